from django.db import models


# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a tenant
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    # accepts a Tenant instance or its primary key
    def for_tenant(self, tenant):
        return self.filter(tenant=tenant)

    def active(self, tenant):
        return self.filter(
            tenant=tenant,  # enforce tenant scoping
            status="active",  # only fetch active records
        )
    # Enables query:
    # Account.objects.active(tenant_id)


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager):
    # Allow Django to serialize this manager in migrations
    use_in_migrations = True

    # every model gets TenantQuerySet (so .for_tenant() is always available)
    def get_queryset(self):
        return TenantQuerySet(self.model, using=self._db)

    def for_tenant(self, tenant):
        return self.get_queryset().for_tenant(tenant)

    def active(self, tenant):
        return self.get_queryset().active(tenant)
