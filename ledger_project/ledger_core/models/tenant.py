from django.db import models


# ---------- Tenant ----------
class Tenant(models.Model):
    """Tenant / Organization. Only the key holder; resolution happens upstream."""

    # Store tenant's full display name
    name = models.CharField(max_length=200)

    slug = models.SlugField(  # A URL-friendly identifier
        max_length=80, unique=True  # no two tenants can have the same slug
    )

    # Store timestamp when the record is first created
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name
