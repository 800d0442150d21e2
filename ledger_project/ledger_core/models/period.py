from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .tenant import Tenant

PERIOD_STATUS = [
    ("open", "Open"),
    ("closed", "Closed"),  # one-way: no postings dated inside it
]


# ---------- FiscalPeriod (accounting period) ----------
class FiscalPeriod(models.Model):
    """
    Contiguous date range of one tenant's calendar.
    Tenant isolation: tenant A can close July while tenant B keeps it open.
    """

    # Prevent deleting a tenant's calendar out from under its entries
    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT)

    # Human-readable label for the period, e.g. "2025-07"
    name = models.CharField(max_length=50, blank=True, default="")

    # Inclusive on both ends
    period_start = models.DateField()
    period_end = models.DateField()

    status = models.CharField(
        max_length=10, choices=PERIOD_STATUS, default="open"
    )
    closed_at = models.DateTimeField(null=True, blank=True)
    # acting principal, as given by the caller
    closed_by = models.CharField(max_length=150, blank=True, default="")

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["tenant", "period_start"], name="fp_tenant_start_idx"),
            models.Index(fields=["tenant", "status"], name="fp_tenant_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(period_start__lte=models.F("period_end")),
                name="fp_start_not_after_end",
            ),
        ]
        # periods come back chronologically
        ordering = ("tenant", "period_start")

    def __str__(self):
        label = self.name or f"{self.period_start}..{self.period_end}"
        return f"{label} [{self.status}]"

    @property
    def is_closed(self):
        return self.status == "closed"

    def clean(self):
        if self.period_start > self.period_end:
            raise ValidationError("period_start must not be after period_end")

        # Two ranges overlap when each starts before the other ends
        overlapping = FiscalPeriod.objects.filter(
            tenant_id=self.tenant_id,
            period_start__lte=self.period_end,
            period_end__gte=self.period_start,
        )
        if self.pk:
            overlapping = overlapping.exclude(pk=self.pk)
        if overlapping.exists():
            raise ValidationError(
                "Fiscal periods of one tenant must not overlap."
            )

    def save(self, *args, **kwargs):
        if self.pk:
            orig = FiscalPeriod.objects.filter(pk=self.pk).first()
            # closing is one-way
            if orig and orig.is_closed and not self.is_closed:
                raise ValidationError("Cannot reopen a closed fiscal period.")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
