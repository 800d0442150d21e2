from django.db import models
from .tenant import Tenant


class PostingFailure(models.Model):
    """
    An event whose journal could not be generated after every retry.
    Written by the terminal failure hook, read by operators.
    """

    # Nullable so a failure is kept even if the tenant is gone
    tenant = models.ForeignKey(
        Tenant, null=True, blank=True, on_delete=models.SET_NULL)
    event_kind = models.CharField(max_length=64)
    reference_type = models.CharField(max_length=50)
    reference_id = models.CharField(max_length=64)
    error_type = models.CharField(max_length=100)
    error_message = models.TextField(blank=True, default="")
    # event payload as delivered, for replay
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["reference_type", "reference_id"], name="pf_reference_idx"),
        ]
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.event_kind} {self.reference_id}: {self.error_type}"
