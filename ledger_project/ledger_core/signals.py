from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import Signal, receiver

from .models import JournalEntry
from .models.journal import LOCKED_STATUSES

# Sent after a period close commits.
# Receivers get notification=FiscalPeriodClosed(period_id, tenant_id, closed_by, closed_at)
fiscal_period_closed = Signal()


"""Block deletion of posted journals (their lines would cascade away)."""


# pre_delete fires for every collected entry, queryset deletes included
@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_posted_journal(sender, instance, **kwargs):
    if instance.status in LOCKED_STATUSES:
        raise ValidationError(
            "Cannot delete a posted JournalEntry. Reverse it instead.")
