from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..exceptions import InvalidTransitionError
from ..managers import TenantManager
from ..money import quantize_cents, to_minor_units
from .account import Account
from .period import FiscalPeriod
from .tenant import Tenant

JOURNAL_STATUS = [
    ("draft", "Draft"),  # still editable
    ("pending", "Pending"),  # submitted, waiting to be posted
    ("posted", "Posted"),  # finalized, immutable
    ("rejected", "Rejected"),  # sent back, can be reopened as draft
    ("reversed", "Reversed"),  # posted, then cancelled by a mirror entry
]

ENTRY_TYPES = [
    ("manual", "Manual"),
    ("payroll", "Payroll"),
    ("inventory_adjustment", "Inventory adjustment"),
    ("goods_receipt", "Goods receipt"),
    ("reversal", "Reversal"),
]

# Statuses whose header and lines are frozen
LOCKED_STATUSES = ("posted", "reversed")

# Header fields that may never change once an entry is posted
FROZEN_FIELDS = (
    "tenant_id",
    "entry_number",
    "entry_type",
    "reference_type",
    "reference_id",
    "entry_date",
    "fiscal_period_id",
    "description",
    "posted_at",
    "reversal_of_id",
)


# ---------- Journal (Header) & JournalEntryLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    # Multi-tenant: every entry belongs to a tenant
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)

    # JE-YYYYMM-NNNNN, allocated from JournalSequence
    entry_number = models.CharField(max_length=32)
    entry_type = models.CharField(
        max_length=32, choices=ENTRY_TYPES, default="manual"
    )

    # Source document; with tenant this is the idempotency key
    reference_type = models.CharField(max_length=50, null=True, blank=True)
    reference_id = models.CharField(max_length=64, null=True, blank=True)
    # Human reference of the source (payroll number, receipt number, ...)
    reference_number = models.CharField(max_length=100, blank=True, default="")

    entry_date = models.DateField()
    # Resolved from entry_date at creation
    fiscal_period = models.ForeignKey(
        FiscalPeriod,
        on_delete=models.PROTECT,  # Prevent breaking historical ledger
        related_name="entries",
    )

    status = models.CharField(
        max_length=10, choices=JOURNAL_STATUS, default="draft"
    )
    is_reversed = models.BooleanField(default=False)
    # Set on the mirror entry, points at the entry it cancels
    reversal_of = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="reversals",
    )

    description = models.TextField(blank=True, default="")
    created_by = models.CharField(max_length=150, blank=True, default="")
    posted_at = models.DateTimeField(null=True, blank=True)
    posted_by = models.CharField(max_length=150, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    # Control status changes; add a state here, not in the services
    ALLOWED_TRANSITIONS = {
        "draft": ["pending", "rejected", "posted"],
        "pending": ["posted", "rejected"],
        "rejected": ["draft"],
        "posted": ["reversed"],
        "reversed": [],
    }

    class Meta:
        indexes = [
            models.Index(fields=["tenant", "entry_date"], name="je_tenant_date_idx"),
            models.Index(fields=["tenant", "status"], name="je_tenant_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "entry_number"], name="uq_entry_tenant_number"
            ),
            # One entry per source document, per tenant
            models.UniqueConstraint(
                fields=["tenant", "reference_type", "reference_id"],
                condition=(
                    models.Q(reference_type__isnull=False) &
                    models.Q(reference_id__isnull=False)
                ),
                name="uq_entry_tenant_reference",
            ),
        ]

    def __str__(self):
        return f"{self.entry_number} {self.entry_date} [{self.status}]"

    @property
    def is_locked(self):
        return self.status in LOCKED_STATUSES

    # Aggregate all debit and credit amounts across entry's lines
    def compute_totals(self):
        """Return debits, credits sums for lines"""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit_amount"),
            total_credit=models.Sum("credit_amount"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    # True if double-entry rule holds: total debits = total credits (in cents)
    def is_balanced(self):
        debit, credit = self.compute_totals()
        return to_minor_units(quantize_cents(debit)) == to_minor_units(quantize_cents(credit))

    def can_transition_to(self, new_status):
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, [])

    def transition_to(self, new_status, **changes):
        """Move along the state machine, saving status plus any stamped fields."""
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(
                f"Cannot go from {self.status} to {new_status}")
        for field, value in changes.items():
            setattr(self, field, value)
        self.status = new_status
        self.save(update_fields=["status", *changes])
        return self

    def save(self, *args, **kwargs):
        if self.pk:  # Does this row already exist in DB?
            orig = JournalEntry.objects.filter(pk=self.pk).first()
            if orig and orig.is_locked:
                for f in FROZEN_FIELDS:
                    if getattr(orig, f) != getattr(self, f):
                        raise ValidationError(
                            "Cannot modify a posted JournalEntry. It is immutable."
                        )
                # only the reversal linkage may move a posted entry
                if self.status not in self.ALLOWED_TRANSITIONS[orig.status] + [orig.status]:
                    raise ValidationError(
                        f"Cannot move a {orig.status} journal to {self.status}")
        super().save(*args, **kwargs)


class JournalEntryLine(models.Model):  # Stores Lines ( credits / debits )
    """
    One debit or one credit leg of a journal entry.
    Zero legs are never stored.
    """

    # Belongs to tenant & a journal entry
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    # Must point to one Account (can't delete account if lines exist → PROTECT)
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="lines")

    debit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=0)
    credit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=0)

    description = models.CharField(max_length=400, blank=True, default="")

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # For fast queries like "all lines for this account" /
        # "all lines in this JE."
        indexes = [
            models.Index(fields=["tenant", "account"], name="jel_tenant_account_idx"),
            models.Index(fields=["tenant", "journal_entry"], name="jel_tenant_entry_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(debit_amount__gte=0) &
                    models.Q(credit_amount__gte=0)
                ),
                name="jel_non_negative_amounts",
            ),
            models.CheckConstraint(
                condition=~(models.Q(debit_amount=0) &
                            models.Q(credit_amount=0)),
                name="jel_debit_or_credit_nonzero",
            ),
            models.CheckConstraint(
                condition=~(models.Q(debit_amount__gt=0) &
                            models.Q(credit_amount__gt=0)),
                name="jel_not_both_debit_and_credit",
            ),
        ]

    def __str__(self):
        side = "Dr" if self.debit_amount else "Cr"
        amount = self.debit_amount or self.credit_amount
        return f"{side} {self.account_id} {amount}"

    def _entry_is_locked(self):
        # read fresh status; the cached journal_entry may be stale
        status = (
            JournalEntry.objects.filter(pk=self.journal_entry_id)
            .values_list("status", flat=True)
            .first()
        )
        return status in LOCKED_STATUSES

    def clean(self):
        # Enforce debits and credits must be non-negative
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValidationError("Debit and credit amounts must be non-negative.")

        if self.debit_amount > 0 and self.credit_amount > 0:
            raise ValidationError("A line cannot carry both a debit and a credit.")

        if self.debit_amount == 0 and self.credit_amount == 0:
            raise ValidationError("A line must carry a debit or a credit.")

        # Enforce tenant consistency
        if self.journal_entry.tenant_id != self.tenant_id:
            raise ValidationError(
                "JournalEntryLine tenant must match its JournalEntry tenant.")
        if self.account.tenant_id != self.tenant_id:
            raise ValidationError(
                "Account must belong to the same tenant as the journal entry.")

        # Lines of a posted entry are frozen, new or existing
        if self._entry_is_locked():
            raise ValidationError(
                "Cannot add or modify lines of a posted journal entry.")

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self._entry_is_locked():
            raise ValidationError("Cannot delete lines of a posted journal entry.")
        return super().delete(*args, **kwargs)


class JournalSequence(models.Model):
    """Per-tenant counter behind entry numbers; row-locked while allocating."""

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    name = models.CharField(max_length=32)  # e.g. "JE-202501"
    next_value = models.PositiveIntegerField(default=1)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "name"], name="uq_sequence_tenant_name"
            )
        ]

    def __str__(self):
        return f"{self.name} → {self.next_value}"
