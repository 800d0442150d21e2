import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from ..exceptions import (AlreadyReversedError, DuplicateReferenceError,
                          InvalidTransitionError, NotPostedError,
                          UnbalancedEntryError)
from ..models import JournalEntry, JournalEntryLine, JournalSequence
from ..money import to_decimal
from .periods import ensure_period_open
from .validation import validate_header, validate_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryHeader:
    entry_date: date
    entry_type: str = "manual"
    description: str = ""
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    reference_number: str = ""
    created_by: str = ""


@dataclass(frozen=True)
class LineInput:
    account_id: int
    debit_amount: Decimal = Decimal("0.00")
    credit_amount: Decimal = Decimal("0.00")
    description: str = ""

    @property
    def is_zero(self):
        return (
            to_decimal(self.debit_amount) == 0 and
            to_decimal(self.credit_amount) == 0
        )


# ----------------------------
# Helpers
# ----------------------------
def find_by_reference(tenant_id, reference_type, reference_id):
    """The entry already recorded for a source document, if any."""
    return (
        JournalEntry.objects.for_tenant(tenant_id)
        .filter(reference_type=reference_type, reference_id=str(reference_id))
        .first()
    )


def _next_entry_number(tenant_id, entry_date):
    """JE-YYYYMM-NNNNN, counted per tenant and month."""
    name = f"JE-{entry_date:%Y%m}"
    # Lock the counter row so concurrent postings never share a number
    seq, _ = JournalSequence.objects.select_for_update().get_or_create(
        tenant_id=tenant_id, name=name
    )
    value = seq.next_value
    seq.next_value = value + 1
    seq.save(update_fields=["next_value"])
    return f"{name}-{value:05d}"


def validate_balance(entry):
    """Σdebit == Σcredit, compared as integer cents."""
    return entry.is_balanced()


# ----------------------------
# Journal workflows
# ----------------------------
def create_entry(tenant_id, header, lines, status="draft", reversal_of=None):
    """
    Persist a header and its non-zero lines in one transaction.
    Balance is checked when posting, not here.
    """
    if status not in ("draft", "pending"):
        raise ValidationError(f"Entries are created as draft or pending, not {status}")

    validate_header(header)
    # mirror lines may point at accounts deactivated since the original posting
    validate_lines(tenant_id, lines, require_active=reversal_of is None)

    # zero legs are skipped, never persisted
    kept = [line for line in lines if not line.is_zero]
    if not kept:
        raise ValidationError("A journal entry needs at least one non-zero line.")

    reference_id = (
        str(header.reference_id) if header.reference_id is not None else None
    )

    with transaction.atomic():
        period = ensure_period_open(tenant_id, header.entry_date)

        if header.reference_type is not None:
            existing = find_by_reference(
                tenant_id, header.reference_type, reference_id)
            if existing is not None:
                raise DuplicateReferenceError(
                    f"{header.reference_type} {reference_id} already "
                    f"recorded as {existing.entry_number}",
                    entry=existing,
                )

        entry_number = _next_entry_number(tenant_id, header.entry_date)
        try:
            # savepoint: a lost uq_entry_tenant_reference race
            # must not poison the outer transaction
            with transaction.atomic():
                entry = JournalEntry.objects.create(
                    tenant_id=tenant_id,
                    entry_number=entry_number,
                    entry_type=header.entry_type,
                    reference_type=header.reference_type,
                    reference_id=reference_id,
                    reference_number=header.reference_number,
                    entry_date=header.entry_date,
                    fiscal_period=period,
                    status=status,
                    reversal_of=reversal_of,
                    description=header.description,
                    created_by=header.created_by,
                )
        except IntegrityError:
            existing = None
            if header.reference_type is not None:
                existing = find_by_reference(
                    tenant_id, header.reference_type, reference_id)
            if existing is None:
                raise
            raise DuplicateReferenceError(
                f"{header.reference_type} {reference_id} recorded concurrently "
                f"as {existing.entry_number}",
                entry=existing,
            )

        for line in kept:
            JournalEntryLine.objects.create(
                tenant_id=tenant_id,
                journal_entry=entry,
                account_id=line.account_id,
                debit_amount=to_decimal(line.debit_amount),
                credit_amount=to_decimal(line.credit_amount),
                description=line.description,
            )

    logger.info(
        "Journal entry created",
        extra={
            "tenant_id": tenant_id,
            "entry_id": entry.pk,
            "entry_number": entry.entry_number,
            "reference_id": reference_id,
        },
    )
    return entry


def post_entry(tenant_id, entry_id, posted_by=""):
    """
    Finalize a draft/pending entry.
    Re-checks the period (it may have closed since creation) and the balance.
    """
    with transaction.atomic():
        # Lock the row to avoid race conditions
        entry = (
            JournalEntry.objects.select_for_update()
            .for_tenant(tenant_id)
            .get(pk=entry_id)
        )
        if entry.status not in ("draft", "pending"):
            raise InvalidTransitionError(
                f"Cannot post a {entry.status} journal entry")

        ensure_period_open(tenant_id, entry.entry_date)

        if not entry.lines.exists():  # Prevent posting an empty entry
            raise ValidationError(
                "JournalEntry must have at least one JournalEntryLine.")

        # Enforce double-entry rule: debits = credits
        if not validate_balance(entry):
            debit, credit = entry.compute_totals()
            raise UnbalancedEntryError(
                f"Journal not balanced: debits={debit}, credits={credit}")

        entry.transition_to(
            "posted", posted_at=timezone.now(), posted_by=posted_by or "")

    logger.info(
        "Journal entry posted",
        extra={
            "tenant_id": tenant_id,
            "entry_id": entry.pk,
            "entry_number": entry.entry_number,
        },
    )
    return entry


def create_and_post(tenant_id, header, lines, posted_by="system"):
    """Create + post with no observable draft in between."""
    with transaction.atomic():
        entry = create_entry(tenant_id, header, lines)
        return post_entry(tenant_id, entry.pk, posted_by=posted_by)


def reverse_entry(tenant_id, entry_id, reversal_date, reversed_by=""):
    """
    Cancel a posted entry with a mirror entry (debits and credits swapped)
    dated reversal_date. Returns the mirror entry.
    """
    with transaction.atomic():
        source = (
            JournalEntry.objects.select_for_update()
            .for_tenant(tenant_id)
            .get(pk=entry_id)
        )
        if source.is_reversed:
            raise AlreadyReversedError(
                f"Journal entry {source.entry_number} is already reversed")
        if source.status != "posted":
            raise NotPostedError(
                f"Only posted entries can be reversed ({source.entry_number} "
                f"is {source.status})")
        # a mirror is cancelled by reversing its source, never itself
        if source.reversal_of_id is not None:
            raise NotPostedError(
                f"Journal entry {source.entry_number} is itself a reversal")

        mirror_lines = [
            LineInput(
                account_id=line.account_id,
                debit_amount=line.credit_amount,
                credit_amount=line.debit_amount,
                description=line.description,
            )
            for line in source.lines.order_by("id")
        ]
        header = EntryHeader(
            entry_date=reversal_date,
            entry_type="reversal",
            description=f"Reversal: {source.description}".strip(),
            reference_number=f"Reversal of {source.entry_number}",
            created_by=reversed_by or "",
        )
        mirror = create_entry(tenant_id, header, mirror_lines, reversal_of=source)
        mirror = post_entry(tenant_id, mirror.pk, posted_by=reversed_by)

        source.transition_to("reversed", is_reversed=True)

    logger.info(
        "Journal entry reversed",
        extra={
            "tenant_id": tenant_id,
            "entry_id": source.pk,
            "reversal_entry_id": mirror.pk,
        },
    )
    return mirror


def _transition(tenant_id, entry_id, new_status):
    with transaction.atomic():
        entry = (
            JournalEntry.objects.select_for_update()
            .for_tenant(tenant_id)
            .get(pk=entry_id)
        )
        return entry.transition_to(new_status)


def submit_entry(tenant_id, entry_id):
    """draft → pending"""
    return _transition(tenant_id, entry_id, "pending")


def reject_entry(tenant_id, entry_id):
    """draft/pending → rejected"""
    return _transition(tenant_id, entry_id, "rejected")


def reopen_entry(tenant_id, entry_id):
    """rejected → draft (resubmission)"""
    return _transition(tenant_id, entry_id, "draft")
