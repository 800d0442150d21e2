import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from ..exceptions import DuplicateReferenceError
from ..services.accounts import find_or_create_account
from ..services.audit_helper import record_failure
from ..services.posting import (EntryHeader, LineInput, create_and_post,
                                find_by_reference)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leg:
    """One candidate line, addressed by account code."""

    account_code: str
    debit_amount: Decimal = Decimal("0.00")
    credit_amount: Decimal = Decimal("0.00")
    description: str = ""

    @property
    def is_zero(self):
        return not self.debit_amount and not self.credit_amount


def debit(code, amount, description=""):
    return Leg(code, debit_amount=amount, description=description)


def credit(code, amount, description=""):
    return Leg(code, credit_amount=amount, description=description)


class JournalGenerator:
    """
    Translate one domain event into a posted journal entry.

    Subclasses supply build_legs() and the header fields; handle() owns the
    transaction, idempotency and failure handling shared by all of them.
    """

    event_type = None  # set by handlers.register
    entry_type = "manual"
    posted_by = "system"

    def is_excluded(self, event):
        """True when the event never touches the ledger. Must not query."""
        return False

    def build_legs(self, event):
        raise NotImplementedError

    def entry_date(self, event):
        return timezone.localdate()

    def description(self, event):
        return ""

    def reference_number(self, event):
        return ""

    def header_for(self, event):
        return EntryHeader(
            entry_date=self.entry_date(event),
            entry_type=self.entry_type,
            description=self.description(event),
            reference_type=event.reference_type,
            reference_id=event.reference_id,
            reference_number=self.reference_number(event),
            created_by=self.posted_by,
        )

    def resolve_lines(self, event, legs):
        # accounts are resolved only for legs that survived the zero filter
        lines = []
        for leg in legs:
            account = find_or_create_account(event.tenant_id, leg.account_code)
            lines.append(
                LineInput(
                    account_id=account.pk,
                    debit_amount=leg.debit_amount,
                    credit_amount=leg.credit_amount,
                    description=leg.description,
                )
            )
        return lines

    def handle(self, event):
        log_extra = {
            "event_kind": event.kind,
            "tenant_id": event.tenant_id,
            "reference_id": event.reference_id,
        }

        if self.is_excluded(event):
            logger.debug("Event excluded from ledger", extra=log_extra)
            return None

        try:
            with transaction.atomic():
                existing = find_by_reference(
                    event.tenant_id, event.reference_type, event.reference_id)
                if existing is not None:
                    logger.info(
                        "Journal entry already recorded",
                        extra={**log_extra, "entry_id": existing.pk},
                    )
                    return existing

                # omit zero legs before the balance check
                legs = [leg for leg in self.build_legs(event) if not leg.is_zero]
                if not legs:
                    logger.debug("Event produced no journal lines", extra=log_extra)
                    return None

                lines = self.resolve_lines(event, legs)
                entry = create_and_post(
                    event.tenant_id,
                    self.header_for(event),
                    lines,
                    posted_by=self.posted_by,
                )
        except DuplicateReferenceError as exc:
            # lost the race to a concurrent delivery: already processed
            logger.info(
                "Journal entry recorded concurrently",
                extra={**log_extra, "entry_id": exc.entry.pk},
            )
            return exc.entry
        except Exception:
            logger.exception("Journal generation failed", extra=log_extra)
            raise

        logger.info(
            "Journal entry generated",
            extra={
                **log_extra,
                "entry_id": entry.pk,
                "entry_number": entry.entry_number,
            },
        )
        return entry

    def failed(self, event, exc):
        """Terminal hook once delivery gives up; records, never retries."""
        return record_failure(event=event, error=exc)
