import logging

from celery import shared_task
from django.core.exceptions import ValidationError

from .conf import ledger_setting
from .events import event_from_payload
from .handlers import dispatch, generator_for
from .services.audit_helper import record_rejected_payload

logger = logging.getLogger(__name__)


@shared_task(bind=True)  # register this function as a Celery task
def generate_journal_entry(self, event_kind, payload):
    """
    Queue entry point for domain events.

    Rebuilds the typed event, hands it to its generator and returns the
    journal entry id (None when the event has no ledger impact). Failures are
    retried; once retries run out the generator's failed() hook records the
    error and the exception is re-raised. A payload that cannot be rebuilt
    into an event is recorded at once and not retried.
    """
    try:
        event = event_from_payload(event_kind, payload)
    except (ValidationError, KeyError, TypeError, ValueError) as exc:
        record_rejected_payload(event_kind=event_kind, payload=payload, error=exc)
        raise

    try:
        entry = dispatch(event)
    except Exception as exc:
        max_retries = ledger_setting("JOURNAL_TASK_MAX_RETRIES")
        if self.request.retries >= max_retries:
            generator_for(event_kind).failed(event, exc)
            raise
        logger.warning(
            "Retrying journal generation",
            extra={
                "event_kind": event_kind,
                "reference_id": event.reference_id,
                "attempt": self.request.retries + 1,
            },
        )
        raise self.retry(
            exc=exc,
            countdown=ledger_setting("JOURNAL_TASK_RETRY_DELAY"),
            max_retries=max_retries,
        )
    return entry.pk if entry is not None else None


def publish(event):
    """Queue an event for journal generation."""
    return generate_journal_entry.delay(event.kind, event.to_dict())
