import logging

from ..models import PostingFailure, Tenant

logger = logging.getLogger(__name__)


def record_failure(*, event, error: BaseException) -> PostingFailure:
    """
    Central failure recorder for events that exhausted their retries.
    Runs outside the failed transaction, so the row survives the rollback.
    """
    tenant_id = getattr(event, "tenant_id", None)
    # a failure for an unknown tenant is still recorded, unlinked
    if tenant_id is not None and not Tenant.objects.filter(pk=tenant_id).exists():
        tenant_id = None

    failure = PostingFailure.objects.create(
        tenant_id=tenant_id,
        event_kind=event.kind,
        reference_type=event.reference_type,
        reference_id=event.reference_id,
        error_type=type(error).__name__,
        error_message=str(error),
        payload=event.to_dict(),
    )
    logger.error(
        "Journal generation failed permanently",
        extra={
            "event_kind": event.kind,
            "reference_id": event.reference_id,
            "error": str(error),
            "failure_id": failure.pk,
        },
    )
    return failure


def record_rejected_payload(*, event_kind, payload, error: BaseException) -> PostingFailure:
    """
    Record a queue payload that could not be rebuilt into an event.
    It is never retried: the same payload would fail the same way.
    """
    payload = payload if isinstance(payload, dict) else {"raw": str(payload)}
    tenant_id = payload.get("tenant_id")
    if not isinstance(tenant_id, int) or not Tenant.objects.filter(pk=tenant_id).exists():
        tenant_id = None

    failure = PostingFailure.objects.create(
        tenant_id=tenant_id,
        event_kind=str(event_kind)[:64],
        reference_type="",
        reference_id="",
        error_type=type(error).__name__,
        error_message=str(error),
        payload=payload,
    )
    logger.error(
        "Rejected malformed event payload",
        extra={
            "event_kind": event_kind,
            "error": str(error),
            "failure_id": failure.pk,
        },
    )
    return failure
