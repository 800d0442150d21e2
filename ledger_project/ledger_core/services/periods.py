import logging

from django.db import transaction
from django.utils import timezone

from ..events import FiscalPeriodClosed
from ..exceptions import AlreadyClosedError, PeriodClosedError, PeriodNotFoundError
from ..models import FiscalPeriod
from ..signals import fiscal_period_closed

logger = logging.getLogger(__name__)

"""
    Posting date determines the period.
    Changing the date before posting should affect the period.
"""


def resolve_period_for(tenant_id, date):
    """Return the period covering date, open or closed."""
    period = (
        FiscalPeriod.objects.for_tenant(tenant_id)
        .filter(period_start__lte=date, period_end__gte=date)
        .first()
    )
    if period is None:
        raise PeriodNotFoundError(
            f"No fiscal period covers {date} for tenant {tenant_id}")
    return period


def ensure_period_open(tenant_id, date):
    """The gate every creation and posting path goes through."""
    period = resolve_period_for(tenant_id, date)
    if period.is_closed:
        raise PeriodClosedError(
            f"Fiscal period {period} is closed; cannot post on {date}")
    return period


def create_period(tenant_id, period_start, period_end, name=""):
    # overlap and ordering are checked by FiscalPeriod.clean()
    return FiscalPeriod.objects.create(
        tenant_id=tenant_id,
        name=name,
        period_start=period_start,
        period_end=period_end,
    )


def close_period(tenant_id, period_id, acting_principal):
    """
    Close a period (one-way). Listeners of fiscal_period_closed are
    notified only once the close has committed.
    """
    with transaction.atomic():
        period = (
            FiscalPeriod.objects.select_for_update()
            .for_tenant(tenant_id)
            .get(pk=period_id)
        )
        if period.is_closed:
            raise AlreadyClosedError(f"Fiscal period {period} is already closed")

        period.status = "closed"
        period.closed_at = timezone.now()
        period.closed_by = acting_principal or ""
        period.save(update_fields=["status", "closed_at", "closed_by"])

        notification = FiscalPeriodClosed(
            period_id=period.pk,
            tenant_id=period.tenant_id,
            closed_by=period.closed_by,
            closed_at=period.closed_at,
        )
        transaction.on_commit(
            lambda: fiscal_period_closed.send(
                sender=FiscalPeriod, notification=notification)
        )

    logger.info(
        "Fiscal period closed",
        extra={
            "tenant_id": tenant_id,
            "period_id": period.pk,
            "closed_by": period.closed_by,
        },
    )
    return period
