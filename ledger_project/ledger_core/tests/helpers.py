import calendar
import datetime
from decimal import Decimal

from ledger_core.models import Account, Tenant
from ledger_core.services import create_period
from ledger_core.services.posting import EntryHeader, LineInput


def make_tenant(name="Test Co", slug=None):
    return Tenant.objects.create(name=name, slug=slug or name.lower().replace(" ", "-"))


def open_year(tenant, year=2025):
    """Twelve monthly periods, all open."""
    periods = []
    for month in range(1, 13):
        last = calendar.monthrange(year, month)[1]
        periods.append(
            create_period(
                tenant.pk,
                datetime.date(year, month, 1),
                datetime.date(year, month, last),
                name=f"{year}-{month:02d}",
            )
        )
    return periods


def make_account(tenant, code, name=None, account_type="asset", **extra):
    return Account.objects.create(
        tenant=tenant,
        code=code,
        name=name or f"Account {code}",
        account_type=account_type,
        **extra,
    )


def dr(account, amount, description=""):
    return LineInput(account_id=account.pk, debit_amount=Decimal(amount),
                     description=description)


def cr(account, amount, description=""):
    return LineInput(account_id=account.pk, credit_amount=Decimal(amount),
                     description=description)


def header(entry_date=datetime.date(2025, 1, 15), **kwargs):
    return EntryHeader(entry_date=entry_date, **kwargs)
