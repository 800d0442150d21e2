from datetime import date
from django.core.exceptions import ValidationError
# Import models
from ..models import Account
from ..money import to_decimal


# ------------------------------------
# Journal input validation
# ------------------------------------
def validate_header(header):
    """Reject a header that cannot become a journal entry."""
    if not isinstance(header.entry_date, date):
        raise ValidationError("entry_date must be a date.")

    # reference_type and reference_id go together (idempotency key)
    if (header.reference_type is None) != (header.reference_id is None):
        raise ValidationError(
            "reference_type and reference_id must be given together.")


def validate_lines(tenant_id, lines, require_active=True):
    """
    Check every candidate line and return {account_id: Account}.
    - amounts are exact cents, non-negative, never a float
    - a line is a debit or a credit, not both
    - the account belongs to the tenant and is active
    """
    if not lines:
        raise ValidationError("A journal entry needs at least one line.")

    for line in lines:
        debit = to_decimal(line.debit_amount)
        credit = to_decimal(line.credit_amount)
        if debit < 0 or credit < 0:
            raise ValidationError("Debit and credit amounts must be non-negative.")
        if debit > 0 and credit > 0:
            raise ValidationError("A line cannot carry both a debit and a credit.")

    account_ids = {line.account_id for line in lines}
    # scoped lookup: another tenant's account simply isn't found
    accounts = Account.objects.for_tenant(tenant_id).in_bulk(account_ids)

    missing = account_ids - set(accounts)
    if missing:
        raise ValidationError(
            f"Accounts {sorted(missing)} do not belong to tenant {tenant_id}.")

    inactive = [a.code for a in accounts.values() if not a.is_active]
    if require_active and inactive:
        raise ValidationError(f"Accounts {inactive} are inactive.")

    return accounts
