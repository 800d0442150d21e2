import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..conf import ledger_setting
from ..exceptions import AccountNotFoundError
from ..models import Account, JournalEntryLine

logger = logging.getLogger(__name__)

# code → (name, account_type, account_subtype)
# Defaults used when a generator needs an account the tenant doesn't have yet
SYSTEM_ACCOUNTS = {
    # Inventory
    "1400": ("Inventory Asset", "asset", "current_asset"),
    "1410": ("Inventory In Transit", "asset", "current_asset"),
    # Payables
    "2100": ("Accounts Payable", "liability", "current_liability"),
    "2150": ("Goods Received Clearing", "liability", "current_liability"),
    "2200": ("Employee Tax Payable", "liability", "current_liability"),
    "2210": ("Salaries Payable", "liability", "current_liability"),
    "2220": ("Employer Tax Payable", "liability", "current_liability"),
    "2230": ("Employer Benefits Payable", "liability", "current_liability"),
    # Expenses
    "5000": ("Cost of Goods Sold", "expense", "cost_of_sales"),
    "6100": ("Inventory Adjustment Expense", "expense", "operating_expense"),
    "6200": ("Salary Expense", "expense", "operating_expense"),
    "6210": ("Employer Tax Expense", "expense", "operating_expense"),
    "6220": ("Employer Benefits Expense", "expense", "operating_expense"),
}


def system_defaults(code):
    """Account defaults for a catalogued system code."""
    name, account_type, subtype = SYSTEM_ACCOUNTS[code]
    return {
        "name": name,
        "account_type": account_type,
        "account_subtype": subtype,
    }


def find_or_create_account(tenant_id, code, defaults=None):
    """
    Explicit upsert on (tenant, code).

    get_or_create inserts inside a savepoint and, when a concurrent caller
    wins the uq_account_tenant_code race, re-fetches the winner's row.
    """
    if defaults is None and code in SYSTEM_ACCOUNTS:
        defaults = system_defaults(code)

    if not ledger_setting("AUTO_CREATE_ACCOUNTS") or defaults is None:
        try:
            return Account.objects.for_tenant(tenant_id).get(code=code)
        except Account.DoesNotExist:
            raise AccountNotFoundError(
                f"Account {code} does not exist for tenant {tenant_id}")

    account, created = Account.objects.get_or_create(
        tenant_id=tenant_id,
        code=code,
        defaults={"is_system": True, **defaults},
    )
    if created:
        logger.info(
            "System account created",
            extra={"tenant_id": tenant_id, "account_code": code},
        )
    return account


def ensure_system_accounts(tenant_id):
    """Create the whole system catalogue for a tenant (seeding)."""
    return [find_or_create_account(tenant_id, code) for code in SYSTEM_ACCOUNTS]


# ----------------------------
# Hierarchy
# ----------------------------
def get_ancestors(account):
    """Parents up to the root, nearest first."""
    ids = account.ancestor_ids()
    by_id = Account.objects.in_bulk(ids)
    return [by_id[i] for i in ids]


def get_descendants(account):
    """Every account below this one, breadth first."""
    descendants = []
    frontier = [account.pk]
    while frontier:
        children = list(
            Account.objects.for_tenant(account.tenant_id)
            .filter(parent_id__in=frontier)
            .order_by("code")
        )
        descendants.extend(children)
        frontier = [c.pk for c in children]
    return descendants


def get_account_tree(tenant_id):
    """Nested dicts rooted at parentless accounts, ordered by code."""
    accounts = list(Account.objects.for_tenant(tenant_id).order_by("code"))
    nodes = {
        a.pk: {
            "id": a.pk,
            "code": a.code,
            "name": a.name,
            "account_type": a.account_type,
            "status": a.status,
            "children": [],
        }
        for a in accounts
    }
    roots = []
    for a in accounts:
        if a.parent_id in nodes:
            nodes[a.parent_id]["children"].append(nodes[a.pk])
        else:
            roots.append(nodes[a.pk])
    return roots


@transaction.atomic
def move_account(tenant_id, account_id, new_parent_id):
    """Re-parent an account; Account.clean() rejects cycles."""
    account = (
        Account.objects.select_for_update()
        .for_tenant(tenant_id)
        .get(pk=account_id)
    )
    if new_parent_id is not None:
        # another tenant's parent is simply not found
        Account.objects.for_tenant(tenant_id).get(pk=new_parent_id)
    account.parent_id = new_parent_id
    account.save(update_fields=["parent"])
    return account


# ----------------------------
# Lifecycle guards
# ----------------------------
def deactivate_account(tenant_id, account_id):
    account = Account.objects.for_tenant(tenant_id).get(pk=account_id)
    if account.is_system:
        raise ValidationError("System accounts cannot be deactivated.")
    account.status = "inactive"
    account.save(update_fields=["status"])
    return account


def activate_account(tenant_id, account_id):
    account = Account.objects.for_tenant(tenant_id).get(pk=account_id)
    account.status = "active"
    account.save(update_fields=["status"])
    return account


def delete_account(tenant_id, account_id):
    account = Account.objects.for_tenant(tenant_id).get(pk=account_id)
    if account.is_system:
        raise ValidationError("System accounts cannot be deleted.")
    if account.children.exists():
        raise ValidationError("Cannot delete an account that has sub-accounts.")
    if JournalEntryLine.objects.filter(account=account).exists():
        raise ValidationError("Cannot delete account used in journal lines.")
    account.delete()
