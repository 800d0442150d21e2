from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .tenant import Tenant

# Choice Lists
ACCOUNT_TYPES = [
    # Used in Account model to classify general ledger accounts
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("revenue", "Revenue"),
    ("expense", "Expense"),
]

# Define whether the account normally increases
# on the debit side or credit side
NORMAL_BALANCE = [
    ("debit", "Debit"),
    ("credit", "Credit"),
]

# Assets/Expenses → Debit, Liabilities/Equity/Revenue → Credit
NORMAL_BALANCE_BY_TYPE = {
    "asset": "debit",
    "expense": "debit",
    "liability": "credit",
    "equity": "credit",
    "revenue": "credit",
}

ACCOUNT_STATUS = [
    ("active", "Active"),
    ("inactive", "Inactive"),  # kept for history, no new postings
]


class Account(models.Model):
    """
    Chart-of-accounts node.
    - code is unique per tenant
    - account_type: determines reporting (balance sheet vs P&L)
    - parent: optional hierarchy, never cyclic
    - is_system: created by the engine, users cannot remove or deactivate it
    """

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    code = models.CharField(max_length=32)
    name = models.CharField(max_length=200)

    account_type = models.CharField(max_length=10, choices=ACCOUNT_TYPES)
    # Free text refinement, e.g. "current_liability", "cost_of_sales"
    account_subtype = models.CharField(max_length=50, blank=True, default="")

    # Filled from account_type when left blank
    normal_balance = models.CharField(
        max_length=6, choices=NORMAL_BALANCE, blank=True, default=""
    )

    # you can't delete a parent while children exist
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="children",
    )

    is_system = models.BooleanField(default=False)
    status = models.CharField(
        max_length=10, choices=ACCOUNT_STATUS, default="active"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["tenant", "account_type"], name="acct_tenant_type_idx"),
            models.Index(fields=["tenant", "parent"], name="acct_tenant_parent_idx"),
        ]

        """ Each tenant defines its own chart of accounts.
            Codes repeat across tenants but must be unique within one. """
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "code"], name="uq_account_tenant_code"
            )
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"  # Example: "1400 – Inventory Asset"

    @property
    def is_active(self):
        return self.status == "active"

    def ancestor_ids(self):
        """Walk up the parent chain; ids nearest first."""
        ids = []
        seen = set()
        parent_id = self.parent_id
        while parent_id is not None and parent_id not in seen:
            seen.add(parent_id)
            ids.append(parent_id)
            parent_id = (
                Account.objects.filter(pk=parent_id)
                .values_list("parent_id", flat=True)
                .first()
            )
        return ids

    def clean(self):
        """Enforce tenant consistency and an acyclic hierarchy."""
        if not self.normal_balance and self.account_type:
            self.normal_balance = NORMAL_BALANCE_BY_TYPE.get(self.account_type, "")

        if self.parent_id is None:
            return

        if self.parent.tenant_id != self.tenant_id:
            raise ValidationError(
                "Parent & child accounts must belong to the same tenant"
            )

        if self.pk and (self.parent_id == self.pk or self.pk in self.ancestor_ids()):
            raise ValidationError(
                "Account cannot be its own ancestor (circular hierarchy)."
            )

    def save(self, *args, **kwargs):
        # Uniqueness is left to the database so concurrent
        # get_or_create calls see the IntegrityError and re-fetch
        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)
