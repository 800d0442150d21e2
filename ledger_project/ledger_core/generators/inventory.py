from django.utils import timezone

from ..conf import ledger_setting
from ..events import StockMovementRecorded
from ..handlers import register
from ..money import quantize_cents
from .base import JournalGenerator, credit, debit

INVENTORY_ASSET = "1400"


def contra_account_for(movement_type):
    """Contra account code for a movement type, or None when unmapped."""
    return ledger_setting("STOCK_MOVEMENT_CONTRA_ACCOUNTS").get(movement_type.lower())


@register(StockMovementRecorded)
class StockMovementJournalGenerator(JournalGenerator):
    """
    Stock movement → inventory value change.

    amount = |quantity| × (unit_cost or product cost price)
      quantity > 0: Dr Inventory Asset / Cr contra
      quantity < 0: Dr contra / Cr Inventory Asset
    The contra account comes from LEDGER["STOCK_MOVEMENT_CONTRA_ACCOUNTS"].
    """

    entry_type = "inventory_adjustment"

    def is_excluded(self, event):
        excluded = ledger_setting("STOCK_MOVEMENT_EXCLUDED_TYPES")
        if event.movement_type.lower() in excluded:
            return True
        # no mapping, no ledger impact
        return contra_account_for(event.movement_type) is None

    def entry_date(self, event):
        return event.occurred_on or timezone.localdate()

    def description(self, event):
        product = event.product_name or f"product {event.product_id}"
        return (
            f"Inventory {event.movement_type}: {product} "
            f"(qty {event.quantity})"
        )

    def reference_number(self, event):
        return event.reference_number

    def amount_for(self, event):
        unit_cost = (
            event.unit_cost if event.unit_cost is not None
            else event.product_cost_price
        )
        return quantize_cents(abs(event.quantity) * unit_cost)

    def build_legs(self, event):
        amount = self.amount_for(event)
        contra = contra_account_for(event.movement_type)
        label = f"Stock {event.movement_type}"

        if event.quantity > 0:
            return [
                debit(INVENTORY_ASSET, amount, label),
                credit(contra, amount, label),
            ]
        if event.quantity < 0:
            return [
                debit(contra, amount, label),
                credit(INVENTORY_ASSET, amount, label),
            ]
        return []
