from decimal import Decimal

from django.utils import timezone

from ..events import GoodsReceived
from ..handlers import register
from ..money import quantize_cents
from .base import JournalGenerator, credit, debit

GOODS_RECEIVED_CLEARING = "2150"
ACCOUNTS_PAYABLE = "2100"


@register(GoodsReceived)
class GoodsReceiptJournalGenerator(JournalGenerator):
    """
    Goods receipt → supplier liability.

      Dr Goods Received Clearing  per receipt line (qty × unit price)
        Cr Accounts Payable       receipt total
    """

    entry_type = "goods_receipt"

    def entry_date(self, event):
        return event.receipt_date or timezone.localdate()

    def description(self, event):
        return f"Goods received from {event.supplier_name}".strip()

    def reference_number(self, event):
        return event.receipt_number

    def build_legs(self, event):
        legs = []
        total = Decimal("0.00")
        for line in event.lines:
            amount = quantize_cents(line.received_quantity * line.unit_price)
            total += amount
            legs.append(
                debit(GOODS_RECEIVED_CLEARING, amount,
                      f"Received product {line.product_id}")
            )
        legs.append(
            credit(ACCOUNTS_PAYABLE, total, f"Payable to {event.supplier_name}")
        )
        return legs
