import datetime
from decimal import Decimal

from django.test import TestCase

from ledger_core.events import GoodsReceived, GoodsReceivedLine
from ledger_core.handlers import dispatch, registered_kinds
from ledger_core.models import JournalEntry

from .helpers import make_tenant, open_year


class GoodsReceiptJournalTests(TestCase):

    def setUp(self):
        self.tenant = make_tenant()
        open_year(self.tenant)

    def receipt(self, *lines):
        return GoodsReceived(
            tenant_id=self.tenant.pk,
            receipt_id=12,
            supplier_name="Acme Supplies",
            warehouse_id=1,
            lines=tuple(lines),
            receipt_number="GRN-0012",
            receipt_date=datetime.date(2025, 5, 2),
        )

    def test_all_event_kinds_are_registered(self):
        self.assertEqual(
            registered_kinds(),
            ["goods_received", "payroll_processed", "stock_movement_recorded"],
        )

    def test_receipt_credits_payable_for_total(self):
        entry = dispatch(self.receipt(
            GoodsReceivedLine(1, Decimal("10"), Decimal("12.50")),
            GoodsReceivedLine(2, Decimal("3"), Decimal("7.00")),
        ))

        self.assertEqual(entry.entry_type, "goods_receipt")
        self.assertEqual(entry.reference_type, "goods_receipt")
        self.assertEqual(entry.reference_number, "GRN-0012")
        self.assertEqual(entry.description, "Goods received from Acme Supplies")

        lines = list(entry.lines.select_related("account").order_by("id"))
        self.assertEqual(
            [(l.account.code, l.debit_amount, l.credit_amount) for l in lines],
            [
                ("2150", Decimal("125.00"), Decimal("0.00")),
                ("2150", Decimal("21.00"), Decimal("0.00")),
                ("2100", Decimal("0.00"), Decimal("146.00")),
            ],
        )

    def test_receipt_without_value_has_no_entry(self):
        result = dispatch(self.receipt(
            GoodsReceivedLine(1, Decimal("5"), Decimal("0.00"))))

        self.assertIsNone(result)
        self.assertEqual(JournalEntry.objects.count(), 0)

    def test_receipt_survives_transport(self):
        event = self.receipt(GoodsReceivedLine(1, Decimal("2.5"), Decimal("4.00")))
        rebuilt = GoodsReceived.from_dict(event.to_dict())

        self.assertEqual(rebuilt, event)
