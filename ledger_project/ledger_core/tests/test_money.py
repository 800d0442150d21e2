from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from ledger_core.money import quantize_cents, to_decimal, to_minor_units


class MoneyTests(SimpleTestCase):

    def test_accepts_decimal_int_and_string(self):
        self.assertEqual(to_decimal(Decimal("12.30")), Decimal("12.30"))
        self.assertEqual(to_decimal(5), Decimal("5"))
        self.assertEqual(to_decimal("0.01"), Decimal("0.01"))
        self.assertEqual(to_decimal(None), Decimal("0"))

    def test_rejects_bad_amounts(self):
        for bad in (0.1, True, "abc", "NaN", "Infinity", "1.001", "1e30"):
            with self.subTest(amount=bad):
                with self.assertRaises(ValidationError):
                    to_decimal(bad)

    def test_minor_units(self):
        self.assertEqual(to_minor_units(Decimal("112650.00")), 11265000)
        self.assertEqual(to_minor_units("0.30"), 30)

    def test_quantize_rounds_half_up(self):
        self.assertEqual(quantize_cents(Decimal("0.025")), Decimal("0.03"))
        self.assertEqual(quantize_cents(Decimal("0.0249")), Decimal("0.02"))
