import datetime

from django.test import TestCase

from ledger_core.exceptions import (AlreadyReversedError, NotPostedError,
                                    PeriodClosedError)
from ledger_core.models import JournalEntry
from ledger_core.services import (close_period, create_and_post, create_entry,
                                  reverse_entry, validate_balance)

from .helpers import cr, dr, header, make_account, make_tenant, open_year


class ReverseEntryTests(TestCase):

    def setUp(self):
        self.tenant = make_tenant()
        self.periods = open_year(self.tenant)
        self.cash = make_account(self.tenant, "1000", "Cash", "asset")
        self.expense = make_account(self.tenant, "6000", "Rent", "expense")
        self.payable = make_account(self.tenant, "2000", "Payable", "liability")
        self.entry = create_and_post(
            self.tenant.pk,
            header(description="January rent"),
            [
                dr(self.expense, "1200.00"),
                cr(self.cash, "200.00"),
                cr(self.payable, "1000.00"),
            ],
        )

    def test_reversal_swaps_every_line(self):
        mirror = reverse_entry(
            self.tenant.pk, self.entry.pk, datetime.date(2025, 2, 1), "auditor")

        original = {
            (line.account_id, line.debit_amount, line.credit_amount)
            for line in self.entry.lines.all()
        }
        swapped = {
            (line.account_id, line.credit_amount, line.debit_amount)
            for line in mirror.lines.all()
        }
        self.assertEqual(original, swapped)
        self.assertTrue(validate_balance(mirror))

    def test_reversal_links_and_marks_source(self):
        mirror = reverse_entry(
            self.tenant.pk, self.entry.pk, datetime.date(2025, 2, 1))

        self.entry.refresh_from_db()
        mirror.refresh_from_db()
        self.assertTrue(self.entry.is_reversed)
        self.assertEqual(self.entry.status, "reversed")
        self.assertEqual(mirror.reversal_of_id, self.entry.pk)
        self.assertEqual(mirror.status, "posted")
        self.assertEqual(mirror.entry_type, "reversal")
        self.assertEqual(mirror.entry_date, datetime.date(2025, 2, 1))
        self.assertEqual(mirror.fiscal_period, self.periods[1])
        self.assertEqual(
            mirror.reference_number, f"Reversal of {self.entry.entry_number}")

    def test_reversing_twice_raises_already_reversed(self):
        reverse_entry(self.tenant.pk, self.entry.pk, datetime.date(2025, 2, 1))

        with self.assertRaises(AlreadyReversedError):
            reverse_entry(self.tenant.pk, self.entry.pk, datetime.date(2025, 2, 2))

        self.assertEqual(JournalEntry.objects.count(), 2)

    def test_reversing_the_mirror_raises_not_posted(self):
        mirror = reverse_entry(
            self.tenant.pk, self.entry.pk, datetime.date(2025, 2, 1))

        with self.assertRaises(NotPostedError):
            reverse_entry(self.tenant.pk, mirror.pk, datetime.date(2025, 2, 2))

    def test_draft_entry_cannot_be_reversed(self):
        draft = create_entry(
            self.tenant.pk, header(),
            [dr(self.cash, "5.00"), cr(self.payable, "5.00")],
        )

        with self.assertRaises(NotPostedError):
            reverse_entry(self.tenant.pk, draft.pk, datetime.date(2025, 2, 1))

    def test_reversal_into_closed_period_leaves_source_untouched(self):
        close_period(self.tenant.pk, self.periods[1].pk, "controller")

        with self.assertRaises(PeriodClosedError):
            reverse_entry(self.tenant.pk, self.entry.pk, datetime.date(2025, 2, 1))

        self.entry.refresh_from_db()
        self.assertFalse(self.entry.is_reversed)
        self.assertEqual(self.entry.status, "posted")
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_reversal_works_when_account_was_deactivated(self):
        self.payable.status = "inactive"
        self.payable.save()

        mirror = reverse_entry(
            self.tenant.pk, self.entry.pk, datetime.date(2025, 2, 1))

        self.assertEqual(mirror.lines.filter(account=self.payable).count(), 1)
