import datetime

from django.core.exceptions import ValidationError
from django.test import TestCase

from ledger_core.models import Account, FiscalPeriod, JournalEntry
from ledger_core.services import (close_period, create_and_post, create_entry,
                                  post_entry, reverse_entry)

from .helpers import cr, dr, header, make_account, make_tenant, open_year


class TenantIsolationTests(TestCase):

    def setUp(self):
        self.tenant_a = make_tenant("Tenant A")
        self.tenant_b = make_tenant("Tenant B")
        self.periods_a = open_year(self.tenant_a)
        self.periods_b = open_year(self.tenant_b)

        self.cash_a = make_account(self.tenant_a, "1000", "Cash", "asset")
        self.sales_a = make_account(self.tenant_a, "4000", "Sales", "revenue")
        self.cash_b = make_account(self.tenant_b, "1000", "Cash", "asset")
        self.sales_b = make_account(self.tenant_b, "4000", "Sales", "revenue")

    def test_for_tenant_scopes_queries(self):
        ids_a = Account.objects.for_tenant(self.tenant_a).values_list("pk", flat=True)
        self.assertEqual(set(ids_a), {self.cash_a.pk, self.sales_a.pk})
        self.assertEqual(
            Account.objects.active(self.tenant_b.pk).count(), 2)

    def test_foreign_account_is_rejected(self):
        with self.assertRaises(ValidationError):
            create_entry(
                self.tenant_a.pk, header(),
                [dr(self.cash_a, "10.00"), cr(self.sales_b, "10.00")],
            )
        self.assertEqual(JournalEntry.objects.count(), 0)

    def test_cannot_post_another_tenants_entry(self):
        entry = create_entry(
            self.tenant_a.pk, header(),
            [dr(self.cash_a, "10.00"), cr(self.sales_a, "10.00")],
        )

        with self.assertRaises(JournalEntry.DoesNotExist):
            post_entry(self.tenant_b.pk, entry.pk)

    def test_cannot_reverse_another_tenants_entry(self):
        entry = create_and_post(
            self.tenant_a.pk, header(),
            [dr(self.cash_a, "10.00"), cr(self.sales_a, "10.00")],
        )

        with self.assertRaises(JournalEntry.DoesNotExist):
            reverse_entry(self.tenant_b.pk, entry.pk, datetime.date(2025, 2, 1))

    def test_same_reference_in_two_tenants(self):
        ref = {"reference_type": "invoice", "reference_id": "INV-1"}
        entry_a = create_and_post(
            self.tenant_a.pk, header(**ref),
            [dr(self.cash_a, "10.00"), cr(self.sales_a, "10.00")],
        )
        entry_b = create_and_post(
            self.tenant_b.pk, header(**ref),
            [dr(self.cash_b, "10.00"), cr(self.sales_b, "10.00")],
        )

        self.assertNotEqual(entry_a.pk, entry_b.pk)
        # numbering is per tenant too
        self.assertEqual(entry_a.entry_number, entry_b.entry_number)

    def test_closing_a_period_affects_one_tenant(self):
        close_period(self.tenant_a.pk, self.periods_a[0].pk, "controller")

        entry = create_and_post(
            self.tenant_b.pk, header(),
            [dr(self.cash_b, "10.00"), cr(self.sales_b, "10.00")],
        )
        self.assertEqual(entry.status, "posted")

    def test_cannot_close_another_tenants_period(self):
        with self.assertRaises(FiscalPeriod.DoesNotExist):
            close_period(self.tenant_b.pk, self.periods_a[0].pk, "controller")
