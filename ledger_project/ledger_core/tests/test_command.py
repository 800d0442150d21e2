from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from ledger_core.models import Account, FiscalPeriod, Tenant
from ledger_core.services import SYSTEM_ACCOUNTS


class CreateDemoTenantCommandTests(TestCase):

    def run_command(self, *args):
        out = StringIO()
        call_command("create_demo_tenant", *args, stdout=out)
        return out.getvalue()

    def test_creates_tenant_periods_and_accounts(self):
        output = self.run_command("--tenant-name", "Demo Co", "--year", "2025")

        tenant = Tenant.objects.get(name="Demo Co")
        self.assertEqual(tenant.slug, "demo-co")
        self.assertEqual(FiscalPeriod.objects.for_tenant(tenant).count(), 12)
        self.assertEqual(
            Account.objects.for_tenant(tenant).count(), len(SYSTEM_ACCOUNTS))
        self.assertIn("Created 12 fiscal periods for 2025", output)

    def test_running_twice_changes_nothing(self):
        self.run_command("--tenant-name", "Demo Co", "--year", "2025")
        output = self.run_command("--tenant-name", "Demo Co", "--year", "2025")

        self.assertEqual(Tenant.objects.count(), 1)
        self.assertEqual(FiscalPeriod.objects.count(), 12)
        self.assertEqual(Account.objects.count(), len(SYSTEM_ACCOUNTS))
        self.assertIn("Created 0 fiscal periods", output)

    def test_slug_clash_gets_suffix(self):
        Tenant.objects.create(name="Someone Else", slug="demo-co")

        self.run_command("--tenant-name", "Demo Co", "--year", "2025")

        self.assertEqual(Tenant.objects.get(name="Demo Co").slug, "demo-co-1")
