import calendar
import datetime

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone
from django.utils.text import slugify

from ledger_core.models import FiscalPeriod, Tenant
from ledger_core.services import create_period, ensure_system_accounts


class Command(BaseCommand):
    help = (
        "Create a demo tenant with twelve monthly fiscal periods "
        "and the system chart of accounts."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--tenant-name",  # Define flag
            default="Demo Tenant",
            help="Name of the demo tenant to create.",
        )
        parser.add_argument(
            "--year",
            type=int,
            default=None,
            help="Fiscal year to open monthly periods for (default: current year).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        # Read arguments from add_arguments()
        tenant_name = options["tenant_name"]
        year = options["year"] or timezone.localdate().year

        # Generate unique slug for tenant
        def unique_slug_for_tenant(name, max_tries=100):
            # Convert tenant name into a slug (e.g., "Test Ltd" → "test-ltd")
            base = slugify(name) or "tenant"
            slug = base
            i = 1
            # If plain slug is taken, append -1, -2, etc.
            while Tenant.objects.filter(slug=slug).exists():
                slug = f"{base}-{i}"
                i += 1
                if i > max_tries:
                    raise CommandError("Couldn't generate unique slug")
            return slug

        # 1. Create tenant (reuse one with the same name)
        tenant = Tenant.objects.filter(name=tenant_name).first()
        if tenant is None:
            tenant = Tenant.objects.create(
                name=tenant_name, slug=unique_slug_for_tenant(tenant_name)
            )
        self.stdout.write(self.style.SUCCESS(f"Tenant: {tenant} (id={tenant.pk})"))

        # 2. Create monthly fiscal periods, skipping months already covered
        created = 0
        for month in range(1, 13):
            start = datetime.date(year, month, 1)
            end = datetime.date(year, month, calendar.monthrange(year, month)[1])
            covered = FiscalPeriod.objects.for_tenant(tenant).filter(
                period_start__lte=end, period_end__gte=start
            ).exists()
            if covered:
                continue
            create_period(tenant.pk, start, end, name=f"{year}-{month:02d}")
            created += 1
        self.stdout.write(
            self.style.SUCCESS(f"Created {created} fiscal periods for {year}")
        )

        # 3. Create the system chart of accounts
        accounts = ensure_system_accounts(tenant.pk)
        self.stdout.write(
            self.style.SUCCESS(f"System accounts ready: {len(accounts)}")
        )
        self.stdout.write(self.style.SUCCESS("Demo tenant setup complete!"))
