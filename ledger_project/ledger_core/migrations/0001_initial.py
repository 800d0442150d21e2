import django.db.models.deletion
import ledger_core.managers
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32)),
                ("name", models.CharField(max_length=200)),
                ("account_type", models.CharField(choices=[("asset", "Asset"), ("liability", "Liability"), ("equity", "Equity"), ("revenue", "Revenue"), ("expense", "Expense")], max_length=10)),
                ("account_subtype", models.CharField(blank=True, default="", max_length=50)),
                ("normal_balance", models.CharField(blank=True, choices=[("debit", "Debit"), ("credit", "Credit")], default="", max_length=6)),
                ("is_system", models.BooleanField(default=False)),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive")], default="active", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("parent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="children", to="ledger_core.account")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.tenant")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["tenant", "account_type"], name="acct_tenant_type_idx"),
                    models.Index(fields=["tenant", "parent"], name="acct_tenant_parent_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant", "code"), name="uq_account_tenant_code"),
                ],
            },
            managers=[
                ("objects", ledger_core.managers.TenantManager()),
            ],
        ),
        migrations.CreateModel(
            name="FiscalPeriod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=50)),
                ("period_start", models.DateField()),
                ("period_end", models.DateField()),
                ("status", models.CharField(choices=[("open", "Open"), ("closed", "Closed")], default="open", max_length=10)),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                ("closed_by", models.CharField(blank=True, default="", max_length=150)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="ledger_core.tenant")),
            ],
            options={
                "ordering": ("tenant", "period_start"),
                "indexes": [
                    models.Index(fields=["tenant", "period_start"], name="fp_tenant_start_idx"),
                    models.Index(fields=["tenant", "status"], name="fp_tenant_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("period_start__lte", models.F("period_end"))), name="fp_start_not_after_end"),
                ],
            },
            managers=[
                ("objects", ledger_core.managers.TenantManager()),
            ],
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_number", models.CharField(max_length=32)),
                ("entry_type", models.CharField(choices=[("manual", "Manual"), ("payroll", "Payroll"), ("inventory_adjustment", "Inventory adjustment"), ("goods_receipt", "Goods receipt"), ("reversal", "Reversal")], default="manual", max_length=32)),
                ("reference_type", models.CharField(blank=True, max_length=50, null=True)),
                ("reference_id", models.CharField(blank=True, max_length=64, null=True)),
                ("reference_number", models.CharField(blank=True, default="", max_length=100)),
                ("entry_date", models.DateField()),
                ("status", models.CharField(choices=[("draft", "Draft"), ("pending", "Pending"), ("posted", "Posted"), ("rejected", "Rejected"), ("reversed", "Reversed")], default="draft", max_length=10)),
                ("is_reversed", models.BooleanField(default=False)),
                ("description", models.TextField(blank=True, default="")),
                ("created_by", models.CharField(blank=True, default="", max_length=150)),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("posted_by", models.CharField(blank=True, default="", max_length=150)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("fiscal_period", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="entries", to="ledger_core.fiscalperiod")),
                ("reversal_of", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="reversals", to="ledger_core.journalentry")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.tenant")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["tenant", "entry_date"], name="je_tenant_date_idx"),
                    models.Index(fields=["tenant", "status"], name="je_tenant_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant", "entry_number"), name="uq_entry_tenant_number"),
                    models.UniqueConstraint(condition=models.Q(("reference_type__isnull", False), ("reference_id__isnull", False)), fields=("tenant", "reference_type", "reference_id"), name="uq_entry_tenant_reference"),
                ],
            },
            managers=[
                ("objects", ledger_core.managers.TenantManager()),
            ],
        ),
        migrations.CreateModel(
            name="JournalEntryLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("debit_amount", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("credit_amount", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("description", models.CharField(blank=True, default="", max_length=400)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="lines", to="ledger_core.account")),
                ("journal_entry", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="ledger_core.journalentry")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.tenant")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["tenant", "account"], name="jel_tenant_account_idx"),
                    models.Index(fields=["tenant", "journal_entry"], name="jel_tenant_entry_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("debit_amount__gte", 0), ("credit_amount__gte", 0)), name="jel_non_negative_amounts"),
                    models.CheckConstraint(condition=models.Q(("debit_amount", 0), ("credit_amount", 0), _negated=True), name="jel_debit_or_credit_nonzero"),
                    models.CheckConstraint(condition=models.Q(("debit_amount__gt", 0), ("credit_amount__gt", 0), _negated=True), name="jel_not_both_debit_and_credit"),
                ],
            },
            managers=[
                ("objects", ledger_core.managers.TenantManager()),
            ],
        ),
        migrations.CreateModel(
            name="JournalSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=32)),
                ("next_value", models.PositiveIntegerField(default=1)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="ledger_core.tenant")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("tenant", "name"), name="uq_sequence_tenant_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PostingFailure",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("event_kind", models.CharField(max_length=64)),
                ("reference_type", models.CharField(max_length=50)),
                ("reference_id", models.CharField(max_length=64)),
                ("error_type", models.CharField(max_length=100)),
                ("error_message", models.TextField(blank=True, default="")),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("tenant", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="ledger_core.tenant")),
            ],
            options={
                "ordering": ("-created_at",),
                "indexes": [
                    models.Index(fields=["reference_type", "reference_id"], name="pf_reference_idx"),
                ],
            },
        ),
    ]
