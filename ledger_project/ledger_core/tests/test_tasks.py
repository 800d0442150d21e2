import datetime
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import OperationalError
from django.test import TestCase, override_settings

from ledger_core.events import StockMovementRecorded
from ledger_core.models import JournalEntry, PostingFailure
from ledger_core.tasks import generate_journal_entry, publish

from .helpers import make_tenant, open_year


class GenerateJournalEntryTaskTests(TestCase):

    def setUp(self):
        self.tenant = make_tenant()
        open_year(self.tenant)
        self.event = StockMovementRecorded(
            tenant_id=self.tenant.pk,
            movement_id=301,
            product_id=4,
            product_cost_price=Decimal("2.50"),
            quantity=Decimal("8"),
            movement_type="receipt",
            occurred_on=datetime.date(2025, 6, 3),
        )

    def run_task(self, event):
        return self.run_task_with(event.kind, event.to_dict())

    def run_task_with(self, kind, payload):
        return generate_journal_entry.apply(args=(kind, payload))

    def test_returns_entry_id(self):
        result = self.run_task(self.event)

        self.assertTrue(result.successful())
        entry = JournalEntry.objects.get(pk=result.get())
        self.assertEqual(entry.reference_id, "301")
        self.assertEqual(entry.status, "posted")

    def test_excluded_event_returns_none(self):
        event = StockMovementRecorded(
            tenant_id=self.tenant.pk,
            movement_id=302,
            product_id=4,
            product_cost_price=Decimal("2.50"),
            quantity=Decimal("1"),
            movement_type="reserve",
        )
        self.assertIsNone(self.run_task(event).get())

    @override_settings(LEDGER={
        "JOURNAL_TASK_MAX_RETRIES": 3,
        "JOURNAL_TASK_RETRY_DELAY": 0,
    })
    def test_retries_then_records_failure(self):
        with mock.patch(
            "ledger_core.tasks.dispatch",
            side_effect=OperationalError("database is locked"),
        ) as dispatch:
            with self.assertLogs("ledger_core.tasks", "WARNING"):
                result = self.run_task(self.event)

        self.assertTrue(result.failed())
        # first attempt plus three retries
        self.assertEqual(dispatch.call_count, 4)

        failure = PostingFailure.objects.get()
        self.assertEqual(failure.event_kind, "stock_movement_recorded")
        self.assertEqual(failure.reference_id, "301")
        self.assertEqual(failure.error_type, "OperationalError")
        self.assertEqual(failure.payload["quantity"], "8")
        self.assertEqual(JournalEntry.objects.count(), 0)

    def test_unknown_event_kind_is_recorded(self):
        result = generate_journal_entry.apply(
            args=("invoice_paid", {"tenant_id": self.tenant.pk}))

        self.assertTrue(result.failed())
        self.assertIsInstance(result.result, ValidationError)
        failure = PostingFailure.objects.get()
        self.assertEqual(failure.event_kind, "invoice_paid")
        self.assertEqual(failure.tenant, self.tenant)
        self.assertEqual(failure.error_type, "ValidationError")

    def test_malformed_payload_is_recorded_without_retry(self):
        payload = self.event.to_dict()
        del payload["movement_id"]

        with mock.patch("ledger_core.tasks.dispatch") as dispatch:
            with self.assertLogs("ledger_core.services.audit_helper", "ERROR"):
                result = self.run_task_with(self.event.kind, payload)

        self.assertTrue(result.failed())
        dispatch.assert_not_called()
        failure = PostingFailure.objects.get()
        self.assertEqual(failure.event_kind, "stock_movement_recorded")
        self.assertEqual(failure.error_type, "KeyError")
        self.assertEqual(failure.payload["product_cost_price"], "2.50")
        self.assertEqual(JournalEntry.objects.count(), 0)

    def test_publish_queues_serialised_event(self):
        with mock.patch.object(generate_journal_entry, "delay") as delay:
            publish(self.event)

        delay.assert_called_once_with(
            "stock_movement_recorded", self.event.to_dict())
        kind, payload = delay.call_args.args
        self.assertEqual(payload["product_cost_price"], "2.50")
        self.assertEqual(payload["occurred_on"], "2025-06-03")
