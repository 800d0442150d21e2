import json
import logging
import os
from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase

from ledger_project.logging_config import JsonFormatter, get_logging_config


class JsonFormatterTests(SimpleTestCase):

    def make_record(self, **extra):
        record = logging.LogRecord(
            name="ledger_core.services.posting",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="Journal entry posted",
            args=(),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_extra_fields_are_included(self):
        line = JsonFormatter().format(
            self.make_record(entry_id=7, entry_number="JE-202501-00001"))
        payload = json.loads(line)

        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["logger"], "ledger_core.services.posting")
        self.assertEqual(payload["message"], "Journal entry posted")
        self.assertEqual(payload["extra"]["entry_id"], 7)
        self.assertEqual(payload["extra"]["entry_number"], "JE-202501-00001")

    def test_unserialisable_extra_is_stringified(self):
        payload = json.loads(
            JsonFormatter().format(self.make_record(amount=Decimal("1.50"))))
        self.assertEqual(payload["extra"]["amount"], "1.50")


class LoggingConfigTests(SimpleTestCase):

    def setUp(self):
        patcher = mock.patch.dict(os.environ)
        patcher.start()
        self.addCleanup(patcher.stop)
        os.environ.pop("LOG_FORMAT", None)
        os.environ.pop("LOG_LEVEL", None)

    def test_debug_uses_console_format(self):
        config = get_logging_config(debug=True)
        self.assertEqual(config["handlers"]["console"]["formatter"], "verbose")
        self.assertEqual(config["loggers"]["django.db.backends"]["handlers"], ["console"])

    def test_production_uses_json(self):
        config = get_logging_config(debug=False)
        self.assertEqual(config["handlers"]["console"]["formatter"], "json")
        self.assertIn("ledger_core", config["loggers"])
