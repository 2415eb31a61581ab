"""Tests for the exception system and the logger setup."""
from __future__ import annotations

import json
import logging
import os
import tempfile
import unittest
from unittest.mock import patch

from supportdesk.core.exceptions import (
    DeliveryError,
    InvalidFlowState,
    ProviderError,
    SupportDeskError,
    exception_factory,
)
from supportdesk.core.logger import JsonFormatter, LoggerConfig, configure


class TestExceptions(unittest.TestCase):
    def test_defaults(self) -> None:
        exc = DeliveryError("telegram down")
        self.assertEqual(exc.code, "DELIVERY_ERROR")
        self.assertEqual(exc.http_status, 502)
        self.assertEqual(str(exc), "telegram down")
        self.assertEqual(InvalidFlowState("x").http_status, 409)

    def test_to_dict_includes_cause(self) -> None:
        cause = TimeoutError("slow")
        exc = ProviderError("openrouter failed", details={"provider": "openrouter"}, cause=cause)
        data = exc.to_dict()
        self.assertEqual(data["details"], {"provider": "openrouter"})
        self.assertEqual(data["cause"], "TimeoutError: slow")
        self.assertIs(exc.__cause__, cause)

    def test_factory(self) -> None:
        QuotaError = exception_factory("QuotaError", code="QUOTA", http_status=429)
        exc = QuotaError("quota exhausted")
        self.assertIsInstance(exc, SupportDeskError)
        self.assertEqual((exc.code, exc.http_status), ("QUOTA", 429))


class TestLoggerConfig(unittest.TestCase):
    @patch.dict("os.environ", {"LOG_LEVEL": "debug", "LOG_CONSOLE": "false"}, clear=True)
    def test_from_env(self) -> None:
        config = LoggerConfig.from_env()
        self.assertEqual(config.level, "DEBUG")
        self.assertFalse(config.console)
        self.assertIsNone(config.log_dir)

    def test_with_overrides_ignores_none(self) -> None:
        config = LoggerConfig().with_overrides(level=None, console=False)
        self.assertEqual(config.level, "INFO")
        self.assertFalse(config.console)


class TestJsonFormatter(unittest.TestCase):
    def test_context_keys_are_lifted(self) -> None:
        record = logging.LogRecord("supportdesk.agent", logging.INFO, __file__, 1, "Turn answered", (), None)
        record.session_id = "abc"
        record.route = "direct_answer"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["message"], "Turn answered")
        self.assertEqual(payload["session_id"], "abc")
        self.assertEqual(payload["route"], "direct_answer")
        self.assertNotIn("ticket_step", payload)


class TestConfigure(unittest.TestCase):
    def tearDown(self) -> None:
        self._detach()

    @staticmethod
    def _detach() -> None:
        root = logging.getLogger("supportdesk")
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.propagate = True
        root.setLevel(logging.NOTSET)

    def test_file_handler_writes_json_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            configure(LoggerConfig(log_dir=tmp, console=False))
            logging.getLogger("supportdesk.test").info("hello", extra={"session_id": "s1"})
            for handler in logging.getLogger("supportdesk").handlers:
                handler.flush()
            with open(os.path.join(tmp, "supportdesk.log"), encoding="utf-8") as fh:
                line = json.loads(fh.readline())
            # handlers hold the file open until closed
            self._detach()
        self.assertEqual(line["message"], "hello")
        self.assertEqual(line["session_id"], "s1")

    def test_reconfigure_replaces_handlers(self) -> None:
        configure(LoggerConfig(console=True))
        configure(LoggerConfig(console=True))
        self.assertEqual(len(logging.getLogger("supportdesk").handlers), 1)


if __name__ == "__main__":
    unittest.main()
