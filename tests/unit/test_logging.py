"""
Unit tests for structured logging.
"""

import json
import logging

import pytest

from print_queue.config import Settings
from print_queue.observability.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_records_carry_extra_fields(self, capsys):
        """Test ``extra`` keys become structured fields."""
        setup_logging(Settings(log_format="json", log_level="INFO", otel_service_name="print-queue-test"))

        logging.getLogger("print_queue.test").info(
            "Claimed job",
            extra={"job_id": 7, "tenant_id": 1},
        )

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "Claimed job"
        assert record["job_id"] == 7
        assert record["tenant_id"] == 1
        assert record["level"] == "info"
        assert record["service"] == "print-queue-test"

    def test_level_filters_records(self, capsys):
        setup_logging(Settings(log_format="json", log_level="WARNING"))

        logging.getLogger("print_queue.test").info("hidden")

        assert capsys.readouterr().out == ""
