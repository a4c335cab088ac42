"""Unit tests for the log formatters."""

import json
import logging

from src.engines.progression.presentation_scheduler import PresentationScheduler
from src.logging_config import ContextFormatter, JsonFormatter, request_id_var, RequestIdFilter


def _record(message="Scheduled units", **extra):
    record = logging.LogRecord(
        name="src.engines.progression.presentation_scheduler",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextFormatter:
    """Development output with engine context appended."""

    def test_engine_fields_appended(self):
        line = ContextFormatter().format(_record(learner_id="l1", module_id="m1"))
        assert "req=- Scheduled units" in line
        assert line.endswith("learner_id=l1 module_id=m1")

    def test_engine_fields_lead_other_extras(self):
        line = ContextFormatter().format(_record(duration_ms=3.5, module_id="m1", learner_id="l1"))
        assert line.endswith("learner_id=l1 module_id=m1 duration_ms=3.5")

    def test_plain_record_unchanged(self):
        line = ContextFormatter().format(_record())
        assert line.endswith("req=- Scheduled units")

    def test_request_id_from_context(self):
        record = _record(attempt_id="att-1")
        token = request_id_var.set("req-42")
        try:
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)
        line = ContextFormatter().format(record)
        assert "req=req-42" in line
        assert line.endswith("attempt_id=att-1")

    def test_scheduler_record_carries_learner_and_module(self, make_module, make_unit, now, caplog):
        with caplog.at_level(logging.DEBUG, logger="src.engines.progression.presentation_scheduler"):
            PresentationScheduler.next_units(make_module("m1"), [make_unit("u1")], None, now, learner_id="l1")
        lines = [ContextFormatter().format(r) for r in caplog.records]
        assert any("learner_id=l1 module_id=m1" in line for line in lines)


class TestJsonFormatter:
    """Production output as one JSON object per record."""

    def test_engine_fields_in_payload(self):
        payload = json.loads(JsonFormatter().format(_record(learner_id="l1", module_id="m1")))
        assert payload["learner_id"] == "l1"
        assert payload["module_id"] == "m1"
        assert payload["message"] == "Scheduled units"
        assert "request_id" not in payload
