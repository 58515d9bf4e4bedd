import json
import logging

from creative_brief.logging_config import StructuredFormatter, get_trace_id, set_trace_id


def _record(**extra):
    record = logging.LogRecord("creative_brief.generation", logging.INFO, __file__, 10, "Generated PDF", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_extra_fields_and_trace():
    set_trace_id("abc123")
    try:
        payload = json.loads(StructuredFormatter().format(_record(artifact="brief.pdf", size=42)))
    finally:
        set_trace_id(None)

    assert payload["message"] == "Generated PDF"
    assert payload["severity"] == "INFO"
    assert payload["artifact"] == "brief.pdf"
    assert payload["size"] == 42
    assert payload["logging.googleapis.com/trace"] == "abc123"
    assert payload["timestamp"].endswith("Z")
    assert "args" not in payload
    assert get_trace_id() is None
