import json
import logging
from uuid import UUID

from fastapi.testclient import TestClient

from standup.main import app
from standup.observability import JsonFormatter, normalize_request_id, sanitize_for_logging


def test_request_id_header_is_generated_when_missing() -> None:
    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    request_id = response.headers.get("X-Request-ID")
    assert request_id is not None
    UUID(request_id)


def test_request_id_header_is_preserved_when_provided() -> None:
    with TestClient(app) as client:
        response = client.get("/ready", headers={"X-Request-ID": "demo-request-123"})
    assert response.status_code == 200
    assert response.headers.get("X-Request-ID") == "demo-request-123"


def test_invalid_request_id_is_replaced() -> None:
    replaced = normalize_request_id("bad id with spaces")
    UUID(replaced)
    assert normalize_request_id("  trace-42  ") == "trace-42"


def test_request_started_log_redacts_sensitive_query_values(caplog) -> None:
    with TestClient(app) as client:
        with caplog.at_level(logging.INFO, logger="standup.api"):
            response = client.get("/health?token=supersecret&email=user@example.org&q=public")
    assert response.status_code == 200

    request_started_logs = [
        record for record in caplog.records if getattr(record, "event", None) == "request_started"
    ]
    assert request_started_logs
    query = request_started_logs[-1].query
    assert query["token"] == "[REDACTED]"
    assert query["email"] == "[REDACTED]"
    assert query["q"] == "public"


def test_sanitize_for_logging_redacts_common_sensitive_patterns() -> None:
    google_key = "AIza" + "SyA1234567890abcdefghijklmnopqrstuv"
    payload = {
        "notes": (
            "Contact user@example.org or +1 (415) 555-0101, "
            "token Bearer abc123, "
            f"server key {google_key}, "
            "api_key=abcd1234abcd1234abcd"
        ),
        "x-gemini-api-key": "user-supplied",
        "Authorization": "Bearer abc123",
        "transcript": ["Yesterday I fixed the login bug"],
    }

    sanitized = sanitize_for_logging(payload, max_string_length=2000)
    notes = sanitized["notes"]
    assert "user@example.org" not in notes
    assert "415" not in notes
    assert google_key not in notes
    assert "[REDACTED_EMAIL]" in notes
    assert "[REDACTED_PHONE]" in notes
    assert "[REDACTED_API_KEY]" in notes
    assert "Bearer [REDACTED]" in notes
    assert "api_key=[REDACTED]" in notes
    assert sanitized["x-gemini-api-key"] == "[REDACTED]"
    assert sanitized["Authorization"] == "[REDACTED]"
    assert sanitized["transcript"] == ["Yesterday I fixed the login bug"]


def test_sanitize_for_logging_truncates_long_strings_and_summarizes_bytes() -> None:
    sanitized = sanitize_for_logging({"text": "a" * 300, "audio": b"\x00" * 10})

    assert sanitized["text"] == "a" * 240 + "...[truncated]"
    assert sanitized["audio"] == "[10 bytes]"


def test_json_formatter_emits_event_fields() -> None:
    record = logging.LogRecord("standup.storage", logging.INFO, __file__, 1, "standup_entry_saved", None, None)
    record.event = "standup_entry_saved"
    record.entry_id = "abc"
    record.request_id = "req-1"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "standup_entry_saved"
    assert payload["logger"] == "standup.storage"
    assert payload["event"] == "standup_entry_saved"
    assert payload["entry_id"] == "abc"
    assert payload["request_id"] == "req-1"
