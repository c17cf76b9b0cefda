"""Tests for secret redaction in structured logs."""

from keybastion.core.logging import REDACTED, redact_sensitive_fields, rename_message_field


def test_sensitive_values_are_redacted():
    event = {
        "event": "Login",
        "password": "hunter2",
        "pin": "1234",
        "refresh_token": "abc",
        "username": "alice",
    }

    result = redact_sensitive_fields(None, "info", event)

    assert result["password"] == REDACTED
    assert result["pin"] == REDACTED
    assert result["refresh_token"] == REDACTED
    assert result["username"] == "alice"
    assert result["event"] == "Login"


def test_events_without_secrets_are_untouched():
    event = {"event": "Request completed", "status_code": 200}
    assert redact_sensitive_fields(None, "info", dict(event)) == event


def test_event_renamed_to_message():
    assert rename_message_field(None, "info", {"event": "hello"}) == {"message": "hello"}
