"""Tests for structured logging setup."""

import logging

from user_service.logging import RedactSecretsProcessor, get_logger, setup_logging


def test_secret_fields_are_redacted():
    processor = RedactSecretsProcessor()

    event = processor(
        None, "info", {"event": "login", "username": "alice", "Password": "s3cret"}
    )

    assert event["username"] == "alice"
    assert event["Password"] == RedactSecretsProcessor.PLACEHOLDER


def test_non_secret_fields_untouched():
    processor = RedactSecretsProcessor()

    event = processor(None, "info", {"event": "scrape", "status_code": 200})

    assert event == {"event": "scrape", "status_code": 200}


def test_json_logging_emits_redacted_output(capsys):
    setup_logging(log_level="INFO", log_format="json")
    try:
        get_logger("user_service.test").info(
            "login attempt", username="alice", password="s3cret"
        )
    finally:
        for handler in list(logging.getLogger().handlers):
            handler.flush()
            logging.getLogger().removeHandler(handler)

    output = capsys.readouterr().out
    assert "login attempt" in output
    assert "s3cret" not in output
