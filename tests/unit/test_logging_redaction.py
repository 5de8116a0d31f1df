import logging

from wage_tracker.utils.logging_redaction import RedactingFilter, redact_message


def test_redacts_bearer_tokens():
    assert redact_message("Authorization: Bearer abc.def-123") == "Authorization: Bearer [REDACTED]"


def test_redacts_token_assignments():
    message = redact_message("sign-in with custom_token=s3cr3t-value failed")
    assert "s3cr3t-value" not in message
    assert "custom_token=[REDACTED]" in message


def test_redacts_database_password():
    message = redact_message("connecting to postgresql://app:hunter2@db:5432/wages")
    assert "hunter2" not in message
    assert message == "connecting to postgresql://app:[REDACTED]@db:5432/wages"


def test_leaves_plain_messages_alone():
    assert redact_message("Sync live for artifacts/app/users/u1/daily_records") == (
        "Sync live for artifacts/app/users/u1/daily_records"
    )


def test_filter_rewrites_record_arguments():
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="token=%s",
        args=("abcdef123",),
        exc_info=None,
    )

    assert RedactingFilter().filter(record) is True
    assert record.getMessage() == "token=[REDACTED]"
