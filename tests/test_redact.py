import logging
import pytest
from src.utils.redact import RedactingFilter, redact, setup_logging

@pytest.mark.parametrize("text, secret, expected", [
    ("Authorization: Bearer abc.def-123", "abc.def-123", "Bearer [REDACTED]"),
    ("api_key=sk-live-999", "sk-live-999", "api_key=[REDACTED]"),
    ('{"apiKey": "k-123"}', "k-123", '{"apiKey": "[REDACTED]"}'),
    ("GROK_API_KEY = sk-live-999", "sk-live-999", "GROK_API_KEY = [REDACTED]"),
    ("token: tok_456", "tok_456", "token: [REDACTED]"),
    ("{'access_token': 'tok_456'}", "tok_456", "'access_token': '[REDACTED]'"),
    ("using key xai-AbC123_def", "AbC123_def", "xai-[REDACTED]"),
])
def test_redact_masks_secrets(text, secret, expected):
    redacted = redact(text)
    assert secret not in redacted
    assert expected in redacted

@pytest.mark.parametrize("text", [
    '{"prompt_tokens": 10, "total_tokens": 30}',
    "GROK_API_KEY is not set. Please set GROK_API_KEY in your .env file",
    "Missing api key for token refresh",
])
def test_redact_leaves_plain_text_alone(text):
    assert redact(text) == text

def test_filter_renders_and_redacts_args():
    record = logging.LogRecord("grok.api", logging.INFO, __file__, 1, "header %s", ("Bearer secret-token",), None)

    assert RedactingFilter().filter(record) is True
    assert record.getMessage() == "header Bearer [REDACTED]"
    assert record.args is None

def test_setup_logging_installs_filter_once():
    setup_logging("debug")
    setup_logging("debug")

    for handler in logging.getLogger().handlers:
        assert sum(isinstance(f, RedactingFilter) for f in handler.filters) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
