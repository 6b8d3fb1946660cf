"""
Logging setup with secret redaction.
Every handler on the root logger gets a filter that masks bearer tokens and API keys.
"""
import logging
import re
import sys

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Key/value patterns need an explicit ":" or "=" so prose such as
# "GROK_API_KEY is not set" passes through untouched
_REDACTIONS = [
    (re.compile(r"Bearer [^\s]+"), "Bearer [REDACTED]"),
    (re.compile(r"(api[_-]?key[\"']?\s*[:=]\s*[\"']?)[^\s'\"]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(token[\"']?\s*[:=]\s*[\"']?)[^\s'\"]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"xai-[A-Za-z0-9_-]+"), "xai-[REDACTED]"),
]


def redact(text: str) -> str:
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


class RedactingFilter(logging.Filter):
    """Rewrites the rendered message of every record before it is emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(record.getMessage())
        record.args = None
        return True


def setup_logging(level: str = "info") -> None:
    # stderr only: stdout carries the MCP protocol
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=LOG_LEVELS.get(level.lower(), logging.INFO),
        stream=sys.stderr,
    )

    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())

    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
