"""
Upstream limits, retry policy and request defaults.
"""
from enum import StrEnum


class TimeWindow(StrEnum):
    FIFTEEN_MINUTES = "15min"
    ONE_HOUR = "1hr"
    FOUR_HOURS = "4hr"
    ONE_DAY = "24hr"
    SEVEN_DAYS = "7d"


class AnalysisType(StrEnum):
    SENTIMENT = "sentiment"
    THEMES = "themes"
    BOTH = "both"


class OutputFormat(StrEnum):
    JSON = "json"
    TEXT = "text"


# Upstream endpoint
GROK_API_BASE_URL = "https://api.x.ai/v1/responses"
DEFAULT_GROK_MODEL = "grok-4-1-fast"

# Retry policy
MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 2.0  # attempt n waits n * delay
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# Per-attempt timeouts (seconds)
REQUEST_TIMEOUT = 60.0
SEARCH_REQUEST_TIMEOUT = 120.0  # x_search round-trips are slower

# Windows longer than a day; anything else resolves to today
TIME_WINDOW_DAYS = {
    TimeWindow.ONE_DAY: 1,
    TimeWindow.SEVEN_DAYS: 7,
}

# Request defaults
DEFAULT_SEARCH_LIMIT = 50
MAX_SEARCH_LIMIT = 50
STRUCTURED_TEMPERATURE = 0.3
DEFAULT_CHAT_TEMPERATURE = 0.7
DEFAULT_ASPECTS = "sentiment,volume trends,key influencers,emerging themes"
