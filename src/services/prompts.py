"""
Request builders for the four Grok tools.
Each builder is pure: caller intent in, one AgentRequest out.
"""
from datetime import datetime, timedelta, timezone

from ..schemas import AgentRequest, ChatMessage, XSearchTool
from ..utils.constants import (
    DEFAULT_CHAT_TEMPERATURE,
    STRUCTURED_TEMPERATURE,
    TIME_WINDOW_DAYS,
    AnalysisType,
    TimeWindow,
)

ANALYSIS_INSTRUCTIONS = {
    AnalysisType.SENTIMENT: (
        "Focus on sentiment analysis: identify positive, negative, and neutral posts. "
        "Extract sentiment-bearing words and phrases."
    ),
    AnalysisType.THEMES: (
        "Focus on thematic analysis: identify main topics, recurring themes, and discussion patterns."
    ),
    AnalysisType.BOTH: (
        "Analyze both sentiment and themes: identify main topics, sentiment distribution, "
        "and key discussion patterns."
    ),
}


def compute_date_range(time_window: str, now: datetime | None = None) -> tuple[str, str]:
    """
    Maps a time window onto an x_search (from_date, to_date) pair.

    The search tool only takes calendar dates, so 15min/1hr/4hr (and any
    unrecognised window) all resolve to today.
    """
    today = (now or datetime.now(timezone.utc)).date()
    days_back = TIME_WINDOW_DAYS.get(time_window, 0)
    return (today - timedelta(days=days_back)).isoformat(), today.isoformat()


def _user_request(model: str | None, prompt: str, tools: list[XSearchTool] | None, temperature: float) -> AgentRequest:
    return AgentRequest(
        model=model,
        input=[ChatMessage(role="user", content=prompt)],
        tools=tools,
        temperature=temperature,
    )


def build_search_request(
    query: str,
    *,
    model: str | None,
    limit: int,
    time_window: str = TimeWindow.FOUR_HOURS,
    analysis_type: str = AnalysisType.BOTH,
    allowed_handles: list[str] | None = None,
    excluded_handles: list[str] | None = None,
    now: datetime | None = None,
) -> AgentRequest:
    instructions = ANALYSIS_INSTRUCTIONS[AnalysisType(analysis_type)]
    window = str(time_window)

    prompt = f"""Analyze up to {limit} recent X/Twitter posts about: {query}

Time window: {window}

{instructions}

Return a structured JSON analysis with:
{{
  "summary": "Brief overview of the discussion",
  "post_count": "estimated number of posts analyzed",
  "themes": ["array", "of", "main", "themes"],
  "sentiment": {{
    "overall": "positive/negative/neutral/mixed",
    "distribution": "description of sentiment distribution",
    "key_sentiment_words": ["array", "of", "sentiment", "words"]
  }},
  "notable_points": ["array", "of", "key", "observations"],
  "time_window": "{window}",
  "data_freshness": "timestamp or description"
}}

Only report what you observe in the posts. Include specific quotes where relevant."""

    from_date, to_date = compute_date_range(window, now)
    tool = XSearchTool(
        from_date=from_date,
        to_date=to_date,
        allowed_x_handles=allowed_handles or None,
        excluded_x_handles=excluded_handles or None,
    )
    return _user_request(model, prompt, [tool], STRUCTURED_TEMPERATURE)


def build_topic_request(
    topic: str,
    aspects: list[str],
    *,
    model: str | None,
    limit: int,
    time_window: str = TimeWindow.FOUR_HOURS,
    now: datetime | None = None,
) -> AgentRequest:
    window = str(time_window)
    aspects_list = ", ".join(aspects)

    prompt = f"""Analyze up to {limit} X/Twitter posts about: {topic}

Focus on these specific aspects: {aspects_list}

Time window: {window}

Provide a structured analysis addressing each aspect. For each aspect, include:
- Key observations from the posts
- Relevant quotes or data points
- Patterns or trends observed

Format your response as a structured JSON object with keys for each aspect.

Only report what you observe in the posts. Do not speculate or make recommendations."""

    from_date, to_date = compute_date_range(window, now)
    return _user_request(model, prompt, [XSearchTool(from_date=from_date, to_date=to_date)], STRUCTURED_TEMPERATURE)


def build_trends_request(
    *,
    model: str | None,
    limit: int,
    category: str | None = None,
    now: datetime | None = None,
) -> AgentRequest:
    category_text = f" in the {category} category" if category else ""

    prompt = f"""What are the trending topics and discussions on X/Twitter right now{category_text}?

Identify the top trending topics from up to {limit} recent posts and provide a structured analysis:

{{
  "trends": [
    {{
      "topic": "name of the trend",
      "description": "what it's about",
      "volume": "high/medium/low or estimated post count",
      "sentiment": "overall sentiment",
      "key_themes": ["main", "themes"]
    }}
  ],
  "analysis_time": "timestamp",
  "data_source": "X/Twitter"
}}

Focus on current, active discussions. Include specific examples where relevant."""

    # Trends are always "right now"
    today = (now or datetime.now(timezone.utc)).date().isoformat()
    return _user_request(model, prompt, [XSearchTool(from_date=today, to_date=today)], STRUCTURED_TEMPERATURE)


def build_chat_request(
    prompt: str,
    *,
    model: str | None,
    enable_search: bool = False,
    temperature: float = DEFAULT_CHAT_TEMPERATURE,
) -> AgentRequest:
    tools = [XSearchTool()] if enable_search else None
    return _user_request(model, prompt, tools, temperature)
