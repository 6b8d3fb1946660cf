import json
import logging

import httpx
from pydantic import ValidationError

from ..config import config
from ..schemas import (
    AgentRequest,
    ChatResponse,
    describe_validation_error,
    parse_chat_response,
    parse_upstream_response,
)
from ..utils.constants import (
    DEFAULT_CHAT_TEMPERATURE,
    MAX_ATTEMPTS,
    REQUEST_TIMEOUT,
    RETRY_DELAY_SECONDS,
    SEARCH_REQUEST_TIMEOUT,
    AnalysisType,
    TimeWindow,
)
from ..utils.decorators import async_retry
from .errors import GrokApiError, is_retryable, to_api_error
from .normalizer import normalize_response
from .prompts import (
    build_chat_request,
    build_search_request,
    build_topic_request,
    build_trends_request,
)

logger = logging.getLogger("grok.api")


class GrokApiClient:
    """
    Client for the xAI Grok responses API.

    Builds requests for the four tools, delivers them with retry, and returns
    every reply as a normalized ChatResponse. Holds no per-call state, so one
    instance can serve concurrent callers.
    """
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        default_search_limit: int | None = None,
    ):
        # An explicit key (even an empty one) wins over the environment
        self.api_key = api_key if api_key is not None else (config.GROK_API_KEY or "")
        self.base_url = base_url or config.GROK_BASE_URL
        self.default_model = default_model or config.GROK_MODEL
        self.default_search_limit = default_search_limit or config.DEFAULT_SEARCH_LIMIT

        if not self.api_key.strip():
            raise ValueError("GROK_API_KEY is required")

    async def chat(self, request: AgentRequest) -> ChatResponse:
        """
        Sends one request and returns the normalized response.

        Raises:
            GrokApiError: on non-retryable HTTP errors, after exhausting retries,
                or if the normalized payload is malformed.
        """
        body = {**request.to_payload(), "model": request.model or self.default_model}
        timeout = SEARCH_REQUEST_TIMEOUT if request.tools else REQUEST_TIMEOUT

        logger.debug(f"Grok API request: {json.dumps(body)[:200]}...")

        try:
            data = await self._post(body, timeout)
        except Exception as e:
            error = to_api_error(e)
            logger.error(f"Grok API error: {error.message} (status: {error.status})")
            raise error from e

        return self._normalize(data)

    @async_retry(attempts=MAX_ATTEMPTS, delay=RETRY_DELAY_SECONDS, retry_if=is_retryable)
    async def _post(self, body: dict, timeout: float) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(self.base_url, headers=headers, json=body)
            response.raise_for_status()
            data = response.json()

        logger.debug(f"Grok API response: {response.status_code}")
        return data

    def _normalize(self, data) -> ChatResponse:
        try:
            parse_upstream_response(data)
        except ValidationError as e:
            logger.warning(f"Grok API response did not match the expected schema, normalizing anyway: {describe_validation_error(e)}")

        normalized = normalize_response(data)

        try:
            return parse_chat_response(normalized)
        except ValidationError as e:
            issues = describe_validation_error(e)
            logger.error(f"Normalized Grok response is invalid: {issues}")
            raise GrokApiError(
                "Grok API returned a response that could not be normalized",
                0,
                {"error": {"message": "Invalid normalized response", "type": "invalid_response"}, "issues": issues},
            ) from e

    async def search_posts(
        self,
        query: str,
        time_window: str = TimeWindow.FOUR_HOURS,
        limit: int | None = None,
        analysis_type: str = AnalysisType.BOTH,
        allowed_handles: list[str] | None = None,
        excluded_handles: list[str] | None = None,
    ) -> ChatResponse:
        """Search and analyze X posts about a topic."""
        request = build_search_request(
            query,
            model=self.default_model,
            limit=limit or self.default_search_limit,
            time_window=time_window,
            analysis_type=analysis_type,
            allowed_handles=allowed_handles,
            excluded_handles=excluded_handles,
        )
        return await self.chat(request)

    async def analyze_topic(
        self,
        topic: str,
        aspects: list[str],
        time_window: str = TimeWindow.FOUR_HOURS,
        limit: int | None = None,
    ) -> ChatResponse:
        """Analyze a topic along caller-chosen aspects."""
        request = build_topic_request(
            topic,
            aspects,
            model=self.default_model,
            limit=limit or self.default_search_limit,
            time_window=time_window,
        )
        return await self.chat(request)

    async def get_trends(self, category: str | None = None, limit: int | None = None) -> ChatResponse:
        """Current trending topics, optionally within a category."""
        request = build_trends_request(
            model=self.default_model,
            limit=limit or self.default_search_limit,
            category=category,
        )
        return await self.chat(request)

    async def general_chat(
        self,
        prompt: str,
        enable_search: bool = False,
        temperature: float = DEFAULT_CHAT_TEMPERATURE,
    ) -> ChatResponse:
        request = build_chat_request(
            prompt,
            model=self.default_model,
            enable_search=enable_search,
            temperature=temperature,
        )
        return await self.chat(request)
