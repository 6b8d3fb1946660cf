"""
Pydantic models for Grok API requests and responses.

Request models are frozen. Response models tolerate and keep unknown fields,
since the upstream adds fields (reasoning, tool configs, cost details) freely.
"""
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


# ============================================================================
# Requests
# ============================================================================

class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class XSearchTool(BaseModel):
    """Directive enabling live X search for one request."""
    model_config = ConfigDict(frozen=True)

    type: Literal["x_search"] = "x_search"
    allowed_x_handles: list[str] | None = None
    excluded_x_handles: list[str] | None = None
    from_date: str | None = Field(default=None, pattern=DATE_PATTERN)
    to_date: str | None = Field(default=None, pattern=DATE_PATTERN)
    enable_image_understanding: bool | None = None


class AgentRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str | None = None
    input: list[ChatMessage] = Field(min_length=1)
    tools: list[XSearchTool] | None = None
    temperature: float | None = Field(default=None, ge=0, le=2)
    max_tokens: int | None = Field(default=None, gt=0)

    def to_payload(self) -> dict[str, Any]:
        # Unset fields are left out entirely; an absent "tools" means no search.
        return self.model_dump(exclude_none=True)


# ============================================================================
# Agent responses (/v1/responses)
# ============================================================================

class Annotation(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    url: str | None = None
    title: str | None = None


class OutputContent(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    text: str | None = None
    annotations: list[Annotation] | None = None
    logprobs: list[Any] | None = None


class _OutputItemBase(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    status: str | None = None


class MessageItem(_OutputItemBase):
    type: Literal["message"]
    role: str | None = None
    content: list[OutputContent] | str | None = None


class ToolUseItem(_OutputItemBase):
    type: Literal["tool_use"]
    name: str | None = None
    input: Any = None


class ToolResultItem(_OutputItemBase):
    type: Literal["tool_result"]
    tool_use_id: str | None = None
    content: Any = None


class CustomToolCallItem(_OutputItemBase):
    type: Literal["custom_tool_call"]
    name: str | None = None
    input: Any = None


OutputItem = Annotated[
    MessageItem | ToolUseItem | ToolResultItem | CustomToolCallItem,
    Field(discriminator="type"),
]


class Usage(BaseModel):
    model_config = ConfigDict(extra="allow")

    input_tokens: int
    output_tokens: int
    total_tokens: int
    input_tokens_details: dict[str, Any] | None = None
    output_tokens_details: dict[str, Any] | None = None
    num_sources_used: int | None = None
    num_server_side_tools_used: int | None = None
    cost_in_usd_ticks: int | None = None


class AgentResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    object: Literal["response"]
    created_at: int | None = None
    completed_at: int | None = None
    model: str
    output: list[OutputItem] = Field(min_length=1)
    usage: Usage | None = None
    status: str | None = None
    error: Any = None


# ============================================================================
# Normalized chat responses
# ============================================================================

class ResponseMessage(BaseModel):
    role: str
    content: str


class Choice(BaseModel):
    index: int
    message: ResponseMessage
    finish_reason: str


class ChatUsage(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatResponse(BaseModel):
    id: str
    object: str
    created: int
    model: str
    choices: list[Choice] = Field(min_length=1)
    usage: ChatUsage | None = None
    citations: Annotated[list[str], Field(min_length=1)] | None = None


# ============================================================================
# Validation helpers
# ============================================================================

def is_chat_completion(data: Any) -> bool:
    """True for payloads in the legacy /chat/completions shape."""
    return isinstance(data, dict) and "choices" in data and "output" not in data


def parse_agent_request(data: Any) -> AgentRequest:
    return AgentRequest.model_validate(data)


def parse_agent_response(data: Any) -> AgentResponse:
    return AgentResponse.model_validate(data)


def parse_chat_response(data: Any) -> ChatResponse:
    return ChatResponse.model_validate(data)


def parse_upstream_response(data: Any) -> AgentResponse | ChatResponse:
    if is_chat_completion(data):
        return parse_chat_response(data)
    return parse_agent_response(data)


def describe_validation_error(exc: ValidationError) -> list[dict[str, str]]:
    """Flattens a ValidationError into field/message pairs."""
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]) or "<root>",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
