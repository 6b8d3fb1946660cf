"""
Converts upstream payloads into the canonical chat-completion shape.

Two wire formats are accepted: the agent format returned by /v1/responses
(a list of heterogeneous output items) and the legacy chat-completion format.
Normalization never fails: fields of the wrong type are treated as missing,
and a payload missing required fields yields a dict that the strict
post-normalization check rejects.
"""
import logging
import math
import time
from typing import Any

from ..schemas import is_chat_completion

logger = logging.getLogger("grok.normalizer")

CHAT_COMPLETION_OBJECT = "chat.completion"


def normalize_response(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        logger.warning(f"Expected a JSON object from Grok API, got {type(data).__name__}")
        data = {}

    if is_chat_completion(data):
        return _normalize_chat_completion(data)
    return _normalize_agent_response(data)


def _normalize_agent_response(data: dict[str, Any]) -> dict[str, Any]:
    text_parts: list[str] = []
    citations: list[str] = []

    for item in _as_list(data.get("output")):
        match item:
            case {"type": "message", "content": str() as content}:
                text_parts.append(content)
            case {"type": "message", "content": list() as blocks}:
                for block in blocks:
                    _collect_block(block, text_parts, citations)
            case {"type": "message"}:
                pass
            case {"type": "tool_use" | "tool_result" | "custom_tool_call" as kind}:
                logger.debug(f"Skipping {kind} output item")
            case _:
                logger.debug(f"Skipping unrecognised output item: {str(item)[:100]}")

    normalized: dict[str, Any] = {
        "id": data.get("id"),
        "object": CHAT_COMPLETION_OBJECT,
        "created": _timestamp(data.get("created_at")),
        "model": data.get("model"),
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "".join(text_parts)},
                "finish_reason": "length" if data.get("status") == "incomplete" else "stop",
            }
        ],
    }

    usage = data.get("usage")
    if isinstance(usage, dict):
        normalized["usage"] = {
            "prompt_tokens": usage.get("input_tokens"),
            "completion_tokens": usage.get("output_tokens"),
            "total_tokens": usage.get("total_tokens"),
        }

    if citations:
        normalized["citations"] = citations

    return normalized


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _timestamp(value: Any) -> int:
    # bool is an int subclass but never a timestamp
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return int(value)
    if value is not None:
        logger.debug(f"Ignoring non-numeric created_at: {str(value)[:50]}")
    return int(time.time())


def _collect_block(block: Any, text_parts: list[str], citations: list[str]) -> None:
    if not isinstance(block, dict):
        return

    if block.get("type") == "output_text" and isinstance(block.get("text"), str):
        text_parts.append(block["text"])

    for annotation in _as_list(block.get("annotations")):
        match annotation:
            case {"type": "url_citation", "url": str() as url} if url:
                citations.append(url)


def _normalize_chat_completion(data: dict[str, Any]) -> dict[str, Any]:
    normalized = {key: data[key] for key in ("id", "object", "created", "model", "choices") if key in data}
    normalized.setdefault("object", CHAT_COMPLETION_OBJECT)
    if normalized.get("created") is None:
        normalized["created"] = int(time.time())

    usage = data.get("usage")
    if isinstance(usage, dict):
        normalized["usage"] = {
            "prompt_tokens": usage.get("prompt_tokens"),
            "completion_tokens": usage.get("completion_tokens"),
            "total_tokens": usage.get("total_tokens"),
        }

    citations = [c for c in _as_list(data.get("citations")) if isinstance(c, str)]
    if citations:
        normalized["citations"] = citations

    return normalized
