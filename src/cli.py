"""CLI: Typer app exposing the Grok tools from the shell."""
import asyncio
import json
import logging
from typing import Any, Awaitable, NoReturn, Optional

import typer

from .config import config
from .services.errors import GrokApiError
from .services.grok_api import GrokApiClient
from .services.tools import response_payload
from .utils.constants import (
    DEFAULT_ASPECTS,
    DEFAULT_CHAT_TEMPERATURE,
    AnalysisType,
    OutputFormat,
    TimeWindow,
)
from .utils.redact import setup_logging

logger = logging.getLogger("grok.cli")

app = typer.Typer(help="CLI for Grok AI - X/Twitter social intelligence", no_args_is_help=True)

# Field holding the main text of each command's result
TEXT_FIELDS = ("analysis", "trends", "response")


def format_output(data: dict[str, Any], output_format: OutputFormat) -> str:
    if output_format == OutputFormat.TEXT:
        for key in TEXT_FIELDS:
            if data.get(key):
                return str(data[key])
    return json.dumps(data, indent=2)


def _fail(payload: dict[str, Any]) -> NoReturn:
    typer.echo(json.dumps(payload, indent=2), err=True)
    raise typer.Exit(code=1)


def _run(ctx: typer.Context, call: Awaitable[Any], content_key: str, **metadata: Any) -> None:
    try:
        response = asyncio.run(call)
    except GrokApiError as e:
        _fail(e.to_dict())
    payload = response_payload(response, content_key, **metadata)
    typer.echo(format_output(payload, ctx.obj["format"]))


def _client(ctx: typer.Context) -> GrokApiClient:
    # Built on first use so --help works without an API key
    if ctx.obj.get("client") is None:
        try:
            ctx.obj["client"] = GrokApiClient()
        except ValueError as e:
            logger.error("GROK_API_KEY is not set. Please set GROK_API_KEY in your .env file")
            _fail({"error": str(e)})
    return ctx.obj["client"]


@app.callback()
def main(
    ctx: typer.Context,
    output_format: OutputFormat = typer.Option(OutputFormat.JSON, "--format", "-f", help="Output format (json|text)."),
) -> None:
    setup_logging(config.LOG_LEVEL)
    ctx.obj = {"format": output_format, "client": None}


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Topic or query to search for."),
    time_window: TimeWindow = typer.Option(TimeWindow.FOUR_HOURS, "--time-window", "-t", help="Time window."),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, max=50, help="Max posts to analyze (1-50)."),
    analysis: AnalysisType = typer.Option(AnalysisType.BOTH, "--analysis", "-a", help="Analysis type."),
) -> None:
    """Search and analyze X/Twitter posts about a topic."""
    call = _client(ctx).search_posts(query, time_window=time_window, limit=limit, analysis_type=analysis)
    _run(ctx, call, "analysis")


@app.command()
def analyze(
    ctx: typer.Context,
    topic: str = typer.Argument(..., help="Topic to analyze."),
    aspects: str = typer.Option(DEFAULT_ASPECTS, "--aspects", "-a", help="Comma-separated aspects to analyze."),
    time_window: str = typer.Option(TimeWindow.FOUR_HOURS.value, "--time-window", "-t", help="Time window for analysis."),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, max=50, help="Max posts to analyze (1-50)."),
) -> None:
    """Deep analysis of a topic with customizable aspects."""
    aspect_list = [a.strip() for a in aspects.split(",") if a.strip()]
    call = _client(ctx).analyze_topic(topic, aspect_list, time_window=time_window, limit=limit)
    _run(ctx, call, "analysis")


@app.command()
def trends(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category filter (technology, politics, sports, ...)."),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, max=50, help="Max posts to analyze for trends (1-50)."),
) -> None:
    """Get trending topics and discussions on X/Twitter."""
    _run(ctx, _client(ctx).get_trends(category=category, limit=limit), "trends")


@app.command()
def chat(
    ctx: typer.Context,
    prompt: str = typer.Argument(..., help="Message or question for Grok."),
    search: bool = typer.Option(False, "--search", "-s", help="Ground the response in X/Twitter search."),
    temperature: float = typer.Option(DEFAULT_CHAT_TEMPERATURE, "--temperature", min=0.0, max=1.0, help="Response creativity 0.0-1.0."),
) -> None:
    """General chat with Grok AI."""
    call = _client(ctx).general_chat(prompt, enable_search=search, temperature=temperature)
    _run(ctx, call, "response", searchEnabled=search)
