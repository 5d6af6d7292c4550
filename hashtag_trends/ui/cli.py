from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional

import typer
import yaml
from pydantic import ValidationError

from ..config import load_settings
from ..engine.service import TrendService
from ..models import ChatMessage
from ..utils.logging import configure_logging, get_logger
from ..utils.text import DEFAULT_MARKER, extract_hashtags
from .messages import format_trending

app = typer.Typer(add_completion=False, help="Hashtag trend tracking utilities")


def load_messages(path: Path) -> List[ChatMessage]:
    """Read a message log: JSON lines (``.jsonl``) or a YAML list / ``messages:`` mapping."""

    json_lines = path.suffix.lower() in {".jsonl", ".ndjson"}
    if json_lines:
        rows: Iterable[Any] = [line for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
    else:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or []
        rows = payload.get("messages", []) if isinstance(payload, dict) else payload

    messages: List[ChatMessage] = []
    for index, row in enumerate(rows):
        try:
            if json_lines:
                row = json.loads(row)
            messages.append(ChatMessage(**row))
        except (TypeError, json.JSONDecodeError, ValidationError) as exc:
            get_logger(__name__).warning("Skipping malformed message", extra={"index": index, "error": str(exc)})
    return messages


@app.command()
def extract(
    text: str = typer.Argument(..., help="Message text to scan"),
    marker: str = typer.Option(DEFAULT_MARKER, help="Hashtag marker character"),
):
    """Print the hashtags found in TEXT, one per line."""

    for tag in extract_hashtags(text, marker=marker):
        typer.echo(tag)


@app.command()
def replay(
    messages: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML or JSON-lines message log"),
    settings: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Path to runtime settings"),
    top: Optional[int] = typer.Option(None, min=1, help="Leaderboard size (defaults to settings top_k)"),
    log_level: Optional[str] = typer.Option(None, help="Logging level"),
):
    """Feed a recorded message log through the trend engine and print each chat's leaderboard."""

    cfg = load_settings(settings, log_level=log_level)
    configure_logging(cfg.log_level)
    service = TrendService(cfg)

    log = load_messages(messages)
    for chat_id in dict.fromkeys(message.chat_id for message in log):
        service.activate(chat_id, interval=0)
    for message in log:
        service.record(message.chat_id, message.text, message.entities)

    if not service.registry:
        typer.echo("No messages to replay")
        return
    for chat_id in service.registry:
        typer.echo(f"Chat {chat_id}")
        typer.echo(format_trending(service.top_trending(chat_id, top)) or "No hashtag used in this group")


if __name__ == "__main__":  # pragma: no cover
    app()
