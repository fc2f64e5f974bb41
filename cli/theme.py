"""Unified Rich theme and reusable UI helper functions for the CLI."""

import json

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme

from events.messages import get_event_message
from models.events import ParsedSSEEvent
from models.response import AgentResponse, NormalizedResponse, UploadResponse

DOCVERIFY_THEME = Theme({
    "app.title": "bold",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    "muted": "dim",
    "accent": "cyan",
    "stat.label": "dim",
    "stat.value": "bold",
    "strategy": "magenta",
})


def get_console() -> Console:
    """Return a Console instance with the docverify theme applied."""
    return Console(theme=DOCVERIFY_THEME)


def app_header(title: str = "docverify") -> Rule:
    """Return a Rule element for the application header banner."""
    return Rule(title=f"[bold]{title}[/]", style="dim")


def command_panel(title: str, fields: dict[str, str]) -> Panel:
    """Return a Panel displaying command parameters.

    Args:
        title: Panel title (e.g. "Ask agent").
        fields: Ordered dict of label -> value pairs.
    """
    lines = []
    for label, value in fields.items():
        lines.append(f"  [stat.label]{label}:[/] [stat.value]{escape(str(value))}[/]")
    body = "\n".join(lines)
    return Panel(body, title=f"[bold]{title}[/]", box=box.ROUNDED, border_style="dim", padding=(0, 2))


def result_panel(response: NormalizedResponse, strategy: str | None = None) -> Panel:
    """Return a Panel rendering a normalized response.

    Green border for success, red for error. The result mapping is shown as
    indented JSON.
    """
    is_error = response.is_error
    style = "error" if is_error else "success"
    lines = [f"  [stat.label]status:[/] [{style}]{response.status.value}[/]"]
    if strategy:
        lines.append(f"  [stat.label]parsed via:[/] [strategy]{strategy}[/]")
    if response.message:
        lines.append(f"  [stat.label]message:[/] {escape(response.message)}")
    if response.metadata:
        lines.append(f"  [stat.label]metadata:[/] {escape(json.dumps(response.metadata, ensure_ascii=False, default=str))}")
    body = json.dumps(response.result, ensure_ascii=False, indent=2, default=str)
    lines.append("")
    lines.append(escape(body))
    return Panel(
        "\n".join(lines),
        title=f"[{style}]Agent result[/]",
        box=box.ROUNDED,
        border_style="red" if is_error else "green",
        padding=(0, 2),
    )


def agent_response_panel(agent_response: AgentResponse) -> Panel:
    """Panel for a full AgentResponse; falls back to the error text."""
    if not agent_response.success and agent_response.error:
        return Panel(
            f"  [error]{escape(agent_response.error)}[/]",
            title="[error]Agent call failed[/]",
            box=box.ROUNDED,
            border_style="red",
            padding=(0, 2),
        )
    return result_panel(agent_response.response, agent_response.parse_strategy)


def events_table(events: list[ParsedSSEEvent]) -> Table:
    """Build a Rich Table with one row per parsed stream event."""
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("#", style="muted", justify="right")
    table.add_column("type", style="accent")
    table.add_column("strategy", style="strategy")
    table.add_column("message")

    for i, parsed in enumerate(events, start=1):
        if parsed.success and parsed.event is not None:
            message = escape(get_event_message(parsed.event))
        else:
            message = f"[error]Parse error: {escape(parsed.error or '')}[/]"
        table.add_row(str(i), escape(parsed.event_type), parsed.parse_strategy or "", message)

    return table


def upload_table(upload: UploadResponse) -> Table:
    """Build a Rich Table listing uploaded files and their asset ids."""
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("file")
    table.add_column("asset id", style="accent")
    table.add_column("status")

    for f in upload.files:
        status = "[success]ok[/]" if f.success else f"[error]{escape(f.error or 'failed')}[/]"
        table.add_row(escape(f.file_name), f.asset_id or "-", status)

    return table
