"""CLI entry point — docverify agent response tooling.

Usage:
  docverify parse response.txt        Recover JSON from a saved agent reply
  docverify stream events.txt         Reassemble and parse a saved SSE dump
  docverify ask "Verify this" -a f.pdf  Upload documents and ask the agent
  docverify upload a.pdf b.png        Upload documents, print asset ids
"""

import asyncio
import logging
import sys

import click
from rich.markup import escape

from cli.theme import (
    get_console,
    app_header,
    command_panel,
    result_panel,
    agent_response_panel,
    events_table,
    upload_table,
)
from config.exceptions import DocVerifyError
from config.logging_config import setup_logging
from config.settings import Settings

console = get_console()


def _init_logging(verbose: bool):
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    settings = Settings()
    setup_logging(level=level, log_dir=settings.log_dir, console_enabled=verbose)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """docverify — ingest and inspect document verification agent replies."""
    _init_logging(verbose)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def parse(source):
    """Parse a raw agent reply (file or stdin) and show the normalized result."""
    from tools.json_parser import robust_json_parse
    from tools.response_normalizer import normalize_response

    text = source.read()
    result = robust_json_parse(text)

    if not result.success:
        console.print(f"[error]Could not parse reply[/] [muted]({result.strategy.value})[/]: {escape(result.error or '')}")
        sys.exit(1)

    console.print(result_panel(normalize_response(result.data), result.strategy.value))


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--request-id", "-r", default=None, help="Request id to back-fill into events")
def stream(source, request_id):
    """Parse a saved SSE dump (file or stdin) and list its events."""
    from events.dispatch import dispatch_event, logging_handlers
    from events.sse_parser import parse_sse_stream

    events = parse_sse_stream(source.read(), request_id)
    if not events:
        console.print("[warning]No events found[/]")
        return

    handlers = logging_handlers()
    for parsed in events:
        dispatch_event(parsed, handlers)

    console.print(events_table(events))
    failed = sum(1 for e in events if not e.success)
    console.print(f"[muted]{len(events)} events, {failed} unparseable[/]")


@cli.command()
@click.argument("message")
@click.option("--agent-id", "-g", default=None, help="Agent id (defaults to DEFAULT_AGENT_ID)")
@click.option("--session-id", "-s", default=None, help="Reuse an existing session")
@click.option("--attach", "-a", multiple=True, type=click.Path(exists=True, dir_okay=False),
              help="Document to upload and attach (repeatable)")
@click.option("--stream", "use_stream", is_flag=True, help="Use the streaming endpoint")
def ask(message, agent_id, session_id, attach, use_stream):
    """Send a message (and optional documents) to the agent."""
    from tools.agent_client import AgentClient

    client = AgentClient()

    fields = {"message": message}
    if attach:
        fields["attachments"] = ", ".join(attach)
    console.print(app_header())
    console.print(command_panel("Ask agent", fields))

    async def _run():
        assets = None
        if attach:
            upload = await client.upload_files(attach)
            upload.raise_for_error()
            assets = upload.asset_ids
        if use_stream:
            return await client.stream_agent(message, agent_id, session_id=session_id, assets=assets)
        return await client.call_agent(message, agent_id, session_id=session_id, assets=assets)

    try:
        outcome = asyncio.run(_run())
    except DocVerifyError as e:
        console.print(f"[error]{escape(str(e))}[/]")
        sys.exit(1)

    if use_stream:
        console.print(events_table(outcome))
        return

    console.print(agent_response_panel(outcome))
    if not outcome.success:
        sys.exit(1)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def upload(paths):
    """Upload documents to asset storage and print their asset ids."""
    from tools.agent_client import AgentClient

    result = asyncio.run(AgentClient().upload_files(paths))
    if result.files:
        console.print(upload_table(result))
    if not result.success:
        console.print(f"[error]{escape(result.message)}[/]: {escape(result.error or '')}")
        sys.exit(1)
    console.print(f"[success]{result.message}[/]")


if __name__ == "__main__":
    cli()
