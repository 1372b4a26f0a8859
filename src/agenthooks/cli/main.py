"""CLI entry point for agenthooks."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from typing import Any

import click
from rich.console import Console

from agenthooks.cli.output import dispatch_to_json, print_config, print_dispatch
from agenthooks.core.config import load_dispatcher_config
from agenthooks.hooks.dispatcher import HookDispatcher
from agenthooks.hooks.events import build_event_payload
from agenthooks.hooks.validation import HookError, load_hook_config
from agenthooks.types.hooks import HookEvent

EVENT_NAMES = [event.value for event in HookEvent]
BLOCKED_EXIT_CODE = 2


def _read_payload(raw: str | None) -> dict[str, Any]:
    """Parse --payload: inline JSON, ``@path`` or ``-`` for stdin."""
    if raw is None:
        return {}
    if raw == "-":
        text = sys.stdin.read()
    elif raw.startswith("@"):
        with open(raw[1:], encoding="utf-8") as f:
            text = f.read()
    else:
        text = raw
    try:
        data = json.loads(text) if text.strip() else {}
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--payload") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--payload")
    return data


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging for every hook command")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """agenthooks -- run lifecycle hook commands and report their decision.

    \b
    Usage:
      agenthooks run PreToolUse -c hooks.json -t Bash --payload '{"tool_input": {"command": "ls"}}'
      agenthooks validate hooks.json
      agenthooks events
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command("run")
@click.argument("event", type=click.Choice(EVENT_NAMES))
@click.option("--config", "-c", "config_path", required=True,
              type=click.Path(exists=True, dir_okay=False), help="Hook config file")
@click.option("--payload", default=None, help="Event fields as JSON, @file, or - for stdin")
@click.option("--tool", "-t", default=None, help="Tool name used for matcher selection")
@click.option("--session", "-s", default="cli", help="Session ID sent to hooks")
@click.option("--transcript", default="", help="Transcript path sent to hooks")
@click.option("--cwd", default=None, help="Working directory for hook commands")
@click.option("--timeout", type=float, default=None, help="Default hook timeout in seconds")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def run_cmd(
    ctx: click.Context,
    event: str,
    config_path: str,
    payload: str | None,
    tool: str | None,
    session: str,
    transcript: str,
    cwd: str | None,
    timeout: float | None,
    as_json: bool,
) -> None:
    """Dispatch EVENT to the hooks in a config file.

    Exits with status 2 when the hooks block the action.
    """
    fields = _read_payload(payload)
    hook_event = HookEvent(event)
    work_dir = cwd or fields.pop("cwd", None) or os.getcwd()
    session_id = fields.pop("session_id", session)
    transcript_path = fields.pop("transcript_path", transcript)
    fields.pop("hook_event_name", None)
    if tool and hook_event in (HookEvent.PRE_TOOL_USE, HookEvent.POST_TOOL_USE):
        fields.setdefault("tool_name", tool)

    try:
        hook_config = load_hook_config(config_path)
        event_payload = build_event_payload(
            hook_event,
            session_id=session_id,
            transcript_path=transcript_path,
            cwd=work_dir,
            **fields,
        )
    except HookError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    dispatcher = HookDispatcher(
        load_dispatcher_config(work_dir, default_timeout=timeout, debug=verbose or None)
    )
    match_key = tool or fields.get("tool_name")
    outcome = asyncio.run(dispatcher.dispatch(hook_event, event_payload, hook_config, match_key))

    if as_json:
        click.echo(dispatch_to_json(outcome))
    else:
        print_dispatch(outcome, Console())

    if outcome.should_block:
        raise SystemExit(BLOCKED_EXIT_CODE)


@cli.command("validate")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
def validate_cmd(config_path: str) -> None:
    """Check a hook config file and list its hooks."""
    try:
        hook_config = load_hook_config(config_path)
    except HookError as e:
        click.echo(f"Invalid hook config: {e}", err=True)
        raise SystemExit(1)
    print_config(hook_config, Console())


@cli.command("events")
def events_cmd() -> None:
    """List the lifecycle events hooks can attach to."""
    for name in EVENT_NAMES:
        click.echo(name)


def main() -> None:
    cli()
