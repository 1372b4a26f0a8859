"""Rendering of dispatch results and configs for the CLI."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from agenthooks.types.hooks import DispatchResult, HookConfig, HookResult

STYLE_OK = "bold #34d399"        # green
STYLE_FAIL = "bold #f87171"      # red
STYLE_WARN = "bold #fbbf24"      # amber
STYLE_MUTED = "#7c7c8a"
STYLE_LABEL = "bold #94a3b8"


def _status(result: HookResult) -> tuple[str, str]:
    if result.timed_out:
        return "timeout", STYLE_WARN
    if result.cancelled:
        return "cancelled", STYLE_WARN
    if result.error and result.exit_code == -1:
        return "error", STYLE_FAIL
    return ("ok", STYLE_OK) if result.success else ("failed", STYLE_FAIL)


def print_dispatch(outcome: DispatchResult, console: Console | None = None) -> None:
    """Print a results table followed by the aggregate decision."""
    console = console or Console()

    table = Table(show_header=True, header_style=STYLE_LABEL)
    table.add_column("#", justify="right", style=STYLE_MUTED)
    table.add_column("Status")
    table.add_column("Exit", justify="right")
    table.add_column("Time", justify="right", style=STYLE_MUTED)
    table.add_column("Output")
    for i, result in enumerate(outcome.results, start=1):
        label, style = _status(result)
        detail = result.stderr or result.error or result.stdout
        table.add_row(
            str(i),
            f"[{style}]{label}[/]",
            str(result.exit_code),
            f"{result.duration_ms:.0f}ms",
            escape(detail[:200]),
        )
    if outcome.results:
        console.print(table)
    else:
        console.print(f"[{STYLE_MUTED}]No hooks matched.[/]")

    if outcome.should_block:
        console.print(f"[{STYLE_FAIL}]Blocked:[/] {escape(outcome.block_reason or '(no reason given)')}")
    if not outcome.should_continue:
        console.print(f"[{STYLE_WARN}]Stop:[/] {escape(outcome.stop_reason or '(no reason given)')}")
    for ctx in outcome.context_to_add:
        console.print(f"[{STYLE_LABEL}]Context:[/] {escape(ctx)}")


def dispatch_to_json(outcome: DispatchResult) -> str:
    """Serialize a DispatchResult using the wire field names."""

    def _result(result: HookResult) -> dict[str, Any]:
        data = dataclasses.asdict(result)
        decision = result.structured_output
        data["structured_output"] = decision.raw if decision is not None else None
        return data

    return json.dumps(
        {
            "results": [_result(r) for r in outcome.results],
            "shouldBlock": outcome.should_block,
            "blockReason": outcome.block_reason,
            "shouldContinue": outcome.should_continue,
            "stopReason": outcome.stop_reason,
            "contextToAdd": list(outcome.context_to_add),
        },
        indent=2,
    )


def print_config(config: HookConfig, console: Console | None = None) -> None:
    """List every configured hook, grouped by event."""
    console = console or Console()
    if not config:
        console.print(f"[{STYLE_MUTED}]No hooks configured.[/]")
        return

    for event, matchers in config.items():
        console.print(f"[{STYLE_LABEL}]{event.value}[/]")
        for matcher in matchers:
            pattern = matcher.pattern or "*"
            for command in matcher.commands:
                timeout = f" (timeout {command.timeout:g}s)" if command.timeout else ""
                console.print(f"  [{STYLE_MUTED}]{escape(pattern)}[/]  {escape(command.command)}{timeout}")
