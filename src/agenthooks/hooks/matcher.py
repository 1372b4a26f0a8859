"""Tool-name matching for hook matchers."""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable

from agenthooks.types.hooks import HookCommand, HookMatcher


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def selects(matcher: HookMatcher, tool_name: str | None) -> bool:
    """Return True if ``matcher`` applies to ``tool_name``.

    No pattern selects everything. A pattern with no tool name never selects.
    A pattern that is not a valid regex degrades to exact string equality.
    """
    if not matcher.pattern:
        return True
    if not tool_name:
        return False

    regex = _compile(matcher.pattern)
    if regex is None:
        return matcher.pattern == tool_name
    return regex.search(tool_name) is not None


def select_commands(
    matchers: Iterable[HookMatcher], tool_name: str | None,
) -> list[HookCommand]:
    """Flatten the commands of every selected matcher, keeping config order."""
    return [
        command
        for matcher in matchers
        if selects(matcher, tool_name)
        for command in matcher.commands
    ]
