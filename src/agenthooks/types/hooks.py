"""Hook types for the agenthooks event system."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

DEFAULT_TIMEOUT_SECONDS = 60.0


class HookEvent(Enum):
    """Lifecycle events that can trigger hooks.

    Values are the identifiers used both as configuration keys and as the
    ``hook_event_name`` field sent to hook processes.
    """

    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    NOTIFICATION = "Notification"
    PRE_COMPACT = "PreCompact"

    @classmethod
    def parse(cls, value: HookEvent | str) -> HookEvent:
        """Coerce a wire name (or an enum member) into a HookEvent."""
        if isinstance(value, HookEvent):
            return value
        return cls(value)


@dataclass(frozen=True, slots=True)
class HookCommand:
    """One external program invocation, defined entirely by configuration."""

    command: str
    timeout: float | None = None  # Seconds; None or 0 means the default

    def effective_timeout(self, default: float = DEFAULT_TIMEOUT_SECONDS) -> float:
        return float(self.timeout) if self.timeout else default


@dataclass(frozen=True, slots=True)
class HookMatcher:
    """A tool-name pattern plus the commands it selects.

    A matcher without a pattern applies to every event of its category.
    """

    pattern: str | None = None
    commands: tuple[HookCommand, ...] = ()


# Parsed configuration: event -> ordered matchers.
HookConfig = dict[HookEvent, tuple[HookMatcher, ...]]

Decision = Literal["approve", "block"]


@dataclass(frozen=True, slots=True)
class StructuredDecision:
    """JSON object a hook may print on stdout for fine-grained control."""

    decision: Decision | None = None
    reason: str | None = None
    continue_: bool | None = None  # "continue" on the wire
    stop_reason: str | None = None
    suppress_output: bool = False
    context: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True, slots=True)
class HookResult:
    """Outcome of one hook command execution."""

    success: bool
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    error: str | None = None
    structured_output: StructuredDecision | None = None
    cancelled: bool = False
    duration_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Aggregate decision over every hook run for one dispatch."""

    results: tuple[HookResult, ...] = ()
    should_block: bool = False
    block_reason: str | None = None
    should_continue: bool = True
    stop_reason: str | None = None
    context_to_add: tuple[str, ...] = ()

    @property
    def context(self) -> str:
        """All contributed context joined into one block."""
        return "\n\n".join(self.context_to_add)

    @property
    def failures(self) -> tuple[HookResult, ...]:
        return tuple(r for r in self.results if not r.success)
