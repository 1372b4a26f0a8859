"""Event payloads sent to hook processes on stdin."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from agenthooks.hooks.validation import InvalidHookConfig
from agenthooks.types.hooks import HookEvent


@dataclass(slots=True)
class EventPayload:
    """Fields every hook receives, whatever the event."""

    session_id: str
    transcript_path: str
    cwd: str

    def to_wire(self, event: HookEvent) -> dict[str, Any]:
        """Return the JSON-ready document written to the hook's stdin."""
        data = dataclasses.asdict(self)
        data["hook_event_name"] = event.value
        return data


@dataclass(slots=True)
class UserPromptSubmitPayload(EventPayload):
    prompt: str = ""


@dataclass(slots=True)
class PreToolUsePayload(EventPayload):
    tool_name: str = ""
    tool_input: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PostToolUsePayload(EventPayload):
    tool_name: str = ""
    tool_input: dict[str, Any] = field(default_factory=dict)
    tool_response: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class StopPayload(EventPayload):
    stop_hook_active: bool = False


@dataclass(slots=True)
class NotificationPayload(EventPayload):
    message: str = ""


@dataclass(slots=True)
class PreCompactPayload(EventPayload):
    trigger: Literal["manual", "auto"] = "auto"
    custom_instructions: str = ""


PAYLOAD_TYPES: dict[HookEvent, type[EventPayload]] = {
    HookEvent.USER_PROMPT_SUBMIT: UserPromptSubmitPayload,
    HookEvent.PRE_TOOL_USE: PreToolUsePayload,
    HookEvent.POST_TOOL_USE: PostToolUsePayload,
    HookEvent.STOP: StopPayload,
    HookEvent.SUBAGENT_STOP: StopPayload,
    HookEvent.NOTIFICATION: NotificationPayload,
    HookEvent.PRE_COMPACT: PreCompactPayload,
}

_BASE_FIELDS = frozenset(f.name for f in dataclasses.fields(EventPayload))


def build_event_payload(
    event: HookEvent | str,
    *,
    session_id: str,
    transcript_path: str = "",
    cwd: str | Path = "",
    **fields: Any,
) -> EventPayload:
    """Build the payload variant for ``event`` from keyword fields."""
    hook_event = HookEvent.parse(event)
    payload_type = PAYLOAD_TYPES[hook_event]
    allowed = {f.name for f in dataclasses.fields(payload_type)} - _BASE_FIELDS
    unknown = set(fields) - allowed
    if unknown:
        raise InvalidHookConfig(
            f"Unexpected fields for {hook_event.value}: {', '.join(sorted(unknown))}"
        )
    if payload_type is PreCompactPayload and fields.get("trigger", "auto") not in ("manual", "auto"):
        raise InvalidHookConfig(f"PreCompact trigger must be 'manual' or 'auto', got {fields['trigger']!r}")
    return payload_type(
        session_id=session_id,
        transcript_path=transcript_path,
        cwd=str(cwd),
        **fields,
    )


def check_payload(event: HookEvent, payload: EventPayload) -> None:
    """Reject a payload variant that does not belong to ``event``."""
    expected = PAYLOAD_TYPES[event]
    if type(payload) is not expected:
        raise InvalidHookConfig(
            f"{event.value} expects {expected.__name__}, got {type(payload).__name__}"
        )


def format_event_data(event: HookEvent, payload: EventPayload) -> str:
    """Render the interesting payload fields, one per line, for logs."""
    parts = [f"Event: {event.value}"]
    if isinstance(payload, (PreToolUsePayload, PostToolUsePayload)):
        parts.append(f"Tool: {payload.tool_name}")
    if isinstance(payload, UserPromptSubmitPayload):
        parts.append(f"Prompt: {payload.prompt}")
    if isinstance(payload, NotificationPayload):
        parts.append(f"Message: {payload.message}")
    parts.append(f"Session: {payload.session_id}")
    parts.append(f"CWD: {payload.cwd}")
    return "\n".join(parts)
