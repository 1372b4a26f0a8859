"""Lifecycle helpers that wire dispatches into tool calls and prompts."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from agenthooks.hooks.dispatcher import HookDispatcher
from agenthooks.hooks.events import (
    NotificationPayload,
    PostToolUsePayload,
    PreCompactPayload,
    PreToolUsePayload,
    StopPayload,
    UserPromptSubmitPayload,
)
from agenthooks.types.hooks import DispatchResult, HookConfig, HookEvent

logger = logging.getLogger(__name__)

ToolExecutor = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]
RawOrParsedConfig = HookConfig | Mapping[str, Any] | None


@dataclass(frozen=True, slots=True)
class HookSession:
    """Fields shared by every payload within one agent session."""

    session_id: str
    transcript_path: str = ""
    cwd: str = ""

    @classmethod
    def create(cls, session_id: str, transcript_path: str = "", cwd: str | Path | None = None) -> HookSession:
        return cls(session_id=session_id, transcript_path=transcript_path, cwd=str(cwd or Path.cwd()))

    def payload_fields(self) -> dict[str, str]:
        return {
            "session_id": self.session_id,
            "transcript_path": self.transcript_path,
            "cwd": self.cwd,
        }


@dataclass(frozen=True, slots=True)
class ToolRun:
    """Outcome of a tool call wrapped in PreToolUse/PostToolUse hooks."""

    tool_name: str
    blocked: bool
    block_reason: str | None = None
    response: dict[str, Any] | None = None
    pre: DispatchResult = field(default_factory=DispatchResult)
    post: DispatchResult | None = None

    @property
    def context(self) -> list[str]:
        ctx = list(self.pre.context_to_add)
        if self.post is not None:
            ctx.extend(self.post.context_to_add)
        return ctx

    @property
    def should_continue(self) -> bool:
        return self.pre.should_continue and (self.post is None or self.post.should_continue)


@dataclass(frozen=True, slots=True)
class PromptSubmission:
    """Whether UserPromptSubmit hooks let a prompt through."""

    prompt: str
    accepted: bool
    reason: str | None = None
    context: tuple[str, ...] = ()
    result: DispatchResult = field(default_factory=DispatchResult)


async def run_tool_with_hooks(
    dispatcher: HookDispatcher,
    hook_config: RawOrParsedConfig,
    session: HookSession,
    tool_name: str,
    tool_input: dict[str, Any],
    execute: ToolExecutor,
    *,
    abort: asyncio.Event | None = None,
) -> ToolRun:
    """Run PreToolUse hooks, the tool itself unless blocked, then PostToolUse.

    A tool blocked by PreToolUse is never executed and no PostToolUse hooks
    run for it. A PostToolUse block is reported with the response attached.
    """
    pre = await dispatcher.dispatch(
        HookEvent.PRE_TOOL_USE,
        PreToolUsePayload(**session.payload_fields(), tool_name=tool_name, tool_input=tool_input),
        hook_config,
        tool_name,
        abort=abort,
    )
    if pre.should_block:
        logger.info("Tool %s blocked by hook: %s", tool_name, pre.block_reason)
        return ToolRun(tool_name=tool_name, blocked=True, block_reason=pre.block_reason, pre=pre)

    response = await execute(tool_input)

    post = await dispatcher.dispatch(
        HookEvent.POST_TOOL_USE,
        PostToolUsePayload(
            **session.payload_fields(),
            tool_name=tool_name,
            tool_input=tool_input,
            tool_response=response,
        ),
        hook_config,
        tool_name,
        abort=abort,
    )
    return ToolRun(
        tool_name=tool_name,
        blocked=post.should_block,
        block_reason=post.block_reason,
        response=response,
        pre=pre,
        post=post,
    )


async def submit_prompt(
    dispatcher: HookDispatcher,
    hook_config: RawOrParsedConfig,
    session: HookSession,
    prompt: str,
    *,
    abort: asyncio.Event | None = None,
) -> PromptSubmission:
    """Run UserPromptSubmit hooks before a prompt is accepted."""
    result = await dispatcher.dispatch(
        HookEvent.USER_PROMPT_SUBMIT,
        UserPromptSubmitPayload(**session.payload_fields(), prompt=prompt),
        hook_config,
        abort=abort,
    )
    if result.should_block:
        logger.warning("User prompt submission blocked by hook: %s", result.block_reason)
    return PromptSubmission(
        prompt=prompt,
        accepted=not result.should_block,
        reason=result.block_reason,
        context=result.context_to_add,
        result=result,
    )


async def notify(
    dispatcher: HookDispatcher,
    hook_config: RawOrParsedConfig,
    session: HookSession,
    message: str,
) -> DispatchResult:
    return await dispatcher.dispatch(
        HookEvent.NOTIFICATION,
        NotificationPayload(**session.payload_fields(), message=message),
        hook_config,
    )


async def stop(
    dispatcher: HookDispatcher,
    hook_config: RawOrParsedConfig,
    session: HookSession,
    *,
    subagent: bool = False,
    stop_hook_active: bool = False,
) -> DispatchResult:
    """Run Stop (or SubagentStop) hooks when the agent finishes its turn."""
    event = HookEvent.SUBAGENT_STOP if subagent else HookEvent.STOP
    return await dispatcher.dispatch(
        event,
        StopPayload(**session.payload_fields(), stop_hook_active=stop_hook_active),
        hook_config,
    )


async def pre_compact(
    dispatcher: HookDispatcher,
    hook_config: RawOrParsedConfig,
    session: HookSession,
    *,
    trigger: Literal["manual", "auto"] = "auto",
    custom_instructions: str = "",
) -> DispatchResult:
    return await dispatcher.dispatch(
        HookEvent.PRE_COMPACT,
        PreCompactPayload(**session.payload_fields(), trigger=trigger, custom_instructions=custom_instructions),
        hook_config,
    )
