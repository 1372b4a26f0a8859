"""Shared fixtures for agenthooks tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from agenthooks.hooks.dispatcher import HookDispatcher
from agenthooks.hooks.events import PreToolUsePayload, UserPromptSubmitPayload
from agenthooks.types.config import DispatcherConfig
from agenthooks.types.hooks import HookResult, StructuredDecision


def make_result(
    exit_code: int = 0,
    stdout: str = "",
    stderr: str = "",
    structured: StructuredDecision | None = None,
    **kwargs: Any,
) -> HookResult:
    """Build a HookResult the way the runner would for a finished command."""
    return HookResult(
        success=exit_code == 0,
        exit_code=exit_code,
        stdout=stdout,
        stderr=stderr,
        structured_output=structured,
        **kwargs,
    )


def hooks_config(event: str, *entries: tuple[str | None, list[str]]) -> dict[str, Any]:
    """Raw settings mapping: ``hooks_config("PreToolUse", ("Bash", ["exit 0"]))``."""
    matchers = []
    for pattern, commands in entries:
        entry: dict[str, Any] = {"hooks": [{"type": "command", "command": c} for c in commands]}
        if pattern is not None:
            entry["matcher"] = pattern
        matchers.append(entry)
    return {event: matchers}


@pytest.fixture
def fast_config() -> DispatcherConfig:
    """Dispatcher settings with a short kill grace period."""
    return DispatcherConfig(kill_grace_seconds=0.5)


@pytest.fixture
def dispatcher(fast_config: DispatcherConfig) -> HookDispatcher:
    return HookDispatcher(fast_config)


@pytest.fixture
def tool_payload(tmp_path: Path) -> PreToolUsePayload:
    return PreToolUsePayload(
        session_id="test-session",
        transcript_path=str(tmp_path / "transcript.jsonl"),
        cwd=str(tmp_path),
        tool_name="Bash",
        tool_input={"command": "ls"},
    )


@pytest.fixture
def prompt_payload(tmp_path: Path) -> UserPromptSubmitPayload:
    return UserPromptSubmitPayload(
        session_id="test-session",
        transcript_path=str(tmp_path / "transcript.jsonl"),
        cwd=str(tmp_path),
        prompt="fix the bug",
    )


@pytest.fixture
def hooks_file(tmp_path: Path):
    """Write a hook config document to disk and return its path."""

    def _write(data: dict[str, Any], name: str = "hooks.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return _write
