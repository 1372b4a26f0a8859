"""Tests for agenthooks.hooks.runner: process lifecycle against /bin/sh."""

from __future__ import annotations

import asyncio
import json
import signal
from pathlib import Path

import pytest

from agenthooks.hooks.runner import ProcessRunner
from agenthooks.types.config import DispatcherConfig
from agenthooks.types.hooks import HookCommand

PAYLOAD = {"session_id": "s1", "transcript_path": "", "cwd": "", "hook_event_name": "Stop"}


def runner_for(
    command: str,
    *,
    timeout: float | None = None,
    grace: float = 0.5,
    shell: str | None = None,
    abort: asyncio.Event | None = None,
) -> ProcessRunner:
    return ProcessRunner(
        HookCommand(command=command, timeout=timeout),
        PAYLOAD,
        config=DispatcherConfig(kill_grace_seconds=grace, shell=shell),
        abort=abort,
    )


class TestCompletion:
    @pytest.mark.asyncio
    async def test_success(self):
        result = await runner_for("exit 0").run()
        assert result.success is True
        assert result.exit_code == 0
        assert result.timed_out is False
        assert result.error is None

    @pytest.mark.asyncio
    async def test_nonzero_exit(self):
        result = await runner_for("exit 3").run()
        assert result.success is False
        assert result.exit_code == 3

    @pytest.mark.asyncio
    async def test_streams_are_trimmed(self):
        result = await runner_for("echo '  out  '; echo '  err  ' 1>&2").run()
        assert result.stdout == "out"
        assert result.stderr == "err"

    @pytest.mark.asyncio
    async def test_payload_written_to_stdin(self):
        result = await runner_for("cat").run()
        assert json.loads(result.stdout) == PAYLOAD

    @pytest.mark.asyncio
    async def test_stdin_is_closed(self):
        # wc only finishes once it sees end-of-input
        result = await runner_for("wc -c", timeout=5).run()
        assert result.timed_out is False
        assert int(result.stdout) == len(json.dumps(PAYLOAD))

    @pytest.mark.asyncio
    async def test_runs_in_cwd(self, tmp_path: Path):
        runner = ProcessRunner(HookCommand("pwd"), PAYLOAD, cwd=str(tmp_path))
        result = await runner.run()
        assert Path(result.stdout).resolve() == tmp_path.resolve()

    @pytest.mark.asyncio
    async def test_structured_output_parsed(self):
        result = await runner_for("""echo '{"decision": "block", "reason": "nope"}'""").run()
        assert result.structured_output is not None
        assert result.structured_output.decision == "block"
        assert result.structured_output.reason == "nope"

    @pytest.mark.asyncio
    async def test_plain_stdout_is_not_structured(self):
        result = await runner_for("echo hello").run()
        assert result.stdout == "hello"
        assert result.structured_output is None

    @pytest.mark.asyncio
    async def test_hook_ignoring_large_stdin(self):
        runner = ProcessRunner(HookCommand("exit 0", timeout=5), "x" * (1 << 20))
        result = await runner.run()
        assert result.success is True
        assert result.timed_out is False

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self):
        result = await runner_for(r"printf 'ok\377'").run()
        assert result.stdout.startswith("ok")
        assert "�" in result.stdout

    @pytest.mark.asyncio
    async def test_no_signals_on_natural_exit(self):
        runner = runner_for("exit 0", timeout=0.3)
        await runner.run()
        await asyncio.sleep(0.5)
        assert runner.signals == []


class TestTimeout:
    @pytest.mark.asyncio
    async def test_sleep_past_timeout_is_terminated(self):
        runner = runner_for("sleep 10", timeout=1)
        result = await runner.run()
        assert result.timed_out is True
        assert result.success is False
        assert result.exit_code == -1
        assert "timed out" in result.error
        assert [sig for sig, _ in runner.signals] == [signal.SIGTERM]
        assert result.duration_ms < 5000

    @pytest.mark.asyncio
    async def test_sigterm_ignored_escalates_to_sigkill(self):
        runner = runner_for("trap '' TERM; sleep 10", timeout=0.3, grace=0.5)
        result = await runner.run()
        assert result.timed_out is True
        assert result.exit_code == -1
        sigs = [sig for sig, _ in runner.signals]
        assert sigs[:2] == [signal.SIGTERM, signal.SIGKILL]
        term_at, kill_at = runner.signals[0][1], runner.signals[1][1]
        assert kill_at - term_at >= 0.45
        assert result.duration_ms < 5000

    @pytest.mark.asyncio
    async def test_output_before_timeout_is_kept(self):
        result = await runner_for("echo partial; sleep 10", timeout=0.3).run()
        assert result.timed_out is True
        assert result.stdout == "partial"

    def test_default_grace_period(self):
        assert DispatcherConfig().kill_grace_seconds == 5.0


class TestSpawnFailure:
    @pytest.mark.asyncio
    async def test_missing_shell(self):
        result = await runner_for("exit 0", shell="/nonexistent/shell").run()
        assert result.success is False
        assert result.exit_code == -1
        assert result.error is not None
        assert "Failed to start hook" in result.error

    @pytest.mark.asyncio
    async def test_nul_byte_in_command(self):
        result = await runner_for("echo a\x00b", timeout=2).run()
        assert result.success is False
        assert result.exit_code == -1
        assert "Failed to start hook: ValueError" in result.error

    @pytest.mark.asyncio
    async def test_nul_byte_in_cwd(self):
        runner = ProcessRunner(HookCommand("exit 0"), PAYLOAD, cwd="/tmp/a\x00b")
        result = await runner.run()
        assert result.exit_code == -1
        assert "Failed to start hook" in result.error

    @pytest.mark.asyncio
    async def test_missing_cwd(self, tmp_path: Path):
        runner = ProcessRunner(HookCommand("exit 0"), PAYLOAD, cwd=str(tmp_path / "missing"))
        result = await runner.run()
        assert result.success is False
        assert result.exit_code == -1
        assert "Failed to start hook" in result.error


class TestCancellation:
    @pytest.mark.asyncio
    async def test_abort_event_terminates(self):
        abort = asyncio.Event()
        runner = runner_for("sleep 10", timeout=30, abort=abort)
        task = asyncio.create_task(runner.run())
        await asyncio.sleep(0.3)
        abort.set()
        result = await asyncio.wait_for(task, timeout=5)
        assert result.cancelled is True
        assert result.timed_out is False
        assert result.success is False
        assert runner.signals[0][0] == signal.SIGTERM

    @pytest.mark.asyncio
    async def test_abort_before_start_spawns_nothing(self):
        abort = asyncio.Event()
        abort.set()
        runner = runner_for("exit 0", abort=abort)
        result = await runner.run()
        assert result.cancelled is True
        assert runner.signals == []

    @pytest.mark.asyncio
    async def test_task_cancel_kills_process(self):
        runner = runner_for("sleep 10", timeout=30)
        task = asyncio.create_task(runner.run())
        await asyncio.sleep(0.3)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert runner.signals[-1][0] == signal.SIGKILL
