"""Process runner: one hook command, one OS process, one attempt."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import signal
import time
from typing import Any

from agenthooks.types.config import DispatcherConfig
from agenthooks.types.hooks import HookCommand, HookResult, StructuredDecision

logger = logging.getLogger(__name__)

_POSIX = os.name == "posix"
_READ_CHUNK = 65536
_SIGKILL = getattr(signal, "SIGKILL", signal.SIGTERM)


def parse_structured_output(stdout: str) -> StructuredDecision | None:
    """Best-effort decode of a hook's stdout as one JSON decision object.

    Anything that is not a single JSON object yields None and the output is
    treated as plain text. Fields with the wrong type are dropped.
    """
    if not stdout:
        return None
    try:
        data = json.loads(stdout)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None

    def _text(key: str) -> str | None:
        value = data.get(key)
        return value if isinstance(value, str) else None

    decision = data.get("decision")
    cont = data.get("continue")
    return StructuredDecision(
        decision=decision if decision in ("approve", "block") else None,
        reason=_text("reason"),
        continue_=cont if isinstance(cont, bool) else None,
        stop_reason=_text("stopReason"),
        suppress_output=data.get("suppressOutput") is True,
        context=_text("context"),
        raw=data,
    )


async def _drain(stream: asyncio.StreamReader | None, chunks: list[bytes]) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            return
        chunks.append(chunk)


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace").strip()


class ProcessRunner:
    """Runs one hook command through the shell and packages a HookResult.

    The event payload is written to stdin and the stream closed. If the
    command outlives its timeout (or ``abort`` is set) the process group gets
    SIGTERM, then SIGKILL once the grace period has passed.
    """

    def __init__(
        self,
        command: HookCommand,
        payload: dict[str, Any] | str,
        *,
        cwd: str | None = None,
        config: DispatcherConfig | None = None,
        abort: asyncio.Event | None = None,
    ) -> None:
        self._command = command
        self._input = payload if isinstance(payload, str) else json.dumps(payload)
        self._cwd = cwd or None
        self._config = config or DispatcherConfig()
        self._abort = abort
        self._proc: asyncio.subprocess.Process | None = None
        self._timed_out = False
        self._cancelled = False
        # (signal, time.monotonic()) for every signal delivered
        self.signals: list[tuple[signal.Signals, float]] = []

    @property
    def command(self) -> HookCommand:
        return self._command

    @property
    def timeout(self) -> float:
        return self._command.effective_timeout(self._config.default_timeout)

    async def run(self) -> HookResult:
        """Execute the command and return its result. Never raises for
        process-level failures; task cancellation kills the process and
        propagates."""
        started = time.monotonic()
        command = self._command.command

        if self._abort is not None and self._abort.is_set():
            return HookResult(
                success=False, exit_code=-1, cancelled=True,
                error="Hook cancelled before start",
            )

        if self._config.debug:
            logger.debug("Executing hook command: %s with timeout %ss", command, self.timeout)

        try:
            self._proc = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._cwd,
                **self._spawn_options(),
            )
        except (OSError, ValueError) as exc:
            # ValueError: NUL byte in the command or cwd
            logger.warning("Hook failed to start: %s: %s", command, exc)
            return HookResult(
                success=False,
                exit_code=-1,
                error=f"Failed to start hook: {type(exc).__name__}: {exc}",
                duration_ms=(time.monotonic() - started) * 1000,
            )

        proc = self._proc
        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        readers = [
            asyncio.create_task(_drain(proc.stdout, stdout_chunks)),
            asyncio.create_task(_drain(proc.stderr, stderr_chunks)),
        ]
        writer = asyncio.create_task(self._feed_stdin(proc))

        try:
            await self._wait_for_exit(proc)
            await self._collect_output(readers)
        except asyncio.CancelledError:
            self._signal(_SIGKILL)
            raise
        finally:
            for task in (writer, *readers):
                if not task.done():
                    task.cancel()

        returncode = proc.returncode
        exit_code = returncode if returncode is not None and returncode >= 0 else -1
        stdout = _decode(stdout_chunks)
        error = None
        if self._timed_out:
            error = f"Hook timed out after {self.timeout}s"
        elif self._cancelled:
            error = "Hook cancelled"

        result = HookResult(
            success=exit_code == 0,
            exit_code=exit_code,
            stdout=stdout,
            stderr=_decode(stderr_chunks),
            timed_out=self._timed_out,
            error=error,
            structured_output=parse_structured_output(stdout),
            cancelled=self._cancelled,
            duration_ms=(time.monotonic() - started) * 1000,
        )
        if self._config.debug:
            logger.debug("Hook command completed with status %d: %s", result.exit_code, command)
        return result

    def _spawn_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if _POSIX:
            # Own process group so signals reach everything the shell started
            options["start_new_session"] = True
        if self._config.shell:
            options["executable"] = self._config.shell
        return options

    async def _feed_stdin(self, proc: asyncio.subprocess.Process) -> None:
        if proc.stdin is None:
            return
        try:
            proc.stdin.write(self._input.encode("utf-8"))
            await proc.stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            # Hook exited without reading its input
            pass
        finally:
            proc.stdin.close()

    async def _wait_for_exit(self, proc: asyncio.subprocess.Process) -> None:
        exited = asyncio.create_task(proc.wait())
        aborted = asyncio.create_task(self._abort.wait()) if self._abort is not None else None
        watched = {exited} if aborted is None else {exited, aborted}
        try:
            done, _ = await asyncio.wait(
                watched, timeout=self.timeout, return_when=asyncio.FIRST_COMPLETED,
            )
            if exited in done:
                return

            if aborted is not None and aborted in done:
                self._cancelled = True
                logger.warning("Hook aborted by caller: %s", self._command.command)
            else:
                self._timed_out = True
                logger.warning("Hook timed out after %ss: %s", self.timeout, self._command.command)

            self._signal(signal.SIGTERM)
            done, _ = await asyncio.wait({exited}, timeout=self._config.kill_grace_seconds)
            if exited not in done:
                logger.warning("Hook ignored SIGTERM, killing: %s", self._command.command)
                self._signal(_SIGKILL)
                await exited
        finally:
            for task in (exited, aborted):
                if task is not None and not task.done():
                    task.cancel()

    async def _collect_output(self, readers: list[asyncio.Task[None]]) -> None:
        if not (self._timed_out or self._cancelled):
            await asyncio.gather(*readers)
            return

        # The shell is gone but a leftover child may still hold the pipes.
        grace = self._config.kill_grace_seconds
        _, pending = await asyncio.wait(readers, timeout=grace)
        if pending:
            self._signal(_SIGKILL)
            await asyncio.wait(pending, timeout=grace)

    def _signal(self, sig: signal.Signals) -> None:
        proc = self._proc
        if proc is None:
            return
        self.signals.append((sig, time.monotonic()))
        try:
            if _POSIX:
                os.killpg(proc.pid, sig)
            elif proc.returncode is None:
                if sig == signal.SIGTERM:
                    proc.terminate()
                else:
                    proc.kill()
        except (ProcessLookupError, PermissionError):
            pass
