"""Fold per-command hook results into one dispatch decision."""

from __future__ import annotations

from collections.abc import Sequence

from agenthooks.types.hooks import DispatchResult, HookResult

# Exit status a hook uses to block the pending action outright.
BLOCKING_EXIT_CODE = 2


def aggregate(results: Sequence[HookResult]) -> DispatchResult:
    """Combine hook results, in request order, into a DispatchResult.

    Results are folded in order and later results overwrite the block and
    stop reasons of earlier ones: the last blocking result wins. Callers that
    need a different precedence must order their matchers accordingly.
    """
    should_block = False
    block_reason: str | None = None
    should_continue = True
    stop_reason: str | None = None
    context: list[str] = []

    for result in results:
        if result.exit_code == BLOCKING_EXIT_CODE and result.stderr:
            should_block = True
            block_reason = result.stderr

        decision = result.structured_output
        if decision is not None:
            if decision.decision == "block":
                should_block = True
                block_reason = decision.reason
            if decision.continue_ is False:
                should_continue = False
                stop_reason = decision.stop_reason
            if decision.context and result.exit_code == 0:
                context.append(decision.context)

        suppressed = decision is not None and decision.suppress_output
        if result.exit_code == 0 and result.stdout and not suppressed:
            context.append(result.stdout)

    return DispatchResult(
        results=tuple(results),
        should_block=should_block,
        block_reason=block_reason,
        should_continue=should_continue,
        stop_reason=stop_reason,
        context_to_add=tuple(context),
    )


def summarize_results(results: Sequence[HookResult]) -> str:
    """Plain-text status block per result, separated by ``---`` lines."""
    blocks = []
    for result in results:
        lines = [f"Status: {'SUCCESS' if result.success else 'FAILURE'}"]
        if result.stdout:
            lines.append(f"Output: {result.stdout}")
        if result.error:
            lines.append(f"Error: {result.error}")
        if result.timed_out:
            lines.append("Timed out: true")
        lines.append("---")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)
