"""Maps execution outcomes to caller-facing tool results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from things_mcp.execution.result_types import ExecutionResult, ToolResult

if TYPE_CHECKING:
    from things_mcp.catalog.operations import Operation
    from things_mcp.schemas.params import OperationParams


def map_result(
    operation: Operation, params: OperationParams, execution: ExecutionResult
) -> ToolResult:
    """Convert an ExecutionResult into the operation's ToolResult.

    Output is only trimmed, never parsed. An empty success payload becomes
    the operation's "no results" message so callers always get a line.

    Args:
        operation: Catalog entry that produced the script.
        params: Validated parameters of the call.
        execution: Outcome from the runner.

    Returns:
        The tool result; failures carry the operation's ``Failed to …`` prefix.
    """
    if not execution.succeeded:
        return ToolResult.failure(
            operation.failure_prefix, execution.error or "Unknown error"
        )

    if operation.success_formatter is not None:
        return ToolResult.ok(operation.success_formatter(params))

    text = execution.output.strip()
    if not text:
        text = operation.empty_text(params)
    return ToolResult.ok(text)
