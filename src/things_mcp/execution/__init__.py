"""Script execution and result mapping."""

from things_mcp.execution.mapper import map_result
from things_mcp.execution.result_types import ExecutionResult, ToolResult
from things_mcp.execution.runner import OsascriptRunner, ScriptRunner

__all__ = [
    "ExecutionResult",
    "OsascriptRunner",
    "ScriptRunner",
    "ToolResult",
    "map_result",
]
