"""Typed results for script execution and tool responses.

ExecutionResult is what the runner hands back for one osascript call;
ToolResult is the caller-facing envelope the MCP layer returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

ExecutionStatus = Literal["success", "failed", "timeout"]


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running one ScriptProgram.

    Failures are values here rather than exceptions; the mapper decides
    how they read to the caller.
    """

    status: ExecutionStatus
    output: str = ""
    error: str | None = None
    returncode: int | None = None
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(cls, output: str, duration_ms: int = 0) -> ExecutionResult:
        return cls(
            status="success", output=output, returncode=0, duration_ms=duration_ms
        )

    @classmethod
    def failure(
        cls, error: str, returncode: int | None = None, duration_ms: int = 0
    ) -> ExecutionResult:
        return cls(
            status="failed",
            error=error,
            returncode=returncode,
            duration_ms=duration_ms,
        )

    @classmethod
    def timeout(cls, seconds: float, duration_ms: int = 0) -> ExecutionResult:
        return cls(
            status="timeout",
            error=f"Script timed out after {seconds:g} seconds",
            duration_ms=duration_ms,
        )


@dataclass(frozen=True)
class ToolResult:
    """One text block returned to the caller, success or not."""

    text: str
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> ToolResult:
        return cls(text=text)

    @classmethod
    def error(cls, message: str) -> ToolResult:
        """Validation-style failure, reported as ``Error: …``."""
        return cls(text=f"Error: {message}", is_error=True)

    @classmethod
    def failure(cls, prefix: str, message: str) -> ToolResult:
        """Execution failure, reported as ``<prefix>: …``."""
        return cls(text=f"{prefix}: {message}", is_error=True)

    def to_content(self) -> list[dict[str, Any]]:
        """Serialize as MCP content blocks."""
        return [{"type": "text", "text": self.text}]
