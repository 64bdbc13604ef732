"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from things_mcp.execution.result_types import ExecutionResult
from things_mcp.scripting.builder import ScriptProgram
from things_mcp.service import OperationService


class FakeRunner:
    """Records every program it is asked to run and replies with a canned result."""

    def __init__(self, result: ExecutionResult | None = None) -> None:
        self.result = result or ExecutionResult.success("")
        self.programs: list[ScriptProgram] = []

    @property
    def call_count(self) -> int:
        return len(self.programs)

    @property
    def last_source(self) -> str:
        return self.programs[-1].source

    async def run(self, program: ScriptProgram) -> ExecutionResult:
        self.programs.append(program)
        return self.result


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Runner that succeeds with empty output unless told otherwise."""
    return FakeRunner()


@pytest.fixture
def service(fake_runner: FakeRunner) -> OperationService:
    """OperationService wired to the fake runner."""
    return OperationService(fake_runner)
