"""Operation service: catalog lookup, script rendering, execution, mapping."""

from __future__ import annotations

import logging
from typing import Any

from things_mcp.catalog.operations import OPERATIONS, Operation
from things_mcp.errors import OperationValidationError, UnknownOperationError
from things_mcp.execution.mapper import map_result
from things_mcp.execution.result_types import ToolResult
from things_mcp.execution.runner import ScriptRunner
from things_mcp.scripting.builder import DEFAULT_APPLICATION, ScriptProgram

logger = logging.getLogger(__name__)


class OperationService:
    """Runs catalog operations against Things3 through a ScriptRunner.

    Every call ends in a ToolResult. Validation problems are reported as
    ``Error: …`` without the runner ever being invoked; execution problems
    carry the operation's ``Failed to …`` prefix.
    """

    def __init__(
        self,
        runner: ScriptRunner,
        application: str = DEFAULT_APPLICATION,
        operations: dict[str, Operation] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            runner: Executes rendered scripts.
            application: Scripting name of the target application.
            operations: Catalog to dispatch from. Defaults to all tools.
        """
        self.runner = runner
        self.application = application
        self.operations = operations if operations is not None else OPERATIONS

    def _lookup(self, name: str) -> Operation:
        try:
            return self.operations[name]
        except KeyError:
            raise UnknownOperationError(name) from None

    def render(self, name: str, arguments: dict[str, Any] | None) -> ScriptProgram:
        """Validate arguments and render the script without running it.

        Raises:
            UnknownOperationError: If the tool does not exist.
            OperationValidationError: If the arguments are invalid.
        """
        operation = self._lookup(name)
        params = operation.parse(arguments)
        return operation.build(params, self.application)

    async def execute(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Run one operation end to end.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            The tool result. Never raises for validation or execution errors.
        """
        try:
            operation = self._lookup(name)
            params = operation.parse(arguments)
            program = operation.build(params, self.application)
        except (UnknownOperationError, OperationValidationError) as e:
            logger.info("Rejected %s call: %s", name, e)
            return ToolResult.error(str(e))

        try:
            execution = await self.runner.run(program)
        except Exception as e:
            logger.exception("Runner raised while executing %s", name)
            return ToolResult.failure(operation.failure_prefix, str(e))

        result = map_result(operation, params, execution)
        if result.is_error:
            logger.info("%s failed: %s", name, result.text)
        return result
