"""MCP server exposing the operation catalog as tools.

Built on the MCP SDK's low-level server so the catalog stays the single
source of tool schemas. Every call answers with exactly one text block;
failures are reported in the text, never as protocol errors.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from things_mcp import __version__
from things_mcp.config import Settings
from things_mcp.execution.result_types import ToolResult
from things_mcp.execution.runner import OsascriptRunner
from things_mcp.service import OperationService

logger = logging.getLogger(__name__)

SERVER_NAME = "things3-mcp-server"


class ThingsMCPServer:
    """MCP server for Things 3.

    Lists every catalog operation as a tool and routes tool calls through
    the OperationService.
    """

    def __init__(
        self,
        service: OperationService | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize MCP server.

        Args:
            service: Operation service. Creates an osascript-backed one if None.
            settings: Runtime settings used when creating the default service.
        """
        self.settings = settings or Settings()
        self.service = service or OperationService(
            OsascriptRunner(self.settings), application=self.settings.application
        )
        self._server: Server[Any, Any] = Server(SERVER_NAME, version=__version__)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Register list/call handlers with the SDK server."""

        @self._server.list_tools()
        async def handle_list_tools() -> list[types.Tool]:
            return self.tool_definitions()

        # The catalog validates arguments and reports problems as "Error: ..." text.
        @self._server.call_tool(validate_input=False)
        async def handle_call_tool(
            name: str, arguments: dict[str, Any] | None
        ) -> list[types.TextContent]:
            result = await self.call_tool(name, arguments)
            return [types.TextContent(**block) for block in result.to_content()]

    def tool_definitions(self) -> list[types.Tool]:
        """Build MCP tool definitions from the catalog."""
        return [
            types.Tool(
                name=operation.name,
                description=operation.description,
                inputSchema=operation.input_schema(),
            )
            for operation in self.service.operations.values()
        ]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> ToolResult:
        """Call an MCP tool.

        Args:
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            Tool result; unknown tools and bad arguments are reported in it.
        """
        logger.debug("Tool call %s", name)
        return await self.service.execute(name, arguments)

    async def serve(self) -> None:
        """Serve over stdio until the client disconnects."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Things 3 MCP server running on stdio")
            await self._server.run(
                read_stream,
                write_stream,
                self._server.create_initialization_options(),
            )

    def run(self) -> None:
        """Run the MCP server over stdio."""
        asyncio.run(self.serve())
