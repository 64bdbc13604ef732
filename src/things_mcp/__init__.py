"""things3-mcp - MCP server for the Things 3 task manager."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("things3-mcp")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
