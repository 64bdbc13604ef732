"""Operation catalog for the Things3 tools."""

from things_mcp.catalog.operations import OPERATIONS, Operation, get_operation

__all__ = ["OPERATIONS", "Operation", "get_operation"]
