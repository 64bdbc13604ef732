"""MCP transport binding for the Things3 operations."""
