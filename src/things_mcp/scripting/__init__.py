"""AppleScript rendering for Things3 operations."""

from things_mcp.scripting.builder import (
    DEFAULT_APPLICATION,
    RecordField,
    ScriptBuilder,
    ScriptProgram,
)
from things_mcp.scripting.literals import (
    Code,
    escape_string,
    parse_date,
    quote,
    render,
    to_literal,
)

__all__ = [
    "DEFAULT_APPLICATION",
    "Code",
    "RecordField",
    "ScriptBuilder",
    "ScriptProgram",
    "escape_string",
    "parse_date",
    "quote",
    "render",
    "to_literal",
]
