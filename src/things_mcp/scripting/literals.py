"""AppleScript literal rendering.

Every value that reaches a generated script passes through ``to_literal``.
Templates are ``string.Template`` strings whose ``$slots`` are filled with
rendered literals only, so user text can never close a string literal early.
"""

from __future__ import annotations

import datetime
import re
from collections.abc import Sequence
from string import Template
from typing import Union

from things_mcp.errors import OperationValidationError

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

DATE_HANDLER_NAME = "makeDate"

# Top-level handler emitted by the builder whenever a date literal is used.
# Day is reset to 1 first so changing the month never overflows.
DATE_HANDLER = f"""on {DATE_HANDLER_NAME}(y, m, d)
    set theDate to current date
    set day of theDate to 1
    set year of theDate to y
    set month of theDate to m
    set day of theDate to d
    set time of theDate to 0
    return theDate
end {DATE_HANDLER_NAME}"""


class Code(str):
    """A trusted AppleScript fragment produced by the renderer."""

    __slots__ = ()


LiteralValue = Union[str, bool, int, datetime.date, Sequence[str], Code]


def escape_string(value: str) -> str:
    """Escape a value for use inside an AppleScript string literal.

    Backslashes are doubled before quotes are escaped, otherwise a trailing
    backslash would escape the closing quote.
    """
    return value.replace("\\", "\\\\").replace('"', '\\"')


def quote(value: str) -> Code:
    """Return ``value`` as a quoted AppleScript string literal."""
    return Code(f'"{escape_string(value)}"')


def date_expression(value: datetime.date) -> Code:
    """Return a locale-independent date expression for ``value``."""
    return Code(f"my {DATE_HANDLER_NAME}({value.year}, {value.month}, {value.day})")


def to_literal(value: LiteralValue) -> Code:
    """Render a Python value as an AppleScript expression.

    Args:
        value: String, boolean, integer, date, list of strings or Code.

    Returns:
        The rendered expression.

    Raises:
        TypeError: If the value has no AppleScript rendering.
    """
    if isinstance(value, Code):
        return value
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, bool):
        return Code("true" if value else "false")
    if isinstance(value, int):
        return Code(str(value))
    if isinstance(value, datetime.date):
        return date_expression(value)
    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if not isinstance(item, str):
                msg = f"List items must be strings, got {type(item).__name__}"
                raise TypeError(msg)
            items.append(quote(item))
        return Code("{" + ", ".join(items) + "}")
    raise TypeError(f"Cannot render {type(value).__name__} as AppleScript")


def render(template: str, **values: LiteralValue) -> Code:
    """Substitute rendered literals into ``template``.

    Args:
        template: ``string.Template`` source using ``$name`` slots.
        **values: Slot values, each rendered with ``to_literal``.

    Returns:
        The rendered fragment.
    """
    rendered = {key: to_literal(value) for key, value in values.items()}
    return Code(Template(template).substitute(rendered))


def parse_date(text: str, field: str = "date") -> datetime.date:
    """Validate a ``YYYY-MM-DD`` string and return the date.

    Raises:
        OperationValidationError: If the text is not a valid calendar date.
    """
    if not DATE_PATTERN.fullmatch(text):
        raise OperationValidationError(
            f"{field} must be in YYYY-MM-DD format, got {text!r}"
        )
    try:
        return datetime.date.fromisoformat(text)
    except ValueError as e:
        raise OperationValidationError(f"{field} is not a valid date: {e}") from e
