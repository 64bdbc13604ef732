"""Structured assembly of AppleScript programs."""

from __future__ import annotations

import datetime
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from things_mcp.scripting.literals import (
    DATE_HANDLER,
    Code,
    LiteralValue,
    quote,
    render,
)

DEFAULT_APPLICATION = "Things3"

INDENT = "    "


@dataclass(frozen=True)
class ScriptProgram:
    """A fully assembled AppleScript program ready for osascript."""

    operation: str
    source: str

    def __str__(self) -> str:
        return self.source


class RecordField(Enum):
    """Labeled fields a read operation can emit for one to do."""

    NAME = "name"
    STATUS = "status"
    PROJECT = "project"
    AREA = "area"
    DUE = "due"
    DUE_OR_NONE = "due_or_none"
    NOTES = "notes"


class ScriptBuilder:
    """Accumulates statements inside a ``tell application`` block.

    Statements are added from ``string.Template`` sources; slot values are
    rendered through ``to_literal`` so nothing user supplied is ever
    concatenated into the program directly.
    """

    def __init__(self, operation: str, application: str = DEFAULT_APPLICATION):
        self.operation = operation
        self.application = application
        self._lines: list[str] = []
        self._depth = 1
        self._uses_dates = False

    def add(self, template: str, **values: LiteralValue) -> ScriptBuilder:
        """Append one rendered statement at the current depth."""
        if any(isinstance(v, datetime.date) for v in values.values()):
            self._uses_dates = True
        self._lines.append(INDENT * self._depth + render(template, **values))
        return self

    @contextmanager
    def block(
        self, opener: str, closer: str, **values: LiteralValue
    ) -> Iterator[ScriptBuilder]:
        """Open a nested block such as ``repeat``, ``if`` or ``try``.

        Args:
            opener: Template for the opening line.
            closer: Literal closing line, e.g. ``end repeat``.
            **values: Slot values for the opener.
        """
        self.add(opener, **values)
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            self._lines.append(INDENT * self._depth + closer)

    def otherwise(self, keyword: str = "else") -> ScriptBuilder:
        """Emit ``else`` (or ``on error``) one level out from the body."""
        self._lines.append(INDENT * (self._depth - 1) + keyword)
        return self

    def describe_record(
        self, var: str, fields: Sequence[RecordField], into: str
    ) -> ScriptBuilder:
        """Append statements that serialize the to do in ``var`` as one line.

        The line is ``Name: … | Label: …`` with fields in the given order,
        each omitted when empty, and is appended to the list ``into``.
        """
        if not fields or fields[0] is not RecordField.NAME:
            raise ValueError("Record descriptions must start with the name field")
        ref = Code(var)
        self.add("set recordInfo to \"Name: \" & (name of $ref)", ref=ref)
        for field in fields[1:]:
            self._describe_field(ref, field)
        self.add("set end of $target to recordInfo", target=Code(into))
        return self

    def _describe_field(self, ref: Code, field: RecordField) -> None:
        if field is RecordField.STATUS:
            self.add(
                'set recordInfo to recordInfo & " | Status: " & '
                "(status of $ref as string)",
                ref=ref,
            )
        elif field in (RecordField.PROJECT, RecordField.AREA):
            prop = Code(field.value)
            label = quote(f" | {field.value.title()}: ")
            with self.block(
                "if $prop of $ref is not missing value then",
                "end if",
                prop=prop,
                ref=ref,
            ):
                self.add(
                    "set recordInfo to recordInfo & $label & (name of $prop of $ref)",
                    label=label,
                    prop=prop,
                    ref=ref,
                )
        elif field in (RecordField.DUE, RecordField.DUE_OR_NONE):
            with self.block(
                "if due date of $ref is not missing value then", "end if", ref=ref
            ):
                self.add(
                    'set recordInfo to recordInfo & " | Due: " & '
                    "(due date of $ref as string)",
                    ref=ref,
                )
                if field is RecordField.DUE_OR_NONE:
                    self.otherwise()
                    self.add('set recordInfo to recordInfo & " | Due: No due date"')
        elif field is RecordField.NOTES:
            with self.block('if notes of $ref is not "" then', "end if", ref=ref):
                self.add(
                    'set recordInfo to recordInfo & " | Notes: " & (notes of $ref)',
                    ref=ref,
                )
        else:
            raise ValueError(f"Unsupported record field: {field}")

    def split_tags(self, source: str, into: str) -> ScriptBuilder:
        """Split the comma separated ``tag names`` text of ``source``."""
        src = Code(source)
        target = Code(into)
        self.add("set tagText to tag names of $src", src=src)
        with self.block('if tagText is "" then', "end if"):
            self.add("set $target to {}", target=target)
            self.otherwise()
            self.add('set AppleScript\'s text item delimiters to ", "')
            self.add("set $target to text items of tagText", target=target)
            self.add('set AppleScript\'s text item delimiters to ""')
        return self

    def write_tags(self, dest: str, list_var: str) -> ScriptBuilder:
        """Store the list ``list_var`` as the ``tag names`` text of ``dest``."""
        self.add('set AppleScript\'s text item delimiters to ", "')
        self.add(
            "set tag names of $dest to $items as string",
            dest=Code(dest),
            items=Code(list_var),
        )
        self.add('set AppleScript\'s text item delimiters to ""')
        return self

    def return_joined(
        self, list_var: str, separator: LiteralValue = Code("linefeed")
    ) -> ScriptBuilder:
        """Return the items of ``list_var`` joined by ``separator``."""
        self.add("set AppleScript's text item delimiters to $sep", sep=separator)
        self.add("set outputText to $items as string", items=Code(list_var))
        self.add('set AppleScript\'s text item delimiters to ""')
        self.add("return outputText")
        return self

    def build(self) -> ScriptProgram:
        """Render the complete program."""
        parts: list[str] = []
        if self._uses_dates:
            parts.extend([DATE_HANDLER, ""])
        parts.append(render("tell application $app", app=self.application))
        parts.extend(self._lines)
        parts.append("end tell")
        source = "\n".join(parts) + "\n"
        return ScriptProgram(operation=self.operation, source=source)
