"""Tests for AppleScript literal rendering."""

from __future__ import annotations

import datetime

import pytest

from things_mcp.errors import OperationValidationError
from things_mcp.scripting.literals import (
    DATE_HANDLER,
    Code,
    date_expression,
    escape_string,
    parse_date,
    quote,
    render,
    to_literal,
)


def _unquote(literal: str) -> str:
    """Reverse AppleScript string escaping, checking the literal stays closed."""
    assert literal.startswith('"') and literal.endswith('"')
    body = literal[1:-1]
    chars: list[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\":
            chars.append(body[i + 1])
            i += 2
            continue
        # An unescaped quote inside the body would end the literal early.
        assert char != '"'
        chars.append(char)
        i += 1
    return "".join(chars)


class TestEscapeString:
    """Tests for escape_string and quote."""

    def test_plain_text_is_unchanged(self) -> None:
        assert escape_string("Buy milk") == "Buy milk"

    def test_quotes_are_escaped(self) -> None:
        assert escape_string('say "hi"') == 'say \\"hi\\"'

    def test_backslashes_are_doubled_before_quotes(self) -> None:
        assert escape_string('a\\"b') == 'a\\\\\\"b'

    def test_trailing_backslash_does_not_escape_closing_quote(self) -> None:
        assert quote("C:\\") == '"C:\\\\"'

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "Buy milk",
            'Call "Bob"',
            "Don't panic",
            "back\\slash",
            "ends with \\",
            '"',
            '\\"',
            '" & do shell script "rm -rf ~" & "',
            "line one\nline two",
            "emoji ☕️ and ünïcödé",
        ],
    )
    def test_quoted_value_reads_back_exactly(self, value: str) -> None:
        """Whatever the input, the literal decodes to the input text."""
        assert _unquote(quote(value)) == value

    def test_apostrophes_need_no_escaping(self) -> None:
        assert quote("Don't") == "\"Don't\""


class TestToLiteral:
    """Tests for to_literal."""

    def test_string(self) -> None:
        assert to_literal("Inbox") == '"Inbox"'

    def test_code_passes_through(self) -> None:
        assert to_literal(Code("aToDo")) == "aToDo"

    def test_booleans(self) -> None:
        assert to_literal(True) == "true"
        assert to_literal(False) == "false"

    def test_integer(self) -> None:
        assert to_literal(10) == "10"

    def test_date(self) -> None:
        assert to_literal(datetime.date(2024, 3, 9)) == "my makeDate(2024, 3, 9)"

    def test_list_of_strings(self) -> None:
        assert to_literal(["Task A", 'Task "B"']) == '{"Task A", "Task \\"B\\""}'

    def test_empty_list(self) -> None:
        assert to_literal([]) == "{}"

    def test_list_with_non_string_is_rejected(self) -> None:
        with pytest.raises(TypeError, match="List items must be strings"):
            to_literal(["a", 1])  # type: ignore[list-item]

    def test_unsupported_type_is_rejected(self) -> None:
        with pytest.raises(TypeError, match="Cannot render float"):
            to_literal(1.5)  # type: ignore[arg-type]

    def test_result_is_code(self) -> None:
        assert isinstance(to_literal("x"), Code)


class TestRender:
    """Tests for render."""

    def test_slots_are_filled_with_literals(self) -> None:
        result = render("set name of $ref to $name", ref=Code("t"), name="New")
        assert result == 'set name of t to "New"'

    def test_dollar_signs_in_values_are_not_expanded(self) -> None:
        result = render("set x to $value", value="$other costs $5")
        assert result == 'set x to "$other costs $5"'

    def test_missing_slot_raises(self) -> None:
        with pytest.raises(KeyError):
            render("set x to $value")


class TestDates:
    """Tests for date parsing and date expressions."""

    def test_parse_valid_date(self) -> None:
        assert parse_date("2024-02-29") == datetime.date(2024, 2, 29)

    @pytest.mark.parametrize(
        "text", ["2024-1-5", "24-01-05", "2024/01/05", "tomorrow", "2024-01-05x", ""]
    )
    def test_parse_rejects_wrong_format(self, text: str) -> None:
        with pytest.raises(OperationValidationError, match="YYYY-MM-DD"):
            parse_date(text, "due_date")

    def test_parse_rejects_impossible_date(self) -> None:
        with pytest.raises(OperationValidationError, match="due_date is not a valid"):
            parse_date("2023-02-30", "due_date")

    def test_error_names_the_field(self) -> None:
        with pytest.raises(OperationValidationError, match="^custom_date must be"):
            parse_date("soon", "custom_date")

    def test_date_expression_uses_components(self) -> None:
        assert date_expression(datetime.date(2025, 12, 1)) == "my makeDate(2025, 12, 1)"

    def test_handler_resets_day_before_month(self) -> None:
        lines = DATE_HANDLER.splitlines()
        day_reset = lines.index("    set day of theDate to 1")
        month_set = lines.index("    set month of theDate to m")
        assert day_reset < month_set
        assert "    set time of theDate to 0" in lines
