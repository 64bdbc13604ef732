"""Tests for the operation catalog and parameter validation."""

from __future__ import annotations

from typing import Any

import pytest

from things_mcp.catalog.operations import OPERATIONS, get_operation
from things_mcp.errors import OperationValidationError, UnknownOperationError

EXPECTED_TOOLS = [
    "add_task",
    "list_tasks",
    "complete_task",
    "list_projects",
    "search_tasks",
    "update_task",
    "delete_task",
    "list_tasks_by_tag",
    "get_overdue_tasks",
    "create_project",
    "list_tags",
    "defer_task",
    "get_next_actions",
    "add_tag_to_task",
    "remove_tag_from_task",
    "bulk_complete_tasks",
]


class TestCatalog:
    """Tests for catalog contents."""

    def test_all_tools_in_order(self) -> None:
        assert list(OPERATIONS) == EXPECTED_TOOLS

    def test_every_operation_has_a_failure_prefix(self) -> None:
        for operation in OPERATIONS.values():
            assert operation.failure_prefix.startswith("Failed to ")
            assert operation.description

    def test_unknown_operation(self) -> None:
        with pytest.raises(UnknownOperationError, match="Unknown tool: nope") as info:
            get_operation("nope")
        assert info.value.name == "nope"


class TestInputSchemas:
    """Tests for the JSON schemas exposed for discovery."""

    def test_add_task_schema(self) -> None:
        schema = get_operation("add_task").input_schema()

        assert schema["type"] == "object"
        assert schema["required"] == ["name"]
        assert schema["properties"]["name"]["type"] == "string"
        assert schema["properties"]["tags"]["type"] == "array"
        assert schema["properties"]["tags"]["items"] == {"type": "string"}
        assert "title" not in schema
        assert "additionalProperties" not in schema

    def test_list_type_enum(self) -> None:
        schema = get_operation("list_tasks").input_schema()
        list_type = schema["properties"]["list_type"]

        assert list_type["enum"] == [
            "inbox",
            "today",
            "upcoming",
            "anytime",
            "someday",
            "completed",
        ]
        assert list_type["default"] == "today"
        assert "required" not in schema

    def test_tag_list_type_includes_all(self) -> None:
        schema = get_operation("list_tasks_by_tag").input_schema()
        assert schema["properties"]["list_type"]["enum"][-1] == "all"
        assert schema["properties"]["list_type"]["default"] == "all"

    def test_defer_option_enum(self) -> None:
        schema = get_operation("defer_task").input_schema()

        assert schema["properties"]["defer_option"]["enum"] == [
            "tomorrow",
            "next_week",
            "weekend",
            "custom",
        ]
        assert schema["required"] == ["task_name", "defer_option"]

    def test_optional_fields_are_plain_types(self) -> None:
        schema = get_operation("update_task").input_schema()
        notes = schema["properties"]["notes"]

        assert notes["type"] == "string"
        assert "anyOf" not in notes
        assert "default" not in notes

    def test_no_argument_tools(self) -> None:
        schema = get_operation("list_projects").input_schema()
        assert schema["properties"] == {}

    def test_next_actions_limit(self) -> None:
        limit = get_operation("get_next_actions").input_schema()["properties"]["limit"]
        assert limit["type"] == "integer"
        assert limit["default"] == 10


class TestParse:
    """Tests for argument validation."""

    def _error(self, tool: str, arguments: dict[str, Any] | None) -> str:
        with pytest.raises(OperationValidationError) as info:
            get_operation(tool).parse(arguments)
        return str(info.value)

    def test_missing_required(self) -> None:
        assert self._error("add_task", {}) == "name is required"

    def test_none_arguments_are_empty(self) -> None:
        assert self._error("complete_task", None) == "task_name is required"

    def test_unexpected_argument(self) -> None:
        message = self._error("list_tags", {"verbose": True})
        assert message == "Unexpected argument: verbose"

    def test_bad_enum(self) -> None:
        message = self._error("list_tasks", {"list_type": "later"})
        assert message.startswith("list_type: ")

    def test_bad_date_names_field(self) -> None:
        message = self._error("add_task", {"name": "A", "due_date": "05/01/2024"})
        assert message == "due_date must be in YYYY-MM-DD format, got '05/01/2024'"

    def test_impossible_date(self) -> None:
        message = self._error(
            "update_task", {"task_name": "A", "due_date": "2024-13-01"}
        )
        assert message.startswith("due_date is not a valid date")

    def test_custom_defer_requires_date(self) -> None:
        message = self._error(
            "defer_task", {"task_name": "A", "defer_option": "custom"}
        )
        assert message == "custom_date is required when defer_option is 'custom'"

    def test_empty_bulk_list(self) -> None:
        message = self._error("bulk_complete_tasks", {"task_names": []})
        assert message.startswith("task_names: ")

    def test_limit_must_be_positive(self) -> None:
        message = self._error("get_next_actions", {"limit": 0})
        assert message.startswith("limit: ")

    def test_empty_name(self) -> None:
        message = self._error("search_tasks", {"query": ""})
        assert message.startswith("query: ")

    def test_valid_arguments(self) -> None:
        params = get_operation("defer_task").parse(
            {"task_name": "A", "defer_option": "custom", "custom_date": "2024-05-01"}
        )
        assert params.custom_date == "2024-05-01"  # type: ignore[attr-defined]

    def test_empty_text_formats_parameters(self) -> None:
        operation = get_operation("search_tasks")
        params = operation.parse({"query": "milk"})
        assert operation.empty_text(params) == "No tasks found matching: milk"
