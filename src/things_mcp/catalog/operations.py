"""Operation catalog: the dispatch surface exposed as MCP tools.

Each entry pairs a parameter model with its script template and the text
used when reporting results. Adding a tool means adding one entry here.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from things_mcp.errors import OperationValidationError, UnknownOperationError
from things_mcp.schemas.params import (
    AddTaskParams,
    BulkCompleteParams,
    CreateProjectParams,
    DeferTaskParams,
    ListTasksByTagParams,
    ListTasksParams,
    NextActionsParams,
    NoParams,
    OperationParams,
    OverdueTasksParams,
    SearchTasksParams,
    TaskNameParams,
    TaskTagParams,
    UpdateTaskParams,
)
from things_mcp.scripting import templates
from things_mcp.scripting.builder import DEFAULT_APPLICATION, ScriptProgram

ScriptTemplate = Callable[[Any, str], ScriptProgram]


def format_validation_error(error: ValidationError) -> str:
    """Turn a pydantic ValidationError into one readable sentence."""
    messages: list[str] = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"])
        kind = item["type"]
        if kind == "missing":
            messages.append(f"{field} is required")
        elif kind == "extra_forbidden":
            messages.append(f"Unexpected argument: {field}")
        elif kind == "value_error":
            # Our own validators already name the field.
            messages.append(str(item.get("ctx", {}).get("error", item["msg"])))
        elif field:
            messages.append(f"{field}: {item['msg']}")
        else:
            messages.append(item["msg"])
    return "; ".join(messages)


def _simplify_schema(node: Any) -> Any:
    """Drop pydantic titles and collapse ``X | None`` into ``X``."""
    if isinstance(node, list):
        return [_simplify_schema(item) for item in node]
    if not isinstance(node, dict):
        return node
    variants = node.get("anyOf")
    if isinstance(variants, list):
        non_null = [v for v in variants if v != {"type": "null"}]
        if len(non_null) == 1 and len(non_null) != len(variants):
            merged = {k: v for k, v in node.items() if k != "anyOf"}
            merged.update(non_null[0])
            if merged.get("default", ...) is None:
                del merged["default"]
            node = merged
    return {
        key: _simplify_schema(value)
        for key, value in node.items()
        if key != "title" or not isinstance(value, str)
    }


@dataclass(frozen=True)
class Operation:
    """One catalog entry."""

    name: str
    description: str
    params_model: type[OperationParams]
    template: ScriptTemplate
    failure_prefix: str
    empty_message: str = "Done"
    success_formatter: Callable[[Any], str] | None = None

    def parse(self, arguments: dict[str, Any] | None) -> OperationParams:
        """Validate raw tool arguments.

        Raises:
            OperationValidationError: If arguments are missing or mistyped.
        """
        try:
            return self.params_model.model_validate(arguments or {})
        except ValidationError as e:
            raise OperationValidationError(format_validation_error(e)) from e

    def build(
        self, params: OperationParams, application: str = DEFAULT_APPLICATION
    ) -> ScriptProgram:
        """Render the script for already validated parameters."""
        return self.template(params, application)

    def empty_text(self, params: OperationParams) -> str:
        """The "no results" line for this call."""
        return self.empty_message.format(**params.model_dump())

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the parameters, as exposed for discovery."""
        schema = _simplify_schema(self.params_model.model_json_schema())
        schema.pop("additionalProperties", None)
        schema.setdefault("properties", {})
        return schema


def _added_task(params: AddTaskParams) -> str:
    return f'Successfully added task: "{params.name}"'


_OPERATIONS = [
    Operation(
        name="add_task",
        description="Add a new task to Things 3",
        params_model=AddTaskParams,
        template=templates.add_task,
        failure_prefix="Failed to add task",
        success_formatter=_added_task,
    ),
    Operation(
        name="list_tasks",
        description="List tasks from Things 3",
        params_model=ListTasksParams,
        template=templates.list_tasks,
        failure_prefix="Failed to list tasks",
        empty_message="No tasks found in {list_type} list",
    ),
    Operation(
        name="complete_task",
        description="Mark a task as completed",
        params_model=TaskNameParams,
        template=templates.complete_task,
        failure_prefix="Failed to complete task",
    ),
    Operation(
        name="list_projects",
        description="List all projects and areas",
        params_model=NoParams,
        template=templates.list_projects,
        failure_prefix="Failed to list projects",
        empty_message="No projects or areas found",
    ),
    Operation(
        name="search_tasks",
        description="Search for tasks by name or content",
        params_model=SearchTasksParams,
        template=templates.search_tasks,
        failure_prefix="Failed to search tasks",
        empty_message="No tasks found matching: {query}",
    ),
    Operation(
        name="update_task",
        description="Update an existing task's properties",
        params_model=UpdateTaskParams,
        template=templates.update_task,
        failure_prefix="Failed to update task",
    ),
    Operation(
        name="delete_task",
        description="Delete a task permanently",
        params_model=TaskNameParams,
        template=templates.delete_task,
        failure_prefix="Failed to delete task",
    ),
    Operation(
        name="list_tasks_by_tag",
        description="List tasks filtered by tag",
        params_model=ListTasksByTagParams,
        template=templates.list_tasks_by_tag,
        failure_prefix="Failed to list tasks by tag",
        empty_message="No tasks found with tag: {tag_name}",
    ),
    Operation(
        name="get_overdue_tasks",
        description="Get all overdue tasks",
        params_model=OverdueTasksParams,
        template=templates.get_overdue_tasks,
        failure_prefix="Failed to get overdue tasks",
        empty_message="No overdue tasks found",
    ),
    Operation(
        name="create_project",
        description="Create a new project",
        params_model=CreateProjectParams,
        template=templates.create_project,
        failure_prefix="Failed to create project",
    ),
    Operation(
        name="list_tags",
        description="List all existing tags with usage counts",
        params_model=NoParams,
        template=templates.list_tags,
        failure_prefix="Failed to list tags",
        empty_message="No tags found",
    ),
    Operation(
        name="defer_task",
        description="Reschedule a task for later",
        params_model=DeferTaskParams,
        template=templates.defer_task,
        failure_prefix="Failed to defer task",
    ),
    Operation(
        name="get_next_actions",
        description="Get tasks that can be worked on now (no blocking start dates)",
        params_model=NextActionsParams,
        template=templates.get_next_actions,
        failure_prefix="Failed to get next actions",
        empty_message="No available next actions found",
    ),
    Operation(
        name="add_tag_to_task",
        description="Add a tag to an existing task",
        params_model=TaskTagParams,
        template=templates.add_tag_to_task,
        failure_prefix="Failed to add tag to task",
    ),
    Operation(
        name="remove_tag_from_task",
        description="Remove a tag from an existing task",
        params_model=TaskTagParams,
        template=templates.remove_tag_from_task,
        failure_prefix="Failed to remove tag from task",
    ),
    Operation(
        name="bulk_complete_tasks",
        description="Mark multiple tasks as completed",
        params_model=BulkCompleteParams,
        template=templates.bulk_complete_tasks,
        failure_prefix="Failed to bulk complete tasks",
    ),
]

OPERATIONS: dict[str, Operation] = {op.name: op for op in _OPERATIONS}


def get_operation(name: str) -> Operation:
    """Look up a catalog entry by tool name.

    Raises:
        UnknownOperationError: If no such tool exists.
    """
    try:
        return OPERATIONS[name]
    except KeyError:
        raise UnknownOperationError(name) from None
