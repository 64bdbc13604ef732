"""Pydantic parameter models for every operation.

Field order is the declared schema order; the script templates apply their
optional clauses in the same order.
"""

from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    model_validator,
)

from things_mcp.scripting.literals import parse_date

ListType = Literal["inbox", "today", "upcoming", "anytime", "someday", "completed"]
TagListType = Literal["inbox", "today", "upcoming", "anytime", "someday", "all"]
DeferOption = Literal["tomorrow", "next_week", "weekend", "custom"]


def _check_date(value: str, info: ValidationInfo) -> str:
    parse_date(value, info.field_name or "date")
    return value


DateString = Annotated[str, AfterValidator(_check_date)]


class OperationParams(BaseModel):
    """Base for operation parameters; unknown arguments are rejected."""

    model_config = ConfigDict(extra="forbid")


class NoParams(OperationParams):
    """Operations that take no arguments."""


class AddTaskParams(OperationParams):
    name: str = Field(min_length=1, description="Task name")
    notes: str | None = Field(default=None, description="Task notes")
    project: str | None = Field(default=None, description="Project name (optional)")
    area: str | None = Field(default=None, description="Area name (optional)")
    due_date: DateString | None = Field(
        default=None, description="Due date in YYYY-MM-DD format (optional)"
    )
    tags: list[str] | None = Field(
        default=None, description="Array of tag names (optional)"
    )


class ListTasksParams(OperationParams):
    list_type: ListType = Field(default="today", description="Which list to query")
    project: str | None = Field(
        default=None, description="Filter by project name (optional)"
    )
    area: str | None = Field(default=None, description="Filter by area name (optional)")


class TaskNameParams(OperationParams):
    task_name: str = Field(min_length=1, description="Name of the task")


class SearchTasksParams(OperationParams):
    query: str = Field(min_length=1, description="Search query")


class UpdateTaskParams(OperationParams):
    task_name: str = Field(
        min_length=1, description="Current name of the task to update"
    )
    new_name: str | None = Field(default=None, description="New task name (optional)")
    notes: str | None = Field(
        default=None,
        description="New task notes (optional, an empty string clears them)",
    )
    due_date: DateString | None = Field(
        default=None, description="New due date in YYYY-MM-DD format (optional)"
    )
    project: str | None = Field(
        default=None, description="Move to project name (optional)"
    )
    area: str | None = Field(default=None, description="Move to area name (optional)")


class ListTasksByTagParams(OperationParams):
    tag_name: str = Field(min_length=1, description="Tag name to filter by")
    list_type: TagListType = Field(
        default="all", description="Which list to query (default: all)"
    )


class OverdueTasksParams(OperationParams):
    include_no_due_date: bool = Field(
        default=False,
        description="Include tasks with no due date (default: false)",
    )


class CreateProjectParams(OperationParams):
    name: str = Field(min_length=1, description="Project name")
    area: str | None = Field(
        default=None, description="Area to place project in (optional)"
    )
    notes: str | None = Field(default=None, description="Project notes (optional)")


class DeferTaskParams(OperationParams):
    task_name: str = Field(min_length=1, description="Name of the task to defer")
    defer_option: DeferOption = Field(description="When to reschedule the task")
    custom_date: DateString | None = Field(
        default=None,
        description=(
            "Custom date in YYYY-MM-DD format "
            "(required if defer_option is 'custom')"
        ),
    )

    @model_validator(mode="after")
    def require_custom_date(self) -> "DeferTaskParams":
        """A custom deferral needs the date to defer to."""
        if self.defer_option == "custom" and not self.custom_date:
            raise ValueError("custom_date is required when defer_option is 'custom'")
        return self


class NextActionsParams(OperationParams):
    limit: int = Field(
        default=10, ge=1, description="Maximum number of tasks to return (default: 10)"
    )
    exclude_tags: list[str] | None = Field(
        default=None, description="Tags to exclude from results (optional)"
    )


class TaskTagParams(OperationParams):
    task_name: str = Field(min_length=1, description="Name of the task")
    tag_name: str = Field(min_length=1, description="Tag to add or remove")


class BulkCompleteParams(OperationParams):
    task_names: list[str] = Field(
        min_length=1, description="Array of task names to complete"
    )
