"""Parameter schemas for the Things3 operations."""

from things_mcp.schemas.params import (
    AddTaskParams,
    BulkCompleteParams,
    CreateProjectParams,
    DeferOption,
    DeferTaskParams,
    ListTasksByTagParams,
    ListTasksParams,
    ListType,
    NextActionsParams,
    NoParams,
    OperationParams,
    OverdueTasksParams,
    SearchTasksParams,
    TagListType,
    TaskNameParams,
    TaskTagParams,
    UpdateTaskParams,
)

__all__ = [
    "OperationParams",
    "NoParams",
    "AddTaskParams",
    "ListTasksParams",
    "TaskNameParams",
    "SearchTasksParams",
    "UpdateTaskParams",
    "ListTasksByTagParams",
    "OverdueTasksParams",
    "CreateProjectParams",
    "DeferTaskParams",
    "NextActionsParams",
    "TaskTagParams",
    "BulkCompleteParams",
    "ListType",
    "TagListType",
    "DeferOption",
]
