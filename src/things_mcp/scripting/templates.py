"""Script templates for the Things3 operations.

Each builder maps one operation's validated parameters to a ScriptProgram.
They are pure: nothing here spawns a process or reads the clock.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from things_mcp.errors import OperationValidationError
from things_mcp.schemas.params import (
    AddTaskParams,
    BulkCompleteParams,
    CreateProjectParams,
    DeferTaskParams,
    ListTasksByTagParams,
    ListTasksParams,
    NextActionsParams,
    NoParams,
    OverdueTasksParams,
    SearchTasksParams,
    TaskNameParams,
    TaskTagParams,
    UpdateTaskParams,
)
from things_mcp.scripting.builder import (
    DEFAULT_APPLICATION,
    RecordField,
    ScriptBuilder,
    ScriptProgram,
)
from things_mcp.scripting.literals import Code, parse_date, render

# Built-in lists by Things3 title; "completed" resolves to the Logbook.
LIST_TITLES = {
    "inbox": "Inbox",
    "today": "Today",
    "upcoming": "Upcoming",
    "anytime": "Anytime",
    "someday": "Someday",
    "completed": "Logbook",
}

SATURDAY = 7

TASK = Code("aToDo")

LIST_FIELDS = (
    RecordField.NAME,
    RecordField.STATUS,
    RecordField.PROJECT,
    RecordField.AREA,
    RecordField.DUE,
    RecordField.NOTES,
)
SEARCH_FIELDS = (RecordField.NAME, RecordField.NOTES)
TAG_FIELDS = (
    RecordField.NAME,
    RecordField.STATUS,
    RecordField.PROJECT,
    RecordField.AREA,
    RecordField.NOTES,
)
OVERDUE_FIELDS = (
    RecordField.NAME,
    RecordField.DUE_OR_NONE,
    RecordField.PROJECT,
    RecordField.AREA,
    RecordField.NOTES,
)
NEXT_ACTION_FIELDS = (
    RecordField.NAME,
    RecordField.PROJECT,
    RecordField.AREA,
    RecordField.DUE,
    RecordField.NOTES,
)


def saturday_offset(weekday: int) -> int:
    """Days from ``weekday`` to the next Saturday.

    Args:
        weekday: AppleScript weekday number, Sunday = 1 through Saturday = 7.

    Returns:
        An offset in 1..7; Saturday itself rolls over to the following week.
    """
    if not 1 <= weekday <= 7:
        raise ValueError(f"weekday must be between 1 and 7, got {weekday}")
    offset = SATURDAY - weekday
    if offset <= 0:
        offset += 7
    return offset


def weekend_offsets() -> Code:
    """AppleScript list of Saturday offsets indexed by weekday number."""
    offsets = ", ".join(str(saturday_offset(day)) for day in range(1, 8))
    return Code("{" + offsets + "}")


def conjunction(predicates: Sequence[Code]) -> Code:
    """AND together rendered predicates."""
    if len(predicates) == 1:
        return predicates[0]
    return Code(" and ".join(f"({p})" for p in predicates))


def select_scope(
    builder: ScriptBuilder, list_type: str, into: str = "theTasks"
) -> None:
    """Resolve a named list scope to its collection of to dos."""
    target = Code(into)
    if list_type == "all":
        builder.add("set $target to to dos", target=target)
    elif list_type in LIST_TITLES:
        builder.add(
            "set $target to to dos of list $title",
            target=target,
            title=LIST_TITLES[list_type],
        )
    else:
        raise ValueError(f"Unknown list type: {list_type}")


@contextmanager
def for_each_task(
    builder: ScriptBuilder,
    collection: str,
    predicates: Sequence[Code] = (),
    split_tags: bool = False,
) -> Iterator[ScriptBuilder]:
    """Loop over ``collection`` and open a block for to dos matching all
    predicates. With ``split_tags`` the loop body first sets ``taskTags``.
    """
    with builder.block(
        "repeat with $task in $items", "end repeat", task=TASK, items=Code(collection)
    ):
        if split_tags:
            builder.split_tags(TASK, "taskTags")
        if predicates:
            cond = conjunction(predicates)
            with builder.block("if $cond then", "end if", cond=cond):
                yield builder
        else:
            yield builder


def find_task(builder: ScriptBuilder, task_name: str) -> None:
    """Resolve the first to do whose name matches exactly."""
    builder.add("set foundTask to first to do whose name is $name", name=task_name)


def place(
    builder: ScriptBuilder, target: str, project: str | None, area: str | None
) -> None:
    """Move ``target`` into a project, or into an area when no project is given."""
    ref = Code(target)
    if project:
        builder.add(
            "set targetProject to first project whose name is $project",
            project=project,
        )
        builder.add("set project of $ref to targetProject", ref=ref)
    elif area:
        builder.add("set targetArea to first area whose name is $area", area=area)
        builder.add("set area of $ref to targetArea", ref=ref)


def append_tag(builder: ScriptBuilder, target: str, tag: str) -> None:
    """Add ``tag`` to the tag names of ``target`` unless already present."""
    builder.split_tags(target, "taskTags")
    with builder.block("if $tag is not in taskTags then", "end if", tag=tag):
        builder.add("set end of taskTags to $tag", tag=tag)
        builder.write_tags(target, "taskTags")


def properties(name: str, notes: str | None) -> Code:
    """Properties record for a new to do or project."""
    if notes:
        return render("{name:$name, notes:$notes}", name=name, notes=notes)
    return render("{name:$name}", name=name)


def add_task(
    params: AddTaskParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Create a to do, then place, date and tag it."""
    builder = ScriptBuilder("add_task", application)
    builder.add(
        "set newToDo to make new to do with properties $props",
        props=properties(params.name, params.notes),
    )
    place(builder, "newToDo", params.project, params.area)
    if params.due_date:
        builder.add(
            "set due date of newToDo to $due",
            due=parse_date(params.due_date, "due_date"),
        )
    for tag in params.tags or []:
        append_tag(builder, "newToDo", tag)
    return builder.build()


def list_tasks(
    params: ListTasksParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """One line per to do in a built-in list, optionally filtered."""
    builder = ScriptBuilder("list_tasks", application)
    builder.add("set taskList to {}")
    select_scope(builder, params.list_type)
    predicates: list[Code] = []
    if params.project:
        predicates.append(
            render(
                "project of $task is not missing value and "
                "name of project of $task is $project",
                task=TASK,
                project=params.project,
            )
        )
    elif params.area:
        predicates.append(
            render(
                "area of $task is not missing value and name of area of $task is $area",
                task=TASK,
                area=params.area,
            )
        )
    with for_each_task(builder, "theTasks", predicates):
        builder.describe_record(TASK, LIST_FIELDS, "taskList")
    builder.return_joined("taskList")
    return builder.build()


def complete_task(
    params: TaskNameParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Mark the first to do with the exact name as completed."""
    builder = ScriptBuilder("complete_task", application)
    find_task(builder, params.task_name)
    builder.add("set status of foundTask to completed")
    builder.add('return "Task completed: " & name of foundTask')
    return builder.build()


def list_projects(
    params: NoParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """PROJECTS: and AREAS: sections, one name per line."""
    builder = ScriptBuilder("list_projects", application)
    builder.add("set projectLines to {}")
    with builder.block("repeat with aProject in projects", "end repeat"):
        builder.add('set end of projectLines to "- " & name of aProject')
    builder.add("set areaLines to {}")
    with builder.block("repeat with anArea in areas", "end repeat"):
        builder.add('set end of areaLines to "- " & name of anArea')
    with builder.block("if projectLines is {} and areaLines is {} then", "end if"):
        builder.add('return ""')
    builder.add(
        'set outputLines to {"PROJECTS:"} & projectLines & {"", "AREAS:"} & areaLines'
    )
    builder.return_joined("outputLines")
    return builder.build()


def search_tasks(
    params: SearchTasksParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """To dos whose name or notes contain the query."""
    builder = ScriptBuilder("search_tasks", application)
    builder.add("set searchResults to {}")
    select_scope(builder, "all")
    match = render(
        "name of $task contains $query or notes of $task contains $query",
        task=TASK,
        query=params.query,
    )
    with for_each_task(builder, "theTasks", [match]):
        builder.describe_record(TASK, SEARCH_FIELDS, "searchResults")
    builder.return_joined("searchResults")
    return builder.build()


def update_task(
    params: UpdateTaskParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Apply rename, notes, due date and placement in that order."""
    builder = ScriptBuilder("update_task", application)
    find_task(builder, params.task_name)
    if params.new_name:
        builder.add("set name of foundTask to $name", name=params.new_name)
    if params.notes is not None:
        builder.add("set notes of foundTask to $notes", notes=params.notes)
    if params.due_date:
        builder.add(
            "set due date of foundTask to $due",
            due=parse_date(params.due_date, "due_date"),
        )
    place(builder, "foundTask", params.project, params.area)
    builder.add('return "Task updated: " & name of foundTask')
    return builder.build()


def delete_task(
    params: TaskNameParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Delete the first to do with the exact name."""
    builder = ScriptBuilder("delete_task", application)
    find_task(builder, params.task_name)
    builder.add("set taskName to name of foundTask")
    builder.add("delete foundTask")
    builder.add('return "Task deleted: " & taskName')
    return builder.build()


def list_tasks_by_tag(
    params: ListTasksByTagParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """To dos in a scope that carry the tag."""
    builder = ScriptBuilder("list_tasks_by_tag", application)
    builder.add("set taskList to {}")
    select_scope(builder, params.list_type)
    tagged = render("$tag is in taskTags", tag=params.tag_name)
    with for_each_task(builder, "theTasks", [tagged], split_tags=True):
        builder.describe_record(TASK, TAG_FIELDS, "taskList")
    builder.return_joined("taskList")
    return builder.build()


def get_overdue_tasks(
    params: OverdueTasksParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Open to dos due before today, optionally with undated ones."""
    builder = ScriptBuilder("get_overdue_tasks", application)
    builder.add("set overdueList to {}")
    select_scope(builder, "all")
    builder.add("set todayStart to current date")
    builder.add("set time of todayStart to 0")
    is_open = render("status of $task is open", task=TASK)
    overdue = render(
        "(due date of $task is missing value and $include) or "
        "(due date of $task is not missing value and due date of $task < todayStart)",
        task=TASK,
        include=params.include_no_due_date,
    )
    with for_each_task(builder, "theTasks", [is_open, overdue]):
        builder.describe_record(TASK, OVERDUE_FIELDS, "overdueList")
    builder.return_joined("overdueList")
    return builder.build()


def create_project(
    params: CreateProjectParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Create a project, optionally inside an area."""
    builder = ScriptBuilder("create_project", application)
    builder.add(
        "set newProject to make new project with properties $props",
        props=properties(params.name, params.notes),
    )
    place(builder, "newProject", None, params.area)
    builder.add('return "Project created: " & name of newProject')
    return builder.build()


def list_tags(
    params: NoParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Tags in first-seen order with the number of to dos using each."""
    builder = ScriptBuilder("list_tags", application)
    builder.add("set tagNames to {}")
    builder.add("set tagCounts to {}")
    select_scope(builder, "all")
    with for_each_task(builder, "theTasks", split_tags=True):
        with builder.block("repeat with aTag in taskTags", "end repeat"):
            builder.add("set tagName to contents of aTag")
            with builder.block("if tagName is in tagNames then", "end if"):
                with builder.block(
                    "repeat with i from 1 to count of tagNames", "end repeat"
                ):
                    with builder.block(
                        "if item i of tagNames is tagName then", "end if"
                    ):
                        builder.add(
                            "set item i of tagCounts to (item i of tagCounts) + 1"
                        )
                        builder.add("exit repeat")
                builder.otherwise()
                builder.add("set end of tagNames to tagName")
                builder.add("set end of tagCounts to 1")
    builder.add("set tagLines to {}")
    with builder.block("repeat with i from 1 to count of tagNames", "end repeat"):
        builder.add(
            "set end of tagLines to (item i of tagNames) & "
            '" (" & (item i of tagCounts) & " tasks)"'
        )
    builder.return_joined("tagLines")
    return builder.build()


def defer_task(
    params: DeferTaskParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Move the due date of a to do to a relative or custom date."""
    builder = ScriptBuilder("defer_task", application)
    find_task(builder, params.task_name)
    option = params.defer_option
    if option == "tomorrow":
        builder.add("set newDueDate to (current date) + (1 * days)")
    elif option == "next_week":
        builder.add("set newDueDate to (current date) + (7 * days)")
    elif option == "weekend":
        builder.add("set currentDate to current date")
        builder.add(
            "set dayOffset to item (weekday of currentDate as integer) of $offsets",
            offsets=weekend_offsets(),
        )
        builder.add("set newDueDate to currentDate + (dayOffset * days)")
    elif option == "custom":
        if not params.custom_date:
            raise OperationValidationError(
                "custom_date is required when defer_option is 'custom'"
            )
        builder.add(
            "set newDueDate to $due",
            due=parse_date(params.custom_date, "custom_date"),
        )
    else:
        raise ValueError(f"Unknown defer option: {option}")
    builder.add("set due date of foundTask to newDueDate")
    builder.add(
        'return "Task deferred: " & name of foundTask & '
        '" | New due date: " & (due date of foundTask as string)'
    )
    return builder.build()


def get_next_actions(
    params: NextActionsParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Open, already active to dos without excluded tags, up to the limit."""
    builder = ScriptBuilder("get_next_actions", application)
    builder.add("set nextActions to {}")
    builder.add("set taskCount to 0")
    select_scope(builder, "all")
    builder.add("set currentDate to current date")
    predicates = [
        render("status of $task is open", task=TASK),
        render(
            "activation date of $task is missing value or "
            "activation date of $task is less than or equal to currentDate",
            task=TASK,
        ),
    ]
    exclude_tags = params.exclude_tags or []
    predicates.extend(
        render("$tag is not in taskTags", tag=tag) for tag in exclude_tags
    )
    with builder.block("repeat with $task in theTasks", "end repeat", task=TASK):
        builder.add(
            "if taskCount is greater than or equal to $limit then exit repeat",
            limit=params.limit,
        )
        if exclude_tags:
            builder.split_tags(TASK, "taskTags")
        with builder.block("if $cond then", "end if", cond=conjunction(predicates)):
            builder.describe_record(TASK, NEXT_ACTION_FIELDS, "nextActions")
            builder.add("set taskCount to taskCount + 1")
    builder.return_joined("nextActions")
    return builder.build()


def add_tag_to_task(
    params: TaskTagParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Create the tag if needed and append it to the to do."""
    builder = ScriptBuilder("add_tag_to_task", application)
    find_task(builder, params.task_name)
    with builder.block(
        "if not (exists tag $tag) then", "end if", tag=params.tag_name
    ):
        builder.add("make new tag with properties {name:$tag}", tag=params.tag_name)
    append_tag(builder, "foundTask", params.tag_name)
    builder.add(
        'return "Tag added: " & $tag & " to task: " & name of foundTask',
        tag=params.tag_name,
    )
    return builder.build()


def remove_tag_from_task(
    params: TaskTagParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Rewrite the tag names of the to do without the tag."""
    builder = ScriptBuilder("remove_tag_from_task", application)
    find_task(builder, params.task_name)
    builder.split_tags("foundTask", "currentTags")
    builder.add("set newTags to {}")
    with builder.block("repeat with aTag in currentTags", "end repeat"):
        with builder.block(
            "if contents of aTag is not $tag then", "end if", tag=params.tag_name
        ):
            builder.add("set end of newTags to contents of aTag")
    builder.write_tags("foundTask", "newTags")
    builder.add(
        'return "Tag removed: " & $tag & " from task: " & name of foundTask',
        tag=params.tag_name,
    )
    return builder.build()


def bulk_complete_tasks(
    params: BulkCompleteParams, application: str = DEFAULT_APPLICATION
) -> ScriptProgram:
    """Complete each named to do, reporting the names that failed."""
    builder = ScriptBuilder("bulk_complete_tasks", application)
    builder.add("set taskNames to $names", names=params.task_names)
    builder.add("set completedNames to {}")
    builder.add("set failedNames to {}")
    with builder.block("repeat with aName in taskNames", "end repeat"):
        builder.add("set taskName to contents of aName")
        with builder.block("try", "end try"):
            builder.add("set foundTask to first to do whose name is taskName")
            builder.add("set status of foundTask to completed")
            builder.add("set end of completedNames to taskName")
            builder.otherwise("on error")
            builder.add("set end of failedNames to taskName")
    builder.add('set AppleScript\'s text item delimiters to ", "')
    builder.add(
        'set outputText to "Completed " & (count of completedNames) & '
        '" tasks: " & (completedNames as string)'
    )
    with builder.block("if (count of failedNames) > 0 then", "end if"):
        builder.add(
            'set outputText to outputText & " | Failed: " & (failedNames as string)'
        )
    builder.add('set AppleScript\'s text item delimiters to ""')
    builder.add("return outputText")
    return builder.build()
