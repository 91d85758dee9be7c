from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, Tuple

from pydantic import Field

from sodium_mcp.core.client import SodiumClient
from sodium_mcp.core.models import TaskCreate, TaskUpdate
from sodium_mcp.core.tools._base import (
    LimitParam,
    OffsetParam,
    join_lines,
    render_list,
    reports_errors,
)

# (payload key, label) pairs rendered when present
_TASK_FIELDS = (
    ("status", "Status"),
    ("dueDate", "Due"),
    ("clientCode", "Client"),
    ("assignedTo", "Assigned to"),
    ("category", "Category"),
    ("description", "Description"),
)


def _format_task(task: Dict[str, Any], *, detailed: bool = False) -> str:
    lines: List[str] = [f"Name: {task.get('name')}", f"Code: {task.get('code')}"]
    fields = _TASK_FIELDS
    if detailed:
        fields += (("createdAt", "Created"), ("updatedAt", "Updated"))
    for key, label in fields:
        if task.get(key):
            lines.append(f"{label}: {task[key]}")
    return join_lines(lines)


def _task_summary(
    heading: str, task: Optional[Dict[str, Any]], fields: Tuple[Tuple[str, str], ...]
) -> str:
    task = task or {}
    lines = [heading, "", f"Code: {task.get('code')}", f"Name: {task.get('name')}"]
    for key, label in fields:
        if task.get(key):
            lines.append(f"{label}: {task[key]}")
    return join_lines(lines)


@reports_errors("listing tasks")
async def list_tasks(
    client: SodiumClient,
    *,
    offset: OffsetParam = None,
    limit: LimitParam = None,
    client_code: Annotated[
        Optional[str], Field(description="Filter tasks by client code")
    ] = None,
) -> str:
    """
    List all tasks in the SodiumHQ tenant. Returns task names, statuses, due
    dates, and assignments.
    """
    tasks = await client.list_tasks(offset=offset, limit=limit, client_code=client_code)
    return render_list(tasks, _format_task, found="task(s)", empty="No tasks found.")


@reports_errors("getting task")
async def get_task(
    client: SodiumClient,
    code: Annotated[str, Field(description="The task code to retrieve")],
) -> str:
    """Get detailed information about a specific task by its code."""
    task = await client.get_task(code)
    return f"Task Details:\n\n{_format_task(task or {}, detailed=True)}"


@reports_errors("creating task")
async def create_task(
    client: SodiumClient,
    name: Annotated[str, Field(description="The task name")],
    *,
    description: Annotated[Optional[str], Field(description="Task description")] = None,
    due_date: Annotated[
        Optional[str], Field(description="Due date in ISO format (YYYY-MM-DD)")
    ] = None,
    client_code: Annotated[
        Optional[str], Field(description="Client code to associate the task with")
    ] = None,
    assigned_to: Annotated[
        Optional[str], Field(description="User code to assign the task to")
    ] = None,
    category: Annotated[Optional[str], Field(description="Task category")] = None,
) -> str:
    """Create a new task in SodiumHQ. Returns the created task's code and details."""
    body = TaskCreate(
        name=name,
        description=description,
        due_date=due_date,
        client_code=client_code,
        assigned_to=assigned_to,
        category=category,
    ).to_body()
    task = await client.create_task(body)
    return _task_summary(
        "Task created successfully!",
        task,
        (("dueDate", "Due"), ("clientCode", "Client"), ("assignedTo", "Assigned to")),
    )


@reports_errors("updating task")
async def update_task(
    client: SodiumClient,
    code: Annotated[str, Field(description="The task code to update")],
    *,
    name: Annotated[Optional[str], Field(description="New task name")] = None,
    description: Annotated[
        Optional[str], Field(description="New task description")
    ] = None,
    status: Annotated[Optional[str], Field(description="New task status")] = None,
    due_date: Annotated[
        Optional[str], Field(description="New due date in ISO format (YYYY-MM-DD)")
    ] = None,
    assigned_to: Annotated[
        Optional[str], Field(description="New assigned user code")
    ] = None,
    category: Annotated[Optional[str], Field(description="New task category")] = None,
) -> str:
    """Update an existing task in SodiumHQ."""
    body = TaskUpdate(
        name=name,
        description=description,
        status=status,
        due_date=due_date,
        assigned_to=assigned_to,
        category=category,
    ).to_body()
    task = await client.update_task(code, body)
    return _task_summary(
        "Task updated successfully!",
        task,
        (("status", "Status"), ("dueDate", "Due"), ("assignedTo", "Assigned to")),
    )


@reports_errors("deleting task")
async def delete_task(
    client: SodiumClient,
    code: Annotated[str, Field(description="The task code to delete")],
) -> str:
    """Delete a task from SodiumHQ. This action cannot be undone."""
    await client.delete_task(code)
    return f"Task {code} deleted successfully."
