from __future__ import annotations
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from loguru import logger

from errors import DuplicateIdError, NotFoundError
from models import CompletionData, Day, Priority, Schedule, Task, TaskType
from planner import phase_for_date


def new_task_id() -> str:
    return f"task_{uuid4().hex[:12]}"


def new_task(
    title: str,
    subject: str,
    duration: int = 60,
    type: TaskType = "study",
    priority: Priority = "medium",
    description: str = "",
    resources: Optional[List[str]] = None,
    now: Optional[datetime] = None,
) -> Task:
    return Task(
        id=new_task_id(),
        title=title,
        subject=subject,
        type=type,
        priority=priority,
        duration=duration,
        description=description,
        resources=resources or [],
        created_at=now or datetime.now(),
    )


def _locate(schedule: Schedule, task_id: str) -> Tuple[Day, int]:
    for day in schedule.days:
        for i, t in enumerate(day.tasks):
            if t.id == task_id:
                return day, i
    raise NotFoundError(task_id)


def _insert(schedule: Schedule, task: Task, on: date) -> None:
    day = schedule.find_day(on)
    if day is None:
        day = Day(date=on, phase=phase_for_date(schedule, on))
        schedule.days.append(day)
        schedule.days.sort(key=lambda d: d.date)
    day.tasks.append(task)


def _prune(schedule: Schedule, day: Day) -> None:
    if not day.tasks:
        schedule.days = [d for d in schedule.days if d is not day]


def add_task(schedule: Schedule, task: Task, on: date) -> Schedule:
    if task.id in set(schedule.task_ids()):
        raise DuplicateIdError(task.id)
    result = schedule.model_copy(deep=True)
    _insert(result, task.model_copy(deep=True), on)
    logger.debug("mutations: Task added", task_id=task.id, date=on.isoformat())
    return result


def update_task(
    schedule: Schedule,
    task_id: str,
    patch: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Schedule:
    """
    Merge patch into the task. Unknown ids raise NotFoundError; renaming onto
    an id already in use raises DuplicateIdError. Flipping completed to True
    stamps completed_at, flipping it back clears it. A completed task never
    ends up without completed_at.
    """
    result = schedule.model_copy(deep=True)
    day, idx = _locate(result, task_id)
    current = day.tasks[idx]

    new_id = patch.get("id", task_id)
    if new_id != task_id and new_id in set(result.task_ids()):
        raise DuplicateIdError(new_id)

    data = current.model_dump()
    data.update(patch)
    if not data.get("completed"):
        data["completed_at"] = None
    elif data.get("completed_at") is None:
        data["completed_at"] = now or datetime.now()

    day.tasks[idx] = Task.model_validate(data)
    logger.debug("mutations: Task updated", task_id=task_id, fields=sorted(patch))
    return result


def delete_task(schedule: Schedule, task_id: str) -> Schedule:
    result = schedule.model_copy(deep=True)
    day, idx = _locate(result, task_id)
    del day.tasks[idx]
    _prune(result, day)
    logger.debug("mutations: Task deleted", task_id=task_id, date=day.date.isoformat())
    return result


def move_task(schedule: Schedule, task_id: str, new_date: date) -> Schedule:
    result = schedule.model_copy(deep=True)
    day, idx = _locate(result, task_id)
    if day.date == new_date:
        return result
    task = day.tasks.pop(idx)
    _prune(result, day)
    _insert(result, task, new_date)
    logger.debug(
        "mutations: Task moved",
        task_id=task_id,
        source=day.date.isoformat(),
        target=new_date.isoformat(),
    )
    return result


def complete_task(
    schedule: Schedule,
    task_id: str,
    completion: Optional[CompletionData] = None,
    *,
    now: Optional[datetime] = None,
) -> Schedule:
    result = schedule.model_copy(deep=True)
    day, idx = _locate(result, task_id)
    task = day.tasks[idx]
    task.completed = True
    task.completed_at = now or datetime.now()
    if completion is not None:
        if completion.notes is not None:
            task.notes = completion.notes
        if completion.time_taken is not None:
            task.time_taken = completion.time_taken
    logger.debug("mutations: Task completed", task_id=task_id)
    return result
