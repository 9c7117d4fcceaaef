"""Planner error types.

Every failure raised by the engine, the mutation API and the exporters is a
``PlannerError`` subclass:

- InvalidConfigError: exam date not after start date, too few days, non-positive hours
- SyllabusNotFoundError: unknown exam id or a syllabus without subjects
- DuplicateIdError: a task id collides with one already in the schedule
- NotFoundError: a task id is absent from the schedule
- ScheduleFormatError: a schedule (or its JSON form) is structurally broken
"""

from __future__ import annotations
from typing import List, Optional


class PlannerError(Exception):
    """Base class for planner failures."""


class InvalidConfigError(PlannerError):
    def __init__(self, details: List[str]):
        self.details = details
        super().__init__("Invalid study configuration: " + "; ".join(details))


class SyllabusNotFoundError(PlannerError):
    def __init__(self, exam_id: Optional[str], reason: str = "exam not found"):
        self.exam_id = exam_id
        super().__init__(f"Syllabus unavailable for '{exam_id}': {reason}")


class DuplicateIdError(PlannerError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task id '{task_id}' already exists in the schedule")


class NotFoundError(PlannerError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' not found in the schedule")


class ScheduleFormatError(PlannerError):
    def __init__(self, details: List[str]):
        self.details = details
        super().__init__("Malformed schedule: " + "; ".join(details))
