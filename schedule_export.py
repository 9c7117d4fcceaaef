from __future__ import annotations
from datetime import date
from typing import Union

from pydantic import ValidationError

from calendar_export import schedule_to_ics
from errors import ScheduleFormatError
from models import Schedule
from pdf_export import schedule_to_pdf
from planner import validate_schedule
from queries import tasks_frame


CSV_HEADER = ["Date", "Phase", "Subject", "Task", "Type", "Priority", "Duration", "Status"]
EXPORT_FORMATS = ("json", "csv", "ical", "pdf")


def to_json(schedule: Schedule) -> str:
    validate_schedule(schedule)
    return schedule.model_dump_json(indent=2)


def from_json(text: str) -> Schedule:
    try:
        schedule = Schedule.model_validate_json(text)
    except ValidationError as exc:
        raise ScheduleFormatError([str(e["msg"]) for e in exc.errors()]) from exc
    validate_schedule(schedule)
    return schedule


def to_csv(schedule: Schedule) -> str:
    """One row per task; duration in minutes, status Completed or Pending."""
    validate_schedule(schedule)
    frame = tasks_frame(schedule)
    frame["date"] = frame["date"].map(date.isoformat)
    frame["completed"] = frame["completed"].map({True: "Completed", False: "Pending"})
    frame.columns = CSV_HEADER
    return frame.to_csv(index=False, lineterminator="\n")


def export_schedule(
    schedule: Schedule,
    fmt: str = "json",
    ical_start_hour: int = 9,
) -> Union[str, bytes]:
    fmt = fmt.lower()
    if fmt == "json":
        return to_json(schedule)
    if fmt == "csv":
        return to_csv(schedule)
    if fmt == "ical":
        return schedule_to_ics(schedule, start_hour=ical_start_hour)
    if fmt == "pdf":
        return schedule_to_pdf(schedule)
    raise ValueError(f"Unsupported export format '{fmt}', expected one of {', '.join(EXPORT_FORMATS)}")
