from __future__ import annotations
import calendar
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

import pandas as pd

from models import (
    Day,
    HourSlot,
    OverdueTask,
    Schedule,
    ScheduleFilters,
    ScheduleStats,
    Task,
)


TASK_COLUMNS = ["date", "phase", "subject", "title", "type", "priority", "duration", "completed"]


def get_tasks_for_date(schedule: Schedule, day: date) -> List[Task]:
    found = schedule.find_day(day)
    return list(found.tasks) if found else []


def get_today_tasks(schedule: Schedule, today: Optional[date] = None) -> List[Task]:
    return get_tasks_for_date(schedule, today or date.today())


def get_upcoming_tasks(
    schedule: Schedule,
    count: int = 5,
    today: Optional[date] = None,
) -> List[Task]:
    today = today or date.today()
    if count <= 0:
        return []
    out: List[Task] = []
    for day in sorted(schedule.days, key=lambda d: d.date):
        if day.date < today:
            continue
        for t in day.tasks:
            if not t.completed:
                out.append(t)
                if len(out) >= count:
                    return out
    return out


def get_overdue_tasks(schedule: Schedule, today: Optional[date] = None) -> List[OverdueTask]:
    today = today or date.today()
    out: List[OverdueTask] = []
    for day in sorted(schedule.days, key=lambda d: d.date):
        if day.date >= today:
            break
        for t in day.tasks:
            if not t.completed:
                out.append(OverdueTask(date=day.date, task=t, days_overdue=(today - day.date).days))
    return out


def compute_stats(schedule: Schedule) -> ScheduleStats:
    tasks = schedule.all_tasks()
    done = [t for t in tasks if t.completed]
    total_minutes = sum(t.duration for t in tasks)
    done_minutes = sum(t.duration for t in done)
    dates = [d.date for d in schedule.days]
    return ScheduleStats(
        total_tasks=len(tasks),
        completed_tasks=len(done),
        pending_tasks=len(tasks) - len(done),
        completion_rate=(len(done) / len(tasks) * 100) if tasks else 0.0,
        total_duration_minutes=total_minutes,
        completed_duration_minutes=done_minutes,
        pending_duration_minutes=total_minutes - done_minutes,
        subjects_count=len({t.subject for t in tasks}),
        phases_count=len({d.phase for d in schedule.days}),
        days_count=len(schedule.days),
        start_date=min(dates) if dates else None,
        end_date=max(dates) if dates else None,
    )


def _matches(task: Task, filters: ScheduleFilters, query: str) -> bool:
    if query and not (
        query in task.title.lower()
        or query in task.description.lower()
        or query in task.subject.lower()
    ):
        return False
    if filters.subjects and task.subject not in filters.subjects:
        return False
    if filters.types and task.type not in filters.types:
        return False
    if filters.priorities and task.priority not in filters.priorities:
        return False
    if filters.status:
        wanted = "completed" if task.completed else "pending"
        if wanted not in filters.status:
            return False
    return True


def apply_filters(schedule: Schedule, filters: ScheduleFilters) -> Schedule:
    """Filter tasks, then drop days left without any task."""
    query = filters.search.strip().lower()
    days: List[Day] = []
    for day in schedule.days:
        if filters.date_from and day.date < filters.date_from:
            continue
        if filters.date_to and day.date > filters.date_to:
            continue
        kept = [t.model_copy(deep=True) for t in day.tasks if _matches(t, filters, query)]
        if kept:
            days.append(Day(date=day.date, phase=day.phase, tasks=kept))
    return Schedule(exam_id=schedule.exam_id, generated_at=schedule.generated_at, days=days)


def _add_months(d: date, months: int) -> date:
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def date_range_preset(preset: str, today: Optional[date] = None) -> Tuple[Optional[date], Optional[date]]:
    today = today or date.today()
    if preset == "all":
        return None, None
    if preset == "week":
        return today, today + timedelta(days=7)
    if preset == "month":
        return today, _add_months(today, 1)
    if preset == "quarter":
        return today, _add_months(today, 3)
    raise ValueError(f"Unknown date range preset: {preset}")


def filter_options(schedule: Schedule) -> Dict[str, List[str]]:
    options: Dict[str, List[str]] = {"subjects": [], "types": [], "priorities": []}
    for t in schedule.all_tasks():
        for key, value in (("subjects", t.subject), ("types", t.type), ("priorities", t.priority)):
            if value and value not in options[key]:
                options[key].append(value)
    return options


def tasks_frame(schedule: Schedule) -> pd.DataFrame:
    rows = [
        {
            "date": day.date,
            "phase": day.phase,
            "subject": t.subject,
            "title": t.title,
            "type": t.type,
            "priority": t.priority,
            "duration": t.duration,
            "completed": t.completed,
        }
        for day in schedule.days
        for t in day.tasks
    ]
    return pd.DataFrame(rows, columns=TASK_COLUMNS)


def subject_breakdown(schedule: Schedule) -> pd.DataFrame:
    """Per-subject task count, planned minutes, completed minutes and share of minutes."""
    columns = ["subject", "tasks", "minutes", "completed_minutes", "share"]
    df = tasks_frame(schedule)
    if df.empty:
        return pd.DataFrame(columns=columns)

    df["completed_minutes"] = df["duration"].where(df["completed"], 0)
    grouped = (
        df.groupby("subject", sort=False)
        .agg(
            tasks=("title", "count"),
            minutes=("duration", "sum"),
            completed_minutes=("completed_minutes", "sum"),
        )
        .reset_index()
    )
    grouped["share"] = grouped["minutes"] / grouped["minutes"].sum() * 100
    return grouped[columns]


def group_by_hour(tasks: List[Task], start_hour: int = 9) -> List[HourSlot]:
    """Lay tasks out back to back from start_hour; each lands in the hour it starts."""
    slots = [HourSlot(hour=h) for h in range(24)]
    cursor = start_hour * 60
    for t in tasks:
        slots[(cursor // 60) % 24].tasks.append(t)
        cursor += t.duration
    return slots
