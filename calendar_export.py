from __future__ import annotations
from datetime import datetime, time, timedelta, timezone

from icalendar import Calendar, Event as IcsEvent

from models import Schedule
from planner import validate_schedule


ICAL_PRIORITY = {
    "very-high": 1,
    "high": 3,
    "medium": 5,
    "low": 7,
}


def schedule_to_ics(schedule: Schedule, start_hour: int = 9) -> bytes:
    """
    One VEVENT per task. Every event starts at start_hour UTC on its day and
    lasts the task duration; PRIORITY follows ICAL_PRIORITY.
    """
    validate_schedule(schedule)

    cal = Calendar()
    cal.add("PRODID", "-//Exam Planner//Study Schedule//EN")
    cal.add("version", "2.0")
    cal.add("X-WR-CALNAME", "Study Schedule")

    for day in schedule.days:
        start_time = datetime.combine(day.date, time(hour=start_hour), tzinfo=timezone.utc)
        for task in day.tasks:
            event = IcsEvent()
            event.add("uid", f"{task.id}@exam-planner")
            event.add("summary", task.title)
            event.add("dtstart", start_time)
            event.add("dtend", start_time + timedelta(minutes=task.duration))
            event.add("description", task.description or "Study Session")
            event.add("priority", ICAL_PRIORITY[task.priority])
            cal.add_component(event)

    return cal.to_ical()
