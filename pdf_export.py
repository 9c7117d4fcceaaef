from __future__ import annotations
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from models import Schedule, ScheduleStats
from planner import validate_schedule
from queries import compute_stats


def schedule_to_pdf(schedule: Schedule, stats: Optional[ScheduleStats] = None) -> bytes:
    validate_schedule(schedule)
    stats = stats or compute_stats(schedule)

    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=letter,
        leftMargin=40,
        rightMargin=40,
        topMargin=40,
        bottomMargin=40,
    )
    styles = getSampleStyleSheet()
    elems = []

    title = f"Study Schedule: {schedule.exam_id}" if schedule.exam_id else "Study Schedule"
    elems.append(Paragraph(escape(title), styles["Title"]))
    elems.append(Spacer(1, 10))
    if stats.start_date and stats.end_date:
        elems.append(Paragraph(
            f"{stats.start_date.isoformat()} - {stats.end_date.isoformat()} | "
            f"Days: {stats.days_count} | Tasks: {stats.total_tasks}",
            styles["Normal"],
        ))
    elems.append(Paragraph(
        f"Completed: {stats.completed_tasks}/{stats.total_tasks} ({stats.completion_rate:.0f}%) "
        f"| Planned hours: {stats.total_duration_minutes / 60:.1f}",
        styles["Normal"],
    ))
    elems.append(Spacer(1, 12))

    for day in schedule.days:
        heading = f"{day.date.strftime('%A, %Y-%m-%d')} - {day.phase}"
        elems.append(Paragraph(escape(heading), styles["Heading3"]))
        table_data = [["Task", "Subject", "Type", "Priority", "Minutes", "Done"]]
        for task in day.tasks:
            table_data.append([
                task.title,
                task.subject,
                task.type,
                task.priority,
                str(task.duration),
                "Yes" if task.completed else "No",
            ])
        table_data.append(["Total", "", "", "", str(day.total_minutes), ""])

        table = Table(table_data, hAlign="LEFT", colWidths=[170, 110, 60, 60, 50, 40])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ("BACKGROUND", (0, -1), (-1, -1), colors.whitesmoke),
            ("ALIGN", (4, 1), (4, -1), "RIGHT"),
        ]))
        elems.append(table)
        elems.append(Spacer(1, 8))

    doc.build(elems)
    return buf.getvalue()
