from datetime import date, datetime

import pytest

from models import Day, Schedule, Subject, Syllabus, Task, UserConfig


@pytest.fixture
def month_config():
    """30 calendar days at 5 hours a day, weekends included."""
    return UserConfig(
        exam_id="demo",
        start_date=date(2024, 1, 1),
        exam_date=date(2024, 1, 31),
        hours_per_day=5,
        include_weekends=True,
    )


@pytest.fixture
def physics_syllabus():
    return Syllabus(
        exam_id="demo",
        label="Demo Exam",
        subjects=[
            Subject(
                name="Physics",
                weight=100,
                total_modules=10,
                topics=["Mechanics", "Optics", "Electromagnetism", "Modern Physics"],
                reference_books=["HC Verma"],
            )
        ],
    )


@pytest.fixture
def small_schedule():
    return Schedule(
        exam_id="demo",
        generated_at=datetime(2024, 1, 31, 8, 0),
        days=[
            Day(
                date=date(2024, 2, 1),
                phase="Concept Building",
                tasks=[
                    Task(id="a", title="Mechanics", subject="Physics", type="study",
                         priority="high", duration=120),
                    Task(id="b", title="Organic", subject="Chemistry", type="practice",
                         priority="medium", duration=60, description="Reaction mechanisms"),
                ],
            ),
            Day(
                date=date(2024, 2, 3),
                phase="Practice & Application",
                tasks=[
                    Task(id="c", title="Optics Practice", subject="Physics", type="practice",
                         priority="low", duration=90, completed=True,
                         completed_at=datetime(2024, 2, 3, 10, 0)),
                ],
            ),
            Day(
                date=date(2024, 2, 5),
                phase="Revision",
                tasks=[
                    Task(id="d", title="Biology Revision", subject="Biology", type="revision",
                         priority="high", duration=45),
                ],
            ),
        ],
    )
