from datetime import date, datetime, timedelta

import pytest

from errors import InvalidConfigError, SyllabusNotFoundError
from models import Day, Schedule, Subject, Syllabus, Task, UserConfig
from planner import (
    ALT_OVERLOAD_TOLERANCE,
    allocate_subject_hours,
    assemble,
    balance_daily_load,
    generate_schedule,
    phase_for_position,
    study_budget,
)


def _task(task_id, priority, minutes=150):
    return Task(id=task_id, title=task_id, subject="Physics", priority=priority, duration=minutes)


def test_phase_boundaries():
    assert phase_for_position(0) == "Concept Building"
    assert phase_for_position(59.9) == "Concept Building"
    assert phase_for_position(60) == "Practice & Application"
    assert phase_for_position(84.9) == "Practice & Application"
    assert phase_for_position(85) == "Revision"
    assert phase_for_position(100) == "Revision"


def test_budget_splits_total_hours(month_config):
    budget = study_budget(month_config)
    assert budget.effective_days == 30
    assert budget.total_hours == 150
    assert budget.concept_hours == pytest.approx(90)
    assert budget.practice_hours == pytest.approx(37.5)
    assert budget.revision_hours == pytest.approx(22.5)
    assert budget.concept_hours + budget.practice_hours + budget.revision_hours == pytest.approx(150)


def test_allocation_is_weight_proportional():
    subjects = [
        Subject(name="Physics", weight=100, total_modules=10),
        Subject(name="Biology", weight=200, total_modules=30),
    ]
    allocs = allocate_subject_hours(subjects, 300, 5)
    assert allocs[0].hours == pytest.approx(100)
    assert allocs[1].hours == pytest.approx(200)
    assert [a.days for a in allocs] == [20, 40]
    assert [a.modules_per_day for a in allocs] == [1, 1]
    assert sum(a.hours for a in allocs) == pytest.approx(300)


def test_allocation_gives_every_subject_a_day():
    subjects = [
        Subject(name="Main", weight=1000, total_modules=5),
        Subject(name="Tiny", weight=1, total_modules=5),
    ]
    allocs = allocate_subject_hours(subjects, 10, 5)
    assert allocs[1].days == 1
    assert allocs[1].modules_per_day == 5


def test_concept_phase_single_subject(month_config, physics_syllabus):
    schedule = generate_schedule(month_config, physics_syllabus)
    concept = [t for t in schedule.all_tasks() if t.type == "study"]

    assert len(concept) == 18
    assert all(t.duration == 180 for t in concept)
    assert all(t.priority == "high" for t in concept)
    assert concept[0].id == "concept-physics-1"
    assert concept[0].title == "Physics - Module 1"
    assert concept[0].topics == ["Mechanics"]
    assert concept[4].topics == []
    assert concept[0].resources == ["HC Verma"]

    concept_dates = [d.date for d in schedule.days if d.phase == "Concept Building"]
    assert concept_dates == [date(2024, 1, 1) + timedelta(days=i) for i in range(18)]


def test_practice_and_revision_phases(month_config, physics_syllabus):
    schedule = generate_schedule(month_config, physics_syllabus)
    practice = [t for t in schedule.all_tasks() if t.type == "practice"]
    mocks = [t for t in schedule.all_tasks() if t.type == "test"]
    revisions = [t for t in schedule.all_tasks() if t.type == "revision"]

    assert len(practice) == 8
    assert all(t.duration == 240 and t.priority == "medium" for t in practice)
    assert [t.id for t in mocks] == ["mock-test-1", "mock-test-2"]
    assert all(t.duration == 180 and t.priority == "very-high" for t in mocks)
    assert mocks[0].subject == "Full Syllabus"
    assert mocks[0].topics == ["Physics"]
    assert [t.id for t in revisions] == ["revision-physics-2", "revision-physics-3", "revision-physics-5"]
    assert all(t.duration == 210 for t in revisions)
    assert revisions[0].topics == ["Mechanics", "Optics", "Electromagnetism"]


def test_generation_rebalances_overlapping_phases(month_config, physics_syllabus):
    schedule = generate_schedule(month_config, physics_syllabus)

    # practice and the first mock test share Jan 26; the practice session moves on
    jan26 = schedule.find_day(date(2024, 1, 26))
    jan27 = schedule.find_day(date(2024, 1, 27))
    assert [t.id for t in jan26.tasks] == ["mock-test-1"]
    assert [t.id for t in jan27.tasks] == ["revision-physics-2", "practice-physics-8"]
    assert len(schedule.all_tasks()) == 31


def test_generated_schedule_invariants(month_config, physics_syllabus):
    now = datetime(2024, 1, 1, 7, 30)
    schedule = generate_schedule(month_config, physics_syllabus, now=now)

    dates = [d.date for d in schedule.days]
    assert dates == sorted(set(dates))
    assert all(d.tasks for d in schedule.days)
    ids = schedule.task_ids()
    assert len(ids) == len(set(ids))
    assert schedule.exam_id == "demo"
    assert schedule.generated_at == now


def test_generation_is_deterministic(month_config, physics_syllabus):
    now = datetime(2024, 1, 1)
    first = generate_schedule(month_config, physics_syllabus, now=now)
    second = generate_schedule(month_config, physics_syllabus, now=now)
    assert first == second


def test_weekend_exclusion_keeps_phase_days_on_weekdays(physics_syllabus):
    config = UserConfig(
        exam_id="demo",
        start_date=date(2024, 1, 1),
        exam_date=date(2024, 1, 31),
        hours_per_day=5,
        include_weekends=False,
    )
    schedule = generate_schedule(config, physics_syllabus)
    assert len([t for t in schedule.all_tasks() if t.type == "study"]) == 14
    assert all(d.date.weekday() < 5 for d in schedule.days if d.phase != "Buffer")


def test_invalid_configs_are_rejected(physics_syllabus):
    base = dict(exam_id="demo", start_date=date(2024, 1, 10), hours_per_day=4)

    with pytest.raises(InvalidConfigError) as exc:
        generate_schedule(UserConfig(exam_date=date(2024, 1, 1), **base), physics_syllabus)
    assert "exam date must be after start date" in exc.value.details

    with pytest.raises(InvalidConfigError):
        generate_schedule(UserConfig(exam_date=date(2024, 1, 15), **base), physics_syllabus)

    with pytest.raises(InvalidConfigError):
        generate_schedule(
            UserConfig(exam_id="demo", start_date=date(2024, 1, 1), exam_date=date(2024, 2, 1),
                       hours_per_day=0),
            physics_syllabus,
        )


def test_empty_syllabus_is_rejected(month_config):
    with pytest.raises(SyllabusNotFoundError):
        generate_schedule(month_config, Syllabus(exam_id="demo"))


def test_assemble_merges_same_date():
    d = date(2024, 3, 1)
    days = [
        Day(date=d + timedelta(days=1), phase="Revision", tasks=[_task("r", "high")]),
        Day(date=d, phase="Concept Building", tasks=[_task("c", "high")]),
        Day(date=d, phase="Practice & Application", tasks=[_task("p", "medium")]),
    ]
    merged = assemble(days)
    assert [x.date for x in merged] == [d, d + timedelta(days=1)]
    assert merged[0].phase == "Concept Building"
    assert [t.id for t in merged[0].tasks] == ["c", "p"]
    assert len(days[1].tasks) == 1


def test_overloaded_day_pushes_low_then_medium_forward():
    d = date(2024, 2, 1)
    schedule = Schedule(days=[Day(date=d, phase="Concept Building", tasks=[
        _task("h", "high"), _task("m1", "medium"), _task("l", "low"), _task("m2", "medium"),
    ])])

    balanced = balance_daily_load(schedule, hours_per_day=5)

    assert [t.id for t in balanced.find_day(d).tasks] == ["h"]
    following = balanced.find_day(d + timedelta(days=1))
    assert following.phase == "Buffer"
    assert [t.id for t in following.tasks] == ["l", "m1", "m2"]
    assert len(schedule.find_day(d).tasks) == 4


def test_only_high_priority_overload_stays():
    d = date(2024, 2, 1)
    schedule = Schedule(days=[Day(date=d, phase="Revision", tasks=[
        _task("h1", "high", 300), _task("h2", "very-high", 300),
    ])])
    balanced = balance_daily_load(schedule, hours_per_day=5)
    assert balanced == schedule


def test_moves_into_existing_next_day():
    d = date(2024, 2, 1)
    schedule = Schedule(days=[
        Day(date=d, phase="Concept Building", tasks=[_task("h", "high", 300), _task("m", "medium", 120)]),
        Day(date=d + timedelta(days=1), phase="Concept Building", tasks=[_task("n", "high", 60)]),
    ])
    balanced = balance_daily_load(schedule, hours_per_day=5)
    assert len(balanced.days) == 2
    assert [t.id for t in balanced.days[1].tasks] == ["n", "m"]


def test_alternative_tolerance_is_more_lenient():
    d = date(2024, 2, 1)
    schedule = Schedule(days=[Day(date=d, phase="Concept Building", tasks=[
        _task("h", "high", 300), _task("m", "medium", 120),
    ])])
    assert len(balance_daily_load(schedule, 5).days) == 2
    assert balance_daily_load(schedule, 5, tolerance=ALT_OVERLOAD_TOLERANCE) == schedule


def test_back_to_back_overloads_move_each_task_once():
    d = date(2024, 2, 1)
    schedule = Schedule(days=[
        Day(date=d, phase="Concept Building", tasks=[
            _task("h", "high", 300), _task("m1", "medium", 300), _task("m2", "medium", 300),
        ]),
        Day(date=d + timedelta(days=1), phase="Concept Building", tasks=[
            _task("h2", "high", 600), _task("m3", "medium", 60),
        ]),
    ])

    balanced = balance_daily_load(schedule, hours_per_day=5)

    assert {x.date.isoformat(): [t.id for t in x.tasks] for x in balanced.days} == {
        "2024-02-01": ["h"],
        "2024-02-02": ["h2", "m1", "m2"],
        "2024-02-03": ["m3"],
    }
