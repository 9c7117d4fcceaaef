from __future__ import annotations
import math
import re
from datetime import date, datetime, timedelta
from typing import Callable, Iterator, List, Optional, Set

from loguru import logger

from errors import InvalidConfigError, ScheduleFormatError, SyllabusNotFoundError
from models import (
    Day,
    Phase,
    Schedule,
    StudyBudget,
    Subject,
    SubjectAllocation,
    Syllabus,
    Task,
    UserConfig,
)


CONCEPT_SHARE = 0.6
PRACTICE_SHARE = 0.25
REVISION_SHARE = 0.15

# Phase start offsets as a fraction of the calendar span
PRACTICE_START = 0.6
REVISION_START = 0.85

MIN_TOTAL_DAYS = 7
MAX_CONCEPT_SESSION_HOURS = 3.0
MOCK_TEST_MINUTES = 180
MOCK_TEST_EVERY = 3

OVERLOAD_TOLERANCE = 1.2
ALT_OVERLOAD_TOLERANCE = 1.5
MOVABLE_PRIORITIES = ("low", "medium")


def phase_for_position(percentage: float) -> Phase:
    """Phase for a position (0-100) within the study span."""
    if percentage < PRACTICE_START * 100:
        return "Concept Building"
    if percentage < REVISION_START * 100:
        return "Practice & Application"
    return "Revision"


def phase_for_date(schedule: Schedule, day: date) -> Phase:
    if not schedule.days:
        return phase_for_position(0)
    first = schedule.days[0].date
    last = schedule.days[-1].date
    span = (last - first).days
    if span <= 0:
        return phase_for_position(0 if day <= first else 100)
    pct = (day - first).days / span * 100
    return phase_for_position(min(100.0, max(0.0, pct)))


def validate_config(config: UserConfig) -> None:
    problems: List[str] = []
    if config.exam_date <= config.start_date:
        problems.append("exam date must be after start date")
    if config.total_days < MIN_TOTAL_DAYS:
        problems.append(f"at least {MIN_TOTAL_DAYS} days are required, got {config.total_days}")
    if config.hours_per_day <= 0:
        problems.append("hours per day must be positive")
    if problems:
        raise InvalidConfigError(problems)


def validate_schedule(schedule: Schedule) -> None:
    problems: List[str] = []
    previous: Optional[date] = None
    for day in schedule.days:
        if previous is not None and day.date <= previous:
            problems.append(f"day {day.date.isoformat()} is duplicated or out of order")
        previous = day.date
    seen: Set[str] = set()
    for task_id in schedule.task_ids():
        if task_id in seen:
            problems.append(f"task id '{task_id}' appears more than once")
        seen.add(task_id)
    if problems:
        raise ScheduleFormatError(problems)


def study_budget(config: UserConfig) -> StudyBudget:
    effective_days = config.effective_days
    total_hours = effective_days * config.hours_per_day
    return StudyBudget(
        effective_days=effective_days,
        total_hours=total_hours,
        concept_hours=total_hours * CONCEPT_SHARE,
        practice_hours=total_hours * PRACTICE_SHARE,
        revision_hours=total_hours * REVISION_SHARE,
    )


def _days_needed(hours: float, hours_per_day: float) -> int:
    # round first so 90/5 stays 18 rather than ceil(18.000000000000004)
    return math.ceil(round(hours / hours_per_day, 9))


def _minutes(hours: float) -> int:
    return max(1, int(round(hours * 60)))


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "task"


def _id_factory() -> Callable[[str], str]:
    seen: Set[str] = set()

    def make(base: str) -> str:
        candidate = base
        n = 2
        while candidate in seen:
            candidate = f"{base}-{n}"
            n += 1
        seen.add(candidate)
        return candidate

    return make


def _study_dates(start: date, include_weekends: bool) -> Iterator[date]:
    d = start
    while True:
        if include_weekends or d.weekday() < 5:
            yield d
        d = d + timedelta(days=1)


def allocate_subject_hours(
    subjects: List[Subject],
    concept_hours: float,
    hours_per_day: float,
) -> List[SubjectAllocation]:
    total_weight = sum(s.weight for s in subjects)
    out: List[SubjectAllocation] = []
    for s in subjects:
        hours = (s.weight / total_weight) * concept_hours
        days = max(1, _days_needed(hours, hours_per_day))
        out.append(SubjectAllocation(
            subject=s.name,
            hours=hours,
            days=days,
            modules_per_day=math.ceil(s.total_modules / days),
        ))
    return out


def concept_phase(
    config: UserConfig,
    subjects: List[Subject],
    concept_hours: float,
    make_id: Callable[[str], str],
) -> List[Day]:
    allocations = allocate_subject_hours(subjects, concept_hours, config.hours_per_day)
    dates = _study_dates(config.start_date, config.include_weekends)
    minutes = _minutes(min(config.hours_per_day * 0.6, MAX_CONCEPT_SESSION_HOURS))

    days: List[Day] = []
    for subject, alloc in zip(subjects, allocations):
        size = alloc.modules_per_day
        for n in range(alloc.days):
            task = Task(
                id=make_id(f"concept-{_slug(subject.name)}-{n + 1}"),
                title=f"{subject.name} - Module {n + 1}",
                subject=subject.name,
                type="study",
                priority="high",
                duration=minutes,
                description="Learn new concepts and theories",
                resources=list(subject.reference_books),
                topics=subject.topics[n * size:(n + 1) * size],
            )
            days.append(Day(date=next(dates), phase="Concept Building", tasks=[task]))
    return days


def practice_phase(
    config: UserConfig,
    subjects: List[Subject],
    practice_hours: float,
    make_id: Callable[[str], str],
) -> List[Day]:
    start = config.start_date + timedelta(days=math.floor(config.total_days * PRACTICE_START))
    dates = _study_dates(start, config.include_weekends)
    minutes = _minutes(config.hours_per_day * 0.8)

    days: List[Day] = []
    for day in range(_days_needed(practice_hours, config.hours_per_day)):
        subject = subjects[day % len(subjects)]
        task = Task(
            id=make_id(f"practice-{_slug(subject.name)}-{day // len(subjects) + 1}"),
            title=f"{subject.name} Practice Session",
            subject=subject.name,
            type="practice",
            priority="medium",
            duration=minutes,
            description="Solve problems and case studies",
            resources=list(subject.reference_books),
        )
        days.append(Day(date=next(dates), phase="Practice & Application", tasks=[task]))
    return days


def revision_phase(
    config: UserConfig,
    subjects: List[Subject],
    revision_hours: float,
    make_id: Callable[[str], str],
) -> List[Day]:
    start = config.start_date + timedelta(days=math.floor(config.total_days * REVISION_START))
    dates = _study_dates(start, config.include_weekends)
    minutes = _minutes(config.hours_per_day * 0.7)

    days: List[Day] = []
    for day in range(_days_needed(revision_hours, config.hours_per_day)):
        if day % MOCK_TEST_EVERY == 0:
            number = day // MOCK_TEST_EVERY + 1
            task = Task(
                id=make_id(f"mock-test-{number}"),
                title=f"Full Length Mock Test {number}",
                subject="Full Syllabus",
                type="test",
                priority="very-high",
                duration=MOCK_TEST_MINUTES,
                description="Simulate actual exam conditions",
                topics=[s.name for s in subjects],
            )
            days.append(Day(date=next(dates), phase="Mock Tests", tasks=[task]))
            continue

        subject = subjects[day % len(subjects)]
        task = Task(
            id=make_id(f"revision-{_slug(subject.name)}-{day + 1}"),
            title=f"{subject.name} Revision",
            subject=subject.name,
            type="revision",
            priority="high",
            duration=minutes,
            description="Review key concepts and formulas",
            topics=subject.topics[:3],
        )
        days.append(Day(date=next(dates), phase="Revision", tasks=[task]))
    return days


def assemble(days: List[Day]) -> List[Day]:
    """Sort by date and merge entries sharing a date; the first entry keeps its phase."""
    merged: List[Day] = []
    by_date = {}
    for d in sorted(days, key=lambda x: x.date):
        existing = by_date.get(d.date)
        if existing is None:
            copy = d.model_copy(deep=True)
            by_date[d.date] = copy
            merged.append(copy)
        else:
            existing.tasks.extend(t.model_copy(deep=True) for t in d.tasks)
    return merged


def balance_daily_load(
    schedule: Schedule,
    hours_per_day: float,
    tolerance: float = OVERLOAD_TOLERANCE,
) -> Schedule:
    """
    Single redistribution pass. Loads are measured once up front; each day
    over hours_per_day * tolerance pushes up to ceil(overload_hours / 2) of its
    low then medium tasks to the next calendar day. Residual overload is kept.
    """
    result = schedule.model_copy(deep=True)
    limit = hours_per_day * 60 * tolerance
    # candidates come only from the tasks a day held before any move
    overloaded = [
        (d.date, d.total_minutes, {t.id for t in d.tasks})
        for d in result.days
        if d.total_minutes > limit
    ]

    for day_date, load, original_ids in overloaded:
        day = result.find_day(day_date)
        if day is None:
            continue
        overload_hours = (load - hours_per_day * 60) / 60
        max_moves = math.ceil(overload_hours / 2)
        candidates = [
            t for p in MOVABLE_PRIORITIES for t in day.tasks
            if t.priority == p and t.id in original_ids
        ][:max_moves]
        if not candidates:
            logger.warning(
                "planner: Overload left in place, nothing movable",
                date=day_date.isoformat(),
                load_minutes=load,
            )
            continue

        target_date = day_date + timedelta(days=1)
        target = result.find_day(target_date)
        if target is None:
            target = Day(date=target_date, phase="Buffer")
            result.days.append(target)
            result.days.sort(key=lambda d: d.date)

        moved = {t.id for t in candidates}
        day.tasks = [t for t in day.tasks if t.id not in moved]
        target.tasks.extend(candidates)
        logger.debug(
            "planner: Redistributed overload",
            date=day_date.isoformat(),
            target=target_date.isoformat(),
            moved=len(candidates),
        )
        if day.total_minutes > limit:
            logger.warning(
                "planner: Day still over budget after redistribution",
                date=day_date.isoformat(),
                load_minutes=day.total_minutes,
            )

    result.days = [d for d in result.days if d.tasks]
    return result


def generate_schedule(
    config: UserConfig,
    syllabus: Syllabus,
    *,
    tolerance: float = OVERLOAD_TOLERANCE,
    now: Optional[datetime] = None,
) -> Schedule:
    validate_config(config)
    if not syllabus.subjects:
        raise SyllabusNotFoundError(syllabus.exam_id, "syllabus has no subjects")

    budget = study_budget(config)
    make_id = _id_factory()
    subjects = syllabus.subjects

    days = concept_phase(config, subjects, budget.concept_hours, make_id)
    days += practice_phase(config, subjects, budget.practice_hours, make_id)
    days += revision_phase(config, subjects, budget.revision_hours, make_id)

    schedule = Schedule(
        exam_id=config.exam_id,
        generated_at=now or datetime.now(),
        days=assemble(days),
    )
    schedule = balance_daily_load(schedule, config.hours_per_day, tolerance)

    logger.info(
        "planner: Schedule generated",
        exam_id=config.exam_id,
        effective_days=budget.effective_days,
        total_hours=budget.total_hours,
        days=len(schedule.days),
        tasks=len(schedule.all_tasks()),
    )
    return schedule
