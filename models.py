from __future__ import annotations
from pydantic import BaseModel, Field
from datetime import date, datetime, timedelta
from typing import List, Literal, Optional


Difficulty = Literal["easy", "medium", "hard", "extreme"]
TaskType = Literal["study", "practice", "test", "revision", "catchup", "group"]
Priority = Literal["very-high", "high", "medium", "low"]
Phase = Literal[
    "Concept Building",
    "Practice & Application",
    "Revision",
    "Mock Tests",
    "Buffer",
]
TaskStatus = Literal["completed", "pending"]


class UserConfig(BaseModel):
    exam_id: str
    user_id: str = "local"
    start_date: date
    exam_date: date
    hours_per_day: float
    difficulty: Difficulty = "medium"
    include_weekends: bool = True
    target_score: int = Field(default=85, ge=0, le=100)

    @property
    def total_days(self) -> int:
        return (self.exam_date - self.start_date).days

    @property
    def effective_days(self) -> int:
        days = max(0, self.total_days)
        if self.include_weekends:
            return days
        full_weeks, leftover = divmod(days, 7)
        count = full_weeks * 5
        tail_start = self.start_date + timedelta(days=full_weeks * 7)
        for i in range(leftover):
            if (tail_start + timedelta(days=i)).weekday() < 5:
                count += 1
        return count


class Subject(BaseModel):
    name: str
    weight: float = Field(gt=0)
    total_modules: int = Field(gt=0)
    topics: List[str] = Field(default_factory=list)
    reference_books: List[str] = Field(default_factory=list)
    type: str = ""
    recommended_time: Optional[float] = None


class Syllabus(BaseModel):
    exam_id: str
    label: str = ""
    subjects: List[Subject] = Field(default_factory=list)


class Exam(BaseModel):
    id: str
    label: str
    category: str
    exam_code: str
    difficulty: Difficulty = "medium"
    duration: str = ""
    frequency: str = ""
    official_sites: List[str] = Field(default_factory=list)
    popularity: int = 0
    subjects: List[Subject] = Field(default_factory=list)

    def syllabus(self) -> Syllabus:
        return Syllabus(exam_id=self.id, label=self.label, subjects=list(self.subjects))


class Task(BaseModel):
    id: str
    title: str
    subject: str
    type: TaskType = "study"
    priority: Priority = "medium"
    duration: int = Field(gt=0)  # minutes
    completed: bool = False
    completed_at: Optional[datetime] = None
    description: str = ""
    resources: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    time_taken: Optional[int] = None
    created_at: Optional[datetime] = None


class Day(BaseModel):
    date: date
    phase: Phase
    tasks: List[Task] = Field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return sum(t.duration for t in self.tasks)


class Schedule(BaseModel):
    exam_id: Optional[str] = None
    generated_at: Optional[datetime] = None
    days: List[Day] = Field(default_factory=list)

    def all_tasks(self) -> List[Task]:
        return [t for d in self.days for t in d.tasks]

    def find_day(self, day: date) -> Optional[Day]:
        for d in self.days:
            if d.date == day:
                return d
        return None

    def task_ids(self) -> List[str]:
        return [t.id for t in self.all_tasks()]


class CompletionData(BaseModel):
    notes: Optional[str] = None
    time_taken: Optional[int] = Field(default=None, ge=0)


class ScheduleFilters(BaseModel):
    subjects: List[str] = Field(default_factory=list)
    types: List[TaskType] = Field(default_factory=list)
    priorities: List[Priority] = Field(default_factory=list)
    status: List[TaskStatus] = Field(default_factory=list)
    search: str = ""
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class ScheduleStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    completion_rate: float
    total_duration_minutes: int
    completed_duration_minutes: int
    pending_duration_minutes: int
    subjects_count: int
    phases_count: int
    days_count: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class OverdueTask(BaseModel):
    date: date
    task: Task
    days_overdue: int


class HourSlot(BaseModel):
    hour: int
    tasks: List[Task] = Field(default_factory=list)


class SubjectAllocation(BaseModel):
    subject: str
    hours: float
    days: int
    modules_per_day: int


class StudyBudget(BaseModel):
    effective_days: int
    total_hours: float
    concept_hours: float
    practice_hours: float
    revision_hours: float
