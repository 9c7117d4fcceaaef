from __future__ import annotations
import math
import time
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from models import Schedule, Task, UserConfig
from queries import compute_stats


PRIORITY_WEIGHTS = {"very-high": 4, "high": 3, "medium": 2, "low": 1}
TYPE_WEIGHTS = {"test": 1.5, "practice": 1.2, "study": 1.0, "revision": 0.8}
EARLY_BONUS = 1.2
LATE_PENALTY = 0.8


class TTLCache:
    """Small expiring key/value map; the clock is injectable for tests."""

    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Any:
        item = self._items.get(key)
        if item is None:
            return None
        expires_at, value = item
        if self._clock() >= expires_at:
            del self._items[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._items[key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, key: Optional[str] = None) -> None:
        if key is None:
            self._items.clear()
        else:
            self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)


def task_weight(task: Task) -> float:
    return PRIORITY_WEIGHTS.get(task.priority, 1) * TYPE_WEIGHTS.get(task.type, 1.0)


def performance_score(schedule: Schedule) -> float:
    """Weighted share of completed work; early completion earns a bonus, late a penalty."""
    total = 0.0
    max_score = 0.0
    for day in schedule.days:
        for t in day.tasks:
            weight = task_weight(t)
            max_score += weight
            if not t.completed:
                continue
            score = weight
            if t.completed_at is not None:
                done_on = t.completed_at.date()
                if done_on < day.date:
                    score *= EARLY_BONUS
                elif done_on > day.date:
                    score *= LATE_PENALTY
            total += score
    return (total / max_score * 100) if max_score > 0 else 0.0


def last_7_days(schedule: Schedule, today: date) -> List[dict]:
    out = []
    for i in range(6, -1, -1):
        d = today - timedelta(days=i)
        day = schedule.find_day(d)
        if day is None:
            out.append({"date": d, "completed": False, "completion_rate": 0.0, "tasks_completed": 0})
            continue
        total = len(day.tasks)
        done = sum(1 for t in day.tasks if t.completed)
        out.append({
            "date": d,
            "completed": done > 0 or total == 0,
            "completion_rate": (done / total * 100) if total else 0.0,
            "tasks_completed": done,
        })
    return out


def efficiency_score(task_rate: float, consistency: float, performance: float) -> float:
    return task_rate * 0.4 + consistency * 0.3 + performance * 0.3


def dashboard_recommendations(
    time_rate: float,
    task_rate: float,
    consistency: float,
    days_remaining: int,
) -> List[dict]:
    recs: List[dict] = []
    if time_rate < 50 and days_remaining < 30:
        recs.append({"type": "urgent", "title": "Accelerate Study Pace",
                     "message": "You're falling behind schedule. Consider increasing daily study hours.",
                     "priority": "high"})
    if task_rate < 70:
        recs.append({"type": "warning", "title": "Improve Task Completion",
                     "message": "Focus on completing scheduled tasks to stay on track.",
                     "priority": "medium"})
    if consistency < 70:
        recs.append({"type": "suggestion", "title": "Build Consistency",
                     "message": "Try to study every day, even if for shorter periods.",
                     "priority": "medium"})
    if days_remaining < 7:
        recs.append({"type": "tip", "title": "Final Revision",
                     "message": "Focus on revision and mock tests in the final week.",
                     "priority": "high"})
    if not recs:
        recs.append({"type": "success", "title": "Great Progress!",
                     "message": "You're on track. Keep up the good work!",
                     "priority": "low"})
    return recs


def required_daily_hours(time_rate: float, days_remaining: int) -> int:
    if time_rate >= 100:
        return 0
    per_day = (100 - time_rate) / max(1, days_remaining)
    # one percent of progress is taken as half an hour of effective study
    return math.ceil(per_day * 0.5)


def study_suggestions(predicted: float) -> List[str]:
    if predicted < 70:
        return [
            "Focus on weak areas identified in analytics",
            "Increase mock test frequency",
            "Join study groups for difficult topics",
        ]
    if predicted < 85:
        return [
            "Maintain current pace with regular revision",
            "Take full-length mock tests weekly",
            "Review error logs from practice sessions",
        ]
    return [
        "Focus on speed and accuracy improvement",
        "Help peers in study groups",
        "Mentor junior students to reinforce concepts",
    ]


def predictions(time_rate: float, performance: float, efficiency: float, days_remaining: int) -> dict:
    time_factor = min(1.0, time_rate / 100)
    predicted = performance * (0.7 + time_factor * 0.3) * (0.8 + efficiency / 100 * 0.2)
    if days_remaining > 0:
        predicted *= 1 + (days_remaining / 30) * 0.1
    predicted = min(98.0, max(40.0, predicted))

    confidence = 75
    if time_rate > 80:
        confidence += 10
    if performance > 80:
        confidence += 10
    if efficiency > 80:
        confidence += 5

    return {
        "predicted_score": round(predicted),
        "confidence": min(95, confidence),
        "required_daily_hours": required_daily_hours(time_rate, days_remaining),
        "study_suggestions": study_suggestions(predicted),
    }


def summarize(config: UserConfig, schedule: Schedule, today: Optional[date] = None) -> dict:
    today = today or date.today()
    total_days = config.total_days
    days_remaining = max(0, (config.exam_date - today).days)
    days_completed = max(0, min(total_days, total_days - days_remaining))
    time_rate = (days_completed / total_days * 100) if total_days > 0 else 0.0
    studied_hours = days_completed * config.hours_per_day

    stats = compute_stats(schedule)
    week = last_7_days(schedule, today)
    consistency = sum(1 for d in week if d["completed"]) / 7 * 100
    performance = performance_score(schedule)
    efficiency = efficiency_score(stats.completion_rate, consistency, performance)

    return {
        "time_metrics": {
            "days_remaining": days_remaining,
            "days_completed": days_completed,
            "completion_rate": time_rate,
            "total_study_hours": studied_hours,
            "estimated_remaining_hours": days_remaining * config.hours_per_day,
            "daily_average_hours": (studied_hours / days_completed) if days_completed else 0.0,
        },
        "task_metrics": {
            "total_tasks": stats.total_tasks,
            "completed_tasks": stats.completed_tasks,
            "task_completion_rate": stats.completion_rate,
            "pending_tasks": stats.pending_tasks,
        },
        "performance_metrics": {
            "score": performance,
            "consistency": consistency,
            "efficiency": efficiency,
            "last_7_days": week,
        },
        "recommendations": dashboard_recommendations(
            time_rate, stats.completion_rate, consistency, days_remaining
        ),
        "predictions": predictions(time_rate, performance, efficiency, days_remaining),
    }
