"""Plan-time recommendations and a heuristic score prediction."""

from __future__ import annotations
from typing import Dict, List

from models import Syllabus, UserConfig


DIFFICULTY_MULTIPLIER = {
    "easy": 0.9,
    "medium": 1.0,
    "hard": 1.1,
    "extreme": 1.2,
}
HEAVY_SUBJECT_WEIGHT = 150


def plan_recommendations(config: UserConfig, syllabus: Syllabus) -> List[dict]:
    recs: List[dict] = []
    if config.hours_per_day < 4:
        recs.append({
            "type": "warning",
            "title": "Low Study Hours",
            "message": f"Consider increasing study hours from {config.hours_per_day:g} "
                       f"to at least 4 hours per day for better results.",
            "priority": "medium",
        })
    if config.hours_per_day > 8:
        recs.append({
            "type": "warning",
            "title": "High Study Hours",
            "message": f"{config.hours_per_day:g} hours per day is intensive. "
                       f"Include breaks and rest days to avoid burnout.",
            "priority": "high",
        })

    for s in syllabus.subjects:
        if s.weight >= HEAVY_SUBJECT_WEIGHT:
            recs.append({
                "type": "suggestion",
                "title": f"Focus on {s.name}",
                "message": f"{s.name} has high weightage ({s.weight:g} marks). "
                           f"Allocate extra time and practice.",
                "priority": "high",
            })

    recs.append({
        "type": "tip",
        "title": "Spaced Repetition",
        "message": "The schedule includes revision cycles for better retention. "
                   "Review concepts at increasing intervals.",
        "priority": "low",
    })
    return recs


def improvement_areas(config: UserConfig) -> List[str]:
    areas: List[str] = []
    if config.hours_per_day < 4:
        areas.append("Increase daily study hours")
    if not config.include_weekends:
        areas.append("Consider studying on weekends for faster progress")
    if config.difficulty == "easy":
        areas.append("Challenge yourself with more difficult practice problems")
    return areas


def predict_performance(config: UserConfig) -> Dict[str, object]:
    score = 60.0
    score += (config.hours_per_day - 4) * 2.5
    score += (config.effective_days - 30) * 0.1
    score *= DIFFICULTY_MULTIPLIER.get(config.difficulty, 1.0)
    score *= config.target_score / 85
    score = max(40.0, min(95.0, score))

    confidence = 75
    if config.total_days >= 90:
        confidence += 10
    if config.hours_per_day >= 6:
        confidence += 10
    if config.difficulty in ("hard", "extreme"):
        confidence -= 5

    weeks = config.total_days / 7
    return {
        "predicted_score": round(score),
        "confidence": min(95, confidence),
        "improvement_areas": improvement_areas(config),
        "weekly_target": round(score / weeks) if weeks > 0 else 0,
    }
