from __future__ import annotations
from datetime import date
from typing import Optional, Tuple, Union

from loguru import logger

import dashboard
import exams
from models import Schedule, UserConfig
from logger import setup_logger
from planner import generate_schedule
from schedule_export import export_schedule
from settings import PlannerSettings
from storage import ScheduleStore, schedule_id


class PlannerContext:
    """
    Services shared by the planner operations, passed explicitly to callers.
    Owns the dashboard cache and, optionally, a schedule store.
    """

    def __init__(
        self,
        settings: Optional[PlannerSettings] = None,
        store: Optional[ScheduleStore] = None,
        cache: Optional[dashboard.TTLCache] = None,
    ):
        self.settings = settings or PlannerSettings()
        self.store = store
        if cache is None:
            cache = dashboard.TTLCache(self.settings.dashboard_cache_ttl_seconds)
        self.cache = cache

    @classmethod
    def from_settings(cls, settings: PlannerSettings) -> "PlannerContext":
        setup_logger(settings.log_level, settings.log_file)
        return cls(settings=settings, store=ScheduleStore(settings.data_dir))

    def generate(self, config: UserConfig) -> Tuple[str, Schedule]:
        syllabus = exams.get_syllabus(config.exam_id)
        schedule = generate_schedule(config, syllabus, tolerance=self.settings.overload_tolerance)
        sid = schedule_id(config.exam_id, config.user_id)
        if self.store is not None:
            self.store.save(sid, schedule)
        self.invalidate_dashboard(config)
        return sid, schedule

    def save(self, config: UserConfig, schedule: Schedule) -> str:
        sid = schedule_id(config.exam_id, config.user_id)
        if self.store is not None:
            self.store.save(sid, schedule)
        self.invalidate_dashboard(config)
        return sid

    def load(self, config: UserConfig) -> Optional[Schedule]:
        if self.store is None:
            return None
        return self.store.load(schedule_id(config.exam_id, config.user_id))

    @staticmethod
    def _dashboard_key(config: UserConfig) -> str:
        return f"dashboard_{config.user_id}_{config.exam_id}"

    def dashboard_summary(
        self,
        config: UserConfig,
        schedule: Schedule,
        today: Optional[date] = None,
    ) -> dict:
        key = self._dashboard_key(config)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        summary = dashboard.summarize(config, schedule, today)
        self.cache.set(key, summary)
        logger.debug("context: Dashboard summary computed", key=key)
        return summary

    def invalidate_dashboard(self, config: UserConfig) -> None:
        self.cache.invalidate(self._dashboard_key(config))

    def export(self, schedule: Schedule, fmt: str = "json") -> Union[str, bytes]:
        return export_schedule(schedule, fmt, ical_start_hour=self.settings.ical_start_hour)
