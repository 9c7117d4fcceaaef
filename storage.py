from __future__ import annotations
import json
import re
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger
from pydantic import ValidationError

from models import Schedule
from paths import get_data_dir


def _sanitize(part: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9_-]+", "_", part.strip())
    return safe.strip("_")[:80] or "default"


def schedule_id(exam_id: str, user_id: str) -> str:
    return f"schedule_{_sanitize(exam_id)}__{_sanitize(user_id)}"


def _backup_file(path: Path, content: str) -> None:
    backup = path.with_suffix(path.suffix + ".bak")
    backup.write_text(content, encoding="utf-8")


def load_json(path: Path | str) -> Any:
    """
    Load JSON from path:
    - If missing: return None
    - If empty or invalid: write .bak next to it and return None
    """
    path = Path(path)
    if not path.exists():
        return None

    raw_text = path.read_text(encoding="utf-8")
    text = raw_text.strip()
    if not text:
        return None

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        _backup_file(path, raw_text)
        logger.warning("storage: Corrupt JSON backed up", path=str(path))
        return None


def save_json(path: Path | str, payload: Any) -> None:
    """
    Atomic JSON write: write to temp file then replace target.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp = path.with_suffix(path.suffix + ".tmp")
    temp.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    temp.replace(path)


class ScheduleStore:
    """One JSON document per schedule id inside base_dir."""

    def __init__(self, base_dir: Path | str | None = None):
        self.base_dir = Path(base_dir) if base_dir else get_data_dir()

    def _path(self, sid: str) -> Path:
        return self.base_dir / f"{_sanitize(sid)}.json"

    def save(self, sid: str, schedule: Schedule) -> Path:
        path = self._path(sid)
        save_json(path, schedule.model_dump(mode="json"))
        logger.debug("storage: Schedule saved", schedule_id=sid, days=len(schedule.days))
        return path

    def load(self, sid: str) -> Optional[Schedule]:
        path = self._path(sid)
        raw = load_json(path)
        if raw is None:
            return None
        try:
            return Schedule.model_validate(raw)
        except ValidationError:
            _backup_file(path, path.read_text(encoding="utf-8"))
            logger.warning("storage: Stored schedule failed validation", schedule_id=sid)
            return None

    def delete(self, sid: str) -> bool:
        try:
            self._path(sid).unlink()
        except FileNotFoundError:
            return False
        return True

    def list_ids(self) -> List[str]:
        if not self.base_dir.exists():
            return []
        return sorted(p.stem for p in self.base_dir.glob("*.json"))
