from __future__ import annotations
import os
import sys
from pathlib import Path
from typing import Optional


APP_NAME = "ExamPlanner"
DATA_DIR_ENV = "EXAM_PLANNER_DATA_DIR"


def default_data_dir(platform: Optional[str] = None, home: Optional[Path] = None) -> Path:
    platform = platform or sys.platform
    home = home or Path.home()
    if platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    if platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        return (Path(appdata) if appdata else home / "AppData" / "Roaming") / APP_NAME
    xdg = os.environ.get("XDG_DATA_HOME")
    return (Path(xdg) if xdg else home / ".local" / "share") / "exam-planner"


def get_data_dir(override: Path | str | None = None) -> Path:
    """
    Directory holding saved schedules, created on first use.
    An explicit override wins, then EXAM_PLANNER_DATA_DIR, then the per-OS default.
    """
    chosen = override or os.environ.get(DATA_DIR_ENV)
    base = Path(chosen).expanduser() if chosen else default_data_dir()
    base.mkdir(parents=True, exist_ok=True)
    return base
