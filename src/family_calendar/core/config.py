from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Family Calendar"
APP_AUTHOR = "FamilyCalendar"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))
STORE_FILE = DATA_DIR / "family_calendar.json"
LOG_FILE = DATA_DIR / "family_calendar.log"


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
