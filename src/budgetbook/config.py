import os
from functools import lru_cache
from pathlib import Path
from typing import Optional


class Settings:
    def __init__(
        self,
        database_path: str,
        default_user: Optional[str],
        default_profile: Optional[str],
        log_level: str,
    ) -> None:
        self.database_path = database_path
        self.default_user = default_user
        self.default_profile = default_profile
        self.log_level = log_level


def _default_database_path() -> str:
    db_dir = Path.home() / ".budgetbook"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "budgetbook.db")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    database_path = os.getenv("BUDGETBOOK_DB_PATH") or _default_database_path()
    default_user = os.getenv("BUDGETBOOK_USER")
    default_profile = os.getenv("BUDGETBOOK_PROFILE")
    log_level = os.getenv("BUDGETBOOK_LOG_LEVEL", "WARNING").upper()
    return Settings(
        database_path=database_path,
        default_user=default_user,
        default_profile=default_profile,
        log_level=log_level,
    )
