"""Settings, read from environment variables"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Self

DEFAULT_DATABASE_URL = "sqlite:///openings.db"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    echo_sql: bool = False

    @classmethod
    def from_env(cls) -> Self:
        """
        * TRAINER_DATABASE_URL: SQLAlchemy URL of the repertoire database
        * TRAINER_SQL_ECHO: set to 1/true/yes to log all SQL statements
        """
        return cls(
            database_url=os.environ.get("TRAINER_DATABASE_URL", DEFAULT_DATABASE_URL),
            echo_sql=os.environ.get("TRAINER_SQL_ECHO", "").lower() in {"1", "true", "yes"},
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
