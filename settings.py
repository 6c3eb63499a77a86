import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def check_log_level(name: str) -> str:
    level = name.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown TRC_LOG_LEVEL {name!r}; expected DEBUG, INFO, WARNING or ERROR")
    return level


@dataclass(frozen=True)
class Settings:
    encoding: str = "utf-8-sig"
    export_separator: str = ","
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            encoding=os.getenv("TRC_ENCODING") or cls.encoding,
            export_separator=os.getenv("TRC_EXPORT_SEPARATOR") or cls.export_separator,
            log_level=check_log_level(os.getenv("TRC_LOG_LEVEL") or cls.log_level),
        )
