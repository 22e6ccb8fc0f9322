"""Console verbosity."""

import os
from dataclasses import dataclass, field
from typing import Literal

__all__ = ("LoggingConfig", "get_default_log_level")

LogLevel = Literal["quiet", "normal", "verbose"]


def get_default_log_level() -> LogLevel:
    """Read the verbosity from CORDOVA_RUN_LOG_LEVEL.

    Returns:
        The configured level, ``normal`` when unset or unknown.
    """
    env_level = os.getenv("CORDOVA_RUN_LOG_LEVEL", "").strip().lower()
    match env_level:
        case "quiet" | "normal" | "verbose":
            return env_level
        case _:
            return "normal"


@dataclass
class LoggingConfig:
    """Console verbosity of a run.

    Attributes:
        level: ``quiet`` prints warnings and failures only, ``normal`` adds
            progress lines and ``verbose`` adds debug logging. An explicit value
            wins over CORDOVA_RUN_LOG_LEVEL.
        timestamps: Show timestamps on verbose log records.
    """

    level: LogLevel = field(default_factory=get_default_log_level)
    timestamps: bool = False

    @property
    def is_quiet(self) -> bool:
        return self.level == "quiet"

    @property
    def is_verbose(self) -> bool:
        return self.level == "verbose"
