"""Outcome of a command execution."""

from dataclasses import dataclass

__all__ = ("EarlyExit", "Failure", "RunResult", "Success")


@dataclass(frozen=True)
class Success:
    """The run completed."""

    exit_code: int = 0


@dataclass(frozen=True)
class EarlyExit:
    """The command finished on purpose before the run phase (e.g. ``--list``)."""

    exit_code: int = 0


@dataclass(frozen=True)
class Failure:
    """The run stopped because of ``error``."""

    error: Exception
    exit_code: int = 1


RunResult = Success | EarlyExit | Failure
