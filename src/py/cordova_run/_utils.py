"""Utilities for console output and logging setup."""

__all__ = (
    "configure_logging",
    "console",
    "log_fail",
    "log_info",
    "log_success",
    "log_warn",
)

import logging
from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from cordova_run.config import LoggingConfig

console = Console()

_TICK = "[bold green]✓[/]"
_INFO = "[cyan]•[/]"
_WARN = "[yellow]![/]"
_FAIL = "[red]x[/]"

_quiet: bool = False


def configure_logging(config: "LoggingConfig") -> None:
    """Apply the configured verbosity to the console helpers and library loggers.

    Suppresses INFO-level logs from httpx (it logs every readiness probe)
    unless the level is verbose.
    """
    global _quiet  # noqa: PLW0603
    _quiet = config.is_quiet

    logger = logging.getLogger("cordova_run")
    logger.setLevel(logging.DEBUG if config.is_verbose else logging.INFO)
    if config.is_verbose and not logger.handlers:
        from rich.logging import RichHandler

        logger.addHandler(RichHandler(console=console, show_path=False, show_time=config.timestamps))
    if not config.is_verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def log_success(message: str) -> None:
    """Print a success message with consistent styling."""

    if not _quiet:
        console.print(f"{_TICK} {message}")


def log_info(message: str) -> None:
    """Print an informational message with consistent styling."""

    if not _quiet:
        console.print(f"{_INFO} {message}")


def log_warn(message: str) -> None:
    """Print a warning message with consistent styling."""

    console.print(f"{_WARN} {message}")


def log_fail(message: str) -> None:
    """Print an error message with consistent styling."""

    console.print(f"{_FAIL} {message}")
