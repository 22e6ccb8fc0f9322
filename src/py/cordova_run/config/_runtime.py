"""Runtime execution settings."""

import os
from dataclasses import dataclass, field
from typing import Literal

from cordova_run.config._constants import TRUE_VALUES

__all__ = ("RuntimeConfig", "resolve_executor", "resolve_project_type")

ExecutorName = Literal["node", "bun", "deno", "yarn", "pnpm"]


def resolve_executor() -> "ExecutorName | None":
    """Resolve the JavaScript executor from environment variable.

    Reads CORDOVA_RUN_EXECUTOR. ``npm`` is accepted as an alias of ``node``.

    Raises:
        ValueError: If an invalid value is provided.

    Returns:
        The resolved executor name, or None to auto-detect.
    """
    env_value = os.getenv("CORDOVA_RUN_EXECUTOR")
    match env_value.strip().lower() if env_value is not None else None:
        case None | "":
            return None
        case "node" | "npm":
            return "node"
        case "bun":
            return "bun"
        case "deno":
            return "deno"
        case "yarn":
            return "yarn"
        case "pnpm":
            return "pnpm"
        case _:
            msg = f"Invalid CORDOVA_RUN_EXECUTOR: {env_value!r}. Expected one of: node, bun, deno, yarn, pnpm"
            raise ValueError(msg)


def resolve_project_type() -> "str | None":
    """Resolve the project type override from CORDOVA_RUN_PROJECT_TYPE.

    Returns:
        The lower-cased project type, or None to detect it from ``package.json``.
    """
    env_value = os.getenv("CORDOVA_RUN_PROJECT_TYPE", "").strip().lower()
    return env_value or None


@dataclass
class RuntimeConfig:
    """Runtime execution settings.

    Attributes:
        executor: JavaScript package manager used for build and dev server scripts (auto-detect if None).
        project_type: Project type selecting the serve runner (``vite``, ``angular``, ``custom``).
            Detected from ``package.json`` if None.
        protocol: Protocol the dev server is reachable with.
        run_command: Command starting the dev server when no runner matches the project type.
        build_command: Command building the web assets when no runner matches the project type.
        cordova_path: Explicit path to the ``cordova`` executable.
        health_check: Wait for the dev server to answer HTTP requests before continuing.
        startup_timeout: Seconds to wait for the dev server to answer.
    """

    executor: "ExecutorName | None" = field(default_factory=resolve_executor)
    project_type: "str | None" = field(default_factory=resolve_project_type)
    protocol: Literal["http", "https"] = field(
        default_factory=lambda: "https" if os.getenv("CORDOVA_RUN_PROTOCOL", "http").lower() == "https" else "http"
    )
    run_command: "list[str] | None" = None
    build_command: "list[str] | None" = None
    cordova_path: "str | None" = field(default_factory=lambda: os.getenv("CORDOVA_PATH"))
    health_check: bool = field(default_factory=lambda: os.getenv("CORDOVA_RUN_HEALTH_CHECK", "True") in TRUE_VALUES)
    startup_timeout: float = field(default_factory=lambda: float(os.getenv("CORDOVA_RUN_STARTUP_TIMEOUT", "30")))

    def apply_executor_defaults(self, executor: "ExecutorName") -> None:
        """Fill unset commands with the defaults of ``executor``."""
        executor_commands = {
            "node": {"run": ["npm", "run", "dev"], "build": ["npm", "run", "build"]},
            "bun": {"run": ["bun", "run", "dev"], "build": ["bun", "run", "build"]},
            "deno": {"run": ["deno", "task", "dev"], "build": ["deno", "task", "build"]},
            "yarn": {"run": ["yarn", "dev"], "build": ["yarn", "build"]},
            "pnpm": {"run": ["pnpm", "dev"], "build": ["pnpm", "build"]},
        }

        cmds = executor_commands[executor]
        if self.run_command is None:
            self.run_command = cmds["run"]
        if self.build_command is None:
            self.build_command = cmds["build"]
