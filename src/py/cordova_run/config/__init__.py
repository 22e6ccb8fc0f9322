"""Cordova-Run Configuration.

The configuration is split into logical groups:

- PathConfig: File system paths of the Cordova project
- RuntimeConfig: Package manager, dev server and toolchain settings
- LoggingConfig: Console verbosity
- RunConfig: Root configuration combining all sub-configs

Example usage::

    # Defaults, project in the current directory
    RunConfig()

    # Explicit project and package manager
    RunConfig(paths=PathConfig(root="app"), runtime=RuntimeConfig(executor="pnpm"))
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cordova_run.config._constants import (
    DEFAULT_ADDRESS,
    DEFAULT_DEV_LOGGER_PORT,
    DEFAULT_LIVERELOAD_PORT,
    DEFAULT_PORT,
    LOCAL_ADDRESSES,
    TRUE_VALUES,
    is_local_address,
)
from cordova_run.config._logging import LoggingConfig
from cordova_run.config._paths import PathConfig
from cordova_run.config._runtime import RuntimeConfig

if TYPE_CHECKING:
    from cordova_run.executor import JSExecutor
    from cordova_run.toolchain import CordovaToolchain

logger = logging.getLogger("cordova_run")

__all__ = (
    "DEFAULT_ADDRESS",
    "DEFAULT_DEV_LOGGER_PORT",
    "DEFAULT_LIVERELOAD_PORT",
    "DEFAULT_PORT",
    "LOCAL_ADDRESSES",
    "TRUE_VALUES",
    "LoggingConfig",
    "PathConfig",
    "RunConfig",
    "RuntimeConfig",
    "is_local_address",
)

_LOCKFILES: "tuple[tuple[str, str], ...]" = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("deno.lock", "deno"),
    ("package-lock.json", "node"),
)


@dataclass
class RunConfig:
    """Root configuration.

    Attributes:
        paths: File system paths configuration.
        runtime: Runtime execution settings.
        logging: Logging configuration (True/None uses defaults).
    """

    paths: PathConfig = field(default_factory=PathConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    logging: "LoggingConfig | bool | None" = None

    _executor_instance: "JSExecutor | None" = field(default=None, repr=False)
    _toolchain_instance: "CordovaToolchain | None" = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Normalize configurations and apply executor defaults."""
        if not isinstance(self.logging, LoggingConfig):
            self.logging = LoggingConfig()
        if self.runtime.executor is None:
            self.runtime.executor = self._detect_executor()
        self.runtime.apply_executor_defaults(self.runtime.executor)

    def _detect_executor(self) -> str:
        """Pick the package manager from the lockfile present in the project root.

        Returns:
            The executor name, ``node`` when no lockfile is found.
        """
        for lockfile, executor in _LOCKFILES:
            if (self.root_dir / lockfile).exists():
                logger.debug("Detected %s from %s", executor, lockfile)
                return executor
        return "node"

    @property
    def logging_config(self) -> LoggingConfig:
        """Get the normalized logging configuration.

        Returns:
            The LoggingConfig instance.
        """
        if isinstance(self.logging, LoggingConfig):
            return self.logging
        return LoggingConfig()

    @property
    def root_dir(self) -> Path:
        """Get the Cordova project root.

        Returns:
            The configured root directory.
        """
        return self.paths.root if isinstance(self.paths.root, Path) else Path(self.paths.root)

    @property
    def config_xml_path(self) -> Path:
        """Get the absolute path of ``config.xml``.

        Returns:
            The descriptor path rooted at ``root_dir``.
        """
        path = Path(self.paths.config_xml)
        return path if path.is_absolute() else self.root_dir / path

    @property
    def platforms_dir(self) -> Path:
        path = Path(self.paths.platforms_dir)
        return path if path.is_absolute() else self.root_dir / path

    @property
    def executor(self) -> "JSExecutor":
        """Get the JavaScript executor instance.

        Returns:
            The configured JavaScript executor.
        """
        if self._executor_instance is None:
            self._executor_instance = self._create_executor()
        return self._executor_instance

    @property
    def toolchain(self) -> "CordovaToolchain":
        """Get the Cordova toolchain instance.

        Returns:
            The toolchain bound to the project root.
        """
        if self._toolchain_instance is None:
            from cordova_run.toolchain import CordovaToolchain

            self._toolchain_instance = CordovaToolchain(self.root_dir, executable_path=self.runtime.cordova_path)
        return self._toolchain_instance

    def _create_executor(self) -> "JSExecutor":
        """Create the appropriate executor based on runtime config.

        Returns:
            An instance of the selected JSExecutor.
        """
        from cordova_run.executor import BunExecutor, DenoExecutor, NodeExecutor, PnpmExecutor, YarnExecutor

        match self.runtime.executor:
            case "bun":
                return BunExecutor()
            case "deno":
                return DenoExecutor()
            case "yarn":
                return YarnExecutor()
            case "pnpm":
                return PnpmExecutor()
            case _:
                return NodeExecutor()
