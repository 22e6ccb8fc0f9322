"""Project-type specific serve runners."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from cordova_run.metadata import CommandMetadata, CommandOption, OptionGroup

if TYPE_CHECKING:
    from cordova_run.arguments import BuildOptions
    from cordova_run.executor import JSExecutor

__all__ = (
    "AngularServeRunner",
    "RunnerNotFound",
    "ServeRunner",
    "ViteServeRunner",
    "lookup_runner",
)

_ADVANCED = frozenset({OptionGroup.ADVANCED})


@dataclass(frozen=True)
class RunnerNotFound:
    """Lookup result for a project type without a serve runner."""

    project_type: str


class ServeRunner(ABC):
    """Knows how to serve and build one type of web project."""

    project_type: ClassVar[str]

    def __init__(self, executor: "JSExecutor") -> None:
        self.executor = executor

    @abstractmethod
    def specialize_command_metadata(self, metadata: CommandMetadata) -> CommandMetadata:
        """Add or override the options this project type understands."""

    @abstractmethod
    def serve_command(self, options: "BuildOptions") -> list[str]:
        """Command starting the dev server."""

    @abstractmethod
    def build_command(self, options: "BuildOptions") -> list[str]:
        """Command building the web assets."""

    def serve_environment(self, options: "BuildOptions") -> dict[str, str]:
        return {"HOST": options.address, "PORT": str(options.port)}


class ViteServeRunner(ServeRunner):
    """Vite projects (``dev`` and ``build`` package scripts)."""

    project_type = "vite"

    def specialize_command_metadata(self, metadata: CommandMetadata) -> CommandMetadata:
        return metadata.with_options(
            CommandOption(name="mode", description="Vite mode to load .env files for", kind=str, groups=_ADVANCED),
        )

    def _mode_args(self, options: "BuildOptions") -> list[str]:
        mode = options.extra.get("mode")
        return ["--mode", mode] if mode else []

    def serve_command(self, options: "BuildOptions") -> list[str]:
        return self.executor.script_command(
            "dev",
            ["--host", options.address, "--port", str(options.port), "--strictPort", *self._mode_args(options)],
        )

    def build_command(self, options: "BuildOptions") -> list[str]:
        return self.executor.script_command("build", self._mode_args(options))


class AngularServeRunner(ServeRunner):
    """Angular CLI projects (``start`` and ``build`` package scripts)."""

    project_type = "angular"

    def specialize_command_metadata(self, metadata: CommandMetadata) -> CommandMetadata:
        return metadata.with_options(
            CommandOption(name="prod", description="Build the application for production"),
            CommandOption(
                name="configuration",
                description="Specify the Angular build configuration",
                kind=str,
                aliases=("c",),
                groups=_ADVANCED,
            ),
        )

    def _configuration_args(self, options: "BuildOptions") -> list[str]:
        configuration = options.extra.get("configuration")
        if not configuration and options.extra.get("prod"):
            configuration = "production"
        return ["--configuration", configuration] if configuration else []

    def serve_command(self, options: "BuildOptions") -> list[str]:
        return self.executor.script_command(
            "start",
            ["--host", options.address, "--port", str(options.port), *self._configuration_args(options)],
        )

    def build_command(self, options: "BuildOptions") -> list[str]:
        return self.executor.script_command("build", self._configuration_args(options))


_RUNNERS: "dict[str, type[ServeRunner]]" = {
    ViteServeRunner.project_type: ViteServeRunner,
    AngularServeRunner.project_type: AngularServeRunner,
}


def lookup_runner(project_type: str, executor: "JSExecutor") -> "ServeRunner | RunnerNotFound":
    """Create the serve runner for ``project_type``.

    Returns:
        The runner, or :class:`RunnerNotFound` when the project type has none.
    """
    runner_cls = _RUNNERS.get(project_type)
    if runner_cls is None:
        return RunnerNotFound(project_type)
    return runner_cls(executor)
