"""Building the web assets before ``cordova run``."""

from typing import TYPE_CHECKING

from cordova_run._utils import console, log_success
from cordova_run.exceptions import BuildError, ToolchainExecutionError
from cordova_run.serve import RunnerNotFound

if TYPE_CHECKING:
    from cordova_run.arguments import BuildOptions
    from cordova_run.environment import RunEnvironment
    from cordova_run.serve import ServeRunner

__all__ = ("build",)


async def build(env: "RunEnvironment", runner: "ServeRunner | RunnerNotFound", options: "BuildOptions") -> None:
    """Run the project's build script.

    Raises:
        BuildError: If the build command exits with a non-zero status.
    """
    if isinstance(runner, RunnerNotFound):
        command = list(env.config.runtime.build_command or [])
    else:
        command = runner.build_command(options)

    console.rule("[yellow]Building web assets[/]", align="left")
    build_env = {"CORDOVA_PLATFORM": options.platform} if options.platform else None
    try:
        await env.config.executor.execute(command, env.project.directory, env=build_env)
    except ToolchainExecutionError as e:
        msg = f"Build failed: {e!s}"
        raise BuildError(msg) from e
    log_success("Web assets built")
