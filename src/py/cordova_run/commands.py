"""The ``run`` and ``emulate`` commands.

A run goes through two phases. :meth:`RunCommand.pre_run` validates the
project, normalizes options, handles ``--list`` and makes sure a platform is
chosen and installed. :meth:`RunCommand.run` loads ``config.xml``, builds or
serves the web assets and hands over to ``cordova run``/``cordova emulate``.
``config.xml`` is restored when the run phase exits, whatever the outcome.
"""

import logging
import signal
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, ClassVar

import anyio

from cordova_run._utils import console, log_info, log_warn
from cordova_run.arguments import BuildOptions, filter_arguments_for_cordova, generate_build_options
from cordova_run.build import build
from cordova_run.config_xml import ConfigStateGuard, ConfigXml
from cordova_run.exceptions import (
    CordovaRunError,
    PlatformInstallationError,
    PreconditionError,
    RunInterruptedError,
    ToolchainExecutableNotFoundError,
    ToolchainExecutionError,
)
from cordova_run.metadata import CommandMetadata, run_metadata
from cordova_run.result import EarlyExit, Failure, RunResult, Success
from cordova_run.serve import (
    RunnerNotFound,
    ServeRunner,
    ServerDetails,
    content_src_url,
    lookup_runner,
    reachability_warning,
    serve,
)

if TYPE_CHECKING:
    from anyio.abc import CancelScope

    from cordova_run.environment import RunEnvironment
    from cordova_run.options import RunOptions

__all__ = ("EmulateCommand", "RunCommand")

logger = logging.getLogger("cordova_run")

ServeFunction = Callable[["RunEnvironment", "ServeRunner | RunnerNotFound", BuildOptions], Awaitable[ServerDetails]]
BuildFunction = Callable[["RunEnvironment", "ServeRunner | RunnerNotFound", BuildOptions], Awaitable[None]]

_TERMINATION_SIGNALS = tuple(getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGHUP") if hasattr(signal, name))


class RunCommand:
    """Run a Cordova project on a device, with optional live reload.

    Args:
        env: The environment to run in.
        serve_fn: Starts the dev server; replaceable for embedding and tests.
        build_fn: Builds the web assets; replaceable for embedding and tests.
    """

    name: ClassVar[str] = "run"

    def __init__(
        self,
        env: "RunEnvironment",
        *,
        serve_fn: ServeFunction = serve,
        build_fn: BuildFunction = build,
    ) -> None:
        self.env = env
        self._serve = serve_fn
        self._build = build_fn
        self._runner: "ServeRunner | RunnerNotFound | None" = None
        self._received_signal: "int | None" = None

    def get_runner(self) -> "ServeRunner | RunnerNotFound":
        """Get the serve runner for the project type, created on first use."""
        if self._runner is None:
            self._runner = lookup_runner(self.env.project.type, self.env.config.executor)
        return self._runner

    def get_metadata(self) -> CommandMetadata:
        """Describe the command, specialized for the project type when a runner exists.

        Returns:
            The command metadata.
        """
        metadata = run_metadata(self.name)
        runner = self.get_runner()
        if isinstance(runner, RunnerNotFound):
            logger.debug("No serve runner for project type %r", runner.project_type)
            return metadata
        return runner.specialize_command_metadata(metadata)

    async def pre_run_checks(self) -> None:
        """Check that the project can be run.

        Raises:
            PreconditionError: If ``config.xml`` or the Cordova CLI is missing.
        """
        config_xml = self.env.config.config_xml_path
        if not config_xml.is_file():
            msg = f"{config_xml} not found. Run this command from the root of a Cordova project."
            raise PreconditionError(msg)
        try:
            self.env.toolchain.resolve_executable()
        except ToolchainExecutableNotFoundError as e:
            msg = "The Cordova CLI was not found. Install it with: npm install -g cordova"
            raise PreconditionError(msg) from e
        if not self.env.project.has_node_modules:
            log_warn("node_modules directory not found. Run your package manager's install command first.")

    async def pre_run(self, options: "RunOptions") -> "EarlyExit | None":
        """Validate and normalize ``options`` before the run phase.

        Returns:
            :class:`EarlyExit` when the command is done (``--list``), else None.
        """
        await self.pre_run_checks()

        if options.noproxy:
            log_warn("The [green]--noproxy[/] option has been deprecated. Please use [green]--no-proxy[/].")
            options.proxy = False

        if options.x:
            options.proxy = False

        if not options.build and options.livereload:
            log_warn("No livereload with [green]--no-build[/].")
            options.livereload = False

        metadata = self.get_metadata()

        if options.list:
            if not options.device and not options.emulator and metadata.name == "emulate":
                options.emulator = True

            args = filter_arguments_for_cordova(metadata, options)
            await self.env.toolchain.invoke(["run", *args[1:]])
            return EarlyExit(0)

        if not options.platform:
            answer = await self.env.prompt("What platform would you like to run ([green]android[/], [green]ios[/])")
            options.platform = answer.strip()

        await self.check_for_platform_installation(options.platform)
        return None

    async def check_for_platform_installation(self, platform: "str | None") -> None:
        """Add ``platform`` to the project if it is not installed yet.

        Raises:
            PlatformInstallationError: If ``cordova platform add`` fails.
        """
        if not platform or platform in self.env.project.installed_platforms():
            return
        log_info(f"Platform [green]{platform}[/] is not installed, adding it")
        try:
            await self.env.toolchain.add_platform(platform)
        except ToolchainExecutionError as e:
            raise PlatformInstallationError(platform, str(e)) from e

    async def run(self, options: "RunOptions") -> None:
        """Build or serve the web assets, then hand over to the Cordova CLI."""
        conf = ConfigXml.load(self.env.project.directory, self.env.config.paths.config_xml)

        with ConfigStateGuard(conf):
            try:
                metadata = self.get_metadata()
                build_options = generate_build_options(metadata, options)

                if options.livereload:
                    details = await self._serve(self.env, self.get_runner(), build_options)
                    warning = reachability_warning(details)
                    if warning:
                        log_warn(f"{warning}\n\n")
                    conf.write_content_src(content_src_url(details))
                    await conf.save()
                elif options.build:
                    await self._build(self.env, self.get_runner(), build_options)

                console.rule(f"[yellow]Running cordova {metadata.name}[/]", align="left")
                await self.env.toolchain.invoke(
                    filter_arguments_for_cordova(metadata, options), log_prefix="[cordova]", wrap=False
                )

                dev_server = self.env.dev_server
                if dev_server is not None and dev_server.is_running:
                    log_info("Dev server is running. Press [bold]Ctrl+C[/] to quit.")
                    await dev_server.wait()
            finally:
                await self.env.stop_dev_server()

    async def execute(self, options: "RunOptions") -> RunResult:
        """Run both phases, turning errors and termination signals into a result.

        Returns:
            :class:`Success`, :class:`EarlyExit` or :class:`Failure`.
        """
        result: "RunResult | None" = None
        async with anyio.create_task_group() as tg:
            tg.start_soon(self._cancel_on_signals, tg.cancel_scope)
            try:
                result = await self._execute(options)
            except CordovaRunError as e:
                result = Failure(e, e.exit_code)
            finally:
                tg.cancel_scope.cancel()

        if self._received_signal is not None:
            error = RunInterruptedError(self._received_signal)
            return Failure(error, error.exit_code)
        return result if result is not None else Success()

    async def _execute(self, options: "RunOptions") -> RunResult:
        early_exit = await self.pre_run(options)
        if early_exit is not None:
            return early_exit
        await self.run(options)
        return Success()

    async def _cancel_on_signals(self, scope: "CancelScope") -> None:
        try:
            with anyio.open_signal_receiver(*_TERMINATION_SIGNALS) as signals:
                async for signum in signals:
                    self._received_signal = signum
                    log_warn("Interrupted, cleaning up...")
                    scope.cancel()
                    return
        except (NotImplementedError, RuntimeError, ValueError) as e:
            # No signal handling outside the main thread or on Windows
            logger.debug("Termination signals not handled: %s", e)


class EmulateCommand(RunCommand):
    """Run a Cordova project on an emulator."""

    name: ClassVar[str] = "emulate"
