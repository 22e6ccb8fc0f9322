from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, TypeVar

from click import Choice, ClickException, Command, Context, argument, group, option, pass_context, version_option
from click import Path as ClickPath

from cordova_run.__metadata__ import __version__
from cordova_run.config import DEFAULT_ADDRESS, DEFAULT_DEV_LOGGER_PORT, DEFAULT_LIVERELOAD_PORT, DEFAULT_PORT

if TYPE_CHECKING:
    from cordova_run.commands import RunCommand

F = TypeVar("F", bound=Callable[..., Any])

_PASSTHROUGH_KEY = "cordova_run.passthrough"


class PassthroughCommand(Command):
    """Command keeping everything after the first ``--`` for the Cordova CLI."""

    def parse_args(self, ctx: Context, args: list[str]) -> list[str]:
        if "--" in args:
            index = args.index("--")
            ctx.meta[_PASSTHROUGH_KEY] = args[index + 1 :]
            args = args[:index]
        return super().parse_args(ctx, args)


@group(name="cordova-run")
@version_option(__version__, prog_name="cordova-run")
def cordova_group() -> None:
    """Run Cordova apps with live reload."""


def run_options(func: F) -> F:
    """Attach the options shared by ``run`` and ``emulate``."""
    decorators = [
        argument("platform", required=False),
        option("--list", "list_targets", is_flag=True, default=False, help="List all available Cordova targets."),
        option("--build/--no-build", default=True, show_default=True, help="Invoke the build/serve step."),
        option("-l", "--livereload", is_flag=True, default=False, help="Spin up dev server to live-reload www files."),
        option(
            "--address",
            default=DEFAULT_ADDRESS,
            envvar="CORDOVA_RUN_ADDRESS",
            show_default=True,
            help="Use specific address for the dev server.",
        ),
        option(
            "-p",
            "--port",
            type=int,
            default=DEFAULT_PORT,
            envvar="CORDOVA_RUN_PORT",
            show_default=True,
            help="Use specific port for HTTP.",
        ),
        option(
            "-r",
            "--livereload-port",
            type=int,
            default=DEFAULT_LIVERELOAD_PORT,
            show_default=True,
            help="Use specific port for live-reload.",
        ),
        option(
            "--dev-logger-port",
            type=int,
            default=DEFAULT_DEV_LOGGER_PORT,
            show_default=True,
            help="Use specific port for dev server communication.",
        ),
        option("--proxy/--no-proxy", default=True, show_default=True, help="Add proxies to the dev server."),
        option("--noproxy", is_flag=True, default=False, hidden=True),
        option("-x", "disable_proxy", is_flag=True, default=False, hidden=True),
        option("--debug", is_flag=True, default=False, help="Mark as a debug build."),
        option("--release", is_flag=True, default=False, help="Mark as a release build."),
        option("--device", is_flag=True, default=False, help="Deploy build to a device."),
        option("--emulator", is_flag=True, default=False, help="Deploy build to an emulator."),
        option("--cordova-target", default=None, help="Deploy build to a device (use --list to see all)."),
        option("--buildConfig", "build_config", default=None, help="Use the specified build configuration."),
        option("--prod", is_flag=True, default=False, help="Build the application for production (Angular)."),
        option("-c", "--configuration", default=None, help="Angular build configuration."),
        option("--mode", default=None, help="Vite mode to load .env files for."),
        option("--nosave", is_flag=True, default=False, help="Do not save platforms to config.xml."),
        option("--verbose", is_flag=True, default=False, help="Enable verbose output."),
        option(
            "--project-dir",
            type=ClickPath(dir_okay=True, file_okay=False, path_type=Path),
            default=None,
            help="The root of the Cordova project. Defaults to the current directory.",
        ),
        option(
            "--executor",
            type=Choice(["node", "bun", "deno", "yarn", "pnpm"]),
            default=None,
            help="Package manager running the build and dev server scripts.",
        ),
        pass_context,
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _execute_command(
    command_cls: "type[RunCommand]",
    ctx: Context,
    platform: "Optional[str]",
    list_targets: bool,
    build: bool,
    livereload: bool,
    address: str,
    port: int,
    livereload_port: int,
    dev_logger_port: int,
    proxy: bool,
    noproxy: bool,
    disable_proxy: bool,
    debug: bool,
    release: bool,
    device: bool,
    emulator: bool,
    cordova_target: "Optional[str]",
    build_config: "Optional[str]",
    prod: bool,
    configuration: "Optional[str]",
    mode: "Optional[str]",
    nosave: bool,
    verbose: bool,
    project_dir: "Optional[Path]",
    executor: "Optional[str]",
) -> None:
    import anyio

    from cordova_run._utils import configure_logging, log_fail
    from cordova_run.config import LoggingConfig, PathConfig, RunConfig, RuntimeConfig
    from cordova_run.environment import RunEnvironment
    from cordova_run.options import RunOptions
    from cordova_run.result import Failure

    try:
        config = RunConfig(
            paths=PathConfig(root=project_dir) if project_dir else PathConfig(),
            runtime=RuntimeConfig(executor=executor) if executor else RuntimeConfig(),  # type: ignore[arg-type]
            logging=LoggingConfig(level="verbose") if verbose else None,
        )
    except ValueError as e:
        raise ClickException(str(e)) from e
    configure_logging(config.logging_config)

    extra: dict[str, Any] = {}
    if prod:
        extra["prod"] = True
    if configuration:
        extra["configuration"] = configuration
    if mode:
        extra["mode"] = mode

    options = RunOptions(
        platform=platform,
        list=list_targets,
        build=build,
        livereload=livereload,
        address=address,
        port=port,
        livereload_port=livereload_port,
        dev_logger_port=dev_logger_port,
        proxy=proxy,
        noproxy=noproxy,
        x=disable_proxy,
        debug=debug,
        release=release,
        device=device,
        emulator=emulator,
        cordova_target=cordova_target,
        build_config=build_config,
        verbose=verbose,
        nosave=nosave,
        extra=extra,
        passthrough=list(ctx.meta.get(_PASSTHROUGH_KEY, [])),
    )

    command = command_cls(RunEnvironment.from_config(config))
    result = anyio.run(command.execute, options)
    if isinstance(result, Failure):
        log_fail(str(result.error))
    ctx.exit(result.exit_code)


@cordova_group.command(
    name="run",
    cls=PassthroughCommand,
    help="Run a Cordova project on a connected device. Pass extra Cordova CLI options after `--`.",
)
@run_options
def run_command(ctx: Context, **kwargs: Any) -> None:
    """Run a Cordova project on a connected device."""
    from cordova_run.commands import RunCommand

    _execute_command(RunCommand, ctx, **kwargs)


@cordova_group.command(
    name="emulate",
    cls=PassthroughCommand,
    help="Run a Cordova project on an emulator. Pass extra Cordova CLI options after `--`.",
)
@run_options
def emulate_command(ctx: Context, **kwargs: Any) -> None:
    """Run a Cordova project on an emulator."""
    from cordova_run.commands import EmulateCommand

    _execute_command(EmulateCommand, ctx, **kwargs)
