"""Starting the dev server for live reload."""

from typing import TYPE_CHECKING

from cordova_run._utils import console
from cordova_run.serve._details import (
    PORT_FORWARDING_HINT,
    ServerDetails,
    content_src_url,
    reachability_warning,
    resolve_external_address,
)
from cordova_run.serve._process import DevServerProcess
from cordova_run.serve._runner import AngularServeRunner, RunnerNotFound, ServeRunner, ViteServeRunner, lookup_runner

if TYPE_CHECKING:
    from cordova_run.arguments import BuildOptions
    from cordova_run.environment import RunEnvironment

__all__ = (
    "PORT_FORWARDING_HINT",
    "AngularServeRunner",
    "DevServerProcess",
    "RunnerNotFound",
    "ServeRunner",
    "ServerDetails",
    "ViteServeRunner",
    "content_src_url",
    "lookup_runner",
    "reachability_warning",
    "resolve_external_address",
    "serve",
)


async def serve(
    env: "RunEnvironment", runner: "ServeRunner | RunnerNotFound", options: "BuildOptions"
) -> ServerDetails:
    """Start the project's dev server and report where a device can reach it.

    Without a runner for the project type, the configured ``run_command`` is
    started with ``HOST`` and ``PORT`` in its environment.

    Raises:
        DevServerError: If the server fails to start or never answers.

    Returns:
        The connection details of the running server.
    """
    config = env.config
    if isinstance(runner, RunnerNotFound):
        command = list(config.runtime.run_command or [])
        server_env = {"HOST": options.address, "PORT": str(options.port)}
    else:
        command = runner.serve_command(options)
        server_env = runner.serve_environment(options)

    console.rule("[yellow]Starting dev server with live reload[/]", align="left")
    process = DevServerProcess(config.executor)
    env.dev_server = process
    process.start(command, env.project.directory, env=server_env)

    if config.runtime.health_check:
        probe_host = "127.0.0.1" if options.address in {"0.0.0.0", "::", ""} else options.address  # noqa: S104
        if ":" in probe_host:
            probe_host = f"[{probe_host}]"
        url = f"{config.runtime.protocol}://{probe_host}:{options.port}"
        await process.wait_until_ready(url, config.runtime.startup_timeout)

    external_address, accessible = resolve_external_address(options.address)
    return ServerDetails(
        protocol=config.runtime.protocol,
        external_address=external_address,
        external_port=options.port,
        externally_accessible=accessible,
    )
