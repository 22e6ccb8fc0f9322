"""The environment a command runs in."""

from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

import anyio
from rich.prompt import Prompt

from cordova_run._utils import console
from cordova_run.config import RunConfig
from cordova_run.project import Project

if TYPE_CHECKING:
    from cordova_run.serve import DevServerProcess
    from cordova_run.toolchain import CordovaToolchain

__all__ = ("RunEnvironment",)


@dataclass
class RunEnvironment:
    """Configuration, project and long-lived resources of one process.

    Attributes:
        config: The root configuration.
        project: The Cordova project being run.
        dev_server: The dev server started for live reload, if any.
    """

    config: RunConfig
    project: Project
    dev_server: "DevServerProcess | None" = None

    @classmethod
    def from_config(cls, config: "RunConfig | None" = None) -> "RunEnvironment":
        config = config or RunConfig()
        return cls(config=config, project=Project.from_config(config))

    @property
    def toolchain(self) -> "CordovaToolchain":
        return self.config.toolchain

    async def prompt(self, message: str) -> str:
        """Ask the user for a value on the console.

        Returns:
            The raw answer.
        """
        # Cancellation must not wait for the user to press Enter
        return await anyio.to_thread.run_sync(partial(Prompt.ask, message, console=console), abandon_on_cancel=True)

    async def stop_dev_server(self) -> None:
        """Stop the dev server in a worker thread, even when the caller is being cancelled."""
        if self.dev_server is not None:
            with anyio.CancelScope(shield=True):
                await anyio.to_thread.run_sync(self.dev_server.stop)
