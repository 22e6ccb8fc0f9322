"""JavaScript runtime executors for build and dev server scripts.

This module provides executor classes for different JavaScript package
managers (npm, Bun, Deno, Yarn, pnpm) to run the project's package scripts.
"""

import os
import platform
import shutil
import signal
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any, ClassVar

import anyio

from cordova_run.exceptions import ToolchainExecutableNotFoundError, ToolchainExecutionError

# Only defined on Windows
_CREATE_NEW_PROCESS_GROUP: int = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)


def _kill_process_group(pid: int, kill: "Callable[[], None]") -> None:
    """Kill the process group led by ``pid``, or call ``kill`` where groups are unavailable."""
    try:
        os.killpg(pid, signal.SIGKILL)
    except AttributeError:
        kill()
    except ProcessLookupError:
        pass


class JSExecutor(ABC):
    """Runs package scripts through one JavaScript package manager."""

    bin_name: ClassVar[str]

    def __init__(self, executable_path: "Path | str | None" = None) -> None:
        self.executable_path = executable_path

    @abstractmethod
    def run(self, args: list[str], cwd: Path, env: "dict[str, str] | None" = None) -> "subprocess.Popen[Any]":
        """Start a long-running command."""

    @abstractmethod
    async def execute(self, args: list[str], cwd: Path, env: "dict[str, str] | None" = None) -> None:
        """Run a command to completion, raising on a non-zero exit.

        Cancelling the caller kills the command and everything it started.
        """

    def _resolve_executable(self) -> str:
        if self.executable_path:
            return str(self.executable_path)
        path = shutil.which(self.bin_name)
        if path is None:
            raise ToolchainExecutableNotFoundError(self.bin_name)
        return path

    def script_command(self, script: str, extra_args: "list[str] | None" = None) -> list[str]:
        """Build the command running a ``package.json`` script with extra arguments.

        Returns:
            The full command, starting with the package manager binary.
        """
        return [self.bin_name, "run", script, *(extra_args or [])]


class CommandExecutor(JSExecutor):
    """Executor invoking the package manager binary directly."""

    def _command(self, args: list[str]) -> list[str]:
        executable = self._resolve_executable()
        # Commands from script_command() already start with the binary name
        if args and Path(args[0]).name == Path(executable).name:
            return [executable, *args[1:]]
        if args and args[0] == self.bin_name:
            return [executable, *args[1:]]
        return [executable, *args]

    def run(self, args: list[str], cwd: Path, env: "dict[str, str] | None" = None) -> "subprocess.Popen[Any]":
        command = self._command(args)
        # A new process group lets the whole tree (package manager, node, vite, ...)
        # be terminated together with os.killpg().
        kwargs: dict[str, Any] = {
            "cwd": cwd,
            "env": {**os.environ, **env} if env else None,
            "stdout": None,  # inherit for live output
            "stderr": None,
        }
        if platform.system() == "Windows":
            kwargs["shell"] = True
            kwargs["creationflags"] = _CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["shell"] = False
            kwargs["start_new_session"] = True
        return subprocess.Popen(command, **kwargs)

    async def execute(self, args: list[str], cwd: Path, env: "dict[str, str] | None" = None) -> None:
        command = self._command(args)
        kwargs: dict[str, Any] = {"cwd": cwd, "env": {**os.environ, **env} if env else None}
        if platform.system() == "Windows":
            kwargs["creationflags"] = _CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True
        process = await anyio.open_process(command, stdin=None, stdout=None, stderr=subprocess.PIPE, **kwargs)
        try:
            stderr = b""
            if process.stderr is not None:
                async for chunk in process.stderr:
                    stderr += chunk
            return_code = await process.wait()
        except BaseException:
            with anyio.CancelScope(shield=True):
                _kill_process_group(process.pid, process.kill)
                await process.wait()
            raise
        finally:
            with anyio.CancelScope(shield=True):
                await process.aclose()
        if return_code != 0:
            raise ToolchainExecutionError(command, return_code, stderr.decode(errors="replace"))


class NodeExecutor(CommandExecutor):
    """npm (Node.js)."""

    bin_name = "npm"

    def script_command(self, script: str, extra_args: "list[str] | None" = None) -> list[str]:
        # npm only forwards arguments that follow "--" to the script
        if extra_args:
            return [self.bin_name, "run", script, "--", *extra_args]
        return [self.bin_name, "run", script]


class BunExecutor(CommandExecutor):
    """Bun."""

    bin_name = "bun"


class DenoExecutor(CommandExecutor):
    """Deno, running ``deno.json`` tasks."""

    bin_name = "deno"

    def script_command(self, script: str, extra_args: "list[str] | None" = None) -> list[str]:
        return [self.bin_name, "task", script, *(extra_args or [])]


class YarnExecutor(CommandExecutor):
    """Yarn."""

    bin_name = "yarn"

    def script_command(self, script: str, extra_args: "list[str] | None" = None) -> list[str]:
        return [self.bin_name, script, *(extra_args or [])]


class PnpmExecutor(CommandExecutor):
    """pnpm."""

    bin_name = "pnpm"

    def script_command(self, script: str, extra_args: "list[str] | None" = None) -> list[str]:
        return [self.bin_name, script, *(extra_args or [])]
