"""Dev server process management."""

import atexit
import os
import signal
import subprocess
import threading
import time
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING, Any

import anyio
import httpx

from cordova_run._utils import console, log_fail, log_success
from cordova_run.exceptions import DevServerError

if TYPE_CHECKING:
    from cordova_run.executor import JSExecutor

__all__ = ("DevServerProcess",)


class DevServerProcess:
    """Manages the development server process.

    Starts the dev server in its own process group so the package manager and
    everything it spawns (node, vite, ng, ...) stop together. All instances are
    stopped at interpreter exit.
    """

    _instances: "list[DevServerProcess]" = []
    _atexit_registered: bool = False

    def __init__(self, executor: "JSExecutor") -> None:
        """Initialize the dev server process manager.

        Args:
            executor: The JavaScript executor to use for running the server.
        """
        self.process: "subprocess.Popen[Any] | None" = None
        self.command: list[str] = []
        self._lock = threading.Lock()
        self._executor = executor

        DevServerProcess._instances.append(self)

        if not DevServerProcess._atexit_registered:
            atexit.register(DevServerProcess._cleanup_all_instances)
            DevServerProcess._atexit_registered = True

    @classmethod
    def _cleanup_all_instances(cls) -> None:
        """Stop all tracked DevServerProcess instances."""
        for instance in list(cls._instances):
            with suppress(Exception):
                instance.stop()

    @property
    def is_running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def start(self, command: list[str], cwd: "Path | str", env: "dict[str, str] | None" = None) -> None:
        """Start the dev server.

        Args:
            command: The command to run (e.g., ["npm", "run", "dev"]).
            cwd: The working directory for the process.
            env: Extra environment variables for the process.

        Raises:
            DevServerError: If the process fails to start or exits immediately.
        """
        cwd = Path(cwd)
        try:
            with self._lock:
                if self.is_running:
                    return

                self.command = command
                self.process = self._executor.run(command, cwd, env=env)
                if self.process.poll() is not None:
                    console.print(
                        "[red]Dev server exited immediately.[/]\n"
                        f"[red]Command:[/] {' '.join(command)}\n"
                        f"[red]Exit code:[/] {self.process.returncode}"
                    )
                    msg = f"Dev server failed to start (exit {self.process.returncode})"
                    raise DevServerError(msg, command=command, return_code=self.process.returncode)  # noqa: TRY301
        except DevServerError:
            raise
        except Exception as e:
            console.print(f"[red]Failed to start dev server: {e!s}[/]")
            msg = f"Failed to start dev server: {e!s}"
            raise DevServerError(msg, command=command) from e

    async def wait_until_ready(self, url: str, timeout: float) -> None:
        """Poll ``url`` until the dev server answers.

        Raises:
            DevServerError: If the process exits or does not answer within ``timeout`` seconds.
        """
        deadline = time.monotonic() + timeout
        async with httpx.AsyncClient(timeout=httpx.Timeout(1.0), verify=False) as client:  # noqa: S501
            while time.monotonic() < deadline:
                if not self.is_running:
                    exit_code = self.process.returncode if self.process else None
                    msg = f"Dev server exited before it was ready (exit {exit_code})"
                    raise DevServerError(msg, command=self.command, return_code=exit_code)
                try:
                    await client.get(url)
                except httpx.HTTPError:
                    await anyio.sleep(0.25)
                else:
                    log_success(f"Dev server responded at {url}")
                    return
        log_fail("Dev server health check failed")
        msg = f"Dev server did not respond at {url} within {timeout:g}s"
        raise DevServerError(msg, command=self.command)

    async def wait(self) -> "int | None":
        """Wait until the dev server process exits.

        Returns:
            The exit code, or None if no process was started.
        """
        while self.process is not None and self.process.poll() is None:
            await anyio.sleep(0.5)
        return self.process.returncode if self.process is not None else None

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the dev server and all its child processes.

        Args:
            timeout: Seconds to wait for graceful shutdown before killing.

        Raises:
            DevServerError: If the process fails to stop.
        """
        try:
            with self._lock:
                self._terminate_process_group(timeout)
                with suppress(ValueError):
                    DevServerProcess._instances.remove(self)
        except Exception as e:
            console.print(f"[red]Failed to stop dev server: {e!s}[/]")
            msg = f"Failed to stop dev server: {e!s}"
            raise DevServerError(msg) from e

    def _terminate_process_group(self, timeout: float) -> None:
        """Terminate the process group, waiting and killing if needed.

        The process is started with ``start_new_session=True`` so its pid is the group id.
        """
        if not self.process or self.process.poll() is not None:
            return
        pid = self.process.pid
        try:
            os.killpg(pid, signal.SIGTERM)
        except AttributeError:
            self.process.terminate()
        except ProcessLookupError:
            pass
        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self._force_kill_process_group()
            self.process.wait(timeout=1.0)

    def _force_kill_process_group(self) -> None:
        """Force kill the process group if still alive."""
        if not self.process:
            return
        pid = self.process.pid
        try:
            os.killpg(pid, signal.SIGKILL)
        except AttributeError:
            self.process.kill()
        except ProcessLookupError:
            pass
