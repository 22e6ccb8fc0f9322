"""Invocation of the Cordova command line toolchain."""

import logging
import platform
import shutil
import subprocess
from collections import deque
from collections.abc import AsyncIterator
from pathlib import Path

import anyio
from anyio.abc import ByteReceiveStream
from anyio.streams.text import TextReceiveStream
from rich.markup import escape

from cordova_run._utils import console
from cordova_run.exceptions import ToolchainExecutableNotFoundError, ToolchainExecutionError

__all__ = ("CordovaToolchain",)

logger = logging.getLogger("cordova_run")

_OUTPUT_TAIL_LINES = 20


async def _iter_lines(stream: ByteReceiveStream) -> AsyncIterator[str]:
    """Yield complete lines from a byte stream, decoding as UTF-8."""
    buffer = ""
    async for chunk in TextReceiveStream(stream, errors="replace"):
        buffer += chunk
        *lines, buffer = buffer.split("\n")
        for line in lines:
            yield line.rstrip("\r")
    if buffer:
        yield buffer.rstrip("\r")


class CordovaToolchain:
    """Runs ``cordova`` commands inside a project directory.

    The executable is looked up in the project's ``node_modules/.bin`` first,
    then on ``PATH``.
    """

    bin_name = "cordova"

    def __init__(self, cwd: Path, executable_path: "Path | str | None" = None) -> None:
        self.cwd = cwd
        self.executable_path = executable_path

    def resolve_executable(self) -> str:
        """Locate the ``cordova`` executable.

        Raises:
            ToolchainExecutableNotFoundError: If no executable can be found.

        Returns:
            The path of the executable.
        """
        if self.executable_path:
            return str(self.executable_path)
        local_name = f"{self.bin_name}.cmd" if platform.system() == "Windows" else self.bin_name
        local = self.cwd / "node_modules" / ".bin" / local_name
        if local.exists():
            return str(local)
        path = shutil.which(self.bin_name)
        if path is None:
            raise ToolchainExecutableNotFoundError(self.bin_name)
        return path

    async def invoke(self, args: list[str], *, log_prefix: "str | None" = None, wrap: bool = True) -> None:
        """Run ``cordova`` with ``args`` and stream its output to the console.

        Args:
            args: Arguments following the executable.
            log_prefix: Text printed in front of every output line.
            wrap: Let the console wrap long output lines.

        Raises:
            ToolchainExecutionError: If the command exits with a non-zero status.
        """
        command = [self.resolve_executable(), *args]
        logger.debug("Running %s in %s", " ".join(command), self.cwd)
        tail: deque[str] = deque(maxlen=_OUTPUT_TAIL_LINES)

        async with await anyio.open_process(
            command, cwd=self.cwd, stdin=None, stdout=subprocess.PIPE, stderr=subprocess.STDOUT
        ) as process:
            if process.stdout is not None:
                async for line in _iter_lines(process.stdout):
                    tail.append(line)
                    text = f"[dim]{escape(log_prefix)}[/] {escape(line)}" if log_prefix else escape(line)
                    console.print(text, soft_wrap=not wrap, highlight=False)
            return_code = await process.wait()

        if return_code != 0:
            raise ToolchainExecutionError(command, return_code, "\n".join(tail))

    async def add_platform(self, name: str, *, save: bool = True) -> None:
        """Install a platform into the project (``cordova platform add``)."""
        args = ["platform", "add", name]
        if save:
            args.append("--save")
        await self.invoke(args, log_prefix="[cordova]", wrap=False)
