"""Cordova-Run exception classes."""

__all__ = [
    "BuildError",
    "ConfigXmlError",
    "CordovaRunError",
    "DevServerError",
    "PlatformInstallationError",
    "PreconditionError",
    "RunInterruptedError",
    "ToolchainExecutableNotFoundError",
    "ToolchainExecutionError",
]


class CordovaRunError(Exception):
    """Base exception for Cordova-Run related errors."""

    exit_code: int = 1


class PreconditionError(CordovaRunError):
    """Raised when the project or environment is not ready for a run."""


class ToolchainExecutableNotFoundError(PreconditionError):
    """Raised when an executable (``cordova``, ``npm``, ...) is not found."""

    def __init__(self, executable: str) -> None:
        super().__init__(f"Executable {executable!r} not found.")
        self.executable = executable


class ToolchainExecutionError(CordovaRunError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: list[str], return_code: int, output: str = "") -> None:
        message = f"Command {command!r} failed with return code {return_code}."
        if output:
            message = f"{message}\nOutput: {output}"
        super().__init__(message)
        self.command = command
        self.return_code = return_code
        self.output = output


class BuildError(CordovaRunError):
    """Raised when the application build step fails."""


class DevServerError(CordovaRunError):
    """Raised when the dev server fails to start or stop."""

    def __init__(
        self,
        message: str,
        command: "list[str] | None" = None,
        return_code: "int | None" = None,
        stderr: "str | None" = None,
        stdout: "str | None" = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr
        self.stdout = stdout


class PlatformInstallationError(CordovaRunError):
    """Raised when the requested platform is not installed and cannot be added."""

    def __init__(self, platform: str, reason: str = "") -> None:
        message = f"Platform {platform!r} is not installed."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.platform = platform


class ConfigXmlError(CordovaRunError):
    """Raised when ``config.xml`` cannot be loaded or written."""

    def __init__(self, path: str, reason: str, action: str = "load") -> None:
        super().__init__(f"Could not {action} {path!r}: {reason}")
        self.path = path


class RunInterruptedError(CordovaRunError):
    """Raised when the run is cancelled by a termination signal."""

    def __init__(self, signum: int) -> None:
        super().__init__(f"Run interrupted by signal {signum}.")
        self.signum = signum
        self.exit_code = 128 + signum
