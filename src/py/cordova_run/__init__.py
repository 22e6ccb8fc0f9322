"""Cordova-Run: run Cordova apps on devices and emulators with live reload.

Basic usage from Python:
    import anyio

    from cordova_run import RunCommand, RunEnvironment, RunOptions

    env = RunEnvironment.from_config()
    result = anyio.run(RunCommand(env).execute, RunOptions(platform="android", livereload=True))

From the command line:
    cordova-run run android --livereload -- --buildFlag='-UseModernBuildSystem=0'
"""

from cordova_run.commands import EmulateCommand, RunCommand
from cordova_run.config import LoggingConfig, PathConfig, RunConfig, RuntimeConfig
from cordova_run.config_xml import ConfigStateGuard, ConfigXml
from cordova_run.environment import RunEnvironment
from cordova_run.options import RunOptions
from cordova_run.result import EarlyExit, Failure, RunResult, Success

__all__ = (
    "ConfigStateGuard",
    "ConfigXml",
    "EarlyExit",
    "EmulateCommand",
    "Failure",
    "LoggingConfig",
    "PathConfig",
    "RunCommand",
    "RunConfig",
    "RunEnvironment",
    "RunOptions",
    "RunResult",
    "RuntimeConfig",
    "Success",
)
