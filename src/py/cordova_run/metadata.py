"""Declared inputs and options of the ``run`` and ``emulate`` commands.

The metadata drives three things: help text, the arguments forwarded to
``cordova`` (options in :attr:`OptionGroup.CORDOVA`) and the options handed to
the build and serve steps (everything else).
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from cordova_run.config import DEFAULT_ADDRESS, DEFAULT_DEV_LOGGER_PORT, DEFAULT_LIVERELOAD_PORT, DEFAULT_PORT

__all__ = (
    "COMMON_SERVE_OPTIONS",
    "CORDOVA_GLOBAL_OPTIONS",
    "CommandInput",
    "CommandMetadata",
    "CommandOption",
    "OptionGroup",
    "run_metadata",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class OptionGroup(str, Enum):
    """Capability groups an option can belong to."""

    CORDOVA = "cordova"
    """Understood by the Cordova toolchain and forwarded to it."""
    ADVANCED = "advanced"
    HIDDEN = "hidden"
    DEPRECATED = "deprecated"


def _to_dest(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


@dataclass(frozen=True)
class CommandInput:
    name: str
    description: str = ""


@dataclass(frozen=True)
class CommandOption:
    """A declared command line option.

    Attributes:
        name: Option name as typed on the command line, without dashes.
        description: Help text.
        kind: Value type, ``bool`` for flags.
        default: Default value.
        groups: Capability groups the option belongs to.
        aliases: Single-letter aliases.
        hint: Short tag shown next to the help text.
        toolchain_name: Name used when forwarding to the toolchain, if different.
        dest: Attribute name on :class:`~cordova_run.options.RunOptions`; derived from ``name``.
    """

    name: str
    description: str = ""
    kind: type = bool
    default: Any = None
    groups: "frozenset[OptionGroup]" = frozenset()
    aliases: "tuple[str, ...]" = ()
    hint: "str | None" = None
    toolchain_name: "str | None" = None
    dest: str = ""

    def __post_init__(self) -> None:
        if not self.dest:
            object.__setattr__(self, "dest", _to_dest(self.name))

    def in_group(self, group: OptionGroup) -> bool:
        return group in self.groups


@dataclass(frozen=True)
class CommandMetadata:
    """Description of a command's inputs and options."""

    name: str
    description: str = ""
    long_description: str = ""
    inputs: "tuple[CommandInput, ...]" = ()
    options: "tuple[CommandOption, ...]" = ()
    example_commands: "tuple[str, ...]" = field(default=())

    def option(self, name: str) -> "CommandOption | None":
        """Find an option by name.

        Returns:
            The option, or None if it is not declared.
        """
        return next((opt for opt in self.options if opt.name == name), None)

    def options_in(self, group: OptionGroup) -> "tuple[CommandOption, ...]":
        return tuple(opt for opt in self.options if opt.in_group(group))

    def with_options(self, *options: CommandOption) -> "CommandMetadata":
        """Return a copy where ``options`` override same-named options and new ones are appended.

        Overridden options keep their position so forwarded arguments stay in declared order.

        Returns:
            The specialized metadata.
        """
        overrides = {opt.name: opt for opt in options}
        merged = [overrides.pop(opt.name, opt) for opt in self.options]
        merged.extend(opt for opt in options if opt.name in overrides)
        return replace(self, options=tuple(merged))


_CORDOVA = frozenset({OptionGroup.CORDOVA})
_ADVANCED_CORDOVA = frozenset({OptionGroup.ADVANCED, OptionGroup.CORDOVA})

COMMON_SERVE_OPTIONS: "tuple[CommandOption, ...]" = (
    CommandOption(
        name="address",
        description="Use specific address for the dev server",
        kind=str,
        default=DEFAULT_ADDRESS,
        groups=frozenset({OptionGroup.ADVANCED}),
    ),
    CommandOption(
        name="port",
        description="Use specific port for HTTP",
        kind=int,
        default=DEFAULT_PORT,
        aliases=("p",),
        groups=frozenset({OptionGroup.ADVANCED}),
    ),
    CommandOption(
        name="livereload",
        description="Spin up dev server to live-reload www files",
        aliases=("l",),
    ),
    CommandOption(
        name="livereload-port",
        description="Use specific port for live-reload",
        kind=int,
        default=DEFAULT_LIVERELOAD_PORT,
        aliases=("r",),
        groups=frozenset({OptionGroup.ADVANCED}),
    ),
    CommandOption(
        name="dev-logger-port",
        description="Use specific port for dev server communication",
        kind=int,
        default=DEFAULT_DEV_LOGGER_PORT,
        groups=frozenset({OptionGroup.ADVANCED}),
    ),
    CommandOption(
        name="proxy",
        description="Do not add proxies",
        default=True,
        groups=frozenset({OptionGroup.ADVANCED}),
    ),
    CommandOption(
        name="noproxy",
        description="Do not add proxies",
        groups=frozenset({OptionGroup.HIDDEN, OptionGroup.DEPRECATED}),
    ),
    CommandOption(
        name="x",
        description="Do not add proxies",
        groups=frozenset({OptionGroup.HIDDEN}),
    ),
)

CORDOVA_GLOBAL_OPTIONS: "tuple[CommandOption, ...]" = (
    CommandOption(name="verbose", groups=_CORDOVA),
    CommandOption(name="nosave", groups=_CORDOVA),
)
"""Options every ``cordova`` subcommand understands."""

_EXAMPLE_COMMANDS = (
    "ios",
    "ios --prod --release",
    "ios --device --prod --release -- --developmentTeam=ABCD --codeSignIdentity='iPhone Developer'",
    "android",
    "android --buildConfig=build.json",
    "android --prod --release -- -- --keystore=filename.keystore --alias=myalias",
    "android --prod --release -- -- --minSdkVersion=21",
)


def run_metadata(name: str = "run") -> CommandMetadata:
    """Build the base metadata of the ``run`` (or ``emulate``) command.

    Returns:
        Metadata with no project-type specialization applied.
    """
    target = "an emulator" if name == "emulate" else "a connected device"
    return CommandMetadata(
        name=name,
        description=f"Run a Cordova project on {target}",
        long_description=(
            f"Like running `cordova {name}` directly, but also uses the project's dev server for "
            "live reload.\n\nAdditional options can be passed to the Cordova CLI after the `--` separator."
        ),
        example_commands=_EXAMPLE_COMMANDS,
        inputs=(CommandInput(name="platform", description="The platform to run (e.g. android, ios)"),),
        options=(
            CommandOption(name="list", description="List all available Cordova targets", groups=_CORDOVA),
            CommandOption(name="build", description="Do not invoke the build/serve step", default=True),
            *COMMON_SERVE_OPTIONS,
            CommandOption(name="debug", description="Mark as a debug build", groups=_CORDOVA, hint="cordova"),
            CommandOption(name="release", description="Mark as a release build", groups=_CORDOVA, hint="cordova"),
            CommandOption(name="device", description="Deploy build to a device", groups=_CORDOVA, hint="cordova"),
            CommandOption(
                name="emulator", description="Deploy build to an emulator", groups=_CORDOVA, hint="cordova"
            ),
            CommandOption(
                name="cordova-target",
                description="Deploy build to a device (use --list to see all)",
                kind=str,
                groups=_ADVANCED_CORDOVA,
                hint="cordova",
                toolchain_name="target",
            ),
            CommandOption(
                name="buildConfig",
                description="Use the specified build configuration",
                kind=str,
                groups=_ADVANCED_CORDOVA,
                hint="cordova",
            ),
        ),
    )
