"""Translation of run options into toolchain arguments and build options."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cordova_run.metadata import CORDOVA_GLOBAL_OPTIONS, OptionGroup

if TYPE_CHECKING:
    from cordova_run.metadata import CommandMetadata, CommandOption
    from cordova_run.options import RunOptions

__all__ = ("BuildOptions", "filter_arguments_for_cordova", "generate_build_options")

# Options consumed by the orchestrator itself; never handed to build/serve.
_ORCHESTRATOR_OPTIONS = frozenset({"list", "build", "noproxy", "x"})
_BUILD_OPTION_FIELDS = frozenset({"address", "port", "livereload_port", "dev_logger_port", "proxy", "livereload"})


@dataclass(frozen=True)
class BuildOptions:
    """Options handed to the build and serve steps.

    Attributes:
        platform: Target platform, used by build scripts that emit per-platform output.
        engine: Runtime the web assets are built for.
        external_address_required: The dev server must be reachable from another device.
        open_browser: Open a desktop browser once the dev server is up.
        extra: Project-type specific options (e.g. ``prod``, ``configuration``, ``mode``).
    """

    platform: "str | None"
    engine: str = "cordova"
    address: str = "0.0.0.0"  # noqa: S104
    port: int = 8100
    livereload_port: int = 35729
    dev_logger_port: int = 53703
    proxy: bool = True
    external_address_required: bool = True
    open_browser: bool = False
    extra: "dict[str, Any]" = field(default_factory=dict)


def _unparse(option: "CommandOption", value: Any) -> list[str]:
    flag = option.toolchain_name or option.name
    if option.kind is bool:
        if value:
            return [f"--{flag}"]
        if value is False and option.default is True:
            return [f"--no-{flag}"]
        return []
    if value is None or value == "":
        return []
    return [f"--{flag}", str(value)]


def filter_arguments_for_cordova(metadata: "CommandMetadata", options: "RunOptions") -> list[str]:
    """Translate ``options`` into the argument vector of ``cordova <command>``.

    The vector is ``[command, platform, *flags, *passthrough]``. Only options in
    the :attr:`~cordova_run.metadata.OptionGroup.CORDOVA` group (plus the
    global ``--verbose``/``--nosave``) are kept, in declared order. Arguments
    given after ``--`` are appended verbatim.

    Returns:
        The argument vector, without the ``cordova`` executable.
    """
    declared = metadata.options_in(OptionGroup.CORDOVA)
    global_options = tuple(opt for opt in CORDOVA_GLOBAL_OPTIONS if metadata.option(opt.name) is None)

    args = [metadata.name]
    if options.platform:
        args.append(options.platform)
    for option in (*declared, *global_options):
        args.extend(_unparse(option, options.get(option.dest)))
    args.extend(options.passthrough)
    return args


def generate_build_options(metadata: "CommandMetadata", options: "RunOptions") -> BuildOptions:
    """Collect the options the build and serve steps understand.

    Returns:
        Build options with runner-specific values in ``extra``.
    """
    extra: dict[str, Any] = {}
    for option in metadata.options:
        if option.in_group(OptionGroup.CORDOVA) or option.name in _ORCHESTRATOR_OPTIONS:
            continue
        if option.dest in _BUILD_OPTION_FIELDS:
            continue
        extra[option.dest] = options.get(option.dest, option.default)

    return BuildOptions(
        platform=options.platform,
        address=options.address,
        port=options.port,
        livereload_port=options.livereload_port,
        dev_logger_port=options.dev_logger_port,
        proxy=options.proxy,
        extra=extra,
    )
