"""The option set of a single run."""

import builtins
from dataclasses import dataclass, field, fields
from typing import Any

from cordova_run.config import DEFAULT_ADDRESS, DEFAULT_DEV_LOGGER_PORT, DEFAULT_LIVERELOAD_PORT, DEFAULT_PORT

__all__ = ("RunOptions",)


@dataclass
class RunOptions:
    """Options of one ``run``/``emulate`` invocation.

    Normalization during the pre-run phase writes these fields in place. One
    instance belongs to one run.

    Attributes:
        platform: Platform to run, prompted for when missing.
        noproxy: Deprecated alias of ``--no-proxy``.
        x: Abbreviated ``--no-proxy``.
        extra: Options declared by a project-type runner (e.g. ``prod``, ``mode``), keyed by dest.
        passthrough: Arguments after ``--``, forwarded verbatim to the toolchain.
    """

    platform: "str | None" = None
    list: bool = False
    build: bool = True
    livereload: bool = False
    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    livereload_port: int = DEFAULT_LIVERELOAD_PORT
    dev_logger_port: int = DEFAULT_DEV_LOGGER_PORT
    proxy: bool = True
    noproxy: bool = False
    x: bool = False
    debug: bool = False
    release: bool = False
    device: bool = False
    emulator: bool = False
    cordova_target: "str | None" = None
    build_config: "str | None" = None
    verbose: bool = False
    nosave: bool = False
    extra: "dict[str, Any]" = field(default_factory=dict)
    passthrough: "builtins.list[str]" = field(default_factory=builtins.list)

    def get(self, dest: str, default: Any = None) -> Any:
        """Read a declared field or a runner-specific ``extra`` option.

        Returns:
            The value, or ``default`` when the option is unknown or unset.
        """
        if dest in _FIELD_NAMES:
            return getattr(self, dest)
        return self.extra.get(dest, default)


_FIELD_NAMES = frozenset(f.name for f in fields(RunOptions)) - {"extra", "passthrough"}
