"""Project detection: project type and installed Cordova platforms."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import msgspec

if TYPE_CHECKING:
    from cordova_run.config import RunConfig

__all__ = ("PackageJson", "Project", "detect_project_type")

logger = logging.getLogger("cordova_run")

_TYPE_MARKERS: "tuple[tuple[str, str], ...]" = (
    ("@angular/core", "angular"),
    ("vite", "vite"),
)


class PackageJson(msgspec.Struct, rename="camel"):
    """The parts of ``package.json`` used for detection."""

    name: "str | None" = None
    scripts: "dict[str, str]" = {}
    dependencies: "dict[str, str]" = {}
    dev_dependencies: "dict[str, str]" = {}

    @classmethod
    def load(cls, path: Path) -> "PackageJson | None":
        try:
            return msgspec.json.decode(path.read_bytes(), type=cls)
        except FileNotFoundError:
            return None
        except msgspec.DecodeError as e:
            logger.warning("Ignoring unreadable %s: %s", path, e)
            return None

    def depends_on(self, package: str) -> bool:
        return package in self.dependencies or package in self.dev_dependencies


def detect_project_type(root: Path) -> str:
    """Detect the project type from the dependencies in ``package.json``.

    Returns:
        ``angular``, ``vite`` or ``custom``.
    """
    package = PackageJson.load(root / "package.json")
    if package is None:
        return "custom"
    for marker, project_type in _TYPE_MARKERS:
        if package.depends_on(marker):
            return project_type
    return "custom"


@dataclass
class Project:
    """A Cordova project on disk."""

    directory: Path
    type: str
    platforms_dir: Path

    @classmethod
    def from_config(cls, config: "RunConfig") -> "Project":
        root = config.root_dir
        project_type = config.runtime.project_type or detect_project_type(root)
        logger.debug("Project %s has type %s", root, project_type)
        return cls(directory=root, type=project_type, platforms_dir=config.platforms_dir)

    def installed_platforms(self) -> list[str]:
        """List the platforms Cordova has installed.

        Returns:
            Sorted platform names (``android``, ``ios``, ...).
        """
        if not self.platforms_dir.is_dir():
            return []
        return sorted(entry.name for entry in self.platforms_dir.iterdir() if entry.is_dir())

    @property
    def has_node_modules(self) -> bool:
        return (self.directory / "node_modules").is_dir()
