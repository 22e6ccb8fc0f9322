"""File system paths configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path

__all__ = ("PathConfig",)


@dataclass
class PathConfig:
    """File system paths configuration.

    Attributes:
        root: The root directory of the Cordova project. Defaults to ``CORDOVA_RUN_ROOT`` or the current directory.
        config_xml: Name of the application descriptor, relative to ``root``.
        platforms_dir: Directory where Cordova installs platforms.
    """

    root: "str | Path" = field(default_factory=lambda: Path(os.getenv("CORDOVA_RUN_ROOT") or Path.cwd()))
    config_xml: "str | Path" = field(default_factory=lambda: Path("config.xml"))
    platforms_dir: "str | Path" = field(default_factory=lambda: Path("platforms"))

    def __post_init__(self) -> None:
        """Normalize path types to Path objects."""
        if isinstance(self.root, str):
            self.root = Path(self.root)
        if isinstance(self.config_xml, str):
            self.config_xml = Path(self.config_xml)
        if isinstance(self.platforms_dir, str):
            self.platforms_dir = Path(self.platforms_dir)
