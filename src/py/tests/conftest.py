from collections.abc import Generator
from pathlib import Path

import pytest

from cordova_run.config import PathConfig, RunConfig, RuntimeConfig

# Environment variables that may affect test behavior - clear before each test
_CORDOVA_RUN_ENV_VARS = [
    "CORDOVA_RUN_ROOT",
    "CORDOVA_RUN_EXECUTOR",
    "CORDOVA_RUN_PROJECT_TYPE",
    "CORDOVA_RUN_PROTOCOL",
    "CORDOVA_RUN_HEALTH_CHECK",
    "CORDOVA_RUN_STARTUP_TIMEOUT",
    "CORDOVA_RUN_LOG_LEVEL",
    "CORDOVA_RUN_ADDRESS",
    "CORDOVA_RUN_PORT",
    "CORDOVA_PATH",
]

CONFIG_XML = """<?xml version="1.0" encoding="UTF-8"?>
<widget id="io.example.app" version="1.0.0" xmlns="http://www.w3.org/ns/widgets" xmlns:cdv="http://cordova.apache.org/ns/1.0">
    <name>Example</name>
    <!-- loaded on startup -->
    <content src="index.html" />
    <access origin="*" />
    <platform name="android">
        <cdv:preference name="AndroidXEnabled" value="true" />
    </platform>
</widget>
"""

PACKAGE_JSON = """{
  "name": "example",
  "scripts": {"dev": "vite", "build": "vite build"},
  "devDependencies": {"vite": "^5.0.0", "cordova": "^12.0.0"}
}
"""


@pytest.fixture(autouse=True)
def clean_cordova_run_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear Cordova-Run environment variables before each test for isolation."""
    for var in _CORDOVA_RUN_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A Vite based Cordova project with the android platform installed."""
    (tmp_path / "config.xml").write_text(CONFIG_XML, encoding="utf-8")
    (tmp_path / "package.json").write_text(PACKAGE_JSON, encoding="utf-8")
    (tmp_path / "platforms" / "android").mkdir(parents=True)
    (tmp_path / "node_modules").mkdir()
    return tmp_path


@pytest.fixture
def run_config(project_dir: Path) -> RunConfig:
    return RunConfig(
        paths=PathConfig(root=project_dir),
        runtime=RuntimeConfig(executor="node", health_check=False),
    )
