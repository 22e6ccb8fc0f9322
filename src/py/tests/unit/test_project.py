"""Tests for cordova_run.project and cordova_run.environment modules."""

from pathlib import Path
from unittest.mock import Mock, patch

import anyio
import pytest

from cordova_run.config import PathConfig, RunConfig, RuntimeConfig
from cordova_run.environment import RunEnvironment
from cordova_run.project import PackageJson, Project, detect_project_type


def test_package_json_load(project_dir: Path) -> None:
    package = PackageJson.load(project_dir / "package.json")

    assert package is not None
    assert package.name == "example"
    assert package.scripts["build"] == "vite build"
    assert package.depends_on("vite")
    assert not package.depends_on("react")


def test_package_json_missing(tmp_path: Path) -> None:
    assert PackageJson.load(tmp_path / "package.json") is None


def test_package_json_invalid(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{not json", encoding="utf-8")

    assert PackageJson.load(tmp_path / "package.json") is None


@pytest.mark.parametrize(
    ("package_json", "expected"),
    [
        ('{"dependencies": {"@angular/core": "^17.0.0"}, "devDependencies": {"vite": "^5.0.0"}}', "angular"),
        ('{"devDependencies": {"vite": "^5.0.0"}}', "vite"),
        ('{"dependencies": {"react": "^18.0.0"}}', "custom"),
    ],
)
def test_detect_project_type(tmp_path: Path, package_json: str, expected: str) -> None:
    (tmp_path / "package.json").write_text(package_json, encoding="utf-8")

    assert detect_project_type(tmp_path) == expected


def test_detect_project_type_without_package_json(tmp_path: Path) -> None:
    assert detect_project_type(tmp_path) == "custom"


def test_project_from_config(run_config: RunConfig, project_dir: Path) -> None:
    project = Project.from_config(run_config)

    assert project.directory == project_dir
    assert project.type == "vite"
    assert project.installed_platforms() == ["android"]
    assert project.has_node_modules


def test_project_type_override(project_dir: Path) -> None:
    config = RunConfig(
        paths=PathConfig(root=project_dir),
        runtime=RuntimeConfig(executor="node", project_type="angular"),
    )

    assert Project.from_config(config).type == "angular"


def test_installed_platforms_without_platforms_dir(tmp_path: Path) -> None:
    project = Project(directory=tmp_path, type="custom", platforms_dir=tmp_path / "platforms")

    assert project.installed_platforms() == []
    assert not project.has_node_modules


@pytest.mark.anyio
async def test_environment_prompt(run_config: RunConfig) -> None:
    env = RunEnvironment.from_config(run_config)

    with patch("cordova_run.environment.Prompt.ask", return_value="ios") as mock_ask:
        assert await env.prompt("What platform?") == "ios"

    assert mock_ask.call_args.args[0] == "What platform?"


@pytest.mark.anyio
async def test_environment_stop_without_dev_server(run_config: RunConfig) -> None:
    env = RunEnvironment.from_config(run_config)

    await env.stop_dev_server()

    assert env.dev_server is None
    assert env.toolchain is run_config.toolchain


@pytest.mark.anyio
async def test_environment_stops_dev_server_when_cancelled(run_config: RunConfig) -> None:
    env = RunEnvironment.from_config(run_config)
    env.dev_server = Mock()

    with anyio.CancelScope() as scope:
        scope.cancel()
        await env.stop_dev_server()

    env.dev_server.stop.assert_called_once_with()
