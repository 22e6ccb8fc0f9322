"""Tests for cordova_run.config_xml module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from cordova_run.config_xml import ConfigStateGuard, ConfigXml
from cordova_run.exceptions import ConfigXmlError

WIDGETS_NS = "http://www.w3.org/ns/widgets"

TEMPLATE_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<widget id="io.cordova.hellocordova" version="1.0.0" xmlns="http://www.w3.org/ns/widgets" xmlns:cdv="http://cordova.apache.org/ns/1.0">
    <name>HelloCordova</name>
    <content src="index.html" />
    <allow-intent href="http://*/*" />
</widget>
"""

RECOVERED_XML = """<?xml version='1.0' encoding='utf-8'?>
<widget xmlns="http://www.w3.org/ns/widgets" id="io.example.app">
    <content src="http://192.168.1.5:8100" original-src="index.html" />
    <allow-navigation href="http://192.168.1.5:8100" sessionid="0123456789ab" />
    <allow-navigation href="https://example.com/*" />
</widget>
"""


def _navigations(conf: ConfigXml) -> list[str]:
    return [nav.get("href", "") for nav in conf.root.findall(f"{{{WIDGETS_NS}}}allow-navigation")]


def test_load_reads_content_src(project_dir: Path) -> None:
    conf = ConfigXml.load(project_dir)

    assert conf.content_src == "index.html"
    assert conf.original_content_src == "index.html"
    assert not conf.dirty


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigXmlError, match="file not found"):
        ConfigXml.load(tmp_path)


def test_load_malformed_file(tmp_path: Path) -> None:
    (tmp_path / "config.xml").write_text("<widget><content></widget>", encoding="utf-8")

    with pytest.raises(ConfigXmlError):
        ConfigXml.load(tmp_path)


def test_write_content_src_adds_navigation(project_dir: Path) -> None:
    conf = ConfigXml.load(project_dir)

    conf.write_content_src("http://192.168.1.5:8100")

    assert conf.content_src == "http://192.168.1.5:8100"
    assert conf.dirty
    assert _navigations(conf) == ["http://192.168.1.5:8100"]


def test_reset_restores_original_value(project_dir: Path) -> None:
    conf = ConfigXml.load(project_dir)
    conf.write_content_src("http://192.168.1.5:8100")

    conf.reset_content_src()

    assert conf.content_src == "index.html"
    assert _navigations(conf) == []
    content = conf.root.find(f"{{{WIDGETS_NS}}}content")
    assert content is not None
    assert "original-src" not in content.attrib


@pytest.mark.anyio
async def test_save_keeps_namespaces_and_comments(project_dir: Path) -> None:
    conf = ConfigXml.load(project_dir)
    conf.write_content_src("http://192.168.1.5:8100")

    await conf.save()

    text = (project_dir / "config.xml").read_text(encoding="utf-8")
    assert 'xmlns="http://www.w3.org/ns/widgets"' in text
    assert 'xmlns:cdv="http://cordova.apache.org/ns/1.0"' in text
    assert "<cdv:preference" in text
    assert "<!-- loaded on startup -->" in text
    assert 'src="http://192.168.1.5:8100"' in text
    assert not conf.dirty


@pytest.mark.anyio
async def test_guard_restores_file_after_block(project_dir: Path) -> None:
    with ConfigStateGuard(ConfigXml.load(project_dir)) as conf:
        conf.write_content_src("http://192.168.1.5:8100")
        await conf.save()
        assert ConfigXml.load(project_dir).content_src == "http://192.168.1.5:8100"

    reloaded = ConfigXml.load(project_dir)
    assert reloaded.content_src == "index.html"
    assert _navigations(reloaded) == []
    assert "original-src" not in (project_dir / "config.xml").read_text(encoding="utf-8")


@pytest.mark.anyio
async def test_guard_restores_file_on_error(project_dir: Path) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with ConfigStateGuard(ConfigXml.load(project_dir)) as conf:
            conf.write_content_src("http://192.168.1.5:8100")
            await conf.save()
            raise RuntimeError("boom")

    assert ConfigXml.load(project_dir).content_src == "index.html"


def test_guard_leaves_untouched_file_alone(project_dir: Path) -> None:
    before = (project_dir / "config.xml").read_bytes()

    with ConfigStateGuard(ConfigXml.load(project_dir)):
        pass

    assert (project_dir / "config.xml").read_bytes() == before


def test_guard_restores_only_once(project_dir: Path) -> None:
    guard = ConfigStateGuard(ConfigXml.load(project_dir))
    guard.conf.write_content_src("http://192.168.1.5:8100")

    guard.restore()
    guard.conf.write_content_src("http://10.0.0.2:8100")
    guard.restore()

    assert guard.restored
    assert guard.conf.content_src == "http://10.0.0.2:8100"
    assert ConfigXml.load(project_dir).content_src == "index.html"


def test_content_element_created_for_run_is_removed(tmp_path: Path) -> None:
    (tmp_path / "config.xml").write_text(
        f'<widget xmlns="{WIDGETS_NS}" id="io.example.app"><name>Example</name></widget>', encoding="utf-8"
    )

    with ConfigStateGuard(ConfigXml.load(tmp_path)) as conf:
        conf.write_content_src("http://192.168.1.5:8100")
        conf.save_sync()

    reloaded = ConfigXml.load(tmp_path)
    assert reloaded.content_src is None
    assert reloaded.root.find(f"{{{WIDGETS_NS}}}content") is None


def test_recovers_from_interrupted_run(tmp_path: Path) -> None:
    (tmp_path / "config.xml").write_text(RECOVERED_XML, encoding="utf-8")

    conf = ConfigXml.load(tmp_path)
    assert conf.original_content_src == "index.html"

    with ConfigStateGuard(conf):
        pass

    reloaded = ConfigXml.load(tmp_path)
    assert reloaded.content_src == "index.html"
    assert _navigations(reloaded) == ["https://example.com/*"]


def test_write_content_src_twice_adds_one_navigation(project_dir: Path) -> None:
    conf = ConfigXml.load(project_dir)
    conf.write_content_src("http://192.168.1.5:8100")
    conf.write_content_src("http://192.168.1.5:8100")

    assert _navigations(conf) == ["http://192.168.1.5:8100"]

    conf.reset_content_src()
    assert _navigations(conf) == []


@pytest.mark.anyio
async def test_guard_restores_original_bytes(tmp_path: Path) -> None:
    (tmp_path / "config.xml").write_bytes(TEMPLATE_XML)

    with ConfigStateGuard(ConfigXml.load(tmp_path)) as conf:
        conf.write_content_src("http://192.168.1.5:8100")
        await conf.save()
        assert (tmp_path / "config.xml").read_bytes() != TEMPLATE_XML

    assert (tmp_path / "config.xml").read_bytes() == TEMPLATE_XML


def test_save_sync_unwritable_file(project_dir: Path) -> None:
    conf = ConfigXml.load(project_dir)
    conf.write_content_src("http://192.168.1.5:8100")

    with patch.object(Path, "write_bytes", side_effect=PermissionError(13, "Permission denied")):
        with pytest.raises(ConfigXmlError, match="Could not write .*Permission denied"):
            conf.save_sync()

    assert conf.dirty
