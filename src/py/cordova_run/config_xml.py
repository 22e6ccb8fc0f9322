"""Reading and rewriting the Cordova ``config.xml`` descriptor.

During live reload the app must load its root content from the dev server
instead of the bundled ``index.html``. :class:`ConfigXml` rewrites the
``<content src="...">`` field and :class:`ConfigStateGuard` puts the original
value back when the run ends, however it ends.
"""

import io
import logging
import uuid
import xml.etree.ElementTree as ET
from pathlib import Path
from types import TracebackType

import anyio

from cordova_run.exceptions import ConfigXmlError

__all__ = ("ConfigStateGuard", "ConfigXml")

logger = logging.getLogger("cordova_run")

_ORIGINAL_SRC_ATTR = "original-src"
_SESSION_ATTR = "sessionid"


def _register_namespaces(data: bytes) -> None:
    """Register the document's namespace prefixes so serialization keeps them."""
    for _, (prefix, uri) in ET.iterparse(io.BytesIO(data), events=("start-ns",)):
        try:
            ET.register_namespace(prefix, uri)
        except ValueError:
            logger.debug("Cannot register namespace prefix %r for %s", prefix, uri)


class ConfigXml:
    """The ``config.xml`` of a Cordova project."""

    def __init__(self, path: Path, root: ET.Element, source: "bytes | None" = None) -> None:
        self.path = path
        self.root = root
        self.session_id = uuid.uuid4().hex[:12]
        self.dirty = False
        self._source = source
        self._source_tree = ET.tostring(root, encoding="unicode")

        namespace, _, _ = root.tag[1:].rpartition("}") if root.tag.startswith("{") else ("", "", "")
        self._namespace = namespace
        content = self._content_element()
        self._had_content = content is not None
        self._recovered = content is not None and content.get(_ORIGINAL_SRC_ATTR) is not None
        if content is None:
            self.original_content_src: "str | None" = None
        elif self._recovered:
            # A previous run was killed before restoring the descriptor.
            self.original_content_src = content.get(_ORIGINAL_SRC_ATTR)
            logger.warning("Recovering content src %r left over by an interrupted run", self.original_content_src)
        else:
            self.original_content_src = content.get("src")

    @classmethod
    def load(cls, project_dir: Path, filename: "str | Path" = "config.xml") -> "ConfigXml":
        """Parse ``config.xml`` from a project directory.

        Raises:
            ConfigXmlError: If the file is missing or is not well-formed XML.

        Returns:
            The loaded descriptor.
        """
        path = Path(project_dir) / filename
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise ConfigXmlError(str(path), "file not found") from e
        try:
            _register_namespaces(data)
            parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
            root = ET.fromstring(data, parser=parser)
        except ET.ParseError as e:
            raise ConfigXmlError(str(path), str(e)) from e
        return cls(path, root, data)

    def _tag(self, name: str) -> str:
        return f"{{{self._namespace}}}{name}" if self._namespace else name

    def _content_element(self) -> "ET.Element | None":
        return self.root.find(self._tag("content"))

    @property
    def content_src(self) -> "str | None":
        content = self._content_element()
        return None if content is None else content.get("src")

    def write_content_src(self, url: str) -> None:
        """Point ``<content src>`` at ``url`` and allow the app to navigate to it."""
        content = self._content_element()
        if content is None:
            content = ET.SubElement(self.root, self._tag("content"))
        if self.original_content_src is not None and content.get(_ORIGINAL_SRC_ATTR) is None:
            content.set(_ORIGINAL_SRC_ATTR, self.original_content_src)
        content.set("src", url)

        navigations = self.root.findall(self._tag("allow-navigation"))
        if not any(nav.get("href") == url for nav in navigations):
            ET.SubElement(self.root, self._tag("allow-navigation"), {"href": url, _SESSION_ATTR: self.session_id})
        self.dirty = True

    def reset_content_src(self) -> None:
        """Restore ``<content src>`` to its value before this run touched it."""
        content = self._content_element()
        if content is not None:
            if not self._had_content:
                self.root.remove(content)
                self.dirty = True
            elif self.original_content_src is None:
                if "src" in content.attrib:
                    del content.attrib["src"]
                    self.dirty = True
            elif content.get("src") != self.original_content_src or _ORIGINAL_SRC_ATTR in content.attrib:
                content.set("src", self.original_content_src)
                content.attrib.pop(_ORIGINAL_SRC_ATTR, None)
                self.dirty = True

        for nav in self.root.findall(self._tag("allow-navigation")):
            session = nav.get(_SESSION_ATTR)
            if session == self.session_id or (self._recovered and session is not None):
                self.root.remove(nav)
                self.dirty = True

    def to_bytes(self) -> bytes:
        if self._source is not None and ET.tostring(self.root, encoding="unicode") == self._source_tree:
            # Same tree as on disk: keep the declaration, quoting and namespace declarations as written
            return self._source
        return ET.tostring(self.root, encoding="utf-8", xml_declaration=True) + b"\n"

    async def save(self) -> None:
        """Write the descriptor back to disk.

        Raises:
            ConfigXmlError: If the file cannot be written.
        """
        try:
            await anyio.Path(self.path).write_bytes(self.to_bytes())
        except OSError as e:
            raise ConfigXmlError(str(self.path), e.strerror or str(e), action="write") from e
        self.dirty = False

    def save_sync(self) -> None:
        """Write the descriptor back to disk, blocking."""
        try:
            self.path.write_bytes(self.to_bytes())
        except OSError as e:
            raise ConfigXmlError(str(self.path), e.strerror or str(e), action="write") from e
        self.dirty = False


class ConfigStateGuard:
    """Restores ``config.xml`` when the guarded block exits.

    The restoration runs exactly once, on normal completion, on error and on
    cancellation, and writes synchronously so it also completes while the
    event loop is shutting down.

    Example::

        with ConfigStateGuard(ConfigXml.load(project_dir)) as conf:
            conf.write_content_src("http://192.168.1.5:8100")
            await conf.save()
    """

    def __init__(self, conf: ConfigXml) -> None:
        self.conf = conf
        self.restored = False

    def __enter__(self) -> ConfigXml:
        return self.conf

    def __exit__(
        self,
        exc_type: "type[BaseException] | None",
        exc_val: "BaseException | None",
        exc_tb: "TracebackType | None",
    ) -> None:
        self.restore()

    def restore(self) -> None:
        if self.restored:
            return
        self.restored = True
        self.conf.reset_content_src()
        if self.conf.dirty:
            self.conf.save_sync()
            logger.debug("Restored content src of %s to %r", self.conf.path, self.conf.original_content_src)
