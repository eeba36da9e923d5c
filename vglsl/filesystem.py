import logging
import os

from .exceptions import DirectiveSyntaxError, SourceReadError
from .registry import resolve_virtual_path

logger = logging.getLogger(__name__)


class FileReader:
    encoding = "utf-8"

    def read(self, path):
        try:
            with open(path, encoding=self.encoding) as f_obj:
                return f_obj.read()
        except (OSError, UnicodeDecodeError):
            logger.debug("Could not read %s", path, exc_info=True)
            return None


class FakeReader(FileReader):
    """Serves sources from a mapping of path to text or list of lines."""

    def __init__(self, sources):
        self.sources = dict(sources)
        self.requested = []

    def read(self, path):
        self.requested.append(path)
        contents = self.sources.get(path)
        if contents is None:
            return None
        if isinstance(contents, str):
            return contents
        return "".join(contents)


def parse_include_target(directive):
    """
    Extract ``(name, angled)`` from the text following ``#include``.

    Whichever of ``"`` and ``<`` comes first decides the style.
    """
    quote = directive.find('"')
    angle = directive.find("<")
    if quote == -1 and angle == -1:
        raise DirectiveSyntaxError("Invalid include directive")
    if quote != -1 and (angle == -1 or quote < angle):
        start, end_char, angled = quote + 1, '"', False
    else:
        start, end_char, angled = angle + 1, ">", True
    end = directive.find(end_char, start)
    if end == -1:
        raise DirectiveSyntaxError("Unterminated include filename")
    name = directive[start:end]
    if not name.strip():
        raise DirectiveSyntaxError("Empty include filename")
    return name, angled


class IncludeResolver:
    """
    Turns an include target into a path and reads it.

    Quoted includes are always joined with ``base_path``. Angle-bracket
    includes try the virtual path entries first and fall back to
    ``base_path``.
    """

    def __init__(self, base_path, virtual_paths=(), reader=None):
        self.base_path = base_path
        self.virtual_paths = tuple(virtual_paths)
        self.reader = reader or FileReader()

    def resolve(self, name, angled):
        if angled:
            resolved = resolve_virtual_path(self.virtual_paths, name)
            if resolved is not None:
                logger.debug("Virtual include <%s> -> %s", name, resolved)
                return resolved
        if self.base_path:
            return os.path.join(self.base_path, name)
        return name

    def read(self, path):
        text = self.reader.read(path)
        if text is None:
            raise SourceReadError(f"Failed to read include file: {path}")
        return text
