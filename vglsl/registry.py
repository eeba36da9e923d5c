import logging
import threading

logger = logging.getLogger(__name__)


class VirtualPathRegistry:
    """
    Ordered alias to real path prefix mapping for angle-bracket includes.

    ``<Engine/lighting.glsl>`` resolves to ``real_prefix + "/lighting.glsl"``
    when ``Engine`` is registered. Mutators silently ignore invalid input.
    """

    def __init__(self, entries=()):
        self._lock = threading.Lock()
        self._entries = {}
        for alias, real_prefix in entries:
            self.add(alias, real_prefix)

    @staticmethod
    def _valid_alias(alias):
        return isinstance(alias, str) and alias != "" and "/" not in alias

    def add(self, alias, real_prefix):
        if not self._valid_alias(alias) or not isinstance(real_prefix, str):
            logger.debug("Ignoring virtual include path %r -> %r",
                         alias, real_prefix)
            return
        with self._lock:
            self._entries[alias] = real_prefix
        logger.debug("Virtual include path %s -> %s", alias, real_prefix)

    def remove(self, alias):
        if not isinstance(alias, str):
            return
        with self._lock:
            removed = self._entries.pop(alias, None)
        if removed is not None:
            logger.debug("Removed virtual include path %s", alias)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def snapshot(self):
        """Return an immutable copy of the entries, in insertion order."""
        with self._lock:
            return tuple(self._entries.items())

    def resolve(self, include_path):
        return resolve_virtual_path(self.snapshot(), include_path)

    def __contains__(self, alias):
        with self._lock:
            return alias in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __iter__(self):
        return iter(self.snapshot())


def resolve_virtual_path(entries, include_path):
    """
    Map ``alias/rest`` onto ``real_prefix/rest`` using ``entries``.

    Returns ``None`` when the path has no ``/`` or its first segment is
    not a registered alias.
    """
    alias, slash, _ = include_path.partition("/")
    if not slash:
        return None
    for name, real_prefix in entries:
        if name == alias:
            return real_prefix + include_path[len(alias):]
    return None


default_registry = VirtualPathRegistry()


def add_virtual_include_path(alias, real_prefix):
    default_registry.add(alias, real_prefix)


def remove_virtual_include_path(alias):
    default_registry.remove(alias)


def clear_virtual_include_paths():
    default_registry.clear()
