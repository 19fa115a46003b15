"""Shared template cache.

Maps a canonical template path to the file's content. Entries are added on
first load and never evicted or invalidated: template files are assumed
static for the life of the cache, so the table only grows.

Thread-Safety:
One re-entrant lock guards the table. ``get()`` takes it for each lookup;
the cache-backed render entry points hold it for the whole render via
``lock()``, which serialises cached renders against each other. An entry is
stored only after a complete read, so a failed load leaves nothing behind.

"""

from __future__ import annotations

import logging
import posixpath
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kiln.environment.loaders import Loader

logger = logging.getLogger(__name__)


def canonical_name(name: str) -> str:
    """Normalise a template path so equivalent spellings share one entry.

    Example:
        >>> canonical_name("pages/../partials\\\\nav.html")
        'partials/nav.html'
    """
    return posixpath.normpath(name.replace("\\", "/"))


class TemplateCache:
    """Lazily populated ``path -> content`` table in front of a loader.

    Attributes:
        stats: Running ``hits`` / ``misses`` counters

    Example:
        >>> cache = TemplateCache(FileSystemLoader("templates"))
        >>> cache.get("base.html")      # reads templates/base.html
        >>> cache.get("./base.html")    # same entry, no I/O
        >>> cache.stats
        {'hits': 1, 'misses': 1}

    """

    __slots__ = ("_entries", "_loader", "_lock", "stats")

    def __init__(self, loader: Loader):
        self._loader = loader
        self._entries: dict[str, str] = {}
        self._lock = threading.RLock()
        self.stats: dict[str, int] = {"hits": 0, "misses": 0}

    def get(self, name: str) -> str:
        """Return template content, reading it through the loader on a miss.

        Raises:
            TemplateNotFoundError: If the loader cannot find the template
            TemplateLoadError: If the template cannot be read
        """
        key = canonical_name(name)
        with self._lock:
            content = self._entries.get(key)
            if content is not None:
                self.stats["hits"] += 1
                logger.debug(f"Template cache hit: {key}")
                return content

            self.stats["misses"] += 1
            content, filename = self._loader.get_source(key)
            self._entries[key] = content
            logger.debug(f"Template cache miss: loaded {key} from {filename or '<memory>'}")
            return content

    @contextmanager
    def lock(self) -> Iterator[TemplateCache]:
        """Hold the cache exclusively for the duration of the block."""
        with self._lock:
            yield self

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_name(name) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)
