"""Template loaders for the Kiln environment.

Loaders are the engine's only way to read template files. They implement
``get_source(name)`` returning ``(source, filename)``.

Built-in Loaders:
- `FileSystemLoader`: Load from a template root directory
- `DictLoader`: Load from an in-memory dictionary (testing/embedded)
- `FunctionLoader`: Wrap a callable as a loader

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM templates WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return row.source, f"db://{name}"
    ```

Thread-Safety:
Loaders must be safe for concurrent ``get_source()`` calls. The built-in
loaders keep no mutable state.

"""

from __future__ import annotations

from collections.abc import Callable
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from kiln.environment.exceptions import TemplateLoadError, TemplateNotFoundError


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load templates from beneath a single template root directory.

    Names are relative paths (``"pages/about.html"``). A name that resolves
    outside the root (``"../secrets.txt"``, an absolute path) is treated as
    not found, so templates can only reach files under the root.

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> source, filename = loader.get_source("pages/about.html")
            >>> print(filename)
            'templates/pages/about.html'

    Raises:
        TemplateNotFoundError: If the file does not exist under the root
        TemplateLoadError: If the file exists but cannot be read or decoded

    """

    __slots__ = ("_encoding", "_root")

    def __init__(self, root: str | Path = "templates", encoding: str = "utf-8"):
        self._root = Path(root)
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from the filesystem."""
        path = self._root / name
        try:
            if not path.resolve().is_relative_to(self._root.resolve()):
                raise TemplateNotFoundError(f"Template '{name}' is outside of {self._root}")
            return path.read_text(self._encoding), str(path)
        except UnicodeDecodeError as e:
            raise TemplateLoadError(name, str(e)) from e
        # ValueError: a name no path can hold, such as one with a NUL byte
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError, ValueError):
            raise TemplateNotFoundError(f"Template '{name}' not found in: {self._root}") from None
        except OSError as e:
            raise TemplateLoadError(name, str(e)) from e


class DictLoader:
    """Load templates from an in-memory dictionary.

    Maps template names to source strings. Useful for testing and for
    templates shipped inside application code.

    Example:
            >>> loader = DictLoader({
            ...     "base.html": "<html>{% block content %}{% endblock %}</html>",
            ...     "page.html": '{% extends "base.html" %}{% block content %}Hi{% endblock %}',
            ... })
            >>> Environment(loader=loader).render("page.html", {})
            '<html>Hi</html>'

    Raises:
        TemplateNotFoundError: If template name not in mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg)
        return self._mapping[name], None


class FunctionLoader:
    """Wrap a callable as a template loader.

    The function takes a template name and returns the source, a
    ``(source, filename)`` tuple, or ``None`` when the template does not
    exist.

    Example:
            >>> def load(name):
            ...     if name == "greeting.html":
            ...         return "Hello, {{ name }}!"
            ...     return None
            >>> Environment(loader=FunctionLoader(load)).render("greeting.html", {"name": "World"})
            'Hello, World!'

    Raises:
        TemplateNotFoundError: If ``load_func`` returns ``None``
    """

    __slots__ = ("_load_func",)

    def __init__(
        self,
        load_func: Callable[[str], str | tuple[str, str | None] | None],
    ):
        self._load_func = load_func

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Call the load function and normalize the result."""
        result = self._load_func(name)

        if result is None:
            raise TemplateNotFoundError(f"Template '{name}' not found")

        if isinstance(result, str):
            return result, "<function>"

        return result
