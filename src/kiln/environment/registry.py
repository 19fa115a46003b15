"""Function registry for the Kiln environment.

Holds functions callable from every template rendered by one Environment:
``{{ now() }}``, ``{{ url_for("static", path) }}``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kiln.environment.core import Environment

# A template function takes the ordered, already-resolved argument values.
TemplateFunction = Callable[[list[str]], Any]


class FunctionRegistry:
    """Dict-like view of an Environment's template functions.

    Supports:
        - env.functions['name'] = func
        - env.functions.update({'name': func})
        - func = env.functions['name']
        - 'name' in env.functions

    Mutations replace the underlying dict instead of changing it in place,
    so renders that already took a snapshot are unaffected.
    """

    __slots__ = ("_env",)

    def __init__(self, env: Environment):
        self._env = env

    def _get_dict(self) -> dict[str, TemplateFunction]:
        return self._env._functions

    def _set_dict(self, d: dict[str, TemplateFunction]) -> None:
        self._env._functions = d

    def __getitem__(self, name: str) -> TemplateFunction:
        return self._get_dict()[name]

    def __setitem__(self, name: str, func: TemplateFunction) -> None:
        new = self._get_dict().copy()
        new[name] = func
        self._set_dict(new)

    def __delitem__(self, name: str) -> None:
        new = self._get_dict().copy()
        del new[name]
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __iter__(self) -> Iterator[str]:
        return iter(self._get_dict())

    def __len__(self) -> int:
        return len(self._get_dict())

    def get(self, name: str, default: TemplateFunction | None = None) -> TemplateFunction | None:
        return self._get_dict().get(name, default)

    def update(self, mapping: Mapping[str, TemplateFunction]) -> None:
        new = self._get_dict().copy()
        new.update(mapping)
        self._set_dict(new)

    def register(self, name: str | None = None) -> Callable[[TemplateFunction], TemplateFunction]:
        """Decorator form of ``env.functions[name] = func``.

        Example:
            >>> @env.functions.register()
            ... def shout(args):
            ...     return args[0].upper()
        """

        def decorator(func: TemplateFunction) -> TemplateFunction:
            self[name or func.__name__] = func
            return func

        return decorator

    def snapshot(self) -> dict[str, TemplateFunction]:
        """Return the current functions; later registrations do not affect it."""
        return self._get_dict()

    def copy(self) -> dict[str, TemplateFunction]:
        return self._get_dict().copy()
