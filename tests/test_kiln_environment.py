"""Test Environment configuration and the function registry."""

from __future__ import annotations

import pytest

from kiln import (
    DictLoader,
    DirectivePatterns,
    Environment,
    FileSystemLoader,
    UndefinedFunctionError,
)


class TestEnvironmentConfiguration:
    def test_default_loader_is_filesystem(self) -> None:
        env = Environment()
        assert isinstance(env.loader, FileSystemLoader)
        assert str(env.loader.root) == "templates"

    def test_template_root(self, template_root) -> None:
        env = Environment(template_root=template_root)
        assert env.render("page.html", {"title": "T"}) == "<p>Partial content</p><h1>T</h1>"

    def test_explicit_loader_wins(self, tmp_path) -> None:
        env = Environment(DictLoader({"a": "dict"}), template_root=tmp_path)
        assert env.render("a") == "dict"

    def test_shared_patterns(self) -> None:
        patterns = DirectivePatterns.compile()
        env = Environment(DictLoader({}), patterns=patterns)
        assert env.patterns is patterns

    def test_custom_expression_syntax(self) -> None:
        patterns = DirectivePatterns.compile(expression=r"\$\{(?P<body>[^}]*)\}")
        env = Environment(DictLoader({}), patterns=patterns)
        assert env.render_string("Hi ${name}", {"name": "Ada"}) == "Hi Ada"

    def test_variables_optional(self, env: Environment) -> None:
        assert env.render("partial.html") == "<p>Partial content</p>"

    def test_repr(self, env: Environment) -> None:
        env.render("partial.html")
        assert repr(env) == "<Environment loader=CountingLoader cached=1 functions=0>"


class TestFunctionRegistry:
    def test_initial_functions(self) -> None:
        env = Environment(DictLoader({}), functions={"one": lambda args: "1"})
        assert env.render_string("{{ one() }}") == "1"

    def test_setitem(self, env: Environment) -> None:
        env.functions["shout"] = lambda args: args[0].upper()
        assert env.render_string('{{ shout("hi") }}') == "HI"
        assert "shout" in env.functions

    def test_update(self, env: Environment) -> None:
        env.functions.update({"a": lambda args: "A", "b": lambda args: "B"})
        assert env.render_string("{{ a() }}{{ b() }}") == "AB"
        assert len(env.functions) == 2

    def test_register_decorator(self, env: Environment) -> None:
        @env.functions.register()
        def join(args: list[str]) -> str:
            return "-".join(args)

        @env.functions.register("first")
        def _first(args: list[str]) -> str:
            return args[0]

        assert env.render_string('{{ join("a", "b") }}/{{ first("x", "y") }}') == "a-b/x"

    def test_delete(self, env: Environment) -> None:
        env.functions["gone"] = lambda args: ""
        del env.functions["gone"]
        with pytest.raises(UndefinedFunctionError):
            env.render_string("{{ gone() }}")

    def test_per_call_functions_override(self, env: Environment) -> None:
        env.functions["name"] = lambda args: "env"
        assert env.render_string("{{ name() }}", {}, {"name": lambda args: "call"}) == "call"
        assert env.render_string("{{ name() }}") == "env"

    def test_per_call_functions_layered(self, env: Environment) -> None:
        env.functions["a"] = lambda args: "A"
        assert env.render_string("{{ a() }}{{ b() }}", {}, {"b": lambda args: "B"}) == "AB"

    def test_copy_on_write(self, env: Environment) -> None:
        snapshot = env.functions.snapshot()
        env.functions["late"] = lambda args: ""
        assert "late" not in snapshot
        assert "late" in env.functions.copy()

    def test_no_functions_anywhere(self, env: Environment) -> None:
        with pytest.raises(UndefinedFunctionError) as exc_info:
            env.render_string("{{ f() }}")
        assert "no functions were registered" in str(exc_info.value)

    def test_empty_per_call_registry_is_a_registry(self, env: Environment) -> None:
        with pytest.raises(UndefinedFunctionError) as exc_info:
            env.render_string("{{ f() }}", {}, {})
        assert "no functions were registered" not in str(exc_info.value)

    def test_function_may_render(self, env: Environment) -> None:
        """Functions can render other templates; the cache lock is re-entrant."""
        env.functions["partial"] = lambda args: env.render(args[0])
        assert env.render_string('<i>{{ partial("partial.html") }}</i>') == (
            "<i><p>Partial content</p></i>"
        )
