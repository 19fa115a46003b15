"""Test the three render stages: inheritance, inclusion, substitution.

Uses the stateless entry points with an in-memory loader, plus the
on-disk template root for the filesystem path.
"""

from __future__ import annotations

import pytest

from kiln import (
    DictLoader,
    DirectivePatterns,
    Renderer,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UndefinedError,
    UndefinedFunctionError,
    render_template,
    render_template_string,
)

from .conftest import TEMPLATES


def render(source: str, variables: dict | None = None, functions: dict | None = None, **templates):
    return render_template_string(
        source, variables or {}, functions, loader=DictLoader({**TEMPLATES, **templates})
    )


class TestVariables:
    def test_variable(self) -> None:
        assert render("{{ variable }}", {"variable": "works"}) == "works"

    def test_surrounding_text(self) -> None:
        assert render("Hello, {{ name }}!", {"name": "World"}) == "Hello, World!"

    def test_every_expression_substituted(self) -> None:
        """All expressions in a document are replaced, not just the first."""
        result = render("{{ a }}-{{ b }}\n{{ a }}", {"a": "1", "b": "2"})
        assert result == "1-2\n1"

    def test_non_string_value(self) -> None:
        assert render("{{ n }} items", {"n": 3}) == "3 items"

    def test_value_not_rescanned(self) -> None:
        assert render("{{ a }}", {"a": "{{ b }}", "b": "no"}) == "{{ b }}"

    def test_undefined_variable(self) -> None:
        with pytest.raises(UndefinedError) as exc_info:
            render("{{ missing }}")
        assert exc_info.value.name == "missing"

    def test_undefined_after_defined_still_raises(self) -> None:
        with pytest.raises(UndefinedError):
            render("{{ a }} {{ missing }}", {"a": "1"})

    def test_bindings_not_mutated(self) -> None:
        bindings = {"a": "1"}
        render("{{ a }}", bindings)
        assert bindings == {"a": "1"}


class TestFunctions:
    def test_function_no_args(self) -> None:
        assert render("{{ function() }}", functions={"function": lambda args: "works"}) == "works"

    def test_function_args(self) -> None:
        def concat(args: list[str]) -> str:
            return args[0] + args[1] + args[2] + args[3]

        result = render(
            '{{ function("works", "blah","hah", variable) }}',
            {"variable": "gah"},
            {"function": concat},
        )
        assert result == "worksblahhahgah"

    def test_arguments_passed_as_ordered_list(self) -> None:
        calls: list[list[str]] = []

        def record(args: list[str]) -> str:
            calls.append(args)
            return ""

        render('{{ function("a", "b", v) }}', {"v": "c"}, {"function": record})
        assert calls == [["a", "b", "c"]]

    def test_return_value_stringified(self) -> None:
        assert render("{{ count() }}", functions={"count": lambda args: 7}) == "7"

    def test_no_registry(self) -> None:
        with pytest.raises(UndefinedFunctionError) as exc_info:
            render("{{ function() }}")
        assert exc_info.value.name == "function"
        assert "no functions were registered" in str(exc_info.value)

    def test_unknown_function(self) -> None:
        with pytest.raises(UndefinedFunctionError) as exc_info:
            render("{{ upprr() }}", functions={"upper": lambda args: ""})
        assert exc_info.value.suggestion == "upper"

    def test_undefined_argument(self) -> None:
        with pytest.raises(UndefinedError):
            render("{{ f(missing) }}", functions={"f": lambda args: ""})

    def test_unclosed_parentheses(self) -> None:
        with pytest.raises(TemplateSyntaxError):
            render("{{ foo( }}", functions={"foo": lambda args: ""})

    def test_registry_not_mutated(self) -> None:
        functions = {"f": lambda args: "x"}
        render("{{ f() }}", functions=functions)
        assert list(functions) == ["f"]


class TestInheritance:
    def test_block_override(self) -> None:
        result = render(
            '{% extends "parent" %}{% block x %}C{% endblock %}',
            parent="before {% block x %}P{% endblock %} after",
        )
        assert result == "before C after"

    def test_parent_default_kept_without_override(self) -> None:
        result = render('{% extends "base.html" %}{% block body %}B{% endblock %}')
        assert result == "<html><head><title>Site</title></head><body>B</body></html>"

    def test_child_blocks_are_rendered(self) -> None:
        result = render_template("child.html", {"name": "Ada"}, loader=DictLoader(TEMPLATES))
        assert "<body>Hello Ada</body>" in result

    def test_child_text_outside_blocks_dropped(self) -> None:
        result = render(
            '{% extends "parent" %}ignored{% block x %}C{% endblock %}ignored',
            parent="[{% block x %}P{% endblock %}]",
        )
        assert result == "[C]"

    def test_text_before_extends_kept(self) -> None:
        result = render(
            'prefix {% extends "parent" %}{% block x %}C{% endblock %}',
            parent="[{% block x %}P{% endblock %}]",
        )
        assert result == "prefix [C]"

    def test_blocks_before_extends_render_content(self) -> None:
        result = render(
            '{% block t %}T{% endblock %}{% extends "parent" %}{% block x %}C{% endblock %}',
            parent="[{% block x %}P{% endblock %}]",
        )
        assert result == "T[C]"

    def test_unknown_child_block_ignored(self) -> None:
        result = render(
            '{% extends "parent" %}{% block other %}O{% endblock %}',
            parent="[{% block x %}P{% endblock %}]",
        )
        assert result == "[P]"

    def test_multiline_blocks(self) -> None:
        result = render(
            '{% extends "parent" %}\n{% block main %}\nchild\n{% endblock %}\n',
            parent="<main>\n{% block main %}\nparent\n{% endblock %}\n</main>",
        )
        assert result == "<main>\nchild\n</main>"

    def test_blocks_without_extends_render_content(self) -> None:
        assert render("<p>{% block x %}P{% endblock %}</p>") == "<p>P</p>"

    def test_override_expressions_substituted(self) -> None:
        result = render(
            '{% extends "parent" %}{% block x %}{{ name }}{% endblock %}',
            {"name": "Ada"},
            parent="Hi {% block x %}{% endblock %}",
        )
        assert result == "Hi Ada"

    def test_missing_parent(self) -> None:
        with pytest.raises(TemplateNotFoundError):
            render('{% extends "nope.html" %}')


class TestInclusion:
    def test_include(self) -> None:
        result = render('a {% include "partial.html" %} b')
        assert result == "a <p>Partial content</p> b"

    def test_include_spliced_verbatim(self) -> None:
        """Directives inside included text are not processed in that pass."""
        result = render('{% include "nested.html" %}')
        assert result == '<div>{% include "partial.html" %}</div>'

    def test_included_expressions_are_substituted(self) -> None:
        result = render('{% include "greeting" %}', {"name": "Ada"}, greeting="Hi {{ name }}")
        assert result == "Hi Ada"

    def test_include_in_parent(self) -> None:
        result = render(
            '{% extends "parent" %}{% block x %}C{% endblock %}',
            parent='{% include "partial.html" %}{% block x %}{% endblock %}',
        )
        assert result == "<p>Partial content</p>C"

    def test_include_in_block_override(self) -> None:
        result = render(
            '{% extends "parent" %}{% block x %}{% include "partial.html" %}{% endblock %}',
            parent="[{% block x %}{% endblock %}]",
        )
        assert result == "[<p>Partial content</p>]"

    def test_missing_include(self) -> None:
        with pytest.raises(TemplateNotFoundError):
            render('{% include "nope.html" %}')


class TestFilesystem:
    def test_render_template(self, template_root) -> None:
        result = render_template("page.html", {"title": "Home"}, template_root=template_root)
        assert result == "<p>Partial content</p><h1>Home</h1>"

    def test_render_template_string_reads_root(self, template_root) -> None:
        result = render_template_string(
            '{% extends "base.html" %}{% block head %}H{% endblock %}',
            {},
            template_root=template_root,
        )
        assert result == "<html><head>H</head><body>default body</body></html>"

    def test_missing_file(self, template_root) -> None:
        with pytest.raises(TemplateNotFoundError):
            render_template("nope.html", {}, template_root=template_root)


class TestRenderer:
    def test_renderer_direct(self) -> None:
        renderer = Renderer(DirectivePatterns.compile(), DictLoader({"nav.html": "<nav/>"}))
        result = renderer.render('{% include "nav.html" %}{{ title }}', {"title": "Home"})
        assert result == "<nav/>Home"

    def test_first_error_aborts(self) -> None:
        """A failing include stops the render before substitution runs."""
        with pytest.raises(TemplateNotFoundError):
            render('{% include "nope.html" %}{{ missing }}')
