"""Concurrent rendering -- 8 threads sharing one Environment.

Every thread renders through the same Environment, so the article layout
and the shared header are read from memory once and reused. Variables are
passed per call, and each render gets its own render context, so there is
no cross-contamination between simultaneous renders.

Run:
    python app.py
"""

from concurrent.futures import ThreadPoolExecutor

from kiln import DictLoader, Environment

TEMPLATES = {
    "header.html": "<header>Daily Notes</header>",
    "article.html": """\
{% include "header.html" %}
<article id="page-{{ page_id }}">
  <h1>{{ title }}</h1>
  <ul>{{ tags(first, second, third) }}</ul>
</article>""",
}

env = Environment(loader=DictLoader(TEMPLATES))


@env.functions.register()
def tags(args: list[str]) -> str:
    return "".join(f"<li>{tag}</li>" for tag in args)


pages = [
    {
        "page_id": i,
        "title": f"Page {i}",
        "first": f"tag-{i}-a",
        "second": f"tag-{i}-b",
        "third": f"tag-{i}-c",
    }
    for i in range(8)
]


def render_page(page: dict) -> str:
    """Render a single page -- called from a worker thread."""
    return env.render("article.html", page)


with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads:\n")
    for i, html in enumerate(results):
        print(f"--- Thread {i} ---")
        print(html)
        print()
    print(f"Cache: {env.cache.stats}")


if __name__ == "__main__":
    main()
