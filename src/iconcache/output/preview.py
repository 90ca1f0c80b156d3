"""Static HTML preview: renders a batch of icons into a self-contained gallery page."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

from jinja2 import Environment, FileSystemLoader

_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_preview(
    icons: Mapping[str, str],
    *,
    requested: Iterable[str] | None = None,
    title: str = "Icon preview",
) -> str:
    """Render ``{identifier: svg}`` into an HTML gallery.

    If ``requested`` is given, identifiers from it that are absent in
    ``icons`` are listed separately as not rendered.
    """
    env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)
    template = env.get_template("preview.html")

    missing = [i for i in dict.fromkeys(requested or []) if i not in icons]

    return template.render(
        title=title,
        icons=[{"identifier": k, "svg": v} for k, v in sorted(icons.items())],
        missing=missing,
    )
