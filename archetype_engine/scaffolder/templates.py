"""Jinja2 template rendering for archetype resources.

Provides the TemplateRenderer class which renders raw resource text with the
resolved property map.  Placeholders use the ``{{ name }}`` interpolation
syntax; unknown names render as empty strings.  An instance is callable with
``(content, properties)`` so it can be handed straight to the generation
driver as its template renderer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import BaseLoader, Environment, select_autoescape


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders resource content through Jinja2.

    The environment keeps trailing newlines so rendered files stay
    byte-compatible with their templates, and registers ``package_path``
    for turning a dotted package name into a directory path.  Callers add
    their own filters through *extra_filters*.
    """

    def __init__(self, extra_filters: Mapping[str, Any] | None = None) -> None:
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=select_autoescape([], default_for_string=False),
            keep_trailing_newline=True,
        )
        self.env.filters["package_path"] = _package_path_filter
        if extra_filters:
            self.env.filters.update(extra_filters)

    def render_string(self, template_string: str, context: Mapping[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(dict(context))

    def __call__(self, content: str, properties: Mapping[str, Any]) -> str:
        return self.render_string(content, properties)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _package_path_filter(value: str) -> str:
    """Convert a dotted package name to a directory path."""
    return value.replace(".", "/")
