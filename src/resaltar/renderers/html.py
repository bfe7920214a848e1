"""HTML output adapter.

Turns fragments into inline-styled elements:

    <span class="modiftxt" style="color:#fc038c;">function</span>

Fragment text is escaped with escape_presentation, so spaces and newlines
survive HTML whitespace collapsing (``&nbsp;`` and ``<br>``).

Thread Safety:
    HtmlRenderer holds only immutable settings. One instance can be shared.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Iterable

from resaltar.annotator import Annotator
from resaltar.errors import RenderError
from resaltar.renderers.fragments import Fragment, render
from resaltar.utils.text import escape_presentation

_ATTRIBUTE_NAME = re.compile(r"[A-Za-z_:][-A-Za-z0-9_:.]*\Z")
_CSS_PROPERTY = re.compile(r"-?[A-Za-z_][-A-Za-z0-9_]*\Z")
_TAG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9-]*\Z")


class HtmlRenderer:
    """Render an Annotator to a string of styled HTML elements.

    Usage:
        >>> from resaltar import Annotator, match_all
        >>> a = Annotator("end x")
        >>> _ = a.style("end", color="#b81870")
        >>> match_all(a, "end", "end")
        1
        >>> HtmlRenderer().render(a)
        '<span class="modiftxt" style="color:#b81870;">end</span><span class="modiftxt">&nbsp;x</span>'

    """

    __slots__ = ("_css_class", "_tag", "_escape")

    def __init__(
        self,
        *,
        css_class: str | None = "modiftxt",
        tag: str = "span",
        escape: Callable[[str], str] = escape_presentation,
    ) -> None:
        """Initialize renderer.

        Args:
            css_class: Class attribute put on every element (None for none)
            tag: Element name
            escape: Escaping applied to fragment text
        """
        if not _TAG_NAME.match(tag):
            raise RenderError(f"Invalid tag name: {tag!r}")
        self._css_class = css_class
        self._tag = tag
        self._escape = escape

    def render(self, annotator: Annotator) -> str:
        """Render annotator marks and styles to HTML."""
        extra = (("class", self._css_class),) if self._css_class else ()
        return self.render_fragments(render(annotator, extra=extra, escape=self._escape))

    def render_fragments(self, fragments: Iterable[Fragment]) -> str:
        """Serialize already-rendered fragments.

        Raises:
            RenderError: An attribute or CSS property name cannot be written
                safely.
        """
        tag = self._tag
        parts: list[str] = []
        for fragment in fragments:
            attrs = list(fragment.extra)
            if fragment.style:
                attrs.append(("style", self._style_value(fragment)))
            parts.append(f"<{tag}{self._attributes(attrs)}>{fragment.text}</{tag}>")
        return "".join(parts)

    @staticmethod
    def _style_value(fragment: Fragment) -> str:
        for name, _value in fragment.style:
            if not _CSS_PROPERTY.match(name):
                raise RenderError(f"Invalid CSS property {name!r} for label {fragment.label!r}")
        return fragment.css()

    @staticmethod
    def _attributes(attrs: list[tuple[str, str]]) -> str:
        out = []
        for name, value in attrs:
            if not _ATTRIBUTE_NAME.match(name):
                raise RenderError(f"Invalid attribute name: {name!r}")
            out.append(f' {name}="{html.escape(value, quote=True)}"')
        return "".join(out)
