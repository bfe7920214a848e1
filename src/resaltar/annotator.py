"""The Annotator: one text buffer, its marks and its styles.

Matchers write marks into an Annotator, the region rewriter re-scans parts of
it through child annotators, and the renderer turns it into fragments.

Lifecycle:
    - Created with optional initial text (default empty)
    - set_text() replaces the text and clears marks; styles are kept so a
      grammar's style table can be reused across documents
    - clear() drops marks without touching the text

Usage:
    >>> from resaltar import Annotator, match_all
    >>> a = Annotator("function example end")
    >>> match_all(a, "end", "end")
    1
    >>> [(m.start, m.end, m.label) for m in a.marks]
    [(17, 20, 'end')]

Thread Safety:
    An Annotator belongs to one highlighting task at a time. There is no
    internal locking.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

from resaltar.config import get_highlight_config
from resaltar.graphemes import GraphemeIndex
from resaltar.marks import Mark, MarkStore
from resaltar.styles import StyleRegistry, StyleRule
from resaltar.utils.text import normalize_input

if TYPE_CHECKING:
    from resaltar.renderers.fragments import Fragment


class Annotator:
    """Text buffer plus a mark store and a style registry.

    All public coordinates are grapheme indices. Raw code-point offsets only
    appear in mark_raw(), which matchers use to hand over substring-search
    results.

    Attributes:
        text: Current text (after input normalization, when enabled)
        index: GraphemeIndex of the current text
        marks: MarkStore holding the current marks
        styles: StyleRegistry (shared with child annotators)
        depth: Nesting depth; 0 for annotators created by callers

    """

    __slots__ = ("_text", "_index", "_marks", "_styles", "_depth")

    def __init__(
        self,
        text: str = "",
        *,
        styles: StyleRegistry | None = None,
        normalize: bool | None = None,
    ) -> None:
        """Initialize annotator.

        Args:
            text: Initial text
            styles: Style registry to use (a new empty one if None). Passing a
                registry shares it; it is not copied.
            normalize: Decode editor markup entities in text. None follows
                HighlightConfig.normalize_input.
        """
        self._styles = styles if styles is not None else StyleRegistry()
        self._marks = MarkStore()
        self._depth = 0
        self._text = ""
        self._index = GraphemeIndex.build("")
        self.set_text(text, normalize=normalize)

    @classmethod
    def _child(cls, parent: Annotator, start: int, end: int) -> Annotator:
        """Annotator over graphemes start..end-1 of parent.

        The child reuses the parent's cluster boundaries so child grapheme i is
        parent grapheme start + i, and shares the parent's style registry.
        """
        child = cls.__new__(cls)
        raw_start, raw_end = parent._index.to_raw(start, end)
        child._text = parent._text[raw_start:raw_end]
        child._index = parent._index.sub(start, end)
        child._marks = MarkStore()
        child._styles = parent._styles
        child._depth = parent._depth + 1
        return child

    @property
    def text(self) -> str:
        return self._text

    @property
    def index(self) -> GraphemeIndex:
        return self._index

    @property
    def marks(self) -> MarkStore:
        return self._marks

    @property
    def styles(self) -> StyleRegistry:
        return self._styles

    @property
    def depth(self) -> int:
        return self._depth

    def set_text(self, text: str, *, normalize: bool | None = None) -> None:
        """Replace the text. Clears every mark; keeps styles."""
        if normalize is None:
            normalize = get_highlight_config().normalize_input
        self._text = normalize_input(text) if normalize else text
        self._index = GraphemeIndex.build(self._text)
        self._marks.clear()

    def clear(self) -> None:
        """Drop every mark without changing the text."""
        self._marks.clear()

    # Marks

    def mark(self, start: int, end: int, label: str) -> bool:
        """Mark graphemes start..end-1; False if dropped (empty or overlapping)."""
        return self._marks.insert(start, min(end, len(self._index)), label)

    def mark_point(self, index: int, label: str) -> bool:
        """Mark a single grapheme."""
        return self.mark(index, index + 1, label)

    def mark_raw(self, raw_start: int, raw_end: int, label: str) -> bool:
        """Mark the graphemes covering code points raw_start..raw_end-1."""
        start, end = self._index.span(raw_start, raw_end)
        return self._marks.insert(start, end, label)

    def marks_with_label(self, label: str) -> list[Mark]:
        return self._marks.with_label(label)

    # Styles

    def style(
        self,
        label: str,
        attributes: Mapping[str, str] | Iterable[tuple[str, str]] = (),
        /,
        **css: str,
    ) -> StyleRule:
        """Register the style for label (last write wins).

        Attributes may be given as pairs, a mapping, or keyword arguments with
        underscores standing for dashes.

        Example:
            >>> a = Annotator()
            >>> a.style("comment", color="#808080", font_style="italic").css()
            'color:#808080;font-style:italic;'
        """
        pairs = list(attributes.items() if isinstance(attributes, Mapping) else attributes)
        pairs.extend((name.replace("_", "-"), value) for name, value in css.items())
        return self._styles.set(label, pairs)

    def remove_style(self, label: str) -> None:
        self._styles.remove(label)

    def labels(self) -> frozenset[str]:
        """Labels with a registered style."""
        return self._styles.labels()

    # Text access

    def slice(self, start: int, end: int) -> str:
        """Text of graphemes start..end-1."""
        raw_start, raw_end = self._index.to_raw(start, end)
        return self._text[raw_start:raw_end]

    def text_of(self, mark: Mark) -> str:
        return self.slice(mark.start, mark.end)

    def graphemes(self) -> Iterator[str]:
        """Grapheme clusters of the text, in order."""
        starts = self._index.starts
        for i, start in enumerate(starts):
            end = starts[i + 1] if i + 1 < len(starts) else len(self._text)
            yield self._text[start:end]

    def render(
        self,
        *,
        extra: Iterable[tuple[str, str]] = (),
        escape: Callable[[str], str] | None = None,
    ) -> list[Fragment]:
        """Render to fragments. See resaltar.renderers.fragments.render."""
        from resaltar.renderers.fragments import render

        return render(self, extra=extra, escape=escape)

    def __len__(self) -> int:
        """Number of grapheme clusters."""
        return len(self._index)

    def __repr__(self) -> str:
        preview = self._text if len(self._text) <= 20 else self._text[:17] + "..."
        return f"Annotator({preview!r}, marks={len(self._marks)}, depth={self._depth})"
