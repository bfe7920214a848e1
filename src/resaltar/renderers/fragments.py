"""Fragment renderer: marks + styles + text -> styled fragments.

Walks the sorted marks and the unmarked gaps between them. Gaps (and the whole
text when nothing is marked) are styled with the ``default`` rule; each mark is
styled by its label, falling back to ``default`` when the label has no rule.

Content preservation:
    Concatenating ``fragment.raw`` over the output reproduces the annotator's
    text exactly. ``fragment.text`` is the escaped form.

Determinism:
    The same text, marks and styles always give the same fragments.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from resaltar.profiling import get_highlight_accumulator
from resaltar.styles import DEFAULT_LABEL
from resaltar.utils.logger import get_logger

if TYPE_CHECKING:
    from resaltar.annotator import Annotator

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Fragment:
    """A styled run of text.

    Attributes:
        text: Escaped text (equal to raw when no escape step is given)
        raw: Exact source substring
        label: Mark label, or ``default`` for unmarked gaps
        start: First grapheme index
        end: One past the last grapheme index
        style: Resolved style attributes
        extra: Attributes shared by every fragment of the render

    """

    text: str
    raw: str
    label: str
    start: int
    end: int
    style: tuple[tuple[str, str], ...] = ()
    extra: tuple[tuple[str, str], ...] = ()

    def css(self) -> str:
        """Style attributes as a CSS declaration list."""
        return "".join(f"{name}:{value};" for name, value in self.style)


def render(
    annotator: Annotator,
    *,
    extra: Iterable[tuple[str, str]] = (),
    escape: Callable[[str], str] | None = None,
) -> list[Fragment]:
    """Render an annotator into fragments.

    Args:
        annotator: Annotator to render
        extra: Attributes attached to every fragment (e.g. a shared CSS class)
        escape: Presentation escaping applied to each fragment's text

    Returns:
        Fragments in document order; empty for empty text

    Example:
        >>> from resaltar import Annotator
        >>> a = Annotator("x = 1")
        >>> a.mark(4, 5, "number")
        True
        >>> [(f.raw, f.label) for f in render(a)]
        [('x = ', 'default'), ('1', 'number')]
    """
    if not annotator.text:
        return []
    styles = annotator.styles
    shared = tuple(extra)
    fragments: list[Fragment] = []
    missing: set[str] = set()

    def emit(start: int, end: int, label: str) -> None:
        raw = annotator.slice(start, end)
        if label not in styles:
            missing.add(label)
        rule = styles.resolve(label)
        fragments.append(
            Fragment(
                text=escape(raw) if escape is not None else raw,
                raw=raw,
                label=label,
                start=start,
                end=end,
                style=rule.attributes,
                extra=shared,
            )
        )

    cursor = 0
    for mark in annotator.marks:
        if cursor < mark.start:
            emit(cursor, mark.start, DEFAULT_LABEL)
        emit(mark.start, mark.end, mark.label)
        cursor = mark.end
    if cursor < len(annotator):
        emit(cursor, len(annotator), DEFAULT_LABEL)

    if missing:
        logger.debug("no style for %s; using %r", ", ".join(sorted(missing)), DEFAULT_LABEL)
    acc = get_highlight_accumulator()
    if acc is not None:
        acc.record_render(text_length=len(annotator.text), fragment_count=len(fragments))
    return fragments


__all__ = ["Fragment", "render"]
