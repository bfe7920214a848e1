"""Range-producing matchers.

Every matcher takes the Annotator first, searches its current text with
``str.find`` or a compiled pattern, converts each hit from code-point offsets to
grapheme indices through the annotator's GraphemeIndex, and inserts marks.
Insertions that would overlap an existing mark are dropped by the mark store,
so the order in which a grammar calls matchers is its priority order.

Each matcher returns the number of marks it actually recorded.

Matchers:
    match_all            every occurrence of a word or operator
    match_char           every occurrence of one character
    match_between        delimited regions ("...", [...], #= ... =#)
    match_before         the run of text before a target (function names)
    match_after          the run of text after a target (types, macros)
    match_for            a target plus a fixed number of graphemes (escapes)
    match_line_after     a target through the end of its line (comments)
    match_line_startswith lines beginning with a prefix (headings)

"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Iterator
from functools import lru_cache
from typing import TYPE_CHECKING

from resaltar.config import get_highlight_config
from resaltar.errors import MatcherError
from resaltar.utils.logger import get_logger

if TYPE_CHECKING:
    from resaltar.annotator import Annotator

logger = get_logger(__name__)


def _require(target: str, what: str = "target") -> None:
    if not isinstance(target, str) or not target:
        raise MatcherError(f"{what} must be a non-empty string, got {target!r}")


def _require_count(value: int, what: str) -> None:
    if value < 0:
        raise MatcherError(f"{what} must not be negative, got {value}")


def _occurrences(text: str, target: str, start: int = 0) -> Iterator[int]:
    """Offsets of non-overlapping occurrences of target, left to right."""
    step = len(target)
    pos = text.find(target, start)
    while pos >= 0:
        yield pos
        pos = text.find(target, pos + step)


@lru_cache(maxsize=512)
def _word_pattern(target: str, boundary_chars: frozenset[str]) -> re.Pattern[str]:
    """Pattern matching target only between boundary characters or buffer edges."""
    if boundary_chars:
        cls = "".join(re.escape(c) for c in sorted(boundary_chars))
        before, after = f"(?<![^{cls}])", f"(?![^{cls}])"
    else:
        before, after = r"(?<![\s\S])", r"(?![\s\S])"
    return re.compile(before + re.escape(target) + after)


def _widen(
    annotator: Annotator,
    raw_start: int,
    raw_end: int,
    include_left: int,
    include_right: int,
) -> tuple[int, int]:
    start, end = annotator.index.span(raw_start, raw_end)
    if end <= start:
        return start, start
    return max(start - include_left, 0), min(end + include_right, len(annotator))


def _resolve_until(until: Iterable[str]) -> tuple[str, ...]:
    delimiters = tuple(d for d in until if d)
    return delimiters or get_highlight_config().default_until


def match_all(
    annotator: Annotator,
    target: str,
    label: str,
    *,
    word_boundary: bool = True,
) -> int:
    """Mark every non-overlapping occurrence of target.

    In word-boundary mode an occurrence only counts when it is preceded and
    followed by a boundary character (HighlightConfig.boundary_chars) or by the
    start/end of the buffer, so ``end`` is not found inside ``append``.

    Args:
        annotator: Annotator to mark
        target: Literal text to find
        label: Label for the marks
        word_boundary: Require boundaries on both sides

    Returns:
        Number of marks recorded
    """
    _require(target)
    text = annotator.text
    if word_boundary:
        pattern = _word_pattern(target, get_highlight_config().boundary_chars)
        spans = ((m.start(), m.end()) for m in pattern.finditer(text))
    else:
        spans = ((pos, pos + len(target)) for pos in _occurrences(text, target))
    recorded = 0
    for raw_start, raw_end in spans:
        recorded += annotator.mark_raw(raw_start, raw_end, label)
    return recorded


def _digit_run_is_free(text: str, pos: int) -> bool:
    """Whether the digit run containing pos is not glued to an identifier."""
    while pos > 0 and text[pos - 1].isdigit():
        pos -= 1
    if pos == 0:
        return True
    prev = text[pos - 1]
    if prev == "_" or prev.isalpha():
        return False
    # A combining mark continues the letter before it
    return not unicodedata.category(prev).startswith("M")


def match_char(
    annotator: Annotator,
    char: str,
    label: str,
    *,
    numeric: bool = False,
) -> int:
    """Mark every occurrence of a single character.

    Matches are unconditional unless numeric is set, in which case a digit is
    only marked when its digit run does not continue an identifier (the ``1``
    in ``x1`` stays unmarked).

    Returns:
        Number of marks recorded
    """
    _require(char, "char")
    if len(char) != 1:
        raise MatcherError(f"match_char expects a single character, got {char!r}")
    text = annotator.text
    recorded = 0
    for pos in _occurrences(text, char):
        if numeric and not _digit_run_is_free(text, pos):
            continue
        recorded += annotator.mark_raw(pos, pos + 1, label)
    return recorded


def match_between(
    annotator: Annotator,
    opener: str,
    label: str,
    *,
    closer: str | None = None,
) -> int:
    """Mark delimited regions, delimiters included.

    Without closer, opener works as both delimiters: occurrences pair up 1st
    with 2nd, 3rd with 4th and so on. With closer, each opener pairs with the
    next unconsumed closer after it. An unterminated region runs to the end of
    the buffer. Delimiters already inside a mark are shielded and ignored.

    Args:
        annotator: Annotator to mark
        opener: Opening delimiter (also the closing one when closer is None)
        label: Label for the marks
        closer: Closing delimiter

    Returns:
        Number of marks recorded
    """
    _require(opener, "opener")
    if closer is None:
        return _match_alternating(annotator, opener, label)
    _require(closer, "closer")
    text = annotator.text
    index = annotator.index
    marks = annotator.marks
    recorded = 0
    cursor = 0
    while True:
        pos = text.find(opener, cursor)
        if pos < 0:
            break
        open_end = pos + len(opener)
        if marks.is_taken(index.to_grapheme(pos)):
            cursor = open_end
            continue
        close = text.find(closer, open_end)
        if close < 0:
            if annotator.mark_raw(pos, len(text), label):
                recorded += 1
                break
            cursor = open_end
            continue
        region_end = close + len(closer)
        if annotator.mark_raw(pos, region_end, label):
            recorded += 1
            cursor = region_end
        else:
            cursor = open_end
    return recorded


def _match_alternating(annotator: Annotator, delimiter: str, label: str) -> int:
    text = annotator.text
    index = annotator.index
    marks = annotator.marks
    positions = [
        pos for pos in _occurrences(text, delimiter) if not marks.is_taken(index.to_grapheme(pos))
    ]
    recorded = 0
    for i in range(0, len(positions), 2):
        start = positions[i]
        end = positions[i + 1] + len(delimiter) if i + 1 < len(positions) else len(text)
        recorded += annotator.mark_raw(start, end, label)
    return recorded


def match_before(
    annotator: Annotator,
    target: str,
    label: str,
    *,
    until: Iterable[str] = (),
    include_left: int = 0,
    include_right: int = 0,
) -> int:
    """Mark the text between the nearest preceding delimiter and target.

    For ``foo(`` with target ``(`` the region is ``foo``: it starts right after
    the closest occurrence of any string in until before target (or at the
    buffer start) and stops just before target. Empty regions are skipped.

    Args:
        annotator: Annotator to mark
        target: Text whose prefix is marked
        label: Label for the marks
        until: Delimiters bounding the region on the left
            (HighlightConfig.default_until when empty)
        include_left: Extra graphemes to take before the region
        include_right: Extra graphemes to take after the region

    Returns:
        Number of marks recorded
    """
    _require(target)
    _require_count(include_left, "include_left")
    _require_count(include_right, "include_right")
    delimiters = _resolve_until(until)
    text = annotator.text
    recorded = 0
    for pos in _occurrences(text, target):
        start = 0
        for delimiter in delimiters:
            found = text.rfind(delimiter, 0, pos)
            if found >= 0:
                start = max(start, found + len(delimiter))
        if start >= pos:
            logger.debug("match_before %r: empty region at offset %d", target, pos)
            continue
        g_start, g_end = _widen(annotator, start, pos, include_left, include_right)
        recorded += annotator.mark(g_start, g_end, label)
    return recorded


def match_after(
    annotator: Annotator,
    target: str,
    label: str,
    *,
    until: Iterable[str] = (),
    include_left: int = 0,
    include_right: int = 0,
) -> int:
    """Mark target and the text after it up to the nearest delimiter.

    For ``x::Int,`` with target ``::`` and ``,`` in until the region is
    ``::Int``. Without a following delimiter the region runs to the buffer end.

    Args:
        annotator: Annotator to mark
        target: Text starting each region
        label: Label for the marks
        until: Delimiters bounding the region on the right
            (HighlightConfig.default_until when empty)
        include_left: Extra graphemes to take before the region
        include_right: Extra graphemes to take after the region

    Returns:
        Number of marks recorded
    """
    _require(target)
    _require_count(include_left, "include_left")
    _require_count(include_right, "include_right")
    delimiters = _resolve_until(until)
    text = annotator.text
    recorded = 0
    for pos in _occurrences(text, target):
        search_from = pos + len(target)
        end = len(text)
        for delimiter in delimiters:
            found = text.find(delimiter, search_from)
            if 0 <= found < end:
                end = found
        g_start, g_end = _widen(annotator, pos, end, include_left, include_right)
        if g_end <= g_start:
            logger.debug("match_after %r: empty region at offset %d", target, pos)
            continue
        recorded += annotator.mark(g_start, g_end, label)
    return recorded


def match_for(annotator: Annotator, target: str, length: int, label: str) -> int:
    """Mark target plus the length graphemes that follow it.

    Occurrences touching an existing mark are skipped, so ``\\\\`` is taken as
    one escape rather than two. Regions are clipped at the buffer end.

    Returns:
        Number of marks recorded
    """
    _require(target)
    _require_count(length, "length")
    text = annotator.text
    recorded = 0
    for pos in _occurrences(text, target):
        g_start, g_end = annotator.index.span(pos, pos + len(target))
        if annotator.marks.any_taken(g_start, g_end):
            continue
        recorded += annotator.mark(g_start, g_end + length, label)
    return recorded


def match_line_after(annotator: Annotator, target: str, label: str) -> int:
    """Mark from target through the end of its line, newline included."""
    return match_between(annotator, target, label, closer="\n")


def match_line_startswith(annotator: Annotator, prefix: str, label: str) -> int:
    """Mark every line that begins with prefix, up to (not including) its newline.

    A ``\\r\\n`` terminator is excluded as a whole.
    """
    _require(prefix, "prefix")
    text = annotator.text
    recorded = 0
    for pos in _occurrences(text, prefix):
        if pos > 0 and text[pos - 1] != "\n":
            continue
        end = text.find("\n", pos)
        if end < 0:
            end = len(text)
        elif end - 1 >= pos + len(prefix) and text[end - 1] == "\r":
            end -= 1
        recorded += annotator.mark_raw(pos, end, label)
    return recorded


__all__ = [
    "match_after",
    "match_all",
    "match_before",
    "match_between",
    "match_char",
    "match_for",
    "match_line_after",
    "match_line_startswith",
]
