"""Grapheme cluster index for resaltar.

Substring search hands back code-point offsets, but marks and style boundaries
are expressed in user-perceived characters (grapheme clusters) so that an
accented letter or an emoji sequence is never split across two fragments.
GraphemeIndex maps between the two coordinate systems.

Segmentation implements the parts of the UAX #29 extended grapheme cluster
rules that show up in source text:

- CR LF stays together; nothing else joins a control character (GB3-GB5)
- Hangul jamo sequences form syllables (GB6-GB8)
- Extend characters, ZWJ and spacing marks attach to the previous cluster (GB9, GB9a)
- Prepend characters attach to the following cluster (GB9b)
- ZWJ emoji sequences stay together (GB11)
- Regional indicators pair into flags (GB12, GB13)

Example:
    >>> index = GraphemeIndex.build("cafe\\u0301!")
    >>> len(index)
    5
    >>> index.to_grapheme(4)  # the combining accent belongs to "e"
    3
    >>> index.to_raw(3, 4)
    (3, 5)

Thread Safety:
    GraphemeIndex is immutable after construction and safe to share.

"""

from __future__ import annotations

import unicodedata
from bisect import bisect_right
from collections.abc import Iterator

_CR = "\r"
_LF = "\n"
_ZWJ = "\u200d"

# Grapheme break property values used below
_CONTROL = "Control"
_EXTEND = "Extend"
_SPACING_MARK = "SpacingMark"
_ZWJ_PROP = "ZWJ"
_REGIONAL = "Regional_Indicator"
_PREPEND = "Prepend"
_L, _V, _T, _LV, _LVT = "L", "V", "T", "LV", "LVT"
_OTHER = "Other"

_HANGUL_BASE = 0xAC00
_HANGUL_END = 0xD7A3
_HANGUL_T_COUNT = 28

# Grapheme_Cluster_Break=Prepend (Arabic number signs and a few Brahmic marks)
_PREPEND_RANGES: tuple[tuple[int, int], ...] = (
    (0x0600, 0x0605),
    (0x06DD, 0x06DD),
    (0x070F, 0x070F),
    (0x0890, 0x0891),
    (0x08E2, 0x08E2),
    (0x0D4E, 0x0D4E),
    (0x110BD, 0x110BD),
    (0x110CD, 0x110CD),
    (0x111C2, 0x111C3),
    (0x1193F, 0x1193F),
    (0x11941, 0x11941),
    (0x11A3A, 0x11A3A),
    (0x11A84, 0x11A89),
    (0x11D46, 0x11D46),
    (0x11F02, 0x11F02),
)


def _break_property(char: str) -> str:
    """Approximate Grapheme_Cluster_Break property of a character."""
    if char == _CR or char == _LF:
        return _CONTROL
    if char == _ZWJ:
        return _ZWJ_PROP
    cp = ord(char)
    if cp == 0x200C:
        return _EXTEND
    if 0x1F1E6 <= cp <= 0x1F1FF:
        return _REGIONAL
    if cp >= 0x0600 and any(low <= cp <= high for low, high in _PREPEND_RANGES):
        return _PREPEND
    if 0x1100 <= cp <= 0x115F or 0xA960 <= cp <= 0xA97C:
        return _L
    if 0x1160 <= cp <= 0x11A7 or 0xD7B0 <= cp <= 0xD7C6:
        return _V
    if 0x11A8 <= cp <= 0x11FF or 0xD7CB <= cp <= 0xD7FB:
        return _T
    if _HANGUL_BASE <= cp <= _HANGUL_END:
        return _LV if (cp - _HANGUL_BASE) % _HANGUL_T_COUNT == 0 else _LVT
    # Variation selectors, emoji modifiers and tag characters extend
    if 0xFE00 <= cp <= 0xFE0F or 0xE0100 <= cp <= 0xE01EF:
        return _EXTEND
    if 0x1F3FB <= cp <= 0x1F3FF or 0xE0020 <= cp <= 0xE007F:
        return _EXTEND
    category = unicodedata.category(char)
    if category in ("Mn", "Me"):
        return _EXTEND
    if category == "Mc":
        return _SPACING_MARK
    if category in ("Cc", "Zl", "Zp", "Cf"):
        return _CONTROL
    return _OTHER


def _is_pictographic(char: str) -> bool:
    """Rough Extended_Pictographic test (emoji and pictographic symbols)."""
    cp = ord(char)
    if 0x1F000 <= cp <= 0x1FAFF or 0x2600 <= cp <= 0x27BF:
        return True
    return unicodedata.category(char) == "So"


def _joins(prev: str, prop_prev: str, char: str, prop: str, ri_count: int, emoji_zwj: bool) -> bool:
    """True when no grapheme boundary falls between prev and char."""
    if prev == _CR and char == _LF:
        return True
    if prop_prev == _CONTROL or prop == _CONTROL:
        return False
    if prop_prev == _L and prop in (_L, _V, _LV, _LVT):
        return True
    if prop_prev in (_LV, _V) and prop in (_V, _T):
        return True
    if prop_prev in (_LVT, _T) and prop == _T:
        return True
    if prop in (_EXTEND, _ZWJ_PROP, _SPACING_MARK):
        return True
    if prop_prev == _PREPEND:
        return True
    if prop_prev == _ZWJ_PROP and emoji_zwj and _is_pictographic(char):
        return True
    if prop_prev == _REGIONAL and prop == _REGIONAL:
        return ri_count % 2 == 1
    return False


def iter_grapheme_starts(text: str) -> Iterator[int]:
    """Yield the code-point offset at which each grapheme cluster starts."""
    if not text:
        return
    yield 0
    prev = text[0]
    prop_prev = _break_property(prev)
    ri_count = 1 if prop_prev == _REGIONAL else 0
    # Inside "pictographic Extend* ZWJ?" so a following pictograph may join
    emoji_zwj = _is_pictographic(prev)
    for offset in range(1, len(text)):
        char = text[offset]
        prop = _break_property(char)
        if not _joins(prev, prop_prev, char, prop, ri_count, emoji_zwj):
            yield offset
            emoji_zwj = _is_pictographic(char)
        elif prop not in (_EXTEND, _ZWJ_PROP):
            emoji_zwj = _is_pictographic(char)
        ri_count = ri_count + 1 if prop == _REGIONAL else 0
        prev, prop_prev = char, prop


def split_graphemes(text: str) -> list[str]:
    """Split text into grapheme clusters.

    Example:
        >>> [len(g) for g in split_graphemes("e\\u0301x")]
        [2, 1]
    """
    starts = list(iter_grapheme_starts(text))
    ends = starts[1:] + [len(text)]
    return [text[s:e] for s, e in zip(starts, ends)]


class GraphemeIndex:
    """Mapping between code-point offsets and grapheme cluster positions.

    Built once per text assignment. Holds a strictly increasing tuple of
    cluster start offsets; lookups are O(log n) bisections.

    Attributes:
        starts: Code-point offset of every cluster start
        length: Length of the indexed text in code points

    """

    __slots__ = ("_starts", "_length")

    def __init__(self, starts: tuple[int, ...], length: int) -> None:
        """Initialize from precomputed cluster starts.

        Use GraphemeIndex.build() to index a string.
        """
        self._starts = starts
        self._length = length

    @classmethod
    def build(cls, text: str) -> GraphemeIndex:
        """Index the grapheme clusters of text."""
        return cls(tuple(iter_grapheme_starts(text)), len(text))

    @property
    def starts(self) -> tuple[int, ...]:
        return self._starts

    @property
    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        """Number of grapheme clusters."""
        return len(self._starts)

    def __bool__(self) -> bool:
        return bool(self._starts)

    def to_grapheme(self, raw_offset: int) -> int:
        """Index of the last cluster starting at or before raw_offset.

        Offsets before the first cluster map to 0; offsets past the end map to
        the last cluster. An empty index always answers 0.
        """
        if not self._starts:
            return 0
        return max(bisect_right(self._starts, raw_offset) - 1, 0)

    def to_raw(self, start: int, end: int) -> tuple[int, int]:
        """Code-point range (start, end) covered by graphemes start..end-1.

        Bounds outside the index are clamped to the buffer.
        """
        count = len(self._starts)
        start = min(max(start, 0), count)
        end = min(max(end, start), count)
        raw_start = self._starts[start] if start < count else self._length
        raw_end = self._starts[end] if end < count else self._length
        return raw_start, raw_end

    def span(self, raw_start: int, raw_end: int) -> tuple[int, int]:
        """Smallest grapheme range (start, end) covering raw_start..raw_end-1.

        A raw range that begins or ends inside a cluster is widened to the
        whole cluster. Empty or inverted raw ranges give an empty grapheme range.
        """
        start = self.to_grapheme(raw_start)
        if raw_end <= raw_start:
            return start, start
        return start, self.to_grapheme(raw_end - 1) + 1

    def sub(self, start: int, end: int) -> GraphemeIndex:
        """Index of graphemes start..end-1 rebased to offset 0."""
        raw_start, raw_end = self.to_raw(start, end)
        count = len(self._starts)
        start = min(max(start, 0), count)
        end = min(max(end, start), count)
        starts = tuple(s - raw_start for s in self._starts[start:end])
        return GraphemeIndex(starts, raw_end - raw_start)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphemeIndex):
            return NotImplemented
        return self._starts == other._starts and self._length == other._length

    def __hash__(self) -> int:
        return hash((self._starts, self._length))

    def __repr__(self) -> str:
        return f"GraphemeIndex(graphemes={len(self._starts)}, length={self._length})"
