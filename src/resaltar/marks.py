"""Marks and the exclusion set that holds them.

A Mark labels a run of grapheme clusters. The MarkStore keeps marks pairwise
non-overlapping by refusing any insertion that touches an already-taken
grapheme. Refusal is the designed conflict policy (first writer wins), so it is
reported through the return value, never raised: grammar packs apply matchers in
priority order and rely on earlier matches shielding their span.

Coordinates:
    Marks use half-open grapheme ranges: ``Mark(2, 5, "kw")`` covers graphemes
    2, 3 and 4.

Thread Safety:
    Mark is frozen and safe to share. MarkStore is mutable and owned by a single
    Annotator; it has no internal locking.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Mark:
    """A labeled range of grapheme clusters.

    Ordering is by (start, end, label), which sorts marks in document order.

    Attributes:
        start: First grapheme index covered
        end: One past the last grapheme index covered
        label: Syntactic category (free-form string chosen by the grammar)

    """

    start: int
    end: int
    label: str

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.end

    @property
    def indices(self) -> range:
        """Grapheme indices covered by the mark."""
        return range(self.start, self.end)

    def overlaps(self, start: int, end: int) -> bool:
        """Whether the mark shares a grapheme with start..end-1."""
        return start < self.end and self.start < end

    def shifted(self, offset: int) -> Mark:
        """The same mark moved by offset graphemes."""
        return Mark(self.start + offset, self.end + offset, self.label)


class MarkStore:
    """Exclusion set of non-overlapping marks.

    Keeps the marks keyed by range plus the set of taken grapheme indices so
    that overlap checks do not scan every mark.

    Usage:
        >>> store = MarkStore()
        >>> store.insert(0, 8, "func")
        True
        >>> store.insert(4, 10, "name")  # touches graphemes 4..7
        False
        >>> [m.label for m in store]
        ['func']

    """

    __slots__ = ("_marks", "_taken")

    def __init__(self) -> None:
        self._marks: dict[tuple[int, int], str] = {}
        self._taken: set[int] = set()

    def insert(self, start: int, end: int, label: str) -> bool:
        """Record a mark over start..end-1 unless that would overlap.

        Args:
            start: First grapheme index
            end: One past the last grapheme index
            label: Mark label

        Returns:
            True when the mark was recorded. False when the range is empty or
            inverted, or any of its graphemes is already taken.
        """
        if end <= start or start < 0:
            return False
        taken = self._taken
        span = range(start, end)
        if any(i in taken for i in span):
            return False
        self._marks[(start, end)] = label
        taken.update(span)
        return True

    def insert_point(self, index: int, label: str) -> bool:
        """Record a single-grapheme mark."""
        return self.insert(index, index + 1, label)

    def clear(self) -> None:
        """Drop every mark and free every index."""
        self._marks.clear()
        self._taken.clear()

    def is_taken(self, index: int) -> bool:
        """Whether grapheme index belongs to some mark."""
        return index in self._taken

    def any_taken(self, start: int, end: int) -> bool:
        """Whether any grapheme in start..end-1 belongs to some mark."""
        taken = self._taken
        return any(i in taken for i in range(start, end))

    def get(self, start: int, end: int) -> Mark | None:
        """The mark recorded for exactly start..end-1, if any."""
        label = self._marks.get((start, end))
        return None if label is None else Mark(start, end, label)

    def with_label(self, label: str) -> list[Mark]:
        """Marks carrying label, in document order."""
        return sorted(
            Mark(start, end, lbl) for (start, end), lbl in self._marks.items() if lbl == label
        )

    def labels(self) -> frozenset[str]:
        """Distinct labels currently used by marks."""
        return frozenset(self._marks.values())

    def remove(self, start: int, end: int) -> Mark | None:
        """Delete the mark recorded for start..end-1 and free its indices.

        Returns:
            The removed mark, or None when no mark has exactly that range.
        """
        label = self._marks.pop((start, end), None)
        if label is None:
            return None
        self._taken.difference_update(range(start, end))
        return Mark(start, end, label)

    def replace(self, mark: Mark, marks: Iterable[Mark]) -> None:
        """Swap one recorded mark for marks that exactly tile its range.

        The taken set does not change: the replacement covers the same
        graphemes. Raises ValueError when the replacement leaves a gap,
        overlaps itself or strays outside the original range.
        """
        tiles = sorted(marks)
        cursor = mark.start
        for tile in tiles:
            if tile.start != cursor or tile.end <= tile.start:
                raise ValueError(f"replacement for {mark} does not tile it at {cursor}")
            cursor = tile.end
        if cursor != mark.end:
            raise ValueError(f"replacement for {mark} stops at {cursor}")
        del self._marks[(mark.start, mark.end)]
        for tile in tiles:
            self._marks[(tile.start, tile.end)] = tile.label

    def __iter__(self) -> Iterator[Mark]:
        """Marks in document order."""
        return iter(sorted(Mark(start, end, label) for (start, end), label in self._marks.items()))

    def __len__(self) -> int:
        return len(self._marks)

    def __bool__(self) -> bool:
        return bool(self._marks)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Mark):
            return self._marks.get((item.start, item.end)) == item.label
        return False

    def __repr__(self) -> str:
        return f"MarkStore(marks={len(self._marks)}, taken={len(self._taken)})"
