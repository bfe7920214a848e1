"""Recursive region rewriting.

rewrite_inside() re-scans the regions carrying one label as independent
documents. Each region becomes a child Annotator; the caller's function marks
it (possibly calling rewrite_inside again, which is how an expression inside a
string interpolation inside a string gets highlighted); the child's marks are
then moved back into the parent's coordinates. Graphemes the child left
unmarked are filled with the region's original label, so the region stays
fully covered.

Example:
    >>> from resaltar import Annotator, match_all, match_between, rewrite_inside
    >>> a = Annotator('x = "say hi" + y')
    >>> match_between(a, '"', "string")
    1
    >>> rewrite_inside(a, "string", lambda child: match_all(child, "hi", "message"))
    1
    >>> [(a.text_of(m), m.label) for m in a.marks]
    [('"say ', 'string'), ('hi', 'message'), ('"', 'string')]

"""

from __future__ import annotations

from collections.abc import Callable

from resaltar.annotator import Annotator
from resaltar.config import get_highlight_config
from resaltar.errors import RecursionDepthError, RewriteError
from resaltar.marks import Mark
from resaltar.profiling import get_highlight_accumulator
from resaltar.utils.logger import get_logger

logger = get_logger(__name__)


def _fill_gaps(region: Mark, children: list[Mark]) -> list[Mark]:
    """Child marks (already in parent coordinates) plus region-labeled gap fillers."""
    tiles: list[Mark] = []
    cursor = region.start
    for mark in children:
        if cursor < mark.start:
            tiles.append(Mark(cursor, mark.start, region.label))
        tiles.append(mark)
        cursor = mark.end
    if cursor < region.end:
        tiles.append(Mark(cursor, region.end, region.label))
    return tiles


def rewrite_inside(
    annotator: Annotator,
    label: str,
    callback: Callable[[Annotator], object],
    *,
    max_depth: int | None = None,
) -> int:
    """Re-annotate every region labeled label through callback.

    Args:
        annotator: Annotator holding the regions
        label: Label of the regions to rewrite
        callback: Called once per region with a child Annotator over the
            region's text. The child shares the parent's style registry and
            must not be kept after the call.
        max_depth: Deepest allowed nesting; HighlightConfig.max_depth if None

    Returns:
        Number of regions rewritten

    Raises:
        RecursionDepthError: The child would be nested deeper than max_depth.
            Raised before the callback runs; regions already rewritten keep
            their new marks.
        RewriteError: The callback replaced the child annotator's text
    """
    limit = get_highlight_config().max_depth if max_depth is None else max_depth
    regions = annotator.marks.with_label(label)
    if not regions:
        return 0
    depth = annotator.depth + 1
    if depth > limit:
        raise RecursionDepthError(label, depth, limit)

    acc = get_highlight_accumulator()
    for region in regions:
        child = Annotator._child(annotator, region.start, region.end)
        region_text = child.text
        callback(child)
        if child.text != region_text:
            raise RewriteError(label, region.start, region.end)
        moved = [mark.shifted(region.start) for mark in child.marks]
        tiles = _fill_gaps(region, moved)
        annotator.marks.replace(region, tiles)
        logger.debug(
            "rewrote %r region %d..%d at depth %d into %d marks",
            label,
            region.start,
            region.end,
            depth,
            len(tiles),
        )
        if acc is not None:
            acc.record_rewrite(depth=depth)
    return len(regions)


__all__ = ["rewrite_inside"]
