"""Opt-in profiling for highlighting.

Accumulates metrics while a block of highlighting work runs:
- Total elapsed time
- Text length and fragment count of each render
- Regions rewritten and the deepest nesting reached

Zero overhead when disabled (get_highlight_accumulator() returns None).

Example:
    from resaltar import highlight
    from resaltar.profiling import profiled_highlight

    with profiled_highlight() as metrics:
        highlight('println("$(1 + 2)")', "julia")

    print(metrics.summary())
    # {"total_ms": 0.8, "render_calls": 1, "text_length": 19, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class HighlightAccumulator:
    """Accumulated metrics during highlighting.

    Attributes:
        start_time: Profiling start timestamp.
        render_calls: Number of render() calls recorded.
        text_length: Total length of rendered text, in code points.
        fragment_count: Total fragments produced.
        rewrites: Number of regions rewritten.
        max_depth: Deepest nesting reached by a rewrite.

    """

    start_time: float = field(default_factory=perf_counter)
    render_calls: int = 0
    text_length: int = 0
    fragment_count: int = 0
    rewrites: int = 0
    max_depth: int = 0

    def record_render(self, text_length: int, fragment_count: int) -> None:
        """Record a render call."""
        self.render_calls += 1
        self.text_length += text_length
        self.fragment_count += fragment_count

    def record_rewrite(self, depth: int) -> None:
        """Record one rewritten region at the given nesting depth."""
        self.rewrites += 1
        self.max_depth = max(self.max_depth, depth)

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of highlight metrics."""
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "render_calls": self.render_calls,
            "text_length": self.text_length,
            "fragment_count": self.fragment_count,
            "rewrites": self.rewrites,
            "max_depth": self.max_depth,
        }


_accumulator: ContextVar[HighlightAccumulator | None] = ContextVar(
    "highlight_accumulator",
    default=None,
)


def get_highlight_accumulator() -> HighlightAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_highlight() -> Iterator[HighlightAccumulator]:
    """Context manager for profiled highlighting.

    Yields:
        HighlightAccumulator that will be populated during the block.

    """
    acc = HighlightAccumulator()
    token: Token[HighlightAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)
