"""Exception classes for resaltar.

Overlapping mark insertions are not errors: the mark store drops them and
reports it through its return value. The exceptions here cover the cases a
caller has to hear about.
"""

from __future__ import annotations

from collections.abc import Iterable


class ResaltarError(Exception):
    """Base exception for all resaltar errors.

    Subclass this for specific error categories.
    """

    pass


class MatcherError(ResaltarError, ValueError):
    """Invalid arguments given to a matcher or grammar rule.

    Raised for empty search targets, negative lengths and unknown rule kinds.
    """

    pass


class RecursionDepthError(ResaltarError):
    """Nested region rewriting went deeper than allowed.

    Raised instead of silently truncating nested highlighting, which would
    produce misleading output.
    """

    def __init__(self, label: str, depth: int, max_depth: int) -> None:
        """Initialize recursion depth error.

        Args:
            label: Label of the region being rewritten
            depth: Nesting depth the rewrite tried to reach
            max_depth: Configured maximum depth
        """
        self.label = label
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Rewriting {label!r} regions would reach depth {depth} "
            f"(maximum is {max_depth})"
        )


class RewriteError(ResaltarError):
    """A rewrite callback replaced the text of the region it was given.

    Child marks are only meaningful over the region's own text, so they
    cannot be moved back into the parent.
    """

    def __init__(self, label: str, start: int, end: int) -> None:
        """Initialize rewrite error.

        Args:
            label: Label of the region being rewritten
            start: First grapheme of the region in the parent
            end: One past the last grapheme of the region
        """
        self.label = label
        self.start = start
        self.end = end
        super().__init__(
            f"Callback for {label!r} region {start}..{end} replaced the region text"
        )


class UnknownGrammarError(ResaltarError, KeyError):
    """No grammar pack registered under the requested name."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        """Initialize unknown grammar error.

        Args:
            name: Requested grammar name or alias
            available: Registered grammar names, for the message
        """
        self.name = name
        self.available = tuple(sorted(available))
        listing = ", ".join(self.available) or "none"
        self.message = f"Unknown grammar: {name!r}. Available: {listing}"
        super().__init__(self.message)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return self.message


class RenderError(ResaltarError):
    """Error while turning fragments into an output format."""

    pass
