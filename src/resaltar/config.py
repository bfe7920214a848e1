"""ContextVar-based highlight configuration for resaltar.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Matchers, the annotator and the region rewriter read the active config; callers
change it for a block of work with the context manager.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed.

Usage:
    from resaltar.config import HighlightConfig, highlight_config_context

    with highlight_config_context(HighlightConfig(max_depth=4)):
        fragments = highlight(source, "julia")

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

# Characters that end a word for match_all's boundary check.
DEFAULT_BOUNDARY_CHARS: frozenset[str] = frozenset(" \t\r\n\f\v,();\"[]{}.")


@dataclass(frozen=True, slots=True)
class HighlightConfig:
    """Immutable highlight configuration.

    Attributes:
        max_depth: Deepest nesting rewrite_inside may reach before raising
            RecursionDepthError. Top-level annotators are depth 0.
        boundary_chars: Characters accepted as word boundaries by match_all.
            Buffer start and end always count as boundaries.
        normalize_input: Decode editor markup entities (``<br>``, ``&nbsp;``)
            when text is assigned to an Annotator. Off by default so the
            text is kept exactly as given.
        default_until: Delimiters used by match_before/match_after when the
            caller passes none.

    """

    max_depth: int = 16
    boundary_chars: frozenset[str] = DEFAULT_BOUNDARY_CHARS
    normalize_input: bool = False
    default_until: tuple[str, ...] = (" ",)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "HighlightConfig":
        """Create HighlightConfig from dictionary.

        Only includes keys that are valid HighlightConfig fields; unknown keys
        are silently ignored. Sequences are converted to the field's type.

        Args:
            config_dict: Dictionary with config values. Keys should match
                HighlightConfig attribute names.

        Returns:
            New HighlightConfig instance with values from dict.

        Example:
            >>> config = HighlightConfig.from_dict({
            ...     "max_depth": 4,
            ...     "default_until": [" ", "\\n"],
            ...     "unknown_key": "ignored",
            ... })
            >>> config.default_until
            (' ', '\\n')

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "boundary_chars" in filtered:
            filtered["boundary_chars"] = frozenset(filtered["boundary_chars"])
        if "default_until" in filtered:
            filtered["default_until"] = tuple(filtered["default_until"])
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: HighlightConfig = HighlightConfig()

_highlight_config: ContextVar[HighlightConfig] = ContextVar(
    "highlight_config",
    default=_DEFAULT_CONFIG,
)


def get_highlight_config() -> HighlightConfig:
    """Get current highlight configuration (thread-local)."""
    return _highlight_config.get()


def set_highlight_config(config: HighlightConfig) -> None:
    """Set highlight configuration for current context.

    Args:
        config: HighlightConfig instance to use for this context.

    """
    _highlight_config.set(config)


def reset_highlight_config() -> None:
    """Reset to default configuration."""
    _highlight_config.set(_DEFAULT_CONFIG)


@contextmanager
def highlight_config_context(config: HighlightConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: HighlightConfig to use within the context.

    Yields:
        None

    Example:
        >>> with highlight_config_context(HighlightConfig(max_depth=2)):
        ...     get_highlight_config().max_depth
        2

    """
    previous = _highlight_config.get()
    _highlight_config.set(config)
    try:
        yield
    finally:
        _highlight_config.set(previous)


__all__ = [
    "DEFAULT_BOUNDARY_CHARS",
    "HighlightConfig",
    "get_highlight_config",
    "set_highlight_config",
    "reset_highlight_config",
    "highlight_config_context",
]
