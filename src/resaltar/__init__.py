"""
Resaltar: Text Annotation and Syntax Highlighting

Marks labeled ranges of grapheme clusters in a text, styles labels with CSS
attributes, and renders the result as styled fragments or inline-styled HTML.
Grammars (Julia, Markdown, TOML) are ordered tables of matcher calls; regions
such as strings can be re-scanned with their own rules.

Quick Start:
    >>> from resaltar import highlight
    >>> [(f.raw, f.label) for f in highlight("x = 1", "julia")]
    [('x ', 'default'), ('=', 'op'), (' ', 'default'), ('1', 'number')]

Building Blocks:
    >>> from resaltar import Annotator, match_all, match_between
    >>> a = Annotator('print("hi") end')
    >>> match_between(a, '"', "string")
    1
    >>> match_all(a, "end", "end")
    1
    >>> _ = a.style("end", color="#b81870")
    >>> [(f.raw, f.label) for f in a.render()]
    [('print(', 'default'), ('"hi"', 'string'), (') ', 'default'), ('end', 'end')]

Installation:
    pip install resaltar             # zero dependencies
"""

from collections.abc import Callable, Iterable

from resaltar.annotator import Annotator
from resaltar.config import (
    HighlightConfig,
    get_highlight_config,
    highlight_config_context,
    reset_highlight_config,
    set_highlight_config,
)
from resaltar.errors import (
    MatcherError,
    RecursionDepthError,
    RenderError,
    ResaltarError,
    RewriteError,
    UnknownGrammarError,
)
from resaltar.grammars import (
    Grammar,
    Rule,
    available_grammars,
    get_grammar,
    register_grammar,
)
from resaltar.graphemes import GraphemeIndex, split_graphemes
from resaltar.marks import Mark, MarkStore
from resaltar.matchers import (
    match_after,
    match_all,
    match_before,
    match_between,
    match_char,
    match_for,
    match_line_after,
    match_line_startswith,
)
from resaltar.profiling import HighlightAccumulator, get_highlight_accumulator, profiled_highlight
from resaltar.renderers.fragments import Fragment
from resaltar.renderers.html import HtmlRenderer
from resaltar.renderers.protocol import FragmentRenderer
from resaltar.rewrite import rewrite_inside
from resaltar.styles import DEFAULT_LABEL, StyleRegistry, StyleRule

__version__ = "0.1.0"


def annotate(text: str, language: str = "julia", *, normalize: bool | None = None) -> Annotator:
    """Create an Annotator over text, marked and styled by a grammar.

    Args:
        text: Source text
        language: Grammar name or alias
        normalize: Decode editor markup entities (``<br>``, ``&nbsp;``) first.
            None follows HighlightConfig.normalize_input, which is off.

    Raises:
        UnknownGrammarError: No grammar is registered under language
    """
    return get_grammar(language).annotate(text, normalize=normalize)


def highlight(
    text: str,
    language: str = "julia",
    *,
    extra: Iterable[tuple[str, str]] = (),
    escape: Callable[[str], str] | None = None,
    normalize: bool | None = None,
) -> list[Fragment]:
    """Highlight text with a registered grammar.

    Args:
        text: Source text
        language: Grammar name or alias (``julia``, ``jl``, ``markdown``,
            ``md``, ``toml``)
        extra: Attributes attached to every fragment
        escape: Presentation escaping applied to fragment text
        normalize: Decode editor markup entities before highlighting

    Returns:
        Styled fragments in document order

    Raises:
        UnknownGrammarError: No grammar is registered under language
    """
    return annotate(text, language, normalize=normalize).render(extra=extra, escape=escape)


def to_html(
    text: str,
    language: str = "julia",
    *,
    css_class: str | None = "modiftxt",
    normalize: bool | None = None,
) -> str:
    """Highlight text and serialize it as inline-styled ``<span>`` elements.

    Example:
        >>> to_html("end", "julia")
        '<span class="modiftxt" style="color:#b81870;">end</span>'
    """
    return HtmlRenderer(css_class=css_class).render(annotate(text, language, normalize=normalize))


__all__ = [
    # Core types
    "Annotator",
    "GraphemeIndex",
    "Mark",
    "MarkStore",
    "StyleRegistry",
    "StyleRule",
    "DEFAULT_LABEL",
    # High-level API
    "annotate",
    "highlight",
    "to_html",
    # Matchers
    "match_after",
    "match_all",
    "match_before",
    "match_between",
    "match_char",
    "match_for",
    "match_line_after",
    "match_line_startswith",
    "rewrite_inside",
    "split_graphemes",
    # Grammars
    "Grammar",
    "Rule",
    "available_grammars",
    "get_grammar",
    "register_grammar",
    # Rendering
    "Fragment",
    "FragmentRenderer",
    "HtmlRenderer",
    # Configuration
    "HighlightConfig",
    "get_highlight_config",
    "highlight_config_context",
    "reset_highlight_config",
    "set_highlight_config",
    # Profiling
    "HighlightAccumulator",
    "get_highlight_accumulator",
    "profiled_highlight",
    # Errors
    "MatcherError",
    "RecursionDepthError",
    "RenderError",
    "ResaltarError",
    "RewriteError",
    "UnknownGrammarError",
    # Version
    "__version__",
]
