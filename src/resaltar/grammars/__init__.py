"""Grammar packs for resaltar.

A grammar is data: an ordered tuple of matcher Rules and a style table.
Built-in grammars are registered when this package is imported.

Built-in Grammars:
    julia     Julia source (alias ``jl``)
    markdown  Markdown text (alias ``md``)
    toml      TOML configuration

Usage:
    >>> from resaltar.grammars import get_grammar
    >>> a = get_grammar("toml").annotate('name = "resaltar"')
    >>> [(a.text_of(m), m.label) for m in a.marks]
    [('=', 'equals'), ('"resaltar"', 'string')]

Custom Grammars:
    from resaltar.grammars import Grammar, Rule, register_grammar

    register_grammar(Grammar(
        name="ini",
        rules=(Rule.line_after(";", "comment"), Rule.between("[", "section", "]")),
    ))

"""

from resaltar.grammars.core import (
    Grammar,
    Rule,
    RuleKind,
    apply_rules,
    available_grammars,
    digits,
    get_grammar,
    keywords,
    operators,
    register_grammar,
    unregister_grammar,
)
from resaltar.grammars.julia import JULIA
from resaltar.grammars.markdown import MARKDOWN
from resaltar.grammars.toml import TOML

for _grammar in (JULIA, MARKDOWN, TOML):
    register_grammar(_grammar)
del _grammar

__all__ = [
    "JULIA",
    "MARKDOWN",
    "TOML",
    "Grammar",
    "Rule",
    "RuleKind",
    "apply_rules",
    "available_grammars",
    "digits",
    "get_grammar",
    "keywords",
    "operators",
    "register_grammar",
    "unregister_grammar",
]
