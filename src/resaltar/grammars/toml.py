"""TOML grammar: comments, table headers, strings, assignments and numbers."""

from __future__ import annotations

from resaltar.grammars.core import Grammar, Rule, digits, keywords
from resaltar.styles import StyleRule

RULES: tuple[Rule, ...] = (
    Rule.line_after("#", "comment"),
    Rule.between('"', "string"),
    Rule.between("[", "keys", "]"),
    Rule.all("=", "equals", word_boundary=False),
    *digits("number"),
    *keywords(("true", "false"), "number"),
)

_COLORS = {
    "keys": "#D67229",
    "equals": "purple",
    "string": "#007958",
    "default": "darkblue",
    "number": "#8b0000",
    "comment": "#808080",
}

STYLES: tuple[StyleRule, ...] = tuple(
    StyleRule(label, (("color", color),)) for label, color in _COLORS.items()
)

TOML = Grammar(name="toml", rules=RULES, styles=STYLES)
