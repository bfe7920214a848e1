"""Markdown grammar: headings, link keys and targets, emphasis, inline code."""

from __future__ import annotations

from resaltar.grammars.core import Grammar, Rule
from resaltar.styles import StyleRule

RULES: tuple[Rule, ...] = (
    Rule.between("``", "code"),
    Rule.between("`", "code"),
    Rule.after("# ", "heading", until=("\n",)),
    Rule.line_startswith("> ", "point"),
    Rule.between("[", "keys", "]"),
    Rule.between("(", "link", ")"),
    Rule.between("**", "bold"),
    Rule.between("*", "italic"),
)

_COLORS = {
    "link": "#8b0000",
    "heading": "purple",
    "point": "darkgreen",
    "bold": "darkblue",
    "italic": "#8b0000",
    "keys": "#ffc00",
    "code": "#8b0000",
    "default": "brown",
}

STYLES: tuple[StyleRule, ...] = tuple(
    StyleRule(label, (("color", color),)) for label, color in _COLORS.items()
)

MARKDOWN = Grammar(name="markdown", rules=RULES, styles=STYLES, aliases=("md",))
