"""Julia grammar.

Priority, highest first: block and line comments, strings (with their
interpolations and escapes rewritten inside), function names, type
annotations and macros, character literals, keywords, numbers, operators.

Interpolated expressions (``$(...)`` and ``$name``) are re-highlighted with
this same grammar, so a string inside an interpolation is itself rewritten.
"""

from __future__ import annotations

from resaltar.grammars.core import Grammar, Rule, digits, keywords, operators
from resaltar.styles import StyleRule

# Left delimiters of a function name: ``x = foo(`` gives ``foo``
FUNCTION_NAME_UNTIL = (" ", "\t", "\n", ",", ".", '"', "(", "=", "[", "{", ";")

# Right delimiters of a ``::Type`` or ``@macro`` run
TYPE_UNTIL = (" ", "\t", ",", ")", "\n", ";", "=", "]", "}")

INTERPOLATION_UNTIL = (" ", "\t", "\n", '"', ",", ")", "$", "\\", ".", "[", ":")

OPERATORS = (
    "<:",
    "=",
    "==",
    "===",
    "!=",
    "<",
    ">",
    "=>",
    "->",
    "||",
    "-=",
    "+=",
    "+",
    "/",
    "*",
    "-",
    "~",
    "<=",
    ">=",
    "&&",
)

_STRING_BODY = (
    Rule.between("$(", "interp", ")"),
    Rule.after("$", "interp", until=INTERPOLATION_UNTIL),
    Rule.inside("interp", (Rule.all("$(", "interp", word_boundary=False),), grammar="julia"),
    Rule.for_("\\", 1, "exit"),
)

RULES: tuple[Rule, ...] = (
    Rule.between("#=", "comment", "=#"),
    Rule.line_after("#", "comment"),
    Rule.between('"', "string"),
    Rule.inside("string", _STRING_BODY),
    Rule.before("(", "funcn", until=FUNCTION_NAME_UNTIL),
    Rule.after("::", "type", until=TYPE_UNTIL),
    Rule.after("@", "type", until=TYPE_UNTIL),
    Rule.between("'", "char"),
    *keywords(("function",), "func"),
    *keywords(("import",), "import"),
    *keywords(("using", "export"), "using"),
    *keywords(("end",), "end"),
    *keywords(("struct",), "struct"),
    *keywords(("abstract",), "abstract"),
    *keywords(("mutable",), "mutable"),
    *keywords(("if", "else", "elseif", "try", "catch", "finally", "return"), "if"),
    *keywords(("in", "isa", "where"), "in"),
    *keywords(("for", "while", "quote", "do", "let", "break", "continue"), "for"),
    *keywords(("begin", "const", "global", "local", "macro"), "begin"),
    *keywords(("module", "baremodule"), "module"),
    *digits("number"),
    *keywords(("true", "false", "nothing"), "number"),
    *operators(OPERATORS, "op"),
)

_COLORS = {
    "default": "#3D3D3D",
    "func": "#fc038c",
    "funcn": "#2F387B",
    "using": "#006C67",
    "import": "#fc038c",
    "end": "#b81870",
    "mutable": "#006C67",
    "struct": "#fc038c",
    "begin": "#fc038c",
    "module": "#b81870",
    "string": "#007958",
    "if": "#fc038c",
    "for": "#fc038c",
    "in": "#006C67",
    "abstract": "#006C67",
    "number": "#8b0000",
    "char": "#8b0000",
    "type": "#D67229",
    "exit": "#cc0099",
    "op": "#0C023E",
    "comment": "#808080",
    "interp": "darkred",
}

STYLES: tuple[StyleRule, ...] = tuple(
    StyleRule(label, (("color", color),)) for label, color in _COLORS.items()
)

JULIA = Grammar(name="julia", rules=RULES, styles=STYLES, aliases=("jl",))
