"""Grammar packs as immutable data.

A Grammar is an ordered tuple of Rules (the mark phase) plus a tuple of
StyleRules (the style phase). Rules are plain frozen records describing one
matcher call each; apply_rules() dispatches them to the matchers in order, so
the order of the tuple is the grammar's priority order.

An INSIDE rule rewrites the regions carrying a label: nested rules and/or a
named grammar are applied to each region as an independent document. Naming
the grammar (rather than holding it) lets a grammar recurse into itself, as
Julia does for string interpolation.

Example:
    >>> from resaltar import Annotator
    >>> tiny = Grammar(
    ...     name="tiny",
    ...     rules=(Rule.line_after("#", "comment"), Rule.all("let", "keyword")),
    ...     styles=(StyleRule("keyword", (("color", "purple"),)),),
    ... )
    >>> a = tiny.annotate("let x # let")
    >>> [(a.text_of(m), m.label) for m in a.marks]
    [('let', 'keyword'), ('# let', 'comment')]

Thread Safety:
    Rule and Grammar are frozen. The registry is a module-level dict written at
    import time and by register_grammar().

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum, auto

from resaltar.annotator import Annotator
from resaltar.errors import MatcherError, UnknownGrammarError
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
from resaltar.rewrite import rewrite_inside
from resaltar.styles import StyleRule
from resaltar.utils.logger import get_logger

logger = get_logger(__name__)


class RuleKind(Enum):
    """Matcher a Rule invokes."""

    ALL = auto()
    CHAR = auto()
    BETWEEN = auto()
    BEFORE = auto()
    AFTER = auto()
    FOR = auto()
    LINE_AFTER = auto()
    LINE_STARTSWITH = auto()
    INSIDE = auto()


@dataclass(frozen=True, slots=True)
class Rule:
    """One matcher invocation, as data.

    Use the classmethod constructors; they only set the fields their matcher
    reads. For INSIDE rules, ``target`` is the label whose regions are
    rewritten.

    """

    kind: RuleKind
    target: str
    label: str = ""
    closer: str | None = None
    until: tuple[str, ...] = ()
    include_left: int = 0
    include_right: int = 0
    length: int = 0
    word_boundary: bool = True
    numeric: bool = False
    rules: tuple[Rule, ...] = ()
    grammar: str | None = None

    @classmethod
    def all(cls, target: str, label: str, *, word_boundary: bool = True) -> Rule:
        return cls(RuleKind.ALL, target, label, word_boundary=word_boundary)

    @classmethod
    def char(cls, char: str, label: str, *, numeric: bool = False) -> Rule:
        return cls(RuleKind.CHAR, char, label, numeric=numeric)

    @classmethod
    def between(cls, opener: str, label: str, closer: str | None = None) -> Rule:
        return cls(RuleKind.BETWEEN, opener, label, closer=closer)

    @classmethod
    def before(
        cls,
        target: str,
        label: str,
        *,
        until: Iterable[str] = (),
        include_left: int = 0,
        include_right: int = 0,
    ) -> Rule:
        return cls(
            RuleKind.BEFORE,
            target,
            label,
            until=tuple(until),
            include_left=include_left,
            include_right=include_right,
        )

    @classmethod
    def after(
        cls,
        target: str,
        label: str,
        *,
        until: Iterable[str] = (),
        include_left: int = 0,
        include_right: int = 0,
    ) -> Rule:
        return cls(
            RuleKind.AFTER,
            target,
            label,
            until=tuple(until),
            include_left=include_left,
            include_right=include_right,
        )

    @classmethod
    def for_(cls, target: str, length: int, label: str) -> Rule:
        return cls(RuleKind.FOR, target, label, length=length)

    @classmethod
    def line_after(cls, target: str, label: str) -> Rule:
        return cls(RuleKind.LINE_AFTER, target, label)

    @classmethod
    def line_startswith(cls, prefix: str, label: str) -> Rule:
        return cls(RuleKind.LINE_STARTSWITH, prefix, label)

    @classmethod
    def inside(
        cls,
        label: str,
        rules: Iterable[Rule] = (),
        *,
        grammar: str | None = None,
    ) -> Rule:
        """Rewrite regions labeled label with rules, then grammar (by name)."""
        return cls(RuleKind.INSIDE, label, rules=tuple(rules), grammar=grammar)


def keywords(words: Iterable[str], label: str) -> tuple[Rule, ...]:
    """Word-boundary ALL rules for each word, in the given order."""
    return tuple(Rule.all(word, label) for word in words)


def operators(symbols: Iterable[str], label: str) -> tuple[Rule, ...]:
    """ALL rules for operator symbols, longest first so ``==`` beats ``=``."""
    ordered = sorted(dict.fromkeys(symbols), key=len, reverse=True)
    return tuple(Rule.all(symbol, label) for symbol in ordered)


def digits(label: str) -> tuple[Rule, ...]:
    """Numeric-mode CHAR rules for 0-9."""
    return tuple(Rule.char(str(d), label, numeric=True) for d in range(10))


def _apply_inside(annotator: Annotator, rule: Rule) -> int:
    nested = rule.rules
    grammar = get_grammar(rule.grammar) if rule.grammar else None

    def annotate_region(child: Annotator) -> None:
        apply_rules(child, nested)
        if grammar is not None:
            grammar.mark(child)

    return rewrite_inside(annotator, rule.target, annotate_region)


_DISPATCH: dict[RuleKind, Callable[[Annotator, Rule], int]] = {
    RuleKind.ALL: lambda a, r: match_all(a, r.target, r.label, word_boundary=r.word_boundary),
    RuleKind.CHAR: lambda a, r: match_char(a, r.target, r.label, numeric=r.numeric),
    RuleKind.BETWEEN: lambda a, r: match_between(a, r.target, r.label, closer=r.closer),
    RuleKind.BEFORE: lambda a, r: match_before(
        a,
        r.target,
        r.label,
        until=r.until,
        include_left=r.include_left,
        include_right=r.include_right,
    ),
    RuleKind.AFTER: lambda a, r: match_after(
        a,
        r.target,
        r.label,
        until=r.until,
        include_left=r.include_left,
        include_right=r.include_right,
    ),
    RuleKind.FOR: lambda a, r: match_for(a, r.target, r.length, r.label),
    RuleKind.LINE_AFTER: lambda a, r: match_line_after(a, r.target, r.label),
    RuleKind.LINE_STARTSWITH: lambda a, r: match_line_startswith(a, r.target, r.label),
    RuleKind.INSIDE: _apply_inside,
}


def apply_rules(annotator: Annotator, rules: Iterable[Rule]) -> int:
    """Run rules against annotator in order.

    Returns:
        Total number of marks recorded (regions rewritten, for INSIDE rules)

    Raises:
        MatcherError: A rule has an unknown kind or invalid arguments
        UnknownGrammarError: An INSIDE rule names an unregistered grammar
        RecursionDepthError: INSIDE rules nest deeper than configured
    """
    total = 0
    for rule in rules:
        handler = _DISPATCH.get(rule.kind)
        if handler is None:
            raise MatcherError(f"Unknown rule kind: {rule.kind!r}")
        total += handler(annotator, rule)
    return total


@dataclass(frozen=True, slots=True)
class Grammar:
    """A grammar pack: ordered mark rules plus a style table.

    Attributes:
        name: Registry name (lowercase)
        rules: Mark phase, replayable on any text
        styles: Style phase, idempotent
        aliases: Other names the registry resolves to this grammar

    """

    name: str
    rules: tuple[Rule, ...]
    styles: tuple[StyleRule, ...] = ()
    aliases: tuple[str, ...] = ()

    def mark(self, annotator: Annotator) -> int:
        """Apply the mark phase to annotator."""
        return apply_rules(annotator, self.rules)

    def style(self, annotator: Annotator) -> None:
        """Register the style table on annotator's registry."""
        for rule in self.styles:
            annotator.styles.add(rule)

    def highlight(self, annotator: Annotator) -> Annotator:
        """Mark and style annotator; returns it for chaining."""
        self.mark(annotator)
        self.style(annotator)
        return annotator

    def annotate(self, text: str, *, normalize: bool | None = None) -> Annotator:
        """New Annotator over text, marked and styled by this grammar.

        normalize decodes editor markup entities first; None follows
        HighlightConfig.normalize_input.
        """
        return self.highlight(Annotator(text, normalize=normalize))


# Registry of grammars by name, plus alias -> name
_GRAMMARS: dict[str, Grammar] = {}
_ALIASES: dict[str, str] = {}


def register_grammar(grammar: Grammar) -> Grammar:
    """Register grammar under its name and aliases, replacing any previous one.

    Returns:
        The grammar, so modules can register at definition time
    """
    name = grammar.name.lower()
    _GRAMMARS[name] = grammar
    for alias in grammar.aliases:
        _ALIASES[alias.lower()] = name
    logger.debug("registered grammar %r", name)
    return grammar


def unregister_grammar(name: str) -> Grammar | None:
    """Remove a grammar and its aliases. Unknown names are ignored."""
    key = name.lower()
    grammar = _GRAMMARS.pop(key, None)
    if grammar is not None:
        for alias in [a for a, target in _ALIASES.items() if target == key]:
            del _ALIASES[alias]
    return grammar


def get_grammar(name: str) -> Grammar:
    """Look up a grammar by name or alias (case-insensitive).

    Raises:
        UnknownGrammarError: No grammar is registered under name
    """
    key = name.lower()
    key = _ALIASES.get(key, key)
    grammar = _GRAMMARS.get(key)
    if grammar is None:
        raise UnknownGrammarError(name, _GRAMMARS)
    return grammar


def available_grammars() -> tuple[str, ...]:
    """Registered grammar names, sorted."""
    return tuple(sorted(_GRAMMARS))
