"""Style registry mapping mark labels to presentation attributes.

The registry is independent of any text: it survives Annotator.set_text() and
is shared by reference with the child annotators the region rewriter creates,
so a grammar's style table is registered once and reused across documents.

Thread Safety:
    StyleRule is frozen and safe to share. StyleRegistry is mutable and has no
    internal locking.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

# Label styling every grapheme no mark covers, and every unknown label
DEFAULT_LABEL = "default"


@dataclass(frozen=True, slots=True)
class StyleRule:
    """Ordered presentation attributes for one label.

    Attributes:
        label: Mark label the rule applies to
        attributes: (name, value) pairs, in registration order

    """

    label: str
    attributes: tuple[tuple[str, str], ...] = ()

    def css(self) -> str:
        """Attributes formatted as a CSS declaration list.

        Example:
            >>> StyleRule("kw", (("color", "#fc038c"), ("font-weight", "bold"))).css()
            'color:#fc038c;font-weight:bold;'
        """
        return "".join(f"{name}:{value};" for name, value in self.attributes)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Value of the last attribute called name."""
        for attr_name, value in reversed(self.attributes):
            if attr_name == name:
                return value
        return default


def _coerce_attributes(
    attributes: Mapping[str, str] | Iterable[tuple[str, str]],
) -> tuple[tuple[str, str], ...]:
    items = attributes.items() if isinstance(attributes, Mapping) else attributes
    return tuple((str(name), str(value)) for name, value in items)


class StyleRegistry:
    """Mutable mapping from label to StyleRule.

    Usage:
        >>> styles = StyleRegistry()
        >>> _ = styles.set("default", [("color", "#3D3D3D")])
        >>> _ = styles.set("string", {"color": "#007958"})
        >>> styles.resolve("string").css()
        'color:#007958;'
        >>> styles.resolve("unregistered").label
        'default'

    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[StyleRule] = ()) -> None:
        self._rules: dict[str, StyleRule] = {}
        for rule in rules:
            self._rules[rule.label] = rule

    def set(
        self,
        label: str,
        attributes: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> StyleRule:
        """Register or overwrite the rule for label (last write wins)."""
        rule = StyleRule(label, _coerce_attributes(attributes))
        self._rules[label] = rule
        return rule

    def add(self, rule: StyleRule) -> None:
        """Register a prebuilt rule, overwriting any rule for its label."""
        self._rules[rule.label] = rule

    def remove(self, label: str) -> StyleRule | None:
        """Unregister label. Removing an unknown label is a no-op."""
        return self._rules.pop(label, None)

    def get(self, label: str) -> StyleRule | None:
        """Rule registered for label, if any."""
        return self._rules.get(label)

    def resolve(self, label: str) -> StyleRule:
        """Rule for label, falling back to the default rule.

        When neither label nor the default label is registered, returns an
        empty default rule.
        """
        rule = self._rules.get(label)
        if rule is not None:
            return rule
        return self._rules.get(DEFAULT_LABEL) or StyleRule(DEFAULT_LABEL)

    def labels(self) -> frozenset[str]:
        """Registered labels (unordered)."""
        return frozenset(self._rules)

    def clear(self) -> None:
        self._rules.clear()

    def copy(self) -> StyleRegistry:
        return StyleRegistry(self._rules.values())

    def __contains__(self, label: object) -> bool:
        return label in self._rules

    def __iter__(self) -> Iterator[StyleRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"StyleRegistry(labels={sorted(self._rules)!r})"
