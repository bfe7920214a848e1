"""Text normalization and escaping for resaltar.

Two directions:

- normalize_input: decode the markup entities editors hand us (``<br>``,
  ``&nbsp;``, ``&#40;`` ...) so matchers see plain source text.
- escape_presentation: encode a fragment for HTML display, turning spaces and
  newlines into their visible equivalents.

Example:
    >>> from resaltar.utils.text import normalize_input, escape_presentation
    >>> normalize_input("x&nbsp;=&nbsp;1<br>")
    'x = 1\\n'
    >>> escape_presentation("a < b\\n")
    'a&nbsp;&lt;&nbsp;b<br>'
"""

from __future__ import annotations

import html as html_module
import re

# Order matters: "</br>" must be tried before "<br>" would leave a stray "/".
_INPUT_ENTITIES: tuple[tuple[str, str], ...] = (
    ("</br>", "\n"),
    ("<br>", "\n"),
    ("&nbsp;", " "),
    ("&#40;", "("),
    ("&#41;", ")"),
    ("&#34;", '"'),
    ("&#60;", "<"),
    ("&#62;", ">"),
    ("&#36;", "$"),
    ("&#61;", "="),
    ("&lt;", "<"),
    ("&gt;", ">"),
)

_INPUT_PATTERN = re.compile("|".join(re.escape(src) for src, _ in _INPUT_ENTITIES))
_INPUT_MAP: dict[str, str] = dict(_INPUT_ENTITIES)


def normalize_input(text: str) -> str:
    """Decode the markup entities accepted on input.

    Replacement is single-pass, so ``&amp;lt;`` style double encodings are not
    collapsed twice.

    Args:
        text: Raw text, possibly carrying editor markup

    Returns:
        Plain source text
    """
    if not text or ("<" not in text and "&" not in text):
        return text
    return _INPUT_PATTERN.sub(lambda m: _INPUT_MAP[m.group(0)], text)


def escape_presentation(text: str) -> str:
    """Escape a fragment for display inside an HTML element.

    Escapes ``& < > "`` and then makes whitespace and backslashes survive HTML
    whitespace collapsing: space becomes ``&nbsp;``, newline becomes ``<br>``,
    backslash becomes ``&bsol;``.

    Args:
        text: Fragment text

    Returns:
        HTML-safe presentation text
    """
    if not text:
        return ""
    escaped = html_module.escape(text, quote=True).replace("&#x27;", "'")
    return escaped.replace(" ", "&nbsp;").replace("\n", "<br>").replace("\\", "&bsol;")


def unescape_presentation(text: str) -> str:
    """Invert escape_presentation.

    Used to check that rendered output preserves the source text.
    """
    if not text:
        return ""
    text = text.replace("<br>", "\n").replace("&nbsp;", " ").replace("&bsol;", "\\")
    return html_module.unescape(text)
