"""Utility modules for resaltar.

Provides:
- text: normalize_input, escape_presentation for input decoding and HTML display
- logger: get_logger for logging
"""

from resaltar.utils.logger import get_logger
from resaltar.utils.text import escape_presentation, normalize_input, unescape_presentation

__all__ = [
    "escape_presentation",
    "get_logger",
    "normalize_input",
    "unescape_presentation",
]
