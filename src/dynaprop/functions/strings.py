"""Text functions exposed as members of ``str`` values.

``lower``, ``upper`` and ``capitalize`` are not defined here: ``str``'s own
methods already serve them.
"""

from __future__ import annotations

import html
import re
import urllib.parse
from xml.sax.saxutils import escape as _xml_escape

_WORD = re.compile(r"\b(\w)(\w*)")
_XML_QUOTES = {'"': "&quot;", "'": "&apos;"}


class StringFunctions:

    @staticmethod
    def substring(value: str, begin: int, end: int | None = None) -> str:
        """Strict slice: indexes outside ``0 <= begin <= end <= len`` raise."""
        if end is None:
            end = len(value)
        if begin < 0 or end > len(value) or begin > end:
            raise IndexError(
                f"begin {begin}, end {end}, length {len(value)}"
            )
        return value[begin:end]

    @staticmethod
    def substr(value: str, begin: int, end: int | None = None) -> str:
        """Lenient slice; out-of-range indexes are clamped."""
        return value[max(begin, 0):end]

    @staticmethod
    def leftstr(value: str, length: int) -> str:
        return value[:max(length, 0)]

    @staticmethod
    def rightstr(value: str, length: int) -> str:
        return value[len(value) - length:] if length > 0 else ""

    @staticmethod
    def midstr(value: str, begin: int, length: int) -> str:
        begin = max(begin, 0)
        return value[begin:begin + max(length, 0)]

    @staticmethod
    def word_capitalize(value: str) -> str:
        """Upper-case the first letter of each word, leaving the rest alone."""
        return _WORD.sub(lambda m: m.group(1).upper() + m.group(2), value)

    @staticmethod
    def escape_html(value: str) -> str:
        return html.escape(value)

    @staticmethod
    def escape_xml(value: str) -> str:
        return _xml_escape(value, _XML_QUOTES)

    @staticmethod
    def escape_url(value: str) -> str:
        return urllib.parse.quote_plus(value)

    @staticmethod
    def parse_int(value: str, radix: int = 10) -> int:
        return int(value.strip(), radix)

    @staticmethod
    def parse_float(value: str) -> float:
        return float(value.strip())
