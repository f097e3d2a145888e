"""
Text utilities for load plan documents.

Extracted manifests mix tabs, runs of spaces and stray carriage returns;
these helpers give every parser the same view of a line.
"""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")
_SEPARATOR_LINE = re.compile(r"^[_\-=]+$")
_FILENAME_TOKEN_SPLIT = re.compile(r"[^A-Za-z0-9]+")


def normalize_whitespace(line: Optional[str]) -> str:
    """
    Collapse every whitespace run to one space and trim the ends.

    - "001\t176-12345678   DXBMXP" → "001 176-12345678 DXBMXP"
    - "   " → ""
    """
    if not line:
        return ""
    return _WHITESPACE.sub(" ", line).strip()


def is_separator_line(line: str) -> bool:
    """True for underline rows such as "-----" or "=====" (after trimming)."""
    return bool(_SEPARATOR_LINE.match(line.strip()))


def split_lines(text: Optional[str]) -> list[str]:
    """Split document text into lines, accepting \\r\\n, \\r and \\n endings."""
    if not text:
        return []
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def filename_tokens(filename: Optional[str]) -> list[str]:
    """
    Break a filename into uppercase alphanumeric tokens.

    - "EK0205_12OCT_COR.docx" → ["EK0205", "12OCT", "COR", "DOCX"]
    """
    if not filename:
        return []
    return [t.upper() for t in _FILENAME_TOKEN_SPLIT.split(filename) if t]


def parse_int(value: Optional[str], default: int = 0) -> int:
    """Parse an integer column, falling back to default."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_float(value: Optional[str], default: float = 0.0) -> float:
    """Parse a decimal column ("1,234.5" allowed), falling back to default."""
    try:
        return float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return default
