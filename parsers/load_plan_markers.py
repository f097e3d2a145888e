"""
Structural marker lines of a load plan.

All checks take a trimmed, whitespace-normalized line.
"""

from typing import Optional
import re

SECTOR_MARKER_PATTERN = re.compile(r"^SECTOR\s*:\s*(?P<sector>[A-Z]{6})\b", re.IGNORECASE)
RAMP_TRANSFER_PATTERN = re.compile(r"\*{3,}\s*RAMP\s+TRANSFER\s*\*{3,}", re.IGNORECASE)
TOTALS_PATTERN = re.compile(r"^TOTALS\s*:", re.IGNORECASE)
BRACKET_NOTE_PATTERN = re.compile(r"^(?:\*\*)?\[")

_SERIAL_COLUMN = re.compile(r"\bSER\.", re.IGNORECASE)
_AWB_COLUMN = re.compile(r"\bAWB\s*NO\b", re.IGNORECASE)

# Header field labels; pages repeat them, they are never shipment comments
HEADER_LABEL_PATTERN = re.compile(
    r"\b(?:ACFT\s+TYPE|ACFT\s+REG|PREPARED\s+BY|PREPARED\s+ON|TTL\s+PLN\s+ULD|ULD\s+VERSION|STD)\s*:",
    re.IGNORECASE,
)

# Page header lines such as "EK0205 / 12 OCT" and "EMIRATES SKYCARGO LOAD PLAN"
PAGE_FLIGHT_LINE_PATTERN = re.compile(r"^[A-Z0-9]{2}\s*-?\s*\d{3,4}[A-Z]?\s*/\s*\d{1,2}\s*-?\s*[A-Z]{3}\b", re.IGNORECASE)
DOCUMENT_TITLE_PATTERN = re.compile(r"\bLOAD\s+PLAN\b", re.IGNORECASE)
PAGE_NUMBER_PATTERN = re.compile(r"^PAGE\s+\d+(?:\s*(?:OF|/)\s*\d+)?$", re.IGNORECASE)


def sector_from_marker(line: str) -> Optional[str]:
    """ "SECTOR: DXBMXP" → "DXBMXP" """
    match = SECTOR_MARKER_PATTERN.match(line)
    return match.group("sector").upper() if match else None


def is_table_header(line: str) -> bool:
    """Column header row: carries both the serial and the AWB column labels."""
    return bool(_SERIAL_COLUMN.search(line) and _AWB_COLUMN.search(line))


def is_ramp_transfer_banner(line: str) -> bool:
    return bool(RAMP_TRANSFER_PATTERN.search(line))


def is_totals_line(line: str) -> bool:
    return bool(TOTALS_PATTERN.match(line))


def is_page_header_line(line: str) -> bool:
    """True for lines a new page repeats; they are never shipment comments."""
    return bool(
        HEADER_LABEL_PATTERN.search(line)
        or PAGE_FLIGHT_LINE_PATTERN.match(line)
        or DOCUMENT_TITLE_PATTERN.search(line)
        or PAGE_NUMBER_PATTERN.match(line)
    )


def bracket_note_text(line: str) -> Optional[str]:
    """
    Text of a bracketed note, or None for other lines.

    - "[Must be load in Fire containment equipment]" → "Must be load in Fire containment equipment"
    - "**[DO NOT STACK]**" → "DO NOT STACK"
    """
    if not BRACKET_NOTE_PATTERN.match(line):
        return None
    return line.replace("**", "").replace("[", "").replace("]", "").strip()
