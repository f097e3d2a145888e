"""
Load plan header field extraction.

Every field is an independent labelled-pattern lookup over the whole
document, so a missing or garbled field never blocks the others:

    EK0205 / 12 OCT
    ACFT TYPE: 388Y  ACFT REG: A6-EOM  STD: 09:30
    PREPARED BY: S123456  PREPARED ON: 12-Oct-25 08:15:00
    TTL PLN ULD: 06PMC/07AKE  ULD VERSION: 06PMC/26
    SECTOR: DXBMXP
"""

from dataclasses import dataclass, asdict
from datetime import date as date_type
from typing import Optional
import re
import structlog

from parsers.load_plan_markers import is_table_header, is_totals_line
from parsers.shipment_line import looks_like_shipment_line
from parsers.uld_section import is_uld_marker
from utils.text_utils import filename_tokens, is_separator_line, normalize_whitespace, split_lines

logger = structlog.get_logger(__name__)

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_MONTH_ALTERNATION = "|".join(MONTHS)

DATE_PATTERN = re.compile(
    rf"(?<!\d)(?P<day>\d{{1,2}})\s*-?\s*(?P<month>{_MONTH_ALTERNATION})(?![A-Z])"
    r"(?:\s*-?\s*(?P<year>\d{4}))?",
    re.IGNORECASE,
)

# Labelled fields; the colon after a label is optional in every layout
FIELD_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "aircraft_type": (re.compile(r"ACFT\s+TYPE[ \t]*:?[ \t]*(?P<value>[A-Z0-9]+)", re.IGNORECASE),),
    "aircraft_reg": (re.compile(r"ACFT\s+REG[ \t]*:?[ \t]*(?P<value>[A-Z0-9-]+)", re.IGNORECASE),),
    "sector": (re.compile(r"SECTOR[ \t]*:?[ \t]*(?P<value>[A-Z]{6})\b", re.IGNORECASE),),
    "std": (re.compile(r"\bSTD[ \t]*:?[ \t]*(?P<value>\d{2}:\d{2})"),),
    "prepared_by": (re.compile(r"PREPARED\s+BY[ \t]*:?[ \t]*(?P<value>[A-Z0-9]+)", re.IGNORECASE),),
    "prepared_on": (
        re.compile(r"PREPARED\s+ON[ \t]*:?[ \t]*(?P<value>[\w-]+[ \t]+[\d:]+)", re.IGNORECASE),
        re.compile(r"PREPARED\s+ON[ \t]*:?[ \t]*(?P<value>[\w-]+)", re.IGNORECASE),
    ),
    "ttl_pln_uld": (re.compile(r"TTL\s+PLN\s+ULD[ \t]*:?[ \t]*(?P<value>[A-Z0-9/]+)", re.IGNORECASE),),
    "uld_version": (re.compile(r"ULD\s+VERSION[ \t]*:?[ \t]*(?P<value>[A-Z0-9/]+)", re.IGNORECASE),),
}

CRITICAL_PATTERN = re.compile(r"CRITICAL", re.IGNORECASE)
CORRECTION_TOKEN_PATTERN = re.compile(r"^CORR?\d*$", re.IGNORECASE)
_CORRECTION_IN_TEXT = re.compile(r"\bCORR?\d*\b", re.IGNORECASE)


@dataclass
class LoadPlanHeader:
    """Document-level fields of one load plan."""
    flight_number: str = ""
    date: str = ""
    aircraft_type: str = ""
    aircraft_reg: str = ""
    sector: str = ""
    std: str = ""
    prepared_by: str = ""
    prepared_on: str = ""
    ttl_pln_uld: Optional[str] = None
    uld_version: Optional[str] = None
    header_warning: Optional[str] = None
    is_critical: bool = False
    is_correct_version: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def _flight_patterns(carrier: str) -> tuple[re.Pattern, ...]:
    code = re.escape(carrier)
    return (
        re.compile(rf"\b{code}\s*-?\s*(?P<number>\d{{4}})\b", re.IGNORECASE),
        re.compile(rf"\b(?:FLIGHT|FLT)\s*(?:NO\.?)?\s*:?\s*{code}\s*-?\s*(?P<number>\d{{3,4}})\b", re.IGNORECASE),
        re.compile(rf"\b{code}\s*-?\s*(?P<number>\d{{3}})\b", re.IGNORECASE),
    )


def _search_flight(text: str, carrier: str) -> Optional[str]:
    for pattern in _flight_patterns(carrier):
        match = pattern.search(text)
        if match:
            return f"{carrier.upper()}{match.group('number').zfill(4)}"
    return None


def extract_flight_number(text: str, filename: str = "", carrier: str = "EK") -> str:
    """
    Find the flight number in the text, then in the filename.

    - "EK 205" → "EK0205"
    - text without a flight, filename "EK0205_12OCT.docx" → "EK0205"

    Returns:
        Normalized carrier + 4 digits, or "" when neither source has one
    """
    flight = _search_flight(text or "", carrier)
    if flight:
        return flight

    # Filenames glue tokens with "_" which defeats \b, so compare token by token
    flight = _search_flight(" ".join(filename_tokens(filename)), carrier)
    if flight:
        logger.debug("flight_number_from_filename", filename=filename, flight_number=flight)
        return flight
    return ""


def extract_date(text: str) -> str:
    """First day + month mention, kept as printed ("12 Oct", "12-Oct-2025")."""
    match = DATE_PATTERN.search(text or "")
    return match.group(0).strip() if match else ""


def _extract_field(text: str, name: str) -> str:
    for pattern in FIELD_PATTERNS[name]:
        match = pattern.search(text)
        if match:
            return match.group("value").strip()
    return ""


def _header_area(lines: list[str]) -> str:
    """Text above the first table header (the whole text when there is none)."""
    area = []
    for raw in lines:
        line = normalize_whitespace(raw)
        if is_table_header(line):
            break
        area.append(line)
    return "\n".join(area)


def detect_correction_mode(text: str, filename: str = "") -> bool:
    """
    True when a COR/CORR token marks the document as a revision.

    The header area and the filename are independent signals; either one
    is enough.
    """
    header_area = _header_area(split_lines(text))
    if _CORRECTION_IN_TEXT.search(header_area):
        return True
    return any(CORRECTION_TOKEN_PATTERN.match(token) for token in filename_tokens(filename))


def extract_header_warning(lines: list[str]) -> Optional[str]:
    """
    Capture the advisory block printed between the first table header and
    the first shipment row.

    Separator, blank and ULD marker lines are skipped; capture stops at the
    first shipment-shaped line or a totals line.
    """
    collected: list[str] = []
    in_block = False

    for raw in lines:
        line = normalize_whitespace(raw)
        if not in_block:
            in_block = is_table_header(line)
            continue
        if looks_like_shipment_line(line) or is_totals_line(line):
            break
        if not line or is_separator_line(line) or is_uld_marker(line):
            continue
        collected.append(raw.strip())

    return "\n".join(collected) if collected else None


def extract_header(text: str, filename: str = "", carrier: str = "EK") -> LoadPlanHeader:
    """
    Extract header fields from load plan text.

    Never raises; a field that cannot be found is left empty. Callers decide
    whether a missing flight number is fatal.

    Args:
        text: Full document text
        filename: Source filename (flight and correction-mode fallback)
        carrier: Two-character airline code used to normalize the flight number

    Returns:
        LoadPlanHeader
    """
    text = text or ""
    lines = split_lines(text)

    header = LoadPlanHeader(
        flight_number=extract_flight_number(text, filename, carrier),
        date=extract_date(text),
        aircraft_type=_extract_field(text, "aircraft_type"),
        aircraft_reg=_extract_field(text, "aircraft_reg"),
        sector=_extract_field(text, "sector").upper(),
        std=_extract_field(text, "std"),
        prepared_by=_extract_field(text, "prepared_by"),
        prepared_on=_extract_field(text, "prepared_on"),
        ttl_pln_uld=_extract_field(text, "ttl_pln_uld") or None,
        uld_version=_extract_field(text, "uld_version") or None,
        header_warning=extract_header_warning(lines),
        is_critical=bool(CRITICAL_PATTERN.search(text)),
        is_correct_version=detect_correction_mode(text, filename),
    )

    logger.debug(
        "load_plan_header_extracted",
        flight_number=header.flight_number,
        date=header.date,
        sector=header.sector,
        is_critical=header.is_critical,
        is_correct_version=header.is_correct_version,
    )
    return header


def format_date_for_report(value: str, year: Optional[int] = None) -> str:
    """
    Format a header date as DD-Mon-YYYY.

    - "1 Oct" → "01-Oct-2025" (year defaults to the current year)
    - "1-Oct-2024" → "01-Oct-2024"
    - "TBA" → "TBA"
    """
    if not value:
        return value

    match = DATE_PATTERN.search(value)
    if not match:
        return value

    month = match.group("month").capitalize()
    resolved_year = match.group("year") or str(year or date_type.today().year)
    return f"{int(match.group('day')):02d}-{month}-{resolved_year}"
