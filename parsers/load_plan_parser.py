"""
Load plan document parser.

Turns the plain text of a cargo load plan (already extracted from the
DOCX/RTF/PDF upload) into a header plus the ordered list of shipments.

A manifest page looks like:

    SECTOR: DXBMXP
    SER. AWB NO       ORGDES PCS WGT  VOL  LVOL SHC     MAN.DESC ...
    ---------------------------------------------------------------
    001 176-12345678 DXBMXP 2   10.0 1.0  1.0  VUN-CRT CONSOLIDATION GCR P2 NORM SS N EK0201 12OCT2025 10:30 N
    [Must be load in Fire containment equipment]
    002 176-87654321 DXBMXP 1   5.0  0.5  0.5  COL     MEDICINES GCR P2 NORM SS N EK0202 11OCT2025 09:15 N
    XX 02PMC XX
    ***** RAMP TRANSFER *****
    003 ...
    TOTALS: 3 PCS ...

ULD markers ("XX 02PMC XX") may follow the shipments they group or precede
them. Lines are folded through one ParserState:

- shipments with no pending ULD wait in a buffer until a ULD marker arrives
  and is assigned to all of them;
- a ULD marker seen with an empty buffer becomes pending and is taken by the
  next shipment, which then stays open to collect its notes;
- table headers, totals lines and the end of the document flush whatever is
  still waiting, with an empty ULD.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional
import structlog

from exceptions import UnidentifiableDocumentError
from parsers.load_plan_header import LoadPlanHeader, extract_header
from parsers.load_plan_markers import (
    bracket_note_text,
    is_page_header_line,
    is_ramp_transfer_banner,
    is_table_header,
    is_totals_line,
    sector_from_marker,
)
from parsers.shipment_line import ShipmentFields, looks_like_shipment_line, match_shipment_line
from parsers.uld_section import parse_uld_marker
from utils.text_utils import is_separator_line, normalize_whitespace, split_lines

logger = structlog.get_logger(__name__)

# Skipped line reasons
REASON_NO_MATCHING_LAYOUT = "no_matching_layout"
REASON_OUTSIDE_SECTION = "outside_shipment_section"


@dataclass
class Shipment(ShipmentFields):
    """One manifest row with the context the document gave it."""
    uld: str = ""
    special_notes: list[str] = field(default_factory=list)
    is_ramp_transfer: bool = False
    sector: str = ""


@dataclass
class SkippedLine:
    """A shipment-shaped line that produced no shipment (non-fatal)."""
    line_number: int
    text: str
    reason: str


@dataclass
class LoadPlanParseResult:
    """Result of parsing one load plan document."""
    header: LoadPlanHeader
    shipments: list[Shipment] = field(default_factory=list)
    skipped_lines: list[SkippedLine] = field(default_factory=list)

    @property
    def unmatched_count(self) -> int:
        """Shipment-shaped lines that were dropped."""
        return len(self.skipped_lines)

    @property
    def success(self) -> bool:
        """True if every shipment-shaped line was recovered."""
        return self.unmatched_count == 0

    @property
    def has_data(self) -> bool:
        return len(self.shipments) > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "header": self.header.to_dict(),
            "shipments": [asdict(s) for s in self.shipments],
            "skipped_lines": [
                {"line_number": s.line_number, "text": s.text, "reason": s.reason}
                for s in self.skipped_lines
            ],
            "unmatched_count": self.unmatched_count,
            "success": self.success,
        }


@dataclass
class ParserState:
    """Mutable state of one parse; never shared between calls."""
    sector: str = ""
    pending_uld: str = ""
    ramp_transfer: bool = False
    in_shipment_section: bool = False
    buffer: list[Shipment] = field(default_factory=list)
    open_shipment: Optional[Shipment] = None
    shipments: list[Shipment] = field(default_factory=list)
    skipped_lines: list[SkippedLine] = field(default_factory=list)


# ===================
# STATE TRANSITIONS
# ===================

def _emit(state: ParserState, shipment: Shipment) -> None:
    if not shipment.sector:
        # Document without any sector marker: the row's own route is the sector
        shipment.sector = f"{shipment.origin}{shipment.destination}"
    state.shipments.append(shipment)


def _close_open_shipment(state: ParserState) -> None:
    if state.open_shipment is not None:
        _emit(state, state.open_shipment)
        state.open_shipment = None


def _flush(state: ParserState) -> None:
    """Emit everything still waiting; unresolved shipments keep an empty ULD."""
    _close_open_shipment(state)
    for shipment in state.buffer:
        _emit(state, shipment)
    state.buffer.clear()


def _end_section_block(state: ParserState) -> None:
    _flush(state)
    state.pending_uld = ""
    state.ramp_transfer = False


def _on_uld_marker(state: ParserState, uld: str) -> None:
    _close_open_shipment(state)
    if state.buffer:
        for shipment in state.buffer:
            shipment.uld = uld
            _emit(state, shipment)
        state.buffer.clear()
        return
    state.pending_uld = uld


def _on_shipment(state: ParserState, fields: ShipmentFields) -> None:
    _close_open_shipment(state)
    shipment = Shipment(
        **asdict(fields),
        is_ramp_transfer=state.ramp_transfer,
        # Tagged when the row is read, not when it is flushed: a SECTOR line
        # between a row and its ULD marker must not re-tag the row
        sector=state.sector,
    )
    if state.pending_uld:
        shipment.uld = state.pending_uld
        state.pending_uld = ""
        state.open_shipment = shipment
    else:
        state.buffer.append(shipment)


def _attach_note(state: ParserState, note: str) -> None:
    """Append a note to the open shipment, else the newest buffered one."""
    if not note:
        return
    if state.open_shipment is not None:
        state.open_shipment.special_notes.append(note)
    elif state.buffer:
        state.buffer[-1].special_notes.append(note)


def _skip(state: ParserState, line_number: int, line: str, reason: str) -> None:
    state.skipped_lines.append(SkippedLine(line_number=line_number, text=line, reason=reason))
    logger.warning(
        "shipment_line_skipped",
        line_number=line_number,
        reason=reason,
        text=line,
    )


def _consume_line(state: ParserState, line_number: int, raw: str) -> None:
    line = normalize_whitespace(raw)
    if not line or is_separator_line(line):
        return

    sector = sector_from_marker(line)
    if sector:
        state.sector = sector
        return

    if is_table_header(line):
        _end_section_block(state)
        state.in_shipment_section = True
        return

    if is_ramp_transfer_banner(line):
        state.ramp_transfer = True
        return

    if is_totals_line(line):
        _end_section_block(state)
        return

    uld = parse_uld_marker(line)
    if uld:
        _on_uld_marker(state, uld)
        return

    if looks_like_shipment_line(line):
        if not state.in_shipment_section:
            _skip(state, line_number, line, REASON_OUTSIDE_SECTION)
            return
        fields = match_shipment_line(line)
        if fields is None:
            _skip(state, line_number, line, REASON_NO_MATCHING_LAYOUT)
            return
        _on_shipment(state, fields)
        return

    note = bracket_note_text(line)
    if note is not None:
        _attach_note(state, note)
        return

    if state.in_shipment_section and not is_page_header_line(line):
        _attach_note(state, line)


# ===================
# PUBLIC API
# ===================

def parse_shipments(text: str, header: LoadPlanHeader) -> LoadPlanParseResult:
    """
    Extract the ordered shipment list from load plan text.

    Args:
        text: Full document text
        header: Header already extracted from the same text; its sector is
            used until the first sector marker

    Returns:
        LoadPlanParseResult with shipments in document order and the
        shipment-shaped lines that could not be parsed
    """
    state = ParserState(sector=header.sector)

    for line_number, raw in enumerate(split_lines(text), start=1):
        _consume_line(state, line_number, raw)

    _flush(state)

    return LoadPlanParseResult(
        header=header,
        shipments=state.shipments,
        skipped_lines=state.skipped_lines,
    )


def parse_load_plan(text: str, filename: str = "", carrier: str = "EK") -> LoadPlanParseResult:
    """
    Parse a load plan document.

    Args:
        text: Full document text
        filename: Source filename, used for flight and correction-mode fallback
        carrier: Airline code the flight number is normalized to

    Returns:
        LoadPlanParseResult

    Raises:
        UnidentifiableDocumentError: No flight number in the text or the filename
    """
    header = extract_header(text, filename=filename, carrier=carrier)
    if not header.flight_number:
        logger.warning("load_plan_unidentifiable", filename=filename or None)
        raise UnidentifiableDocumentError(filename=filename or None)

    result = parse_shipments(text, header)
    if not result.has_data:
        logger.warning("load_plan_has_no_shipments", flight_number=header.flight_number, filename=filename or None)

    logger.info(
        "load_plan_parsed",
        flight_number=header.flight_number,
        filename=filename or None,
        sector=header.sector,
        shipments=len(result.shipments),
        unmatched=result.unmatched_count,
        is_correct_version=header.is_correct_version,
    )
    return result
