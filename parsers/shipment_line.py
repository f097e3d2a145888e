"""
Shipment line matcher for load plan manifests.

One manifest row reads, left to right:

    SER AWB ORGDES PCS WGT VOL LVOL SHC MAN.DESC PCODE PC THC BS PI
    FLTIN ARRDT.TIME QNN/AQNN WHS SI

    001 176-12345678 DXBMXP 2 10.0 1.0 1.0 VUN-CRT CONSOLIDATION GCR P2 NORM SS N EK0201 12OCT2025 10:30 N

The mainframe printout drops columns instead of leaving them blank (SHC, PC,
the inbound flight block and BS/PI are the usual casualties), so a row is tried
against an ordered list of strategies. Each strategy is a pattern plus the
shared validation in _is_plausible(); the first strategy that both matches
and validates wins.
"""

from dataclasses import dataclass, field
from typing import Optional
import re
import structlog

from utils.text_utils import normalize_whitespace, parse_float, parse_int

logger = structlog.get_logger(__name__)

# Shape every shipment row shares; used for diagnostics and header-warning capture
SHIPMENT_SHAPE_PATTERN = re.compile(r"^\d{3}\s+\d{3}\s*-\s*\d{8}\b")

# ===================
# PATTERN FRAGMENTS
# ===================

_PREFIX = (
    r"^(?P<serial>\d{3})\s+"
    r"(?P<awb>\d{3}\s*-\s*\d{8})\s+"
    r"(?P<origin>[A-Z]{3})(?P<destination>[A-Z]{3})\s+"
    r"(?P<pieces>\d+)\s+"
    r"(?P<weight>[\d.,]+)\s+"
    r"(?P<volume>[\d.,]+)\s+"
    r"(?P<lvol>[\d.,]+)\s+"
)
_SHC_CODES = r"(?P<shc>[A-Z0-9]{3}(?:-[A-Z0-9]{2,3})*)\s+"
_SHC_SHORT = r"(?:(?P<shc>[A-Z0-9]{1,2})\s+)?"
_SHC_ANY = r"(?:(?P<shc>[A-Z0-9]{1,3}(?:-[A-Z0-9]{2,3})*)\s+)?"
_DESC = r"(?P<man_desc>.+?)\s+"
_PCODE = r"(?P<pcode>[A-Z]{3})\s+"
_PC = r"(?P<pc>[A-Z]\d)\s+"
_PC_OPTIONAL = r"(?:(?P<pc>[A-Z]\d)\s+)?"
# Charge code, possibly with the secondary code glued on ("P2NORM") or a second word
_THC = r"(?:(?P<thc>[A-Z]\d[A-Z]{2,5}|[A-Z0-9]{2,5}(?:\s[A-Z0-9]{2,5})?)\s+)?"
_BS_PI = r"(?P<bs>SS|BS|NN)\s+(?P<pi>[YN])"
_INBOUND = (
    r"\s+(?P<flt_in>[A-Z0-9]{2}\d{1,5}[A-Z]?)"
    r"\s+(?P<arr_date>\d{2}[A-Z]{3}\d{2,4})"
    r"(?:\s+(?P<arr_time>\d{1,2}:\d{2}(?:/\d{1,2})?))?"
)
_TAIL = r"(?P<tail>(?:\s+\S+)*)$"
# Whatever follows the charge code when booking status and priority are not printed
_REST = r"(?P<tail>.*)$"

# Secondary parsing of values the main patterns leave combined
_GLUED_CODE_PATTERN = re.compile(r"^(?P<pc>[A-Z]\d)\s*(?P<thc>[A-Z][A-Z0-9 ]*)$")
_FLIGHT_TOKEN = re.compile(r"^[A-Z0-9]{2}\d{1,5}[A-Z]?$", re.IGNORECASE)
_DATE_TOKEN = re.compile(r"^\d{2}[A-Z]{3}\d{2,4}$", re.IGNORECASE)
_TIME_TOKEN = re.compile(r"^\d{1,2}:\d{2}(?:/\d{1,2})?$")
_SHC_CODE_LIST = re.compile(r"^[A-Z]{3}(?:-[A-Z0-9]{2,3})*$")
_YES_NO = {"Y", "N"}

# Assumed when a row prints neither booking status nor priority
DEFAULT_BOOKING_STATUS = "SS"
DEFAULT_PRIORITY = "N"


@dataclass
class ShipmentFields:
    """Columns recovered from one manifest row."""
    serial_no: str
    awb_no: str
    origin: str
    destination: str
    pieces: int = 0
    weight: float = 0.0
    volume: float = 0.0
    lvol: float = 0.0
    shc: str = ""
    man_desc: str = ""
    pcode: str = ""
    pc: str = ""
    thc: str = ""
    bs: str = ""
    pi: str = ""
    flt_in: str = ""
    arr_dt_time: str = ""
    qnn_aqnn: str = ""
    whs: str = ""
    si: str = "N"


@dataclass(frozen=True)
class LineStrategy:
    """A named row layout: one pattern plus the shared validation."""
    name: str
    pattern: re.Pattern = field(repr=False)

    def apply(self, line: str) -> Optional[ShipmentFields]:
        match = self.pattern.match(line)
        if not match:
            return None
        fields = _build_fields(match.groupdict())
        if not _is_plausible(fields):
            logger.debug(
                "shipment_candidate_rejected",
                strategy=self.name,
                serial=fields.serial_no,
                man_desc=fields.man_desc,
                pcode=fields.pcode,
            )
            return None
        return fields


def _strategy(name: str, *fragments: str) -> LineStrategy:
    return LineStrategy(name=name, pattern=re.compile("".join(fragments), re.IGNORECASE))


# Order matters: the most complete layout first, then one relaxation each.
# no_inbound and no_booking_status are the loosest; their tails still yield an
# inbound block if present.
LINE_STRATEGIES: tuple[LineStrategy, ...] = (
    _strategy(
        "full",
        _PREFIX, _SHC_CODES, _DESC, _PCODE, _PC, _THC, _BS_PI, _INBOUND, _TAIL,
    ),
    _strategy(
        "short_shc",
        _PREFIX, _SHC_SHORT, _DESC, _PCODE, _PC, _THC, _BS_PI, _INBOUND, _TAIL,
    ),
    _strategy(
        "no_secondary_code",
        _PREFIX, _SHC_CODES, _DESC, _PCODE, _THC, _BS_PI, _INBOUND, _TAIL,
    ),
    _strategy(
        "no_inbound",
        _PREFIX, _SHC_ANY, _DESC, _PCODE, _PC_OPTIONAL, _THC, _BS_PI, _TAIL,
    ),
    _strategy(
        "no_booking_status",
        _PREFIX, _SHC_ANY, _DESC, _PCODE, _PC, _THC, _REST,
    ),
)


def looks_like_shipment_line(line: str) -> bool:
    """True when a line starts with a serial number and an AWB."""
    return bool(SHIPMENT_SHAPE_PATTERN.match(normalize_whitespace(line)))


def match_shipment_line(line: str) -> Optional[ShipmentFields]:
    """
    Decompose one manifest row into shipment columns.

    Args:
        line: Trimmed, whitespace-normalized document line

    Returns:
        ShipmentFields, or None when no strategy both matches and validates
    """
    _, fields = _match_with_strategy(line)
    return fields


def _match_with_strategy(line: str) -> tuple[Optional[str], Optional[ShipmentFields]]:
    """Run the cascade and report which strategy accepted the line."""
    normalized = normalize_whitespace(line)
    if not SHIPMENT_SHAPE_PATTERN.match(normalized):
        return None, None

    for strategy in LINE_STRATEGIES:
        fields = strategy.apply(normalized)
        if fields is not None:
            logger.debug("shipment_line_matched", strategy=strategy.name, serial=fields.serial_no)
            return strategy.name, fields

    return None, None


def _is_plausible(fields: ShipmentFields) -> bool:
    """Shape checks that keep an ambiguous row from being mis-split."""
    desc = fields.man_desc
    if not desc or not desc[0].isalpha() or not desc[0].isupper():
        return False
    pcode = fields.pcode
    if len(pcode) != 3 or not pcode.isalpha() or not pcode.isupper():
        return False
    # Blank SHC: the description must not open with what is really the SHC column
    if not fields.shc and _SHC_CODE_LIST.match(desc.split(" ", 1)[0]):
        return False
    return True


def _split_glued_code(thc: str) -> tuple[str, str]:
    """
    Recover a secondary product code printed against the charge code.

    - "P2QRT" → ("P2", "QRT")
    - "P2 QRT" → ("P2", "QRT")
    - "NORM" → ("", "NORM")
    """
    match = _GLUED_CODE_PATTERN.match(thc)
    if not match:
        return "", thc
    return match.group("pc"), match.group("thc").strip()


def _split_trailing_block(tokens: list[str], flt_in: str, arr_dt_time: str) -> dict:
    """
    Assign the columns after the priority indicator.

    The last Y/N token is the special-instruction flag. When the layout
    matched without an inbound block, a flight + date pair at the start of
    the tail is still picked up. Anything left is QNN/AQNN then WHS.
    """
    tokens = list(tokens)

    si = "N"
    if tokens and tokens[-1].upper() in _YES_NO:
        si = tokens.pop().upper()

    if (
        not flt_in
        and len(tokens) >= 2
        and _FLIGHT_TOKEN.match(tokens[0])
        and _DATE_TOKEN.match(tokens[1])
    ):
        flt_in = tokens.pop(0)
        arr_dt_time = tokens.pop(0)
        if tokens and _TIME_TOKEN.match(tokens[0]):
            arr_dt_time = f"{arr_dt_time} {tokens.pop(0)}"

    return {
        "flt_in": flt_in,
        "arr_dt_time": arr_dt_time,
        "qnn_aqnn": tokens[0] if tokens else "",
        "whs": " ".join(tokens[1:]),
        "si": si,
    }


def _build_fields(groups: dict) -> ShipmentFields:
    def value(name: str) -> str:
        return (groups.get(name) or "").strip()

    pc = value("pc")
    thc = value("thc")
    if not pc and thc:
        pc, thc = _split_glued_code(thc)

    arr_dt_time = f"{value('arr_date')} {value('arr_time')}".strip()
    trailing = _split_trailing_block(value("tail").split(), value("flt_in"), arr_dt_time)

    return ShipmentFields(
        serial_no=value("serial"),
        awb_no=re.sub(r"\s+", "", value("awb")),
        origin=value("origin"),
        destination=value("destination"),
        pieces=parse_int(value("pieces")),
        weight=parse_float(value("weight")),
        volume=parse_float(value("volume")),
        lvol=parse_float(value("lvol")),
        shc=value("shc"),
        man_desc=value("man_desc"),
        pcode=value("pcode"),
        pc=pc,
        thc=thc,
        bs=value("bs") or DEFAULT_BOOKING_STATUS,
        pi=value("pi") or DEFAULT_PRIORITY,
        flt_in=trailing["flt_in"],
        arr_dt_time=trailing["arr_dt_time"],
        qnn_aqnn=trailing["qnn_aqnn"],
        whs=trailing["whs"],
        si=trailing["si"],
    )
