"""
ULD section markers.

Load plans group shipments under ULD allocation lines:

    XX 02PMC XX
    XX 01PMC 01AKE XX --- HL ON EK041
    XX BULK XX
    TO BE LDD IN 04PMC/05AKE(STATION REQUIREMENT)

The marker value stored on a shipment is the normalized core
("XX 02PMC 03AKE XX") followed by any trailing instruction text.
"""

from dataclasses import dataclass, field
from typing import Optional
import re

# One allocation token: count + 3-letter ULD type (02PMC, 1AKE) or BULK
_ULD_TOKEN = r"(?:\d{1,2}[A-Z]{3}|BULK)"
_ULD_CONTENTS = rf"{_ULD_TOKEN}(?:[\s/]+{_ULD_TOKEN})*"

XX_MARKER_PATTERN = re.compile(
    rf"^XX\s+(?P<contents>{_ULD_CONTENTS})\s+XX(?:\s+(?P<trailing>.*))?$",
    re.IGNORECASE,
)
TO_BE_LOADED_PATTERN = re.compile(
    rf"^TO\s+BE\s+LDD\s+IN\s+(?P<contents>{_ULD_CONTENTS})\b\s*(?P<trailing>.*)$",
    re.IGNORECASE,
)

# Core + trailing split of an already-normalized ULD value
_ULD_PARTS_PATTERN = re.compile(r"^(XX\s+.+?\s+XX)(.*)$", re.IGNORECASE)
_ULD_COUNT_PATTERN = re.compile(r"\b(\d+)?(PMC|AKE|AKL|AMF|ALF|PLA|PAG|AMP|RKE|BULK)\b", re.IGNORECASE)


@dataclass
class UldParts:
    """Core "XX ... XX" part of a ULD value and the text after it."""
    core: str
    trailing: str = ""
    trailing_type: str = "none"


@dataclass
class UldSectionSummary:
    """ULD count and types declared by one section."""
    count: int = 0
    types: list[str] = field(default_factory=list)
    expanded_types: list[str] = field(default_factory=list)


def _normalize_contents(contents: str) -> str:
    return re.sub(r"\s+", " ", contents.strip()).upper()


def parse_uld_marker(line: str) -> Optional[str]:
    """
    Recognise a ULD marker line and return its normalized value.

    Args:
        line: Trimmed, whitespace-normalized document line

    Returns:
        "XX <CONTENTS> XX[ trailing]" or None when the line is not a
        well-formed marker (such lines are ordinary comment text).
    """
    match = XX_MARKER_PATTERN.match(line) or TO_BE_LOADED_PATTERN.match(line)
    if not match:
        return None

    value = f"XX {_normalize_contents(match.group('contents'))} XX"
    trailing = (match.group("trailing") or "").strip()
    if trailing:
        value = f"{value} {trailing}"
    return value


def is_uld_marker(line: str) -> bool:
    return parse_uld_marker(line) is not None


def detect_trailing_type(trailing: str) -> str:
    """
    Classify the instruction text that follows a ULD section.

    - "(ENSURE TO LOAD...)" → parenthetical
    - "// OPTIMIZE WITH SBY CARGO" → doubleslash
    - "--- HL ON EK041" → dashes
    - "[Must load QKE]" → brackets
    """
    trimmed = (trailing or "").strip()
    if not trimmed:
        return "none"
    if trimmed.startswith("(") and ")" in trimmed:
        return "parenthetical"
    if trimmed.startswith("//"):
        return "doubleslash"
    if trimmed.startswith("---"):
        return "dashes"
    if trimmed.startswith("[") and "]" in trimmed:
        return "brackets"
    return "other"


def extract_uld_parts(uld: str) -> UldParts:
    """Split a ULD value into its XX core and trailing instruction."""
    if not uld:
        return UldParts(core="")

    match = _ULD_PARTS_PATTERN.match(uld.strip())
    if not match:
        return UldParts(core=uld)

    trailing = match.group(2).strip()
    return UldParts(
        core=match.group(1).strip(),
        trailing=trailing,
        trailing_type=detect_trailing_type(trailing),
    )


def parse_uld_section(uld: str) -> UldSectionSummary:
    """
    Count the ULDs declared by a section, ignoring trailing text.

    - "XX 02PMC XX" → count 2, types ["PMC"]
    - "XX 02PMC 03AKE XX" → count 5, types ["PMC", "AKE"]
    - "XX BULK XX" → count 1, types ["BULK"]
    """
    core = extract_uld_parts(uld).core
    cleaned = re.sub(r"^XX\s+", "", core, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s+XX$", "", cleaned, flags=re.IGNORECASE).strip()

    summary = UldSectionSummary()
    if not cleaned:
        return summary

    for match in _ULD_COUNT_PATTERN.finditer(cleaned):
        uld_type = match.group(2).upper()
        count = int(match.group(1)) if match.group(1) else 1
        if uld_type not in summary.types:
            summary.types.append(uld_type)
        summary.expanded_types.extend([uld_type] * count)

    summary.count = len(summary.expanded_types)
    return summary
