"""
Load plan parsers module.

parse_load_plan() is the entry point; the other modules are the pieces it
is built from and are importable for focused use and tests.
"""

from parsers.load_plan_header import (
    LoadPlanHeader,
    extract_header,
    format_date_for_report,
)
from parsers.load_plan_parser import (
    LoadPlanParseResult,
    Shipment,
    SkippedLine,
    parse_load_plan,
    parse_shipments,
)
from parsers.shipment_line import (
    ShipmentFields,
    looks_like_shipment_line,
    match_shipment_line,
)
from parsers.uld_section import (
    extract_uld_parts,
    parse_uld_marker,
    parse_uld_section,
)

__all__ = [
    "parse_load_plan",
    "parse_shipments",
    "LoadPlanParseResult",
    "Shipment",
    "SkippedLine",
    "LoadPlanHeader",
    "extract_header",
    "format_date_for_report",
    "ShipmentFields",
    "looks_like_shipment_line",
    "match_shipment_line",
    "extract_uld_parts",
    "parse_uld_marker",
    "parse_uld_section",
]
