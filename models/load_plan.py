"""
Load plan request and response models.

Parser output is plain dataclasses; these schemas are the API view of it.
"""

from typing import Optional
from pydantic import Field

from models.base import BaseSchema
from parsers import LoadPlanParseResult, parse_uld_section


# ===================
# REQUEST SCHEMAS
# ===================

class ParseTextRequest(BaseSchema):
    """Load plan text already extracted from the source document."""
    text: str = Field(..., min_length=1, description="Full document text")
    filename: Optional[str] = Field(
        None,
        max_length=255,
        description="Source filename (flight number and correction-mode fallback)"
    )


# ===================
# RESPONSE SCHEMAS
# ===================

class LoadPlanHeaderResponse(BaseSchema):
    """Document-level fields."""
    flight_number: str = Field(..., description="Carrier + 4 digits (e.g., EK0205)")
    date: str = Field("", description="Flight date as printed (e.g., 12 Oct)")
    aircraft_type: str = ""
    aircraft_reg: str = ""
    sector: str = Field("", description="Origin + destination (e.g., DXBMXP)")
    std: str = Field("", description="Scheduled departure HH:MM")
    prepared_by: str = ""
    prepared_on: str = ""
    ttl_pln_uld: Optional[str] = Field(None, description="Planned ULDs (e.g., 06PMC/07AKE)")
    uld_version: Optional[str] = None
    header_warning: Optional[str] = None
    is_critical: bool = False
    is_correct_version: bool = Field(False, description="Document revises an earlier upload")


class ShipmentResponse(BaseSchema):
    """One manifest row."""
    serial_no: str
    awb_no: str
    origin: str
    destination: str
    pieces: int = Field(0, ge=0)
    weight: float = Field(0.0, ge=0)
    volume: float = Field(0.0, ge=0)
    lvol: float = Field(0.0, ge=0)
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
    uld: str = Field("", description="ULD section the row belongs to (e.g., XX 02PMC XX)")
    special_notes: list[str] = Field(default_factory=list)
    is_ramp_transfer: bool = False
    sector: str


class SkippedLineResponse(BaseSchema):
    """Shipment-shaped line that produced no shipment."""
    line_number: int = Field(..., ge=1)
    text: str
    reason: str


class UldSectionResponse(BaseSchema):
    """Shipments grouped under one ULD marker value."""
    uld: str
    shipment_count: int = Field(..., ge=0)
    uld_count: int = Field(..., ge=0, description="ULDs declared by the marker")
    uld_types: list[str] = Field(default_factory=list)


class LoadPlanParseResponse(BaseSchema):
    """Parsed load plan."""
    header: LoadPlanHeaderResponse
    shipments: list[ShipmentResponse] = Field(default_factory=list)
    skipped_lines: list[SkippedLineResponse] = Field(default_factory=list)
    uld_sections: list[UldSectionResponse] = Field(default_factory=list)
    shipment_count: int = 0
    skipped_count: int = 0
    success: bool = True

    @classmethod
    def from_result(cls, result: LoadPlanParseResult) -> "LoadPlanParseResponse":
        """Build the response from a parse result."""
        data = result.to_dict()
        return cls(
            header=data["header"],
            shipments=data["shipments"],
            skipped_lines=data["skipped_lines"],
            uld_sections=summarize_uld_sections(result),
            shipment_count=len(data["shipments"]),
            skipped_count=data["unmatched_count"],
            success=data["success"],
        )


def summarize_uld_sections(result: LoadPlanParseResult) -> list[UldSectionResponse]:
    """One entry per distinct ULD value, in order of first appearance."""
    counts: dict[str, int] = {}
    for shipment in result.shipments:
        if shipment.uld:
            counts[shipment.uld] = counts.get(shipment.uld, 0) + 1

    sections = []
    for uld, shipment_count in counts.items():
        summary = parse_uld_section(uld)
        sections.append(UldSectionResponse(
            uld=uld,
            shipment_count=shipment_count,
            uld_count=summary.count,
            uld_types=summary.types,
        ))
    return sections
