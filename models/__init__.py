"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.load_plan import (
    ParseTextRequest,
    LoadPlanHeaderResponse,
    ShipmentResponse,
    SkippedLineResponse,
    UldSectionResponse,
    LoadPlanParseResponse,
    summarize_uld_sections,
)

__all__ = [
    # Base
    "BaseSchema",

    # Load plans
    "ParseTextRequest",
    "LoadPlanHeaderResponse",
    "ShipmentResponse",
    "SkippedLineResponse",
    "UldSectionResponse",
    "LoadPlanParseResponse",
    "summarize_uld_sections",
]
