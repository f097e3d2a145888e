"""
Load plan API routes.

Both endpoints return the same LoadPlanParseResponse; errors use the
AppError response format.
"""

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse
import structlog

from models.load_plan import ParseTextRequest, LoadPlanParseResponse
from services.load_plan_service import get_load_plan_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.post("/parse", response_model=LoadPlanParseResponse)
async def parse_load_plan_text(request: ParseTextRequest):
    """
    Parse load plan text extracted from a DOCX/RTF/PDF manifest.

    The filename is optional; it is used when the text has no flight number
    and for COR/CORR correction-mode detection.
    """
    try:
        service = get_load_plan_service()
        result = service.parse_text(request.text, filename=request.filename or "")
        return LoadPlanParseResponse.from_result(result)

    except Exception as e:
        return handle_error(e)


@router.post("/upload", response_model=LoadPlanParseResponse)
async def upload_load_plan(file: UploadFile = File(...)):
    """
    Parse an uploaded load plan text file.

    Returns:
        header: Flight, sector, aircraft and planning fields
        shipments: Manifest rows in document order
        skipped_lines: Shipment-shaped lines that could not be parsed
        uld_sections: Shipments per ULD marker
    """
    try:
        service = get_load_plan_service()
        content = await file.read()
        result = service.parse_upload(content, file.filename or "")

        logger.info(
            "load_plan_upload_parsed",
            filename=file.filename,
            flight_number=result.header.flight_number,
            shipments=len(result.shipments),
        )
        return LoadPlanParseResponse.from_result(result)

    except Exception as e:
        return handle_error(e)
