"""
Load plan service.

Entry point for callers that hold a load plan as text or as an uploaded
file. Applies configuration (carrier, upload limits) around the parser and
consults the optional critical-stamp detector.
"""

from pathlib import Path
from typing import Callable, Optional
import structlog

from config import settings
from exceptions import (
    DocumentDecodeError,
    DocumentTooLargeError,
    ExternalServiceError,
    UnsupportedDocumentError,
)
from parsers import LoadPlanParseResult, parse_load_plan

logger = structlog.get_logger(__name__)

# Image/OCR check for a "CRITICAL" stamp the text extraction could not see
CriticalDetector = Callable[[], bool]


class LoadPlanService:
    """
    Parse load plan documents.

    Each call owns its parser state, so one instance serves concurrent
    requests.
    """

    def __init__(
        self,
        carrier_code: Optional[str] = None,
        max_upload_bytes: Optional[int] = None,
        allowed_extensions: Optional[list[str]] = None,
        encoding: Optional[str] = None,
    ):
        self.carrier_code = carrier_code or settings.carrier_code
        self.max_upload_bytes = max_upload_bytes or settings.max_upload_bytes
        self.allowed_extensions = [
            ext.lower() for ext in (allowed_extensions or settings.allowed_upload_extensions)
        ]
        self.encoding = encoding or settings.upload_encoding

    def parse_text(
        self,
        text: str,
        filename: str = "",
        critical_detector: Optional[CriticalDetector] = None,
    ) -> LoadPlanParseResult:
        """
        Parse load plan text.

        Args:
            text: Document text
            filename: Source filename (flight and correction-mode fallback)
            critical_detector: Called only when the text carries no CRITICAL
                stamp; a failing detector counts as "not critical"

        Returns:
            LoadPlanParseResult

        Raises:
            UnidentifiableDocumentError: No flight number in text or filename
        """
        result = parse_load_plan(text, filename=filename, carrier=self.carrier_code)

        if not result.header.is_critical and critical_detector is not None:
            result.header.is_critical = self._detect_critical(critical_detector, filename)

        return result

    def parse_upload(
        self,
        content: bytes,
        filename: str,
        critical_detector: Optional[CriticalDetector] = None,
    ) -> LoadPlanParseResult:
        """
        Parse an uploaded text file.

        Raises:
            UnsupportedDocumentError: Extension not accepted
            DocumentTooLargeError: Content over the configured limit
            DocumentDecodeError: Content is not text in the configured encoding
            UnidentifiableDocumentError: No flight number in text or filename
        """
        self.validate_upload(filename, len(content))

        try:
            text = content.decode(self.encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning("load_plan_decode_failed", filename=filename, encoding=self.encoding, error=str(e))
            raise DocumentDecodeError(filename=filename, encoding=self.encoding)

        # Word exports often start with a byte order mark
        text = text.lstrip("\ufeff")

        logger.info("load_plan_upload_received", filename=filename, size=len(content))
        return self.parse_text(text, filename=filename, critical_detector=critical_detector)

    def validate_upload(self, filename: str, size: int) -> None:
        """Reject files by extension and size before reading them."""
        extension = Path(filename or "").suffix.lower()
        if extension not in self.allowed_extensions:
            raise UnsupportedDocumentError(filename=filename or "", allowed=self.allowed_extensions)
        if size > self.max_upload_bytes:
            raise DocumentTooLargeError(size=size, limit=self.max_upload_bytes)

    def _run_detector(self, detector: CriticalDetector) -> bool:
        """Call the detector; any failure surfaces as ExternalServiceError."""
        try:
            return bool(detector())
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError("critical_detector", str(e)) from e

    def _detect_critical(self, detector: CriticalDetector, filename: str) -> bool:
        try:
            found = self._run_detector(detector)
        except ExternalServiceError as e:
            logger.warning("critical_detection_failed", filename=filename or None, code=e.code, error=e.message)
            return False

        logger.debug("critical_detection_completed", filename=filename or None, is_critical=found)
        return found


# Singleton instance
_load_plan_service: Optional[LoadPlanService] = None


def get_load_plan_service() -> LoadPlanService:
    """Get or create LoadPlanService instance."""
    global _load_plan_service
    if _load_plan_service is None:
        _load_plan_service = LoadPlanService()
    return _load_plan_service
