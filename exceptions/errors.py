"""
Custom exception classes for the application.

Parser-level problems that are recoverable (an unrecognised line, a bad
number) never raise; they are reported in the parse result instead.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "UNIDENTIFIABLE_DOCUMENT")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External collaborator failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# LOAD PLAN PARSER ERRORS
# ===================

class LoadPlanParseError(ValidationError):
    """Load plan text could not be parsed."""

    def __init__(
        self,
        message: str,
        code: str = "LOAD_PLAN_PARSE_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details=details
        )


class UnidentifiableDocumentError(LoadPlanParseError):
    """No flight number in the document text or the filename."""

    def __init__(self, filename: Optional[str] = None):
        super().__init__(
            code="UNIDENTIFIABLE_DOCUMENT",
            message="Flight number not found in document or filename",
            details={"filename": filename or ""}
        )


# ===================
# UPLOAD ERRORS
# ===================

class UnsupportedDocumentError(AppError):
    """Uploaded file type is not accepted (400)."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            code="INVALID_FILE_TYPE",
            message=f"File must be one of: {', '.join(allowed)}",
            status_code=400,
            details={"filename": filename, "allowed": allowed}
        )


class DocumentTooLargeError(AppError):
    """Uploaded file exceeds the configured size limit (413)."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            code="DOCUMENT_TOO_LARGE",
            message=f"File is {size} bytes, limit is {limit} bytes",
            status_code=413,
            details={"size": size, "limit": limit}
        )


class DocumentDecodeError(ValidationError):
    """Uploaded file is not readable text."""

    def __init__(self, filename: str, encoding: str):
        super().__init__(
            code="DOCUMENT_DECODE_ERROR",
            message=f"File could not be decoded as {encoding} text",
            details={"filename": filename, "encoding": encoding}
        )
