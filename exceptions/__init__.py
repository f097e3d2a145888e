"""
Custom exceptions module.

All application errors derive from AppError and render through to_dict().
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,
    ExternalServiceError,

    # Load plan parser
    LoadPlanParseError,
    UnidentifiableDocumentError,

    # Uploads
    UnsupportedDocumentError,
    DocumentTooLargeError,
    DocumentDecodeError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",
    "ExternalServiceError",

    # Load plan parser
    "LoadPlanParseError",
    "UnidentifiableDocumentError",

    # Uploads
    "UnsupportedDocumentError",
    "DocumentTooLargeError",
    "DocumentDecodeError",
]
