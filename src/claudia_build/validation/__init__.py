"""Resource file validation for claudia-build."""

from .icon_validator import (
    ICO_SIGNATURE,
    PNG_SIGNATURE,
    IconValidator,
    ValidationReport,
    format_signature,
    validate,
)

__all__ = [
    "ICO_SIGNATURE",
    "PNG_SIGNATURE",
    "IconValidator",
    "ValidationReport",
    "format_signature",
    "validate",
]
