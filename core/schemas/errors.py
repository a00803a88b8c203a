"""
Module 01 - Schemas
File: errors.py

Purpose: Standard error taxonomy for the capsule simulator.
Defines stable error codes and the exceptions raised for control flow.
"""

from typing import Any


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    INVALID_PROOF_PAYLOAD = "INVALID_PROOF_PAYLOAD"
    CAPSULE_LIMIT_EXCEEDED = "CAPSULE_LIMIT_EXCEEDED"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class CapsuleException(Exception):
    """
    Base exception for all capsule simulator errors.

    Carries a stable error code and structured details for the API and CLI
    to report.
    """

    def __init__(
        self,
        message: str,
        code: str = "CAPSULE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class SchemaValidationException(CapsuleException):
    """Exception raised when a request payload fails schema validation."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
        code: str = ErrorCodes.SCHEMA_VALIDATION_ERROR,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=code,
            details=full_details,
        )


class InvalidProofPayloadException(SchemaValidationException):
    """Verification payload is missing its root or leaf, or its path is not a list."""

    def __init__(
        self,
        message: str = "Invalid proof payload",
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            field_path=field_path,
            details=details,
            code=ErrorCodes.INVALID_PROOF_PAYLOAD,
        )


class CapsuleLimitException(SchemaValidationException):
    """Requested capsule count exceeds the configured ceiling."""

    def __init__(self, requested: int, limit: int) -> None:
        super().__init__(
            message=f"Requested {requested} capsules exceeds the limit of {limit}",
            field_path="auditRatio",
            details={"requested": requested, "limit": limit},
            code=ErrorCodes.CAPSULE_LIMIT_EXCEEDED,
        )


class ConfigurationException(CapsuleException):
    """Exception raised when runtime configuration is invalid."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if setting:
            full_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
        )
