"""
Error types and error codes for dsauthz.
Provides structured error handling across all packages.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standard error codes used across dsauthz."""
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    INVALID_TRANSITION = "invalid_transition"
    CONFLICT = "conflict"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"

    def __str__(self) -> str:
        return self.value


class AuthFailure(str, Enum):
    """Reasons a credential is rejected."""
    MISSING_TOKEN = "missing token"
    INVALID_OR_EXPIRED = "invalid or expired"

    def __str__(self) -> str:
        return self.value


class DenialReason(str, Enum):
    """Reasons an authenticated caller is refused."""
    INSUFFICIENT_PERMISSIONS = "insufficient permissions"
    ONLY_ADMINS_CAN_APPROVE = "only admins can approve"
    PERMISSION_DENIED = "permission denied"

    def __str__(self) -> str:
        return self.value


class AccessControlError(Exception):
    """Base exception for all dsauthz errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            'error': self.error_code.value,
            'message': self.message,
            'details': self.details,
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


class Unauthenticated(AccessControlError):
    """No credential, or one that failed verification."""

    def __init__(self, reason: AuthFailure = AuthFailure.INVALID_OR_EXPIRED,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(reason.value, ErrorCode.UNAUTHENTICATED, details)
        self.reason = reason


class Forbidden(AccessControlError):
    """Authenticated, but not permitted for this action."""

    def __init__(self, reason: DenialReason = DenialReason.PERMISSION_DENIED,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(reason.value, ErrorCode.FORBIDDEN, details)
        self.reason = reason


class ResourceNotFound(AccessControlError):
    """Raised by the persistence layer when a resource does not exist."""

    def __init__(self, resource_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Resource not found: {resource_id}", ErrorCode.NOT_FOUND, details)
        self.resource_id = resource_id
        self.details['resource_id'] = resource_id


class ValidationError(AccessControlError):
    """Raised when request data cannot be applied."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
    ):
        super().__init__(message, error_code, details)
        self.field = field
        self.value = value

        if field:
            self.details['field'] = field
        if value is not None:
            self.details['value'] = str(value)


class InvalidTransition(ValidationError):
    """Status change rejected by the strict workflow."""

    def __init__(self, current: Any, target: Any):
        super().__init__(
            f"Cannot move from {current} to {target}",
            field='status',
            value=target,
            details={'from': str(current), 'to': str(target)},
            error_code=ErrorCode.INVALID_TRANSITION,
        )


class ConflictError(AccessControlError):
    """Raised when a resource changed between load and save."""

    def __init__(self, resource_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Resource was modified concurrently: {resource_id}",
                         ErrorCode.CONFLICT, details)
        self.resource_id = resource_id
        self.details['resource_id'] = resource_id


class ConfigurationError(AccessControlError):
    """Raised when there's a configuration error."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
        self.config_key = config_key

        if config_key:
            self.details['config_key'] = config_key


# Error mapping for HTTP status codes
ERROR_CODE_TO_HTTP_STATUS = {
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.VALIDATION_FAILED: 400,
    ErrorCode.INVALID_TRANSITION: 400,
    ErrorCode.CONFLICT: 409,
    ErrorCode.CONFIGURATION_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}


def get_http_status(error_code: ErrorCode) -> int:
    """Get HTTP status code for an error code."""
    return ERROR_CODE_TO_HTTP_STATUS.get(error_code, 500)


def create_error_response(error: AccessControlError) -> Dict[str, Any]:
    """Create a standardized error response."""
    return {
        'error': error.message,
        'code': error.error_code.value,
        'details': error.details,
    }
