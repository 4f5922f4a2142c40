# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package types provides the shared error taxonomy for dsauthz.

Every failure the engine reports carries a stable, enumerable reason so that
callers and tests can match on the kind of failure rather than on prose.
"""

from .errors import (
    ErrorCode,
    AuthFailure,
    DenialReason,
    AccessControlError,
    Unauthenticated,
    Forbidden,
    ResourceNotFound,
    ValidationError,
    InvalidTransition,
    ConflictError,
    ConfigurationError,
    ERROR_CODE_TO_HTTP_STATUS,
    get_http_status,
    create_error_response,
)

__all__ = [
    'ErrorCode',
    'AuthFailure',
    'DenialReason',
    'AccessControlError',
    'Unauthenticated',
    'Forbidden',
    'ResourceNotFound',
    'ValidationError',
    'InvalidTransition',
    'ConflictError',
    'ConfigurationError',
    'ERROR_CODE_TO_HTTP_STATUS',
    'get_http_status',
    'create_error_response',
]
