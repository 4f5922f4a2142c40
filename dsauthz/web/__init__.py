# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package web adapts dsauthz to aiohttp.

Error kinds map to HTTP status codes:
  Unauthenticated   401
  Forbidden         403
  ResourceNotFound  404
  ValidationError   400
  ConflictError     409
"""

from .middleware import (
    ACCESS_CONTROL,
    IDENTITY,
    authenticated,
    require_role,
    require_admin,
    error_middleware,
    get_identity,
)

from .app import create_app, ResourceHandlers

__all__ = [
    'ACCESS_CONTROL',
    'IDENTITY',
    'authenticated',
    'require_role',
    'require_admin',
    'error_middleware',
    'get_identity',
    'create_app',
    'ResourceHandlers',
]
