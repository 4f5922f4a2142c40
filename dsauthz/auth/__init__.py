# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package auth verifies bearer credentials for dsauthz.

This package implements:
- Bearer header parsing
- JWT signature, expiry, issuer and audience validation
- Decoding of the identity claims (id, username, role) into an Identity
- A credential issuer for development and tests
"""

from .types import Claims

from .jwt import (
    CredentialVerifier,
    CredentialIssuer,
    extract_bearer_token,
)

__all__ = [
    'Claims',
    'CredentialVerifier',
    'CredentialIssuer',
    'extract_bearer_token',
]
