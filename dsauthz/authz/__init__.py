# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package authz implements role, ownership and combined access decisions for dsauthz.

Decision precedence (first match wins):
  1. delete                       admin only
  2. any write of status=approved admin only
  3. status-only submit for review owner or admin
  4. any other update             owner or admin
  5. create, read                 any authenticated role
  6. everything else              denied
"""

from .policy import (
    RolePolicy,
    DEFAULT_ROLE_PERMISSIONS,
)

from .ownership import (
    OwnershipEvaluator,
    is_owner,
)

from .engine import (
    AccessDecisionEngine,
    Grant,
    Rule,
    RULES,
    authorize,
)

__all__ = [
    'RolePolicy',
    'DEFAULT_ROLE_PERMISSIONS',
    'OwnershipEvaluator',
    'is_owner',
    'AccessDecisionEngine',
    'Grant',
    'Rule',
    'RULES',
    'authorize',
]
