"""
dsauthz Python Package

Authorization and resource-lifecycle control for design-system resources.
"""

__version__ = "0.1.0"

from .core.service import AccessControl
from .core.config import Config, TokenConfig
from .core.types import (
    Action,
    ActionKind,
    Decision,
    Identity,
    Resource,
    ResourceKind,
    Role,
    Status,
)
from .auth.jwt import CredentialVerifier, extract_bearer_token
from .authz.engine import AccessDecisionEngine, authorize
from .types.errors import (
    AccessControlError,
    Unauthenticated,
    Forbidden,
    ResourceNotFound,
    ValidationError,
)


def verify(raw_token, config: TokenConfig):
    """Verify ``raw_token`` against ``config`` and return the caller's Identity."""
    return CredentialVerifier(config).verify(raw_token)


__all__ = [
    "AccessControl",
    "Config",
    "TokenConfig",
    "Action",
    "ActionKind",
    "Decision",
    "Identity",
    "Resource",
    "ResourceKind",
    "Role",
    "Status",
    "CredentialVerifier",
    "AccessDecisionEngine",
    "extract_bearer_token",
    "verify",
    "authorize",
    "AccessControlError",
    "Unauthenticated",
    "Forbidden",
    "ResourceNotFound",
    "ValidationError",
]
