"""
Configuration module for dsauthz.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

All settings are passed in explicitly at construction time. Nothing here is
read at import time and there is no built-in fallback secret.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, FrozenSet, Optional

from .types import ActionKind, Role
from ..types.errors import ConfigurationError
from ..util.config import get_config_value, parse_duration_string

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


def _env_duration(key: str, default: str) -> timedelta:
    value = get_config_value(key, default)
    try:
        return parse_duration_string(value)
    except ValueError as e:
        raise ConfigurationError(str(e), config_key=key)


@dataclass
class TokenConfig:
    """Credential signing and verification settings"""
    secret_key: str = ""
    algorithm: str = "HS256"
    issuer: Optional[str] = None
    audience: Optional[str] = None
    expiry: timedelta = field(default_factory=lambda: timedelta(hours=24))
    leeway: timedelta = field(default_factory=lambda: timedelta(seconds=0))

    def validate(self) -> bool:
        """Validate the token configuration"""
        if not self.secret_key:
            raise ConfigurationError("secret_key is required", config_key="secret_key")
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(
                f"Unsupported algorithm: {self.algorithm}", config_key="algorithm"
            )
        if self.expiry <= timedelta(0):
            raise ConfigurationError("expiry must be positive", config_key="expiry")
        if self.leeway < timedelta(0):
            raise ConfigurationError("leeway cannot be negative", config_key="leeway")
        return True


@dataclass
class Config:
    """Configuration for the access control engine"""
    token: TokenConfig
    role_permissions: Optional[Dict[Role, FrozenSet[ActionKind]]] = None
    admin_roles: FrozenSet[Role] = frozenset({Role.ADMIN})
    strict_workflow: bool = False
    audit_max_entries: int = 1000

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from DSAUTHZ_* environment variables"""
        token = TokenConfig(
            secret_key=get_config_value("secret_key", ""),
            algorithm=get_config_value("algorithm", "HS256"),
            issuer=get_config_value("issuer"),
            audience=get_config_value("audience"),
            expiry=_env_duration("token_expiry", "24h"),
            leeway=_env_duration("leeway", "0s"),
        )
        return cls(
            token=token,
            strict_workflow=get_config_value("strict_workflow", False, bool),
            audit_max_entries=get_config_value("audit_max_entries", 1000, int),
        )

    def validate(self) -> bool:
        """Validate the configuration"""
        self.token.validate()
        if not self.admin_roles:
            raise ConfigurationError("at least one admin role is required", config_key="admin_roles")
        if self.audit_max_entries <= 0:
            raise ConfigurationError("audit_max_entries must be positive", config_key="audit_max_entries")
        return True
