"""
Credential claim types for dsauthz.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..core.types import Identity, Role


@dataclass
class Claims:
    """JWT claims carried by a bearer credential."""
    id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
    iss: Optional[str] = None  # Issuer
    aud: Optional[Union[str, List[str]]] = None  # Audience
    exp: Optional[int] = None  # Expiration time
    iat: Optional[int] = None  # Issued at
    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, dropping unset claims."""
        result = {}

        for name in ('id', 'username', 'role', 'iss', 'aud', 'exp', 'iat'):
            value = getattr(self, name)
            if value is not None:
                result[name] = value

        result.update(self.custom)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Claims':
        """Create from dictionary."""
        standard_fields = {'id', 'username', 'role', 'iss', 'aud', 'exp', 'iat'}

        kwargs = {}
        custom = {}

        for key, value in data.items():
            if key in standard_fields:
                kwargs[key] = value
            else:
                custom[key] = value

        if custom:
            kwargs['custom'] = custom

        return cls(**kwargs)

    @classmethod
    def for_identity(cls, identity: Identity) -> 'Claims':
        return cls(id=identity.id, username=identity.username, role=identity.role.value)

    def to_identity(self) -> Identity:
        """
        Decode the identity claims.

        Raises:
            ValueError: if id or username is missing or the role is not one
                of the known roles.
        """
        if self.id is None or isinstance(self.id, bool) or str(self.id) == "":
            raise ValueError("id claim is missing")
        if not isinstance(self.username, str) or not self.username:
            raise ValueError("username claim is missing")

        return Identity(id=str(self.id), username=self.username, role=Role.parse(self.role))
