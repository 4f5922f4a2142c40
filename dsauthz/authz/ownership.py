"""
Ownership checks for dsauthz.
"""

from typing import Optional

from ..core.types import Identity, Resource


def is_owner(identity: Identity, resource: Optional[Resource]) -> bool:
    """True when ``identity`` created ``resource``."""
    if resource is None:
        return False
    return identity.id == resource.owner_id


class OwnershipEvaluator:
    """Injectable wrapper around :func:`is_owner`."""

    def is_owner(self, identity: Identity, resource: Optional[Resource]) -> bool:
        return is_owner(identity, resource)
