"""
Persistence interface for dsauthz resources.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..core.types import Resource, ResourceKind, Status


class ResourceStore(ABC):
    """
    Abstract resource store.

    The decision engine never talks to a store; the service layer loads a
    snapshot before deciding and saves the result afterwards.
    """

    @abstractmethod
    async def load(self, resource_id: str) -> Resource:
        """
        Load a resource by ID.

        Raises:
            ResourceNotFound: if no resource has this ID
        """
        pass

    @abstractmethod
    async def save(self, resource: Resource,
                   expected_updated_at: Optional[datetime] = None) -> None:
        """
        Insert or replace a resource.

        When ``expected_updated_at`` is given, the stored copy must still
        carry that timestamp or ConflictError is raised.
        """
        pass

    @abstractmethod
    async def delete(self, resource_id: str) -> None:
        """
        Remove a resource.

        Raises:
            ResourceNotFound: if no resource has this ID
        """
        pass

    @abstractmethod
    async def list(self, kind: Optional[ResourceKind] = None,
                   status: Optional[Status] = None) -> List[Resource]:
        """Return resources, newest first, optionally filtered by kind and status."""
        pass

    async def close(self) -> None:
        """Close the store and release resources"""
        pass
