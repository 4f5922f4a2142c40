"""
In-memory resource store for dsauthz.
Suitable for development, tests and single-process deployments.
"""

import copy
import threading
from datetime import datetime
from typing import Dict, List, Optional

from .types import ResourceStore
from ..core.types import Resource, ResourceKind, Status
from ..types.errors import ConflictError, ResourceNotFound


def _detached(resource: Resource) -> Resource:
    # Payloads are plain dicts; callers never share one with the store
    return resource.with_changes(payload=copy.deepcopy(resource.payload))


class MemoryResourceStore(ResourceStore):
    """
    In-memory resource store implementation.

    Note: All data is lost when the process terminates.
    """

    def __init__(self):
        self._resources: Dict[str, Resource] = {}
        self._lock = threading.RLock()

    async def load(self, resource_id: str) -> Resource:
        with self._lock:
            if resource_id not in self._resources:
                raise ResourceNotFound(resource_id)
            return _detached(self._resources[resource_id])

    async def save(self, resource: Resource,
                   expected_updated_at: Optional[datetime] = None) -> None:
        with self._lock:
            if expected_updated_at is not None:
                current = self._resources.get(resource.id)
                if current is None or current.updated_at != expected_updated_at:
                    raise ConflictError(resource.id)
            self._resources[resource.id] = _detached(resource)

    async def delete(self, resource_id: str) -> None:
        with self._lock:
            if resource_id not in self._resources:
                raise ResourceNotFound(resource_id)
            del self._resources[resource_id]

    async def list(self, kind: Optional[ResourceKind] = None,
                   status: Optional[Status] = None) -> List[Resource]:
        with self._lock:
            resources = [
                _detached(r) for r in self._resources.values()
                if (kind is None or r.kind == kind) and (status is None or r.status == status)
            ]

        resources.sort(key=lambda r: r.created_at, reverse=True)
        return resources

    async def count(self) -> int:
        with self._lock:
            return len(self._resources)
