"""
Access control service for dsauthz.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

Wires the credential verifier, decision engine and status workflow to the
persistence and audit collaborators: verify, load, decide, save, record.
"""

import logging
import uuid
from typing import Any, Collection, Dict, List, Mapping, Optional

from .config import Config
from .types import (
    Action,
    AuditEvent,
    Decision,
    Identity,
    Resource,
    ResourceKind,
    Role,
    Status,
)
from ..audit.logger import AuditLogger, MemoryAuditLogger
from ..auth.jwt import CredentialVerifier, extract_bearer_token
from ..authz.engine import AccessDecisionEngine
from ..authz.policy import RolePolicy
from ..store.memory import MemoryResourceStore
from ..store.types import ResourceStore
from ..types.errors import DenialReason, Forbidden, ResourceNotFound
from ..workflow.status import StatusWorkflow


class AccessControl:
    """
    Entry point used by transport handlers before touching persistence.
    Use AccessControl.new() to construct an instance from a validated config.
    """

    def __init__(
        self,
        config: Config,
        store: Optional[ResourceStore] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the service.

        Args:
            config: dsauthz configuration
            store: Resource storage implementation (defaults to in-memory)
            audit_logger: Audit logging implementation (defaults to in-memory)
        """
        self.config = config
        self.verifier = CredentialVerifier(config.token)
        self.policy = RolePolicy(config.role_permissions, config.admin_roles)
        self.engine = AccessDecisionEngine(self.policy)
        self.workflow = StatusWorkflow(self.engine, strict=config.strict_workflow)
        self.store = store or MemoryResourceStore()
        self.audit_logger = audit_logger or MemoryAuditLogger(max_entries=config.audit_max_entries)
        self.logger = logging.getLogger(__name__)

    @classmethod
    def new(
        cls,
        config: Config,
        store: Optional[ResourceStore] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "AccessControl":
        """
        Create a new instance with the provided configuration.

        Raises:
            ConfigurationError: If configuration is invalid

        Example:
            access = AccessControl.new(Config(token=TokenConfig(secret_key="s3cret")))
        """
        config.validate()
        return cls(config, store, audit_logger)

    def verify(self, raw_token: Optional[str]) -> Identity:
        """Verify a raw bearer token. Raises Unauthenticated."""
        return self.verifier.verify(raw_token)

    def authenticate(self, authorization: Optional[str]) -> Identity:
        """Verify the token carried by an ``Authorization`` header value."""
        return self.verifier.verify(extract_bearer_token(authorization))

    def authorize(self, identity: Identity, resource: Optional[Resource], action: Action) -> Decision:
        """Decide one action. Raises Forbidden."""
        return self.engine.authorize(identity, resource, action)

    def require_role(self, identity: Identity, allowed_roles: Collection[Role]) -> None:
        """
        Route-level guard: the caller's role must be one of ``allowed_roles``.

        Raises:
            Forbidden: with reason ``insufficient permissions``
        """
        if not self.policy.has_any_role(identity.role, allowed_roles):
            self.logger.warning(f"Role {identity.role} of {identity.id} not in {sorted(allowed_roles)}")
            raise Forbidden(DenialReason.INSUFFICIENT_PERMISSIONS,
                            details={'allowed_roles': sorted(r.value for r in allowed_roles)})

    async def create_resource(self, identity: Identity, kind: ResourceKind,
                              payload: Optional[Mapping[str, Any]] = None) -> Resource:
        try:
            resource = self.workflow.create(identity, kind, payload)
        except Forbidden as e:
            await self._record_denial(identity, None, "create", e)
            raise

        await self.store.save(resource)
        await self._record(identity, "resource_created", resource.id, "create", "allow",
                           details={"kind": resource.kind.value, "status": resource.status.value})
        return resource

    async def get_resource(self, identity: Identity, resource_id: str,
                           kind: Optional[ResourceKind] = None) -> Resource:
        resource = await self._load(resource_id, kind)
        self.engine.authorize(identity, resource, Action.read())
        return resource

    async def list_resources(self, identity: Identity, kind: Optional[ResourceKind] = None,
                             status: Optional[Status] = None) -> List[Resource]:
        self.engine.authorize(identity, None, Action.read())
        return await self.store.list(kind=kind, status=status)

    async def update_resource(self, identity: Identity, resource_id: str,
                              updates: Mapping[str, Any],
                              kind: Optional[ResourceKind] = None) -> Resource:
        """
        Apply an update body to a stored resource.

        Raises:
            ResourceNotFound: if the resource does not exist
            Forbidden: if the engine denies the change
            ValidationError: if the body cannot be applied
            ConflictError: if the resource changed since it was loaded
        """
        resource = await self._load(resource_id, kind)

        try:
            updated = self.workflow.apply_update(identity, resource, updates)
        except Forbidden as e:
            await self._record_denial(identity, resource_id, e.details.get('action', 'update'), e)
            raise

        action = Action.from_update(updates)
        await self.store.save(updated, expected_updated_at=resource.updated_at)
        await self._record(identity, "resource_updated", resource_id, str(action), "allow",
                           details={"fields": sorted(action.fields),
                                    "status": updated.status.value})
        return updated

    async def change_status(self, identity: Identity, resource_id: str, to: Status,
                            kind: Optional[ResourceKind] = None) -> Resource:
        resource = await self._load(resource_id, kind)
        action = Action.change_status(to)

        try:
            updated = self.workflow.transition(identity, resource, action.target_status)
        except Forbidden as e:
            await self._record_denial(identity, resource_id, str(action), e)
            raise

        await self.store.save(updated, expected_updated_at=resource.updated_at)
        await self._record(identity, "status_changed", resource_id, str(action), "allow",
                           details={"from": resource.status.value, "to": updated.status.value})
        return updated

    async def delete_resource(self, identity: Identity, resource_id: str,
                              kind: Optional[ResourceKind] = None) -> None:
        """
        Delete a resource. The role check runs before the lookup, so
        non-admins learn nothing about which IDs exist.
        """
        try:
            self.engine.authorize(identity, None, Action.delete())
        except Forbidden as e:
            await self._record_denial(identity, resource_id, "delete", e)
            raise

        await self._load(resource_id, kind)
        await self.store.delete(resource_id)
        await self._record(identity, "resource_deleted", resource_id, "delete", "allow")

    async def _load(self, resource_id: str, kind: Optional[ResourceKind]) -> Resource:
        resource = await self.store.load(resource_id)
        if kind is not None and resource.kind != kind:
            raise ResourceNotFound(resource_id)
        return resource

    async def close(self) -> None:
        await self.store.close()
        await self.audit_logger.close()

    async def _record_denial(self, identity: Identity, resource_id: Optional[str],
                             action: str, error: Forbidden) -> None:
        self.logger.warning(f"Denied {action} on {resource_id} for {identity.id}: {error.reason}")
        await self._record(identity, "access_denied", resource_id, action, "deny",
                           reason=error.reason.value, details=dict(error.details))

    async def _record(self, identity: Identity, event_type: str, resource_id: Optional[str],
                      action: str, outcome: str, reason: Optional[str] = None,
                      details: Optional[Dict[str, Any]] = None) -> None:
        await self.audit_logger.log(AuditEvent(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            actor_id=identity.id,
            resource_id=resource_id,
            action=action,
            outcome=outcome,
            reason=reason,
            details={"role": identity.role.value, **(details or {})},
        ))
