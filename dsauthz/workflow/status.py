"""
Status workflow for dsauthz resources.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

Resources move through draft, review, approved and deprecated. Every change
is authorized by the decision engine. By default any authorized actor may set
any status; strict mode limits changes to the linear edges below.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional

from ..authz.engine import AccessDecisionEngine
from ..core.types import Action, Identity, Resource, ResourceKind, Status, utc_now
from ..types.errors import InvalidTransition, ValidationError

logger = logging.getLogger(__name__)

LINEAR_TRANSITIONS: Mapping[Status, FrozenSet[Status]] = MappingProxyType({
    Status.DRAFT: frozenset({Status.REVIEW, Status.APPROVED}),
    Status.REVIEW: frozenset({Status.APPROVED, Status.DRAFT}),
    Status.APPROVED: frozenset({Status.DEPRECATED}),
    Status.DEPRECATED: frozenset(),
})

# Fields no update may write.
IMMUTABLE_FIELDS = frozenset({'id', 'owner_id', 'kind', 'created_at', 'updated_at'})


class StatusWorkflow:
    """
    Applies creations, updates and status changes to resource snapshots.

    Methods return new snapshots; persisting them is the caller's job.
    """

    def __init__(self, engine: Optional[AccessDecisionEngine] = None, strict: bool = False):
        self.engine = engine or AccessDecisionEngine()
        self.strict = strict

    def initial_status(self) -> Status:
        return Status.DRAFT

    def allowed_targets(self, current: Status) -> FrozenSet[Status]:
        """Statuses reachable from ``current`` in one step."""
        if not self.strict:
            return frozenset(Status)
        return LINEAR_TRANSITIONS[current] | {current}

    def can_transition(self, current: Status, target: Status) -> bool:
        return target in self.allowed_targets(current)

    def create(self, identity: Identity, kind: ResourceKind,
               payload: Optional[Mapping[str, Any]] = None) -> Resource:
        """
        Build a new resource owned by ``identity``.

        The optional ``status`` field of the payload sets the starting state;
        starting as approved needs an admin like any other approval.
        """
        fields: Dict[str, Any] = dict(payload or {})
        self._reject_immutable(fields)

        status = Status.parse(fields.pop('status')) if 'status' in fields else self.initial_status()
        target = None if status == self.initial_status() else status
        self.engine.authorize(identity, None, Action.create(target))

        if self.strict and status != self.initial_status():
            raise InvalidTransition(self.initial_status(), status)

        resource = Resource.new(identity.id, kind=ResourceKind(kind), payload=fields, status=status)
        logger.info(f"Created {resource.kind} {resource.id} for {identity.username} in {status}")
        return resource

    def transition(self, identity: Identity, resource: Resource, to: Status) -> Resource:
        """Change only the status of ``resource``."""
        action = Action.change_status(to)
        self.engine.authorize(identity, resource, action)
        self._check_transition(resource, action.target_status)

        logger.info(f"{resource.kind} {resource.id}: {resource.status} -> {action.target_status} "
                    f"by {identity.username}")
        return resource.with_changes(status=action.target_status, updated_at=utc_now())

    def apply_update(self, identity: Identity, resource: Resource,
                     updates: Mapping[str, Any]) -> Resource:
        """
        Apply a parsed update body.

        A body of exactly ``{"status": ...}`` is a status change; anything
        else is a general update, even when it also writes the status.

        Raises:
            Forbidden: when the engine denies the change
            ValidationError: for an empty body, an unknown status or an
                attempt to write an immutable field
            InvalidTransition: in strict mode, for a step outside the linear edges
        """
        if not updates:
            raise ValidationError("No fields to update")

        try:
            action = Action.from_update(updates)
        except ValidationError:
            # An unknown status is still gated by ownership before it is reported
            self.engine.authorize(identity, resource, Action.update(updates))
            raise
        self.engine.authorize(identity, resource, action)
        self._reject_immutable(updates)

        status = resource.status
        if action.target_status is not None:
            self._check_transition(resource, action.target_status)
            status = action.target_status

        payload = dict(resource.payload)
        payload.update({k: v for k, v in updates.items() if k != 'status'})

        logger.debug(f"Updated {resource.kind} {resource.id} fields {sorted(action.fields)}")
        return resource.with_changes(payload=payload, status=status, updated_at=utc_now())

    def _check_transition(self, resource: Resource, target: Status) -> None:
        if not self.can_transition(resource.status, target):
            logger.warning(f"Rejected transition {resource.status} -> {target} on {resource.id}")
            raise InvalidTransition(resource.status, target)

    @staticmethod
    def _reject_immutable(fields: Mapping[str, Any]) -> None:
        for name in sorted(IMMUTABLE_FIELDS & set(fields)):
            raise ValidationError(f"Field cannot be changed: {name}", field=name)
