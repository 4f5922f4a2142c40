"""
Core types for dsauthz.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

Identities, resources, actions and decisions exchanged between the credential
verifier, the decision engine, the status workflow and the persistence layer.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from ..types.errors import ValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Closed set of caller roles. Matching is exact and case-sensitive."""
    ADMIN = "admin"
    DESIGNER = "designer"
    DEVELOPER = "developer"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """Decode a role claim. Raises ValueError for anything not in the set."""
        if not isinstance(value, str):
            raise ValueError(f"Role must be a string, got {type(value).__name__}")
        return cls(value)


class Status(str, Enum):
    """Lifecycle states of a mutable resource."""
    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    DEPRECATED = "deprecated"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> "Status":
        if isinstance(value, Status):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Unknown status: {value}", field="status", value=value)


class ResourceKind(str, Enum):
    """Kinds of resources governed by the engine."""
    COMPONENT = "component"
    DESIGN_TOKEN = "design_token"

    def __str__(self) -> str:
        return self.value


class ActionKind(str, Enum):
    """Operations that can be requested on a resource."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    CHANGE_STATUS = "change_status"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, decoded from a verified credential."""
    id: str
    username: str
    role: Role

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role.value,
        }


@dataclass(frozen=True)
class Action:
    """
    A requested operation.

    ``target_status`` is set whenever the operation writes a status value,
    ``fields`` holds the field names an update touches.
    """
    kind: ActionKind
    target_status: Optional[Status] = None
    fields: FrozenSet[str] = frozenset()

    @classmethod
    def create(cls, target_status: Optional[Status] = None) -> "Action":
        """A creation; ``target_status`` is set when the new resource does not start as draft."""
        return cls(ActionKind.CREATE, target_status)

    @classmethod
    def read(cls) -> "Action":
        return cls(ActionKind.READ)

    @classmethod
    def delete(cls) -> "Action":
        return cls(ActionKind.DELETE)

    @classmethod
    def update(cls, fields=(), target_status: Optional[Status] = None) -> "Action":
        return cls(ActionKind.UPDATE, target_status, frozenset(fields))

    @classmethod
    def change_status(cls, to: Status) -> "Action":
        return cls(ActionKind.CHANGE_STATUS, Status.parse(to), frozenset({'status'}))

    @classmethod
    def from_update(cls, updates: Mapping[str, Any]) -> "Action":
        """
        Classify a parsed update body.

        Exactly ``{status: s}`` becomes a status change; anything else is a
        general update that still records the status it writes, if any.
        """
        fields = frozenset(updates)
        target = Status.parse(updates['status']) if 'status' in updates else None

        if fields == {'status'}:
            return cls.change_status(target)
        return cls.update(fields, target)

    @property
    def is_status_only(self) -> bool:
        return self.kind == ActionKind.CHANGE_STATUS and self.fields == {'status'}

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'kind': self.kind.value,
            'fields': sorted(self.fields),
        }
        if self.target_status is not None:
            result['target_status'] = self.target_status.value
        return result

    def __str__(self) -> str:
        if self.kind == ActionKind.CHANGE_STATUS:
            return f"change_status({self.target_status})"
        return str(self.kind)


@dataclass(frozen=True)
class Resource:
    """
    Snapshot of a mutable domain object.

    The decision engine looks only at ``owner_id`` and ``status``; the
    payload is carried along untouched.
    """
    id: str
    owner_id: str
    status: Status = Status.DRAFT
    kind: ResourceKind = ResourceKind.COMPONENT
    payload: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def new(cls, owner_id: str, kind: ResourceKind = ResourceKind.COMPONENT,
            payload: Optional[Dict[str, Any]] = None,
            status: Status = Status.DRAFT) -> "Resource":
        now = utc_now()
        return cls(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            status=status,
            kind=kind,
            payload=dict(payload or {}),
            created_at=now,
            updated_at=now,
        )

    def with_changes(self, **changes: Any) -> "Resource":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation, payload fields first."""
        result = dict(self.payload)
        result.update({
            'id': self.id,
            'kind': self.kind.value,
            'owner_id': self.owner_id,
            'status': self.status.value,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        })
        return result


@dataclass(frozen=True)
class Decision:
    """Outcome of one authorization check."""
    allowed: bool
    rule: str
    action: Action
    reason: Optional[Any] = None
    identity_id: Optional[str] = None
    resource_id: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'allowed': self.allowed,
            'rule': self.rule,
            'action': self.action.to_dict(),
            'timestamp': self.timestamp.isoformat(),
        }
        if self.reason is not None:
            result['reason'] = str(self.reason)
        if self.identity_id is not None:
            result['identity_id'] = self.identity_id
        if self.resource_id is not None:
            result['resource_id'] = self.resource_id
        return result


@dataclass
class AuditEvent:
    """Audit event for access decisions and resource changes"""
    event_id: str
    event_type: str  # e.g., "authorize", "resource_created", "resource_deleted"
    actor_id: Optional[str]
    timestamp: datetime = field(default_factory=utc_now)
    resource_id: Optional[str] = None
    action: Optional[str] = None
    outcome: Optional[str] = None  # "allow" or "deny"
    reason: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.event_id:
            self.event_id = str(uuid.uuid4())
