"""
Access decision engine for dsauthz.
Composes the role policy and ownership evaluator into one decision.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .ownership import OwnershipEvaluator
from .policy import RolePolicy
from ..core.types import Action, ActionKind, Decision, Identity, Resource, Status
from ..types.errors import DenialReason, Forbidden


logger = logging.getLogger(__name__)


class Grant(Enum):
    """Who a rule lets through."""
    ADMIN_ONLY = "admin_only"
    OWNER_OR_ADMIN = "owner_or_admin"
    ROLE_TABLE = "role_table"


@dataclass(frozen=True)
class Rule:
    """One entry of the precedence list."""
    name: str
    applies: Callable[[Action], bool]
    grant: Grant
    reason: DenialReason


# Ordered from most to least restrictive; the first rule that applies decides.
RULES: Tuple[Rule, ...] = (
    Rule(
        "delete",
        lambda action: action.kind == ActionKind.DELETE,
        Grant.ADMIN_ONLY,
        DenialReason.INSUFFICIENT_PERMISSIONS,
    ),
    Rule(
        "approve",
        lambda action: action.target_status == Status.APPROVED,
        Grant.ADMIN_ONLY,
        DenialReason.ONLY_ADMINS_CAN_APPROVE,
    ),
    Rule(
        "submit_for_review",
        lambda action: action.is_status_only and action.target_status == Status.REVIEW,
        Grant.OWNER_OR_ADMIN,
        DenialReason.PERMISSION_DENIED,
    ),
    Rule(
        "update",
        lambda action: action.kind in (ActionKind.UPDATE, ActionKind.CHANGE_STATUS),
        Grant.OWNER_OR_ADMIN,
        DenialReason.PERMISSION_DENIED,
    ),
    Rule(
        "create_or_read",
        lambda action: action.kind in (ActionKind.CREATE, ActionKind.READ),
        Grant.ROLE_TABLE,
        DenialReason.PERMISSION_DENIED,
    ),
)

DEFAULT_DENY = "default_deny"


class AccessDecisionEngine:
    """
    Decides whether an identity may perform an action on a resource.

    The engine is a pure function of its inputs: the caller loads the
    resource snapshot beforehand and persists any change afterwards.
    """

    def __init__(self, policy: Optional[RolePolicy] = None,
                 ownership: Optional[OwnershipEvaluator] = None):
        self.policy = policy or RolePolicy()
        self.ownership = ownership or OwnershipEvaluator()

    def evaluate(self, identity: Identity, resource: Optional[Resource], action: Action) -> Decision:
        """
        Evaluate without raising.

        Returns:
            Decision: allowed or denied, with the name of the deciding rule
        """
        resource_id = resource.id if resource is not None else None

        for rule in RULES:
            if not rule.applies(action):
                continue

            allowed = self._granted(rule.grant, identity, resource, action)
            decision = Decision(
                allowed=allowed,
                rule=rule.name,
                action=action,
                reason=None if allowed else rule.reason,
                identity_id=identity.id,
                resource_id=resource_id,
            )
            logger.debug(
                f"{'Allowed' if allowed else 'Denied'} {action} for {identity.id} "
                f"({identity.role}) on {resource_id} by rule {rule.name}"
            )
            return decision

        logger.debug(f"Denied {action} for {identity.id} on {resource_id}: no rule applies")
        return Decision(
            allowed=False,
            rule=DEFAULT_DENY,
            action=action,
            reason=DenialReason.PERMISSION_DENIED,
            identity_id=identity.id,
            resource_id=resource_id,
        )

    def authorize(self, identity: Identity, resource: Optional[Resource], action: Action) -> Decision:
        """
        Evaluate and raise on denial.

        Raises:
            Forbidden: carrying the denial reason of the deciding rule
        """
        decision = self.evaluate(identity, resource, action)
        if not decision.allowed:
            raise Forbidden(decision.reason, details={'rule': decision.rule, 'action': str(action)})
        return decision

    def _granted(self, grant: Grant, identity: Identity, resource: Optional[Resource],
                 action: Action) -> bool:
        if grant == Grant.ADMIN_ONLY:
            return self.policy.is_admin(identity.role)
        if grant == Grant.OWNER_OR_ADMIN:
            if self.policy.is_admin(identity.role):
                return True
            return self.ownership.is_owner(identity, resource)
        return self.policy.permits(identity.role, action)


def authorize(identity: Identity, resource: Optional[Resource], action: Action,
              policy: Optional[RolePolicy] = None) -> Decision:
    """Convenience function to authorize with a one-off engine."""
    return AccessDecisionEngine(policy).authorize(identity, resource, action)
