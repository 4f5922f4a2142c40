"""
Tests for the access decision engine.
"""

import pytest

from dsauthz import authorize
from dsauthz.authz import AccessDecisionEngine, RolePolicy
from dsauthz.core.types import Action, ActionKind, Identity, Resource, Role, Status
from dsauthz.types.errors import DenialReason, Forbidden, ValidationError

NON_ADMIN_ROLES = [Role.DESIGNER, Role.DEVELOPER]


@pytest.fixture
def engine():
    return AccessDecisionEngine()


def _denial(engine, identity, resource, action):
    with pytest.raises(Forbidden) as exc_info:
        engine.authorize(identity, resource, action)
    return exc_info.value


class TestActionClassification:
    """Test Action.from_update"""

    def test_status_only_is_status_change(self):
        action = Action.from_update({"status": "review"})

        assert action.kind == ActionKind.CHANGE_STATUS
        assert action.target_status == Status.REVIEW
        assert action.is_status_only

    def test_mixed_update_is_general_update(self):
        action = Action.from_update({"name": "x", "status": "review"})

        assert action.kind == ActionKind.UPDATE
        assert action.target_status == Status.REVIEW
        assert action.fields == {"name", "status"}
        assert not action.is_status_only

    def test_plain_update(self):
        action = Action.from_update({"name": "x"})

        assert action.kind == ActionKind.UPDATE
        assert action.target_status is None

    def test_unknown_status(self):
        with pytest.raises(ValidationError) as exc_info:
            Action.from_update({"status": "published"})

        assert exc_info.value.field == "status"

    def test_status_is_case_sensitive(self):
        with pytest.raises(ValidationError):
            Action.change_status("APPROVED")


class TestDecisionRules:
    """Test the precedence-ordered rules"""

    @pytest.mark.parametrize("role", NON_ADMIN_ROLES)
    def test_delete_denied_for_non_admins_even_owners(self, engine, role):
        identity = Identity(id="u1", username="user", role=role)
        resource = Resource(id="c1", owner_id="u1")

        error = _denial(engine, identity, resource, Action.delete())

        assert error.reason == DenialReason.INSUFFICIENT_PERMISSIONS
        assert error.message == "insufficient permissions"

    def test_admin_deletes_anything(self, engine, admin, draft_resource):
        decision = engine.authorize(admin, draft_resource, Action.delete())

        assert decision.allowed
        assert decision.rule == "delete"

    @pytest.mark.parametrize("role", list(Role))
    def test_owner_may_update(self, engine, role):
        identity = Identity(id="u1", username="user", role=role)
        resource = Resource(id="c1", owner_id="u1")

        assert engine.authorize(identity, resource, Action.update({"name"})).allowed

    @pytest.mark.parametrize("role", NON_ADMIN_ROLES)
    def test_non_owner_may_not_update(self, engine, role, draft_resource):
        identity = Identity(id="someone-else", username="user", role=role)

        error = _denial(engine, identity, draft_resource, Action.update({"name"}))

        assert error.reason == DenialReason.PERMISSION_DENIED

    def test_admin_updates_any_resource(self, engine, admin, draft_resource):
        assert engine.authorize(admin, draft_resource, Action.update({"name"})).allowed

    @pytest.mark.parametrize("role", NON_ADMIN_ROLES)
    def test_approve_is_admin_only_even_for_owner(self, engine, role):
        identity = Identity(id="u1", username="user", role=role)
        resource = Resource(id="c1", owner_id="u1", status=Status.REVIEW)

        error = _denial(engine, identity, resource, Action.change_status(Status.APPROVED))

        assert error.reason == DenialReason.ONLY_ADMINS_CAN_APPROVE

    def test_admin_approves_someone_elses_resource(self, engine, admin, review_resource):
        decision = engine.authorize(admin, review_resource, Action.change_status(Status.APPROVED))

        assert decision.allowed
        assert decision.rule == "approve"

    def test_admin_approves_own_resource(self, engine, admin):
        resource = Resource(id="c9", owner_id=admin.id)

        assert engine.authorize(admin, resource, Action.change_status(Status.APPROVED)).allowed

    def test_bundled_approval_still_admin_only(self, engine, owner, draft_resource):
        """Approval cannot be smuggled in alongside other fields"""
        action = Action.from_update({"name": "New", "status": "approved"})

        error = _denial(engine, owner, draft_resource, action)

        assert error.reason == DenialReason.ONLY_ADMINS_CAN_APPROVE

    @pytest.mark.parametrize("role", list(Role))
    def test_owner_submits_for_review(self, engine, role):
        identity = Identity(id="u1", username="user", role=role)
        resource = Resource(id="c1", owner_id="u1")

        decision = engine.authorize(identity, resource, Action.change_status(Status.REVIEW))

        assert decision.allowed
        assert decision.rule == "submit_for_review"

    @pytest.mark.parametrize("role", NON_ADMIN_ROLES)
    def test_non_owner_cannot_submit_for_review(self, engine, role, draft_resource):
        identity = Identity(id="u9", username="user", role=role)

        error = _denial(engine, identity, draft_resource, Action.change_status(Status.REVIEW))

        assert error.reason == DenialReason.PERMISSION_DENIED

    def test_admin_submits_for_review(self, engine, admin, draft_resource):
        assert engine.authorize(admin, draft_resource, Action.change_status(Status.REVIEW)).allowed

    def test_mixed_review_update_uses_general_rule(self, engine, owner, other_designer, draft_resource):
        action = Action.from_update({"name": "x", "status": "review"})

        assert engine.authorize(owner, draft_resource, action).rule == "update"
        error = _denial(engine, other_designer, draft_resource, action)
        assert error.reason == DenialReason.PERMISSION_DENIED

    @pytest.mark.parametrize("target", [Status.DRAFT, Status.DEPRECATED])
    def test_other_status_changes_follow_ownership(self, engine, owner, other_designer, target):
        resource = Resource(id="c1", owner_id=owner.id, status=Status.APPROVED)
        action = Action.change_status(target)

        decision = engine.authorize(owner, resource, action)
        assert decision.allowed
        assert decision.rule == "update"

        assert _denial(engine, other_designer, resource, action).reason == DenialReason.PERMISSION_DENIED

    @pytest.mark.parametrize("role", list(Role))
    def test_create_and_read_for_every_role(self, engine, role, draft_resource):
        identity = Identity(id="u5", username="user", role=role)

        assert engine.authorize(identity, None, Action.create()).allowed
        assert engine.authorize(identity, draft_resource, Action.read()).rule == "create_or_read"

    def test_create_in_approved_state_is_admin_only(self, engine, owner, admin):
        action = Action.create(Status.APPROVED)

        assert _denial(engine, owner, None, action).reason == DenialReason.ONLY_ADMINS_CAN_APPROVE
        assert engine.authorize(admin, None, action).allowed

    def test_update_without_resource_fails_closed(self, engine, owner):
        assert _denial(engine, owner, None, Action.update({"name"})).reason == DenialReason.PERMISSION_DENIED

    def test_unknown_action_fails_closed(self, engine, admin, draft_resource):
        decision = engine.evaluate(admin, draft_resource, Action("archive"))

        assert not decision.allowed
        assert decision.rule == "default_deny"
        assert decision.reason == DenialReason.PERMISSION_DENIED


class TestEngineApi:
    """Test evaluate/authorize behaviour"""

    def test_evaluate_does_not_raise(self, engine, other_designer, draft_resource):
        decision = engine.evaluate(other_designer, draft_resource, Action.delete())

        assert decision.allowed is False
        assert decision.reason == DenialReason.INSUFFICIENT_PERMISSIONS
        assert decision.identity_id == other_designer.id
        assert decision.resource_id == draft_resource.id

    def test_forbidden_carries_rule(self, engine, owner, draft_resource):
        error = _denial(engine, owner, draft_resource, Action.change_status(Status.APPROVED))

        assert error.details["rule"] == "approve"
        assert error.to_dict()["error"] == "forbidden"

    def test_decision_to_dict(self, engine, admin, draft_resource):
        result = engine.authorize(admin, draft_resource, Action.change_status(Status.APPROVED)).to_dict()

        assert result["allowed"] is True
        assert result["action"] == {"kind": "change_status", "fields": ["status"], "target_status": "approved"}

    def test_custom_policy(self, owner, draft_resource):
        engine = AccessDecisionEngine(RolePolicy(admin_roles={Role.ADMIN, Role.DESIGNER}))

        assert engine.authorize(owner, draft_resource, Action.delete()).allowed

    def test_module_level_authorize(self, admin, owner, draft_resource):
        assert authorize(admin, draft_resource, Action.delete()).allowed
        with pytest.raises(Forbidden):
            authorize(owner, draft_resource, Action.delete())


class TestScenarios:
    """End-to-end decision scenarios"""

    def test_review_approve_delete_lifecycle(self, engine, owner, other_designer, admin, draft_resource):
        submit = Action.from_update({"status": "review"})
        approve = Action.from_update({"status": "approved"})

        assert engine.authorize(owner, draft_resource, submit).allowed
        assert _denial(engine, other_designer, draft_resource, submit).reason == DenialReason.PERMISSION_DENIED

        in_review = draft_resource.with_changes(status=Status.REVIEW)
        assert engine.authorize(admin, in_review, approve).allowed
        assert _denial(engine, owner, in_review, approve).reason == DenialReason.ONLY_ADMINS_CAN_APPROVE

        assert engine.authorize(admin, in_review, Action.delete()).allowed
        assert _denial(engine, owner, in_review, Action.delete()).reason == DenialReason.INSUFFICIENT_PERMISSIONS
