"""
Shared fixtures for dsauthz tests.
"""

import pytest

from dsauthz.auth.jwt import CredentialIssuer, CredentialVerifier
from dsauthz.core.config import Config, TokenConfig
from dsauthz.core.service import AccessControl
from dsauthz.core.types import Identity, Resource, Role, Status

SECRET = "test-secret-key-0123456789abcdef-0123456789"


@pytest.fixture
def token_config():
    """Create a test token configuration"""
    return TokenConfig(secret_key=SECRET)


@pytest.fixture
def config(token_config):
    return Config(token=token_config)


@pytest.fixture
def issuer(token_config):
    return CredentialIssuer(token_config)


@pytest.fixture
def verifier(token_config):
    return CredentialVerifier(token_config)


@pytest.fixture
def owner():
    return Identity(id="u1", username="alice", role=Role.DESIGNER)


@pytest.fixture
def other_designer():
    return Identity(id="u2", username="bob", role=Role.DESIGNER)


@pytest.fixture
def developer():
    return Identity(id="u3", username="dave", role=Role.DEVELOPER)


@pytest.fixture
def admin():
    return Identity(id="admin-1", username="admin", role=Role.ADMIN)


@pytest.fixture
def draft_resource(owner):
    return Resource(id="c1", owner_id=owner.id, status=Status.DRAFT, payload={"name": "Button"})


@pytest.fixture
def review_resource(owner):
    return Resource(id="c2", owner_id=owner.id, status=Status.REVIEW, payload={"name": "Card"})


@pytest.fixture
def access(config):
    """Create an AccessControl instance with in-memory collaborators"""
    return AccessControl.new(config)
