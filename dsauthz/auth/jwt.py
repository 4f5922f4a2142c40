"""
JWT credential verification for dsauthz.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import jwt

from .types import Claims
from ..core.config import TokenConfig
from ..core.types import Identity, utc_now
from ..types.errors import AuthFailure, Unauthenticated

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["exp", "iat"]


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header value.

    Returns None when the header is absent or not in bearer form.
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


class CredentialVerifier:
    """
    Validates signed, time-bound bearer credentials.

    Expired, forged, malformed and unrecognised-role tokens are all reported
    as the same failure so callers learn nothing about why validation failed.
    """

    def __init__(self, config: TokenConfig):
        config.validate()
        self.config = config

    def verify(self, raw_token: Optional[str]) -> Identity:
        """
        Verify a raw token and return the caller's identity.

        Raises:
            Unauthenticated: ``missing token`` if the token is absent or empty,
                ``invalid or expired`` for every other failure.
        """
        if not isinstance(raw_token, str) or not raw_token.strip():
            raise Unauthenticated(AuthFailure.MISSING_TOKEN)

        try:
            payload = jwt.decode(
                raw_token,
                self.config.secret_key,
                algorithms=[self.config.algorithm],
                audience=self.config.audience,
                issuer=self.config.issuer,
                leeway=self.config.leeway,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Credential rejected: expired")
            raise Unauthenticated(AuthFailure.INVALID_OR_EXPIRED)
        except jwt.InvalidTokenError as e:
            logger.debug(f"Credential rejected: {e}")
            raise Unauthenticated(AuthFailure.INVALID_OR_EXPIRED)

        try:
            identity = Claims.from_dict(payload).to_identity()
        except ValueError as e:
            logger.debug(f"Credential rejected: {e}")
            raise Unauthenticated(AuthFailure.INVALID_OR_EXPIRED)

        return identity


class CredentialIssuer:
    """
    Mints credentials the verifier accepts.

    Issuance belongs to the login flow, outside the engine; this class exists
    for development tooling and tests.
    """

    def __init__(self, config: TokenConfig):
        config.validate()
        self.config = config

    def issue(self, identity: Identity, expires_in: Optional[timedelta] = None,
              now: Optional[datetime] = None) -> str:
        """Sign a token for ``identity``. A negative ``expires_in`` yields an expired token."""
        now = now or utc_now()
        exp = now + (expires_in if expires_in is not None else self.config.expiry)

        claims = Claims.for_identity(identity)
        claims.iat = int(now.timestamp())
        claims.exp = int(exp.timestamp())
        claims.iss = self.config.issuer
        claims.aud = self.config.audience

        token = jwt.encode(claims.to_dict(), self.config.secret_key, algorithm=self.config.algorithm)
        logger.info(f"Issued credential for {identity.username} ({identity.role})")
        return token
