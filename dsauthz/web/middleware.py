"""
aiohttp middleware and handler guards for dsauthz.

Maps the engine's error kinds onto HTTP responses and provides the
``authenticated`` and ``require_role`` guards used by route handlers.
"""

import functools
import logging
from typing import Any, Callable

from aiohttp import hdrs, web

from ..core.service import AccessControl
from ..core.types import Identity, Role
from ..types.errors import (
    AccessControlError,
    AuthFailure,
    Unauthenticated,
    create_error_response,
    get_http_status,
)


logger = logging.getLogger(__name__)

ACCESS_CONTROL = web.AppKey("access_control", AccessControl)
IDENTITY = "identity"


def _request_from(args: Any) -> web.Request:
    # Handlers may be plain functions or bound methods; the request comes last.
    return args[-1]


def get_identity(request: web.Request) -> Identity:
    identity = request.get(IDENTITY)
    if identity is None:
        raise Unauthenticated(AuthFailure.MISSING_TOKEN)
    return identity


@web.middleware
async def error_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Translate AccessControlError into a JSON error response."""
    try:
        return await handler(request)
    except AccessControlError as e:
        status = get_http_status(e.error_code)
        if status >= 500:
            logger.error(f"{request.method} {request.path} failed: {e}")
        else:
            logger.info(f"{request.method} {request.path} -> {status} ({e.message})")
        return web.json_response(create_error_response(e), status=status)


def authenticated(handler: Callable) -> Callable:
    """Verify the bearer token and store the caller's Identity on the request."""
    @functools.wraps(handler)
    async def wrapper(*args: Any) -> web.StreamResponse:
        request = _request_from(args)
        access = request.app[ACCESS_CONTROL]
        request[IDENTITY] = access.authenticate(request.headers.get(hdrs.AUTHORIZATION))
        return await handler(*args)
    return wrapper


def require_role(*roles: Role) -> Callable:
    """
    Only let callers with one of ``roles`` through.

    Must be applied inside ``authenticated``. Roles are matched exactly; an
    admin is refused when ``Role.ADMIN`` is not listed. With no roles, the
    service's configured admin roles are required.
    """
    allowed = frozenset(roles)

    def decorator(handler: Callable) -> Callable:
        @functools.wraps(handler)
        async def wrapper(*args: Any) -> web.StreamResponse:
            request = _request_from(args)
            access = request.app[ACCESS_CONTROL]
            access.require_role(get_identity(request), allowed or access.policy.admin_roles)
            return await handler(*args)
        return wrapper

    return decorator


def require_admin(handler: Callable) -> Callable:
    """``require_role`` for the admin roles configured on the service."""
    return require_role()(handler)
