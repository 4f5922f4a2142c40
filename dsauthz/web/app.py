"""
aiohttp application exposing components and design tokens behind dsauthz.
"""

import json
import logging
from typing import Any, Dict

from aiohttp import web

from .middleware import ACCESS_CONTROL, authenticated, error_middleware, get_identity, require_admin
from ..core.service import AccessControl
from ..core.types import ResourceKind, Status
from ..types.errors import ValidationError


logger = logging.getLogger(__name__)


async def _read_json(request: web.Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


class ResourceHandlers:
    """CRUD handlers for one resource kind."""

    def __init__(self, kind: ResourceKind):
        self.kind = kind

    @authenticated
    async def list_all(self, request: web.Request) -> web.Response:
        access = request.app[ACCESS_CONTROL]
        status = request.query.get("status")
        resources = await access.list_resources(
            get_identity(request),
            kind=self.kind,
            status=Status.parse(status) if status else None,
        )
        return web.json_response({
            "items": [r.to_dict() for r in resources],
            "total": len(resources),
        })

    @authenticated
    async def get(self, request: web.Request) -> web.Response:
        access = request.app[ACCESS_CONTROL]
        resource = await access.get_resource(get_identity(request), request.match_info["id"], kind=self.kind)
        return web.json_response(resource.to_dict())

    @authenticated
    async def create(self, request: web.Request) -> web.Response:
        access = request.app[ACCESS_CONTROL]
        body = await _read_json(request)
        resource = await access.create_resource(get_identity(request), self.kind, body)
        return web.json_response(resource.to_dict(), status=201)

    @authenticated
    async def update(self, request: web.Request) -> web.Response:
        access = request.app[ACCESS_CONTROL]
        body = await _read_json(request)
        resource = await access.update_resource(
            get_identity(request), request.match_info["id"], body, kind=self.kind
        )
        return web.json_response(resource.to_dict())

    @authenticated
    @require_admin
    async def delete(self, request: web.Request) -> web.Response:
        access = request.app[ACCESS_CONTROL]
        await access.delete_resource(get_identity(request), request.match_info["id"], kind=self.kind)
        return web.json_response({"message": f"{self.kind.value} deleted"})

    def routes(self, prefix: str):
        return [
            web.get(prefix, self.list_all),
            web.post(prefix, self.create),
            web.get(prefix + "/{id}", self.get),
            web.put(prefix + "/{id}", self.update),
            web.delete(prefix + "/{id}", self.delete),
        ]


@authenticated
async def current_user(request: web.Request) -> web.Response:
    return web.json_response({"user": get_identity(request).to_dict()})


def create_app(access_control: AccessControl) -> web.Application:
    """Build the application with error mapping and resource routes installed."""
    app = web.Application(middlewares=[error_middleware])
    app[ACCESS_CONTROL] = access_control

    app.router.add_get("/api/auth/me", current_user)
    app.router.add_routes(ResourceHandlers(ResourceKind.COMPONENT).routes("/api/components"))
    app.router.add_routes(ResourceHandlers(ResourceKind.DESIGN_TOKEN).routes("/api/tokens"))

    async def on_cleanup(app: web.Application) -> None:
        await app[ACCESS_CONTROL].close()

    app.on_cleanup.append(on_cleanup)
    logger.info("dsauthz application created")
    return app
