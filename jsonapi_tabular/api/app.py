"""
Main API application factory.

This module creates the aiohttp application with all routes and middleware.
"""

import logging
import os
from datetime import datetime, timezone

import aiohttp_cors
import sentry_sdk
from aiohttp import ClientSession, web

from jsonapi_tabular import config
from jsonapi_tabular.core.data_access import DataAccessor
from jsonapi_tabular.core.health import check_health
from jsonapi_tabular.core.operations import Operations
from jsonapi_tabular.core.schema import Schema, load_schema
from jsonapi_tabular.core.sentry import get_sentry_kwargs
from jsonapi_tabular.core.version import get_app_version

from .routes.resources import routes as resource_routes

log = logging.getLogger(__name__)

sentry_sdk.init(**get_sentry_kwargs())


async def health_handler(request):
    """Handle health check requests."""
    return await check_health(request)


async def app_factory(schema: Schema | None = None):
    """Create and configure the aiohttp application.

    The relationship schema is read from `SCHEMA_PATH` unless one is given.
    """
    if schema is None:
        schema = load_schema(config.SCHEMA_PATH) if config.SCHEMA_PATH else Schema()
    log.info("serving %d resource type(s) with relationships", len(schema.relationships))

    async def on_startup(app):
        app["csession"] = ClientSession()
        app["accessor"] = DataAccessor(app["csession"])
        app["operations"] = Operations(app["accessor"], app["schema"])
        app["start_time"] = datetime.now(timezone.utc)
        app["app_version"] = await get_app_version()

    async def on_cleanup(app):
        await app["csession"].close()

    app = web.Application()
    app["schema"] = schema

    app.router.add_get("/health/", health_handler)
    app.add_routes(resource_routes)

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    cors = aiohttp_cors.setup(
        app,
        defaults={
            "*": aiohttp_cors.ResourceOptions(
                allow_credentials=True, expose_headers="*", allow_headers="*", allow_methods="*"
            )
        },
    )
    for route in list(app.router.routes()):
        cors.add(route)

    return app


def run():
    """Run the application."""
    logging.basicConfig(level=config.LOG_LEVEL)
    web.run_app(app_factory(), path=os.environ.get("JSONAPI_TABULAR_APP_SOCKET_PATH"))
