"""
Resource-related route definitions.
"""

from aiohttp import web

from ..handlers.resource_handlers import (
    handle_create,
    handle_delete,
    handle_find_all,
    handle_find_one,
    handle_update,
    handle_update_relationship,
)

routes = web.RouteTableDef()


@routes.get(r"/api/{type}/", name="collection")
async def find_all(request):
    """List the resources of a type, with their included relationships."""
    return await handle_find_all(request)


@routes.post(r"/api/{type}/", name="collection")
async def create(request):
    """Create a resource."""
    return await handle_create(request)


@routes.get(r"/api/{type}/{id}/", name="item")
async def find_one(request):
    """Get a resource, with its included relationships."""
    return await handle_find_one(request)


@routes.patch(r"/api/{type}/{id}/", name="item")
async def update(request):
    """Update the attributes and foreign keys of a resource."""
    return await handle_update(request)


@routes.delete(r"/api/{type}/{id}/", name="item")
async def delete(request):
    """Delete a resource."""
    return await handle_delete(request)


@routes.patch(r"/api/{type}/{id}/relationships/{relationship}/", name="relationship")
async def update_relationship(request):
    """Relationships can only be changed through their foreign keys."""
    return await handle_update_relationship(request)
