"""
Resource-related request handlers.
"""

import re

from aiohttp import web

from jsonapi_tabular.core.exceptions import QueryException, ResolutionError, handle_exception
from jsonapi_tabular.core.operations import Operations
from jsonapi_tabular.core.url import self_link

FIELDS_PATTERN = re.compile(r"^fields\[(?P<type>[^\]]+)\]$")
FILTER_PATTERN = re.compile(r"^filter\[(?P<column>[^\]]+)\]$")


def _get_operations(request) -> Operations:
    return request.app["operations"]


def build_find_arguments(request) -> tuple[str | list[str], dict]:
    """
    Translate the query string of a find request into fields and filter.

    `fields[<type>]=a,b` selects columns of the requested type, `include=a,b`
    requests relationships and `filter[column]=value` adds equality predicates.
    The id of the path, if any, becomes an equality on the `id` column.
    """
    resource_type = request.match_info["type"]
    fields: str | list[str] = "*"
    query = {}
    for key, value in request.query.items():
        if key == "include":
            query["include"] = value
            continue
        fields_match = FIELDS_PATTERN.match(key)
        if fields_match:
            # only one level of include, fields of other types cannot be applied
            if fields_match["type"] == resource_type:
                fields = [f.strip() for f in value.split(",") if f.strip()]
            continue
        filter_match = FILTER_PATTERN.match(key)
        if filter_match:
            query[filter_match["column"]] = value
            continue
        raise QueryException(400, None, "Invalid query string", f"Unknown argument '{key}'")
    filter = {}
    if query:
        filter["query"] = query
    if "id" in request.match_info:
        filter["params"] = {"id": request.match_info["id"]}
    return fields, filter


def parse_id(request) -> int:
    try:
        return int(request.match_info["id"])
    except ValueError:
        raise QueryException(
            400, None, "Invalid id", f"'{request.match_info['id']}' is not an integer id"
        )


async def read_document(request) -> dict:
    """Read and check the shape of a resource document sent in the request body."""
    try:
        document = await request.json()
    except ValueError:
        raise QueryException(400, None, "Invalid body", "Request body is not valid JSON")
    if not isinstance(document, dict) or not isinstance(document.get("data"), dict):
        raise QueryException(
            400, None, "Invalid body", "Request body must hold a resource object in 'data'"
        )
    attributes = document["data"].get("attributes")
    if attributes is not None and not isinstance(attributes, dict):
        raise QueryException(400, None, "Invalid body", "'attributes' must be an object")
    relationships = document["data"].get("relationships") or {}
    if not isinstance(relationships, dict):
        raise QueryException(400, None, "Invalid body", "'relationships' must be an object")
    for name, relationship in relationships.items():
        if not isinstance(relationship, dict) or not is_valid_linkage(relationship.get("data")):
            raise QueryException(
                400, None, "Invalid body", f"Relationship '{name}' has no valid resource linkage"
            )
    return document


def is_valid_linkage(linkage) -> bool:
    # a null linkage clears the foreign key
    if linkage is None:
        return True
    if not isinstance(linkage, dict):
        return False
    id = linkage.get("id")
    return isinstance(id, (str, int)) and not isinstance(id, bool)


async def handle_find_all(request):
    """Handle collection requests."""
    resource_type = request.match_info["type"]
    fields, filter = build_find_arguments(request)
    try:
        document = await _get_operations(request).find_all(resource_type, fields, filter)
    except ResolutionError as e:
        handle_exception(e.status, e.kind, e.message, resource_type)
    document["links"] = {"self": self_link(request)}
    return web.json_response(document)


async def handle_find_one(request):
    """Handle single resource requests."""
    resource_type = request.match_info["type"]
    fields, filter = build_find_arguments(request)
    try:
        document = await _get_operations(request).find_one(resource_type, fields, filter)
    except ResolutionError as e:
        handle_exception(e.status, e.kind, e.message, resource_type)
    if document is None:
        raise web.HTTPNotFound()
    document["links"] = {"self": self_link(request)}
    return web.json_response(document)


async def handle_create(request):
    resource_type = request.match_info["type"]
    document = await read_document(request)
    try:
        record = await _get_operations(request).create(resource_type, document)
    except ValueError as e:
        raise QueryException(400, None, "Invalid body", f"Malformed resource linkage: {e}")
    return web.json_response({"data": record}, status=201)


async def handle_update(request):
    resource_type = request.match_info["type"]
    id = parse_id(request)
    document = await read_document(request)
    try:
        updated = await _get_operations(request).update(resource_type, id, document)
    except ValueError as e:
        raise QueryException(400, None, "Invalid body", f"Malformed resource linkage: {e}")
    if updated is None:
        raise web.HTTPNotFound()
    return web.json_response(updated)


async def handle_delete(request):
    resource_type = request.match_info["type"]
    await _get_operations(request).delete(resource_type, parse_id(request))
    return web.Response(status=204)


async def handle_update_relationship(request):
    resource_type = request.match_info["type"]
    try:
        _get_operations(request).update_relationship(
            request.match_info["relationship"], request.match_info["id"], None
        )
    except ResolutionError as e:
        handle_exception(e.status, e.kind, e.message, resource_type)
