"""
Resource operations.

Find operations compose a query on the table of the resource type and embed the
requested relationships. Writes flatten the relationships of the input document
into `<name>_id` foreign key attributes.
"""

import logging
from typing import Any

from .data_access import DataAccessor
from .exceptions import UnsupportedOperation
from .filters import parse_filter
from .includes import aggregate
from .query_builder import TableQuery
from .schema import Schema

log = logging.getLogger(__name__)


def compose_query(
    accessor: DataAccessor,
    schema: Schema,
    resource_type: str,
    fields: str | list[str] | None,
    core_filter: dict,
) -> TableQuery:
    """
    Build the primary query of a find, without running it.

    Args:
        accessor: Data accessor the query will run on
        schema: Schema used to resolve the table
        resource_type: Logical resource type
        fields: Columns to select, ignored when the filter has a join
        core_filter: Filter with optional "params", "query" and "join" entries

    Returns:
        A lazy query, which callers may narrow further
    """
    query = accessor.table(schema.table_for(resource_type))
    join = core_filter.get("join")
    if join:
        query.left_outer_join(join["table"], join["left"], join["right"], fields=join["fields"])
    else:
        query.select(fields)
    if core_filter.get("params"):
        query.where(core_filter["params"])
    if core_filter.get("query"):
        query.where(core_filter["query"])
    return query


def get_attributes(data: dict) -> dict:
    """Flatten the relationships of a resource document into foreign key attributes."""
    resource = data["data"]
    attributes = dict(resource.get("attributes") or {})
    for name, relationship in (resource.get("relationships") or {}).items():
        linkage = relationship.get("data")
        attributes[f"{name}_id"] = int(linkage["id"]) if linkage else linkage
    return attributes


class Operations:
    """The operations exposed for every resource type."""

    def __init__(self, accessor: DataAccessor, schema: Schema):
        self.accessor = accessor
        self.schema = schema

    def query(self, resource_type: str, fields, filter: dict | None) -> tuple[TableQuery, list[str]]:
        core_filter, include_names = parse_filter(filter)
        if include_names:
            log.debug("including %s in %s", ", ".join(include_names), resource_type)
        query = compose_query(self.accessor, self.schema, resource_type, fields, core_filter)
        return query, include_names

    async def find_all(self, resource_type: str, fields, filter: dict | None) -> dict:
        query, include_names = self.query(resource_type, fields, filter)
        return await aggregate(self.accessor, self.schema, query, resource_type, include_names)

    async def find_one(self, resource_type: str, fields, filter: dict | None) -> dict | None:
        query, include_names = self.query(resource_type, fields, filter)
        document = await aggregate(
            self.accessor, self.schema, query.first(), resource_type, include_names
        )
        return document if document["data"] is not None else None

    async def create(self, resource_type: str, data: dict) -> dict | None:
        return await self.accessor.insert(self.schema.table_for(resource_type), get_attributes(data))

    async def update(self, resource_type: str, id: Any, data: dict) -> dict | None:
        id = int(id)
        await self.accessor.update(self.schema.table_for(resource_type), id, get_attributes(data))
        return await self.find_one(resource_type, "*", {"params": {"id": id}})

    async def delete(self, resource_type: str, id: Any) -> None:
        await self.accessor.delete(self.schema.table_for(resource_type), int(id))

    def update_relationship(self, relationship: str, record: Any, data: dict) -> None:
        raise UnsupportedOperation("updateRelationship")
