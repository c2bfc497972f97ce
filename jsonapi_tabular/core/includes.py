"""
Resolution of the relationships requested with `include`.

The primary result is fetched first, then one secondary query per requested
relationship is sent concurrently. Results are grouped by the target resource
type of each relationship.
"""

import asyncio
import logging

from .data_access import DataAccessor
from .exceptions import MissingLookupKey, UnsupportedRelationshipKind
from .query_builder import TableQuery
from .schema import BELONGS_TO, HAS_MANY, RelationshipDescriptor, Schema
from .utils import has_missing_values, singularize

log = logging.getLogger(__name__)


def lookup_values(primary: dict | list[dict], key: str) -> list:
    if isinstance(primary, dict):
        return [primary.get(key)]
    return [record.get(key) for record in primary]


def build_relationship_query(
    accessor: DataAccessor,
    schema: Schema,
    descriptor: RelationshipDescriptor,
    source_type: str,
    primary: dict | list[dict],
) -> TableQuery:
    """
    Build the secondary query of a relationship, without running it.

    Args:
        accessor: Data accessor the query will run on
        schema: Schema used to resolve the target table
        descriptor: The relationship to resolve
        source_type: Resource type the primary records belong to
        primary: The primary result, a single record or a list of records

    Returns:
        A lazy query selecting the related records

    Raises:
        UnsupportedRelationshipKind: If the descriptor is neither belongsTo nor hasMany
        MissingLookupKey: If a primary record lacks the key used for the lookup
    """
    if descriptor.kind == BELONGS_TO:
        # the foreign key is held by the source records
        lookup_key = descriptor.foreign_key or f"{descriptor.name}_id"
        column = descriptor.id_key or "id"
    elif descriptor.kind == HAS_MANY:
        # the target records point back to the source
        lookup_key = descriptor.id_key or "id"
        column = descriptor.foreign_key or f"{singularize(source_type)}_id"
    else:
        raise UnsupportedRelationshipKind(descriptor.name, source_type, descriptor.kind)

    values = lookup_values(primary, lookup_key)
    if has_missing_values(values):
        raise MissingLookupKey(descriptor.name, source_type, lookup_key)
    table = schema.table_for(descriptor.target_type)
    return accessor.table(table).select("*").where_in(column, values)


async def resolve_relationship(
    accessor: DataAccessor,
    schema: Schema,
    descriptor: RelationshipDescriptor,
    source_type: str,
    primary: dict | list[dict],
) -> list[dict]:
    query = build_relationship_query(accessor, schema, descriptor, source_type, primary)
    return await query.execute()


async def run_all(queries: list[TableQuery]) -> list:
    """Run queries concurrently, the first failure cancels the others and is raised."""
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(query.execute()) for query in queries]
    except ExceptionGroup as errors:
        raise errors.exceptions[0] from None
    return [task.result() for task in tasks]


async def aggregate(
    accessor: DataAccessor,
    schema: Schema,
    query: TableQuery,
    source_type: str,
    include_names: list[str],
) -> dict:
    """Run the primary query and embed the requested relationships in the document."""
    primary = await query.execute()
    if not include_names or not primary:
        return {"data": primary}

    # every descriptor and lookup is checked before any secondary query is sent
    descriptors = [schema.relationship(source_type, name) for name in include_names]
    queries = [
        build_relationship_query(accessor, schema, descriptor, source_type, primary)
        for descriptor in descriptors
    ]
    results = await run_all(queries)

    included = {}
    for descriptor, records in zip(descriptors, results):
        if descriptor.target_type in included:
            log.warning(
                "relationship '%s' of '%s' overwrites included '%s'",
                descriptor.name,
                source_type,
                descriptor.target_type,
            )
        included[descriptor.target_type] = records
    return {"data": primary, "included": included}
