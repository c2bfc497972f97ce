"""
Core module for jsonapi_tabular.

This module contains the core business logic separated from the API layer.
It provides data access, query composition, relationship resolution and
exception handling functionality.
"""

from .data_access import DataAccessor
from .exceptions import (
    MissingLookupKey,
    QueryException,
    ResolutionError,
    SchemaError,
    UnknownRelationship,
    UnsupportedOperation,
    UnsupportedRelationshipKind,
    handle_exception,
)
from .filters import ParsedFilter, parse_filter
from .includes import aggregate, build_relationship_query, resolve_relationship
from .operations import Operations, compose_query, get_attributes
from .query_builder import TableQuery
from .schema import RelationshipDescriptor, Schema, load_schema

__all__ = [
    "DataAccessor",
    "TableQuery",
    "Operations",
    "Schema",
    "RelationshipDescriptor",
    "ParsedFilter",
    "load_schema",
    "parse_filter",
    "compose_query",
    "get_attributes",
    "aggregate",
    "build_relationship_query",
    "resolve_relationship",
    "QueryException",
    "handle_exception",
    "ResolutionError",
    "SchemaError",
    "UnknownRelationship",
    "MissingLookupKey",
    "UnsupportedRelationshipKind",
    "UnsupportedOperation",
]
