"""
Exception handling for the core module.

Two families live here: `QueryException`, the aiohttp exception sent back to
the client, and the resolution errors raised by the include engine when the
relationship schema and the stored data disagree.
"""

import json

import sentry_sdk
from aiohttp import web

from jsonapi_tabular import config


class QueryException(web.HTTPException):
    """Re-raise an exception as aiohttp exception with a JSON error body"""

    def __init__(self, status, error_code, title, detail) -> None:
        self.status_code = status
        error_body = {"errors": [{"code": error_code, "title": title, "detail": detail}]}
        super().__init__(content_type="application/json", text=json.dumps(error_body))


def handle_exception(status: int, title: str, detail: str | dict, resource_type: str | None = None):
    """Report the error to Sentry when configured and raise a QueryException."""
    event_id = None
    e = Exception(detail)
    if config.SENTRY_DSN:
        with sentry_sdk.new_scope() as scope:
            sentry_tags: dict = {
                "status": status,
                "title": title,
                "detail": detail,
            }
            if resource_type:
                sentry_tags["resource_type"] = resource_type
            scope.set_tags(sentry_tags)
            event_id = sentry_sdk.capture_exception(e)
    raise QueryException(status, event_id, title, detail)


class SchemaError(ValueError):
    """The relationship schema could not be built from its source."""


class ResolutionError(Exception):
    """Base class for the errors aborting a request in the include engine."""

    kind = "ResolutionError"
    status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnknownRelationship(ResolutionError):
    kind = "UnknownRelationship"
    status = 400

    def __init__(self, resource_type: str, relationship: str) -> None:
        self.resource_type = resource_type
        self.relationship = relationship
        super().__init__(
            f"Relationship '{relationship}' is not defined for resource type '{resource_type}'"
        )


class MissingLookupKey(ResolutionError):
    kind = "MissingLookupKey"

    def __init__(self, relationship: str, resource_type: str, key: str) -> None:
        self.relationship = relationship
        self.resource_type = resource_type
        self.key = key
        super().__init__(
            f"Cannot resolve relationship '{relationship}' of '{resource_type}': "
            f"key '{key}' is missing on one or more records"
        )


class UnsupportedRelationshipKind(ResolutionError):
    kind = "UnsupportedRelationshipKind"

    def __init__(self, relationship: str, resource_type: str, relationship_kind: str) -> None:
        self.relationship = relationship
        self.resource_type = resource_type
        self.relationship_kind = relationship_kind
        super().__init__(
            f"Relationship '{relationship}' of '{resource_type}' has unsupported kind "
            f"'{relationship_kind}' (expected 'belongsTo' or 'hasMany')"
        )


class UnsupportedOperation(ResolutionError):
    kind = "UnsupportedOperation"
    status = 403

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Operation '{operation}' is not supported")
