"""
Request handlers for the API module.
"""

from .resource_handlers import (
    handle_create,
    handle_delete,
    handle_find_all,
    handle_find_one,
    handle_update,
    handle_update_relationship,
)

__all__ = [
    "handle_find_all",
    "handle_find_one",
    "handle_create",
    "handle_update",
    "handle_delete",
    "handle_update_relationship",
]
