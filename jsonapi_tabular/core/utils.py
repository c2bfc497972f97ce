import re
from functools import lru_cache
from typing import Any
from urllib.parse import quote

import inflect

# characters with a meaning inside a PostgREST `in.(...)` list
RESERVED_LIST_CHARS = set(',.:()"\\ ')
PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def quote_identifier(name: str) -> str:
    """Render a column name for a PostgREST query string.

    Plain identifiers are kept as is, anything else is double-quoted (with `"`
    escaped) and percent-encoded so it can only ever name a column.
    """
    if PLAIN_IDENTIFIER.match(name):
        return name
    # we're escaping the " because they are the encapsulators of the label
    return quote('"{}"'.format(name.replace("\\", "\\\\").replace('"', '\\"')), safe="")


@lru_cache(maxsize=1)
def _inflect_engine() -> inflect.engine:
    return inflect.engine()


@lru_cache(maxsize=256)
def singularize(word: str) -> str:
    # singular_noun returns False when the word is already singular
    return _inflect_engine().singular_noun(word) or word


def format_value(value: Any) -> str:
    """Render a scalar as a PostgREST filter operand, percent-encoded."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return quote(str(value), safe="")


def format_list_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, str) and (not value or RESERVED_LIST_CHARS & set(value)):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return format_value(f'"{escaped}"')
    return format_value(value)


def has_missing_values(lookup: Any) -> bool:
    """True if a lookup value, or any value nested in a list of them, is absent."""
    if isinstance(lookup, (list, tuple)):
        return any(has_missing_values(value) for value in lookup)
    return lookup is None
