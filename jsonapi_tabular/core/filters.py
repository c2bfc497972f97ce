from typing import Any, NamedTuple


class ParsedFilter(NamedTuple):
    core_filter: dict
    include_names: list[str]


def parse_filter(filter: dict[str, Any] | None) -> ParsedFilter:
    """Split a raw filter into its core predicate and the requested include names.

    The `include` entry of `filter["query"]` is not a column, it is removed from
    the returned core filter. The given filter is left untouched.
    """
    core_filter = dict(filter or {})
    query = core_filter.get("query")
    if not query or "include" not in query:
        return ParsedFilter(core_filter, [])
    query = dict(query)
    include = query.pop("include")
    core_filter["query"] = query
    # a trailing comma must not produce an empty relationship name
    include_names = [name.strip() for name in str(include).split(",") if name.strip()]
    return ParsedFilter(core_filter, include_names)
