"""
Query building logic for the core module.

A TableQuery is a lazy description of a read on one table. It is rendered as a
PostgREST query string and only sent to the database when `execute` is awaited.
"""

import logging
from typing import TYPE_CHECKING, Any, Iterable

from .utils import format_list_value, format_value, quote_identifier

if TYPE_CHECKING:
    from .data_access import DataAccessor

log = logging.getLogger(__name__)


def split_column(column: str) -> tuple[str | None, str]:
    """Split `table.column` into its table and column parts."""
    table, _, name = column.rpartition(".")
    return table or None, name


def render_column(name: str) -> str:
    return name if name == "*" else quote_identifier(name)


class TableQuery:
    """Handles query building on a single table for PostgREST."""

    def __init__(self, accessor: "DataAccessor", table: str):
        self.accessor = accessor
        self.table = table
        self.columns: list[str] = ["*"]
        self.filters: list[str] = []
        self.embed: str | None = None
        self.single = False

    def select(self, columns: str | Iterable[str] | None) -> "TableQuery":
        if columns is None or columns == "*":
            self.columns = ["*"]
        elif isinstance(columns, str):
            self.columns = [c.strip() for c in columns.split(",") if c.strip()]
        else:
            self.columns = list(columns)
        return self

    def where(self, conditions: dict[str, Any]) -> "TableQuery":
        """Add one equality predicate per item, all of them must hold."""
        for column, value in conditions.items():
            if value is None:
                self.filters.append(f"{quote_identifier(column)}=is.null")
            else:
                self.filters.append(f"{quote_identifier(column)}=eq.{format_value(value)}")
        return self

    def where_in(self, column: str, values: Iterable[Any]) -> "TableQuery":
        # order and duplicates are kept as given
        rendered = ",".join(format_list_value(value) for value in values)
        self.filters.append(f"{quote_identifier(column)}=in.({rendered})")
        return self

    def left_outer_join(
        self, table: str, left: str, right: str, fields: str | Iterable[str] | None = None
    ) -> "TableQuery":
        """
        Embed `table` on `left = right`, keeping base rows without a match.

        PostgREST expresses joins as resource embedding, the embedding is hinted
        with the join column that belongs to the base table so the foreign key
        on that column is used. `fields` qualified with the joined table are
        selected inside the embedding, the others on the base table.
        """
        left_table, left_column = split_column(left)
        right_table, right_column = split_column(right)
        hint = right_column if right_table == self.table and left_table != self.table else left_column
        if fields is not None:
            self.select(fields)
        base_columns, joined_columns = [], []
        for column in self.columns:
            column_table, name = split_column(column)
            if column_table == table:
                joined_columns.append(name)
            elif column_table in (None, self.table):
                base_columns.append(name)
            else:
                raise ValueError(f"column '{column}' belongs to neither '{self.table}' nor '{table}'")
        self.columns = base_columns
        joined = ",".join(render_column(name) for name in joined_columns) or "*"
        self.embed = f"{table}!{quote_identifier(hint)}({joined})"
        return self

    def first(self) -> "TableQuery":
        self.single = True
        return self

    def build_query_string(self) -> str:
        select = [render_column(column) for column in self.columns]
        if self.embed:
            select.append(self.embed)
        query = [f"select={','.join(select)}", *self.filters]
        if self.single:
            query.append("limit=1")
        return "&".join(query)

    async def execute(self) -> list[dict] | dict | None:
        """
        Run the query against the database.

        Returns:
            The list of matching records, or the first record (None if no
            record matched) when the query was narrowed with `first`
        """
        query_string = self.build_query_string()
        log.debug("querying %s?%s", self.table, query_string)
        records = await self.accessor.get_records(self.table, query_string)
        if self.single:
            return records[0] if records else None
        return records

    def __repr__(self) -> str:
        return f"<TableQuery {self.table}?{self.build_query_string()}>"
