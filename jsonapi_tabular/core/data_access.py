"""
Data access layer for the core module.

It provides methods for interacting with the database via PostgREST.
"""

import logging

from aiohttp import ClientSession

from .. import config
from .exceptions import handle_exception
from .query_builder import TableQuery
from .utils import format_value

log = logging.getLogger(__name__)


class DataAccessor:
    """Handles data access operations on the tables exposed by PostgREST."""

    def __init__(self, session: ClientSession):
        self.session = session

    def table(self, name: str) -> TableQuery:
        """Start a lazy query on a table, nothing is sent until it is executed."""
        return TableQuery(self, name)

    async def get_records(self, table: str, query_string: str) -> list[dict]:
        url = f"{config.PGREST_ENDPOINT}/{table}?{query_string}"
        async with self.session.get(url) as res:
            record = await res.json()
            if not res.ok:
                handle_exception(res.status, "Database error", record, table)
            return record

    async def insert(self, table: str, attributes: dict) -> dict | None:
        """
        Insert a row in a table.

        Args:
            table: The physical table name
            attributes: Column values of the new row

        Returns:
            The inserted row, as stored
        """
        url = f"{config.PGREST_ENDPOINT}/{table}"
        headers = {"Prefer": "return=representation"}
        log.debug("inserting into %s", table)
        async with self.session.post(url, json=attributes, headers=headers) as res:
            record = await res.json()
            if not res.ok:
                handle_exception(res.status, "Database error", record, table)
            return record[0] if record else None

    async def update(self, table: str, id: int, attributes: dict) -> None:
        url = f"{config.PGREST_ENDPOINT}/{table}?id=eq.{format_value(id)}"
        log.debug("updating %s id=%s", table, id)
        async with self.session.patch(url, json=attributes) as res:
            if not res.ok:
                handle_exception(res.status, "Database error", await res.json(), table)

    async def delete(self, table: str, id: int) -> None:
        url = f"{config.PGREST_ENDPOINT}/{table}?id=eq.{format_value(id)}"
        log.debug("deleting from %s id=%s", table, id)
        async with self.session.delete(url) as res:
            if not res.ok:
                handle_exception(res.status, "Database error", await res.json(), table)

    async def ping(self) -> bool:
        # the root of PostgREST serves the OpenAPI description of the database
        async with self.session.head(f"{config.PGREST_ENDPOINT}/") as res:
            return res.ok
