import re

import aiohttp
import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer
from aioresponses import aioresponses

from jsonapi_tabular import config
from jsonapi_tabular.app import app_factory
from jsonapi_tabular.core.data_access import DataAccessor
from jsonapi_tabular.core.operations import Operations
from jsonapi_tabular.core.schema import Schema

PGREST_ENDPOINT = "https://example.com"

SCHEMA = {
    "relationships": {
        "dogs": {
            "owner": {"target_type": "people", "kind": "belongsTo"},
        },
        "people": {
            "dogs": {"targetType": "dogs", "kind": "hasMany", "foreignKey": "owner_id"},
            "walked_dogs": {"target_type": "dogs", "kind": "hasMany", "foreign_key": "walker_id"},
            "vet": {"target_type": "vets", "kind": "belongsTo"},
        },
    },
}

OWNER_DOGS = [{"id": 1, "name": "Rex", "owner_id": 9}, {"id": 2, "name": "Fido", "owner_id": 9}]
PERSON = {"id": 9, "name": "Alice", "vet_id": 3}


def table_pattern(table: str) -> re.Pattern:
    """Match any read on a table, whatever its query string"""
    return re.compile(rf"^{re.escape(PGREST_ENDPOINT)}/{table}(\?.*)?$")


def requests_to(rmock, table: str, method: str = "GET") -> list:
    """URLs requested on a table, PostgREST query arguments are available in `url.query`"""
    return [
        url
        for (request_method, url) in rmock.requests
        if request_method == method and url.path == f"/{table}"
    ]


@pytest.fixture(autouse=True)
def setup():
    config.override(PGREST_ENDPOINT=PGREST_ENDPOINT, SENTRY_DSN="")


@pytest.fixture
def rmock():
    # passthrough for local requests (aiohttp TestServer)
    with aioresponses(passthrough=["http://127.0.0.1"]) as m:
        yield m


@pytest.fixture
def schema():
    return Schema.from_dict(SCHEMA)


@pytest_asyncio.fixture
async def accessor():
    async with aiohttp.ClientSession() as session:
        yield DataAccessor(session)


@pytest.fixture
def operations(accessor, schema):
    return Operations(accessor, schema)


@pytest_asyncio.fixture
async def fake_client(schema):
    app = await app_factory(schema)
    async with TestClient(TestServer(app)) as client:
        yield client
