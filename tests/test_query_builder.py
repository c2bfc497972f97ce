import pytest

from jsonapi_tabular.core.data_access import DataAccessor
from jsonapi_tabular.core.operations import compose_query
from jsonapi_tabular.core.schema import Schema

JOIN = {
    "fields": ["dogs.id", "dogs.name", "people.name"],
    "table": "people",
    "left": "dogs.owner_id",
    "right": "people.id",
}


@pytest.fixture
def store():
    # queries are only rendered here, never executed
    return DataAccessor(session=None)


def test_select_all(store):
    assert store.table("dogs").build_query_string() == "select=*"


@pytest.mark.parametrize("fields", [["id", "name"], "id,name", "id, name"])
def test_compose_fields(store, schema, fields):
    query = compose_query(store, schema, "dogs", fields, {})
    assert query.table == "dogs"
    assert query.build_query_string() == "select=id,name"


@pytest.mark.parametrize("fields", ["*", None])
def test_compose_all_fields(store, schema, fields):
    assert compose_query(store, schema, "dogs", fields, {}).build_query_string() == "select=*"


def test_compose_params_and_query(store, schema):
    query = compose_query(
        store, schema, "dogs", "*", {"params": {"id": 9}, "query": {"name": "Rex", "good": True}}
    )
    assert query.build_query_string() == "select=*&id=eq.9&name=eq.Rex&good=eq.true"


def test_compose_null_predicate(store, schema):
    query = compose_query(store, schema, "dogs", "*", {"query": {"owner_id": None}})
    assert query.build_query_string() == "select=*&owner_id=is.null"


def test_compose_resolves_table(store):
    schema = Schema.from_dict({"tables": {"people": "person"}})
    assert compose_query(store, schema, "people", "*", {}).table == "person"


def test_compose_join_ignores_fields(store, schema):
    query = compose_query(store, schema, "dogs", ["id"], {"join": JOIN, "params": {"id": 1}})
    assert query.build_query_string() == "select=id,name,people!owner_id(name)&id=eq.1"


def test_join_hint_from_right_side(store):
    query = store.table("dogs").left_outer_join("people", "people.id", "dogs.owner_id", ["id"])
    assert query.build_query_string() == "select=id,people!owner_id(*)"


def test_join_unqualified_columns(store):
    query = store.table("dogs").left_outer_join("people", "owner_id", "id", ["id", "name"])
    assert query.build_query_string() == "select=id,name,people!owner_id(*)"


def test_join_foreign_column(store):
    with pytest.raises(ValueError):
        store.table("dogs").left_outer_join("people", "owner_id", "id", ["vets.name"])


def test_where_in_keeps_order_and_duplicates(store):
    query = store.table("people").where_in("id", [9, 2, 9])
    assert query.build_query_string() == "select=*&id=in.(9,2,9)"


def test_where_in_quotes_strings(store):
    query = store.table("dogs").where_in("name", ["Rex, Jr", "Fido"])
    assert query.build_query_string() == "select=*&name=in.(%22Rex%2C%20Jr%22,Fido)"


def test_first(store, schema):
    query = compose_query(store, schema, "people", "*", {"params": {"id": 9}}).first()
    assert query.single
    assert query.build_query_string() == "select=*&id=eq.9&limit=1"


def test_odd_column_names_are_quoted(store):
    query = (
        store.table("dogs")
        .select(["id", "first name", "*"])
        .where({"a&b": 1, 'say "hi"': None})
        .where_in("x=y", [1])
    )
    assert query.build_query_string() == (
        "select=id,%22first%20name%22,*"
        "&%22a%26b%22=eq.1"
        "&%22say%20%5C%22hi%5C%22%22=is.null"
        "&%22x%3Dy%22=in.(1)"
    )


def test_join_quotes_joined_columns(store):
    query = store.table("dogs").left_outer_join(
        "people", "dogs.owner_id", "people.id", ["id", "people.full name", "people.*"]
    )
    assert query.build_query_string() == "select=id,people!owner_id(%22full%20name%22,*)"
