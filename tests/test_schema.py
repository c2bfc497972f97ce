import pytest

from jsonapi_tabular.core.exceptions import SchemaError, UnknownRelationship
from jsonapi_tabular.core.schema import RelationshipDescriptor, Schema, load_schema


def test_table_for_defaults_to_type():
    schema = Schema.from_dict({"tables": {"people": "person"}})
    assert schema.table_for("people") == "person"
    assert schema.table_for("dogs") == "dogs"


def test_empty_schema():
    schema = Schema()
    assert schema.table_for("dogs") == "dogs"
    with pytest.raises(UnknownRelationship):
        schema.relationship("dogs", "owner")


def test_relationship_lookup(schema):
    descriptor = schema.relationship("people", "dogs")
    assert descriptor == RelationshipDescriptor(
        name="dogs", target_type="dogs", kind="hasMany", foreign_key="owner_id"
    )


def test_unknown_relationship(schema):
    with pytest.raises(UnknownRelationship) as exc_info:
        schema.relationship("dogs", "walker")
    assert exc_info.value.kind == "UnknownRelationship"
    assert "walker" in str(exc_info.value)
    assert "dogs" in str(exc_info.value)


def test_schema_is_read_only(schema):
    with pytest.raises(TypeError):
        schema.relationships["cats"] = {}
    with pytest.raises(TypeError):
        schema.relationships["people"]["cats"] = None
    with pytest.raises(AttributeError):
        schema.relationship("people", "dogs").kind = "belongsTo"


@pytest.mark.parametrize(
    "raw",
    [
        {"kind": "belongsTo"},
        {"target_type": "people"},
        {"target_type": "people", "kind": "belongsTo", "through": "walks"},
    ],
)
def test_invalid_descriptor(raw):
    with pytest.raises(SchemaError):
        Schema.from_dict({"relationships": {"dogs": {"owner": raw}}})


def test_unknown_kind_is_accepted_at_load_time():
    schema = Schema.from_dict(
        {"relationships": {"dogs": {"owner": {"target_type": "people", "kind": "manyToMany"}}}}
    )
    assert schema.relationship("dogs", "owner").kind == "manyToMany"


def test_load_schema(tmp_path):
    path = tmp_path / "schema.toml"
    path.write_text(
        """
[tables]
people = "person"

[relationships.dogs.owner]
target_type = "people"
kind = "belongsTo"

[relationships.people.dogs]
targetType = "dogs"
kind = "hasMany"
foreignKey = "owner_id"
"""
    )
    schema = load_schema(path)
    assert schema.table_for("people") == "person"
    assert schema.relationship("dogs", "owner").target_type == "people"
    assert schema.relationship("people", "dogs").foreign_key == "owner_id"


def test_load_invalid_schema(tmp_path):
    path = tmp_path / "schema.toml"
    path.write_text("[relationships.dogs\n")
    with pytest.raises(SchemaError):
        load_schema(path)
