"""Unit tests for serializing observables and rebuilding them from serialized data."""

import json

import pytest

from bindable import (
    SERIALIZED_DATA_KEY,
    ObservableList,
    ObservableObject,
    SerializationError,
    TypeRegistry,
    Vec2,
    dumps,
    encode_value,
    register_type,
)
from bindable.serialization import primitive_tag


@pytest.fixture
def flagged():
    """Provide a full-mode observable carrying every kind of property flag."""
    obj = ObservableObject(simple_serialize=False)
    obj.add_property("name", "widget")
    obj.add_property("size", 3, removable=False)
    obj.add_ro_property("visible", True)
    obj.add_property("owner", None)
    obj.add_property("secret", "hidden", enumerable=False)
    return obj


@pytest.mark.unit
@pytest.mark.serialization
def test_simple_mode_returns_plain_mapping(point):
    """Simple serialization is a plain mapping of enumerable values"""
    point.add_property("hidden", 0, enumerable=False)

    assert point.to_json() == {"x": 1, "y": 2}


@pytest.mark.unit
@pytest.mark.serialization
def test_full_mode_records_flags_and_type_tags(flagged):
    """Full serialization lists each enumerable property with flags and varType"""
    data = flagged.to_json()

    entries = {entry["name"]: entry for entry in data[SERIALIZED_DATA_KEY]}
    assert list(entries) == ["name", "size", "visible", "owner"]
    assert entries["name"] == {
        "name": "name",
        "value": "widget",
        "enumerable": True,
        "writable": True,
        "configurable": True,
        "varType": "string",
    }
    assert entries["size"]["configurable"] is False
    assert entries["size"]["varType"] == "number"
    assert entries["visible"]["writable"] is False
    assert entries["visible"]["varType"] == "boolean"
    assert entries["owner"]["varType"] == "null"


@pytest.mark.unit
@pytest.mark.serialization
def test_primitive_round_trip_preserves_names_values_and_flags(flagged):
    """Rebuilding from full serialized data restores every enumerable property"""
    rebuilt = ObservableObject(flagged.to_json())

    assert rebuilt.property_names() == ["name", "size", "visible", "owner"]
    for name in rebuilt.property_names():
        original = flagged.get_descriptor(name)
        copy = rebuilt.get_descriptor(name)
        assert copy.value == original.value
        assert copy.writable == original.writable
        assert copy.removable == original.removable
        assert copy.enumerable == original.enumerable


@pytest.mark.unit
@pytest.mark.serialization
def test_private_set_property_serializes_as_read_only():
    """A privately-settable property comes back read-only and non-removable"""
    obj = ObservableObject(simple_serialize=False)
    obj.add_property_with_private_set("count", 2)

    rebuilt = ObservableObject(obj.to_json())

    assert rebuilt.count == 2
    assert rebuilt.set("count", 3) is False
    assert rebuilt.remove_property("count") is False


@pytest.mark.unit
@pytest.mark.serialization
def test_registered_types_are_rebuilt():
    """Non-primitive values are rebuilt through the type registry"""
    obj = ObservableObject(simple_serialize=False)
    obj.add_property("origin", Vec2(1, 2))
    obj.add_property("tags", ["a", "b"])
    obj.add_property("child", ObservableObject({"depth": 1}))
    obj.add_property("items", ObservableList([1, 2, 3]))

    data = obj.to_json()
    rebuilt = ObservableObject(data)

    tags = {entry["name"]: entry["varType"] for entry in data[SERIALIZED_DATA_KEY]}
    assert tags == {
        "origin": "Vec2",
        "tags": "list",
        "child": "ObservableObject",
        "items": "ObservableList",
    }
    assert rebuilt.origin == Vec2(1, 2)
    assert rebuilt.tags == ["a", "b"]
    assert isinstance(rebuilt.child, ObservableObject)
    assert rebuilt.child.depth == 1
    assert isinstance(rebuilt.items, ObservableList)
    assert rebuilt.items.to_array() == [1, 2, 3]


@pytest.mark.unit
@pytest.mark.serialization
@pytest.mark.edge_case
def test_unknown_type_tag_drops_property():
    """A property whose varType has no factory is skipped silently"""
    data = {
        SERIALIZED_DATA_KEY: [
            {"name": "kept", "value": 1, "varType": "number"},
            {"name": "lost", "value": {"a": 1}, "varType": "Mystery"},
        ]
    }

    rebuilt = ObservableObject(data)

    assert rebuilt.property_names() == ["kept"]


@pytest.mark.unit
@pytest.mark.serialization
@pytest.mark.edge_case
def test_descriptor_without_type_tag_is_rejected():
    """add_deserialized_property needs a varType"""
    obj = ObservableObject()

    assert obj.add_deserialized_property({"name": "x", "value": 1}) is False
    assert not obj.has_property("x")


@pytest.mark.unit
@pytest.mark.serialization
def test_custom_registry_controls_reconstruction():
    """An object built with its own registry only knows that registry's tags"""
    obj = ObservableObject(simple_serialize=False)
    obj.add_property("origin", Vec2(1, 2))
    data = obj.to_json()

    bare = ObservableObject(data, registry=TypeRegistry(install_defaults=False))

    assert not bare.has_property("origin")


@pytest.mark.unit
@pytest.mark.serialization
def test_register_type_extends_global_registry():
    """Types registered globally serialize under their tag and rebuild"""

    class Temperature:
        def __init__(self, degrees):
            self.degrees = degrees

        def to_json(self):
            return self.degrees

    register_type("Temperature", Temperature, Temperature)
    obj = ObservableObject(simple_serialize=False)
    obj.add_property("reading", Temperature(21.5))

    data = obj.to_json()
    rebuilt = ObservableObject(data)

    assert data[SERIALIZED_DATA_KEY][0]["varType"] == "Temperature"
    assert data[SERIALIZED_DATA_KEY][0]["value"] == 21.5
    assert rebuilt.reading.degrees == 21.5


@pytest.mark.unit
@pytest.mark.serialization
def test_simple_mapping_with_values_is_copied_verbatim():
    """A mapping without the serialized-data key is copied as plain properties"""
    rebuilt = ObservableObject({"pos": [1, 2], "label": "a"})

    assert rebuilt.pos == [1, 2]
    assert rebuilt.get_descriptor("pos").writable


@pytest.mark.unit
@pytest.mark.serialization
def test_encode_value_recurses_through_containers():
    """encode_value asks nested values for their to_json form"""
    value = {"points": [Vec2(1, 2), (3, 4)], "meta": ObservableObject({"n": 1})}

    assert encode_value(value) == {"points": [[1, 2], [3, 4]], "meta": {"n": 1}}


@pytest.mark.unit
@pytest.mark.serialization
def test_dumps_serializes_nested_observables(point):
    """dumps produces JSON for observables holding observables"""
    point.add_property("children", ObservableList([ObservableObject({"n": 1})]))

    assert json.loads(dumps(point)) == {"x": 1, "y": 2, "children": [{"n": 1}]}


@pytest.mark.unit
@pytest.mark.serialization
@pytest.mark.edge_case
def test_dumps_rejects_unserializable_values():
    """Values without a JSON form raise SerializationError, a TypeError"""
    with pytest.raises(SerializationError):
        dumps({"handle": object()})
    with pytest.raises(TypeError):
        dumps({"handle": object()})


@pytest.mark.unit
@pytest.mark.serialization
@pytest.mark.parametrize(
    "value,tag",
    [
        (None, "null"),
        (True, "boolean"),
        (0, "number"),
        (2.5, "number"),
        ("", "string"),
        ([], None),
        (Vec2(0, 0), None),
    ],
)
def test_primitive_tag(value, tag):
    """Primitive values map to their varType tag; others have none"""
    assert primitive_tag(value) == tag
