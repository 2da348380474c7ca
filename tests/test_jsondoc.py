import pytest

from xserial.context import Context, ContextType
from xserial.errors import (
    DeserializerError,
    SerializerError,
    TypeSerializerError,
)
from xserial.interfaces import Null
from xserial.jsondoc import JSON, JSONDeserializer, JSONSerializer, json_context_type
from xserial.meta import FieldAttribute, MetaObject, field
from xserial.typeutil import Scalar, ScalarKind
from xserial.values import deserialize, serialize, to_serializer

WEAK = FieldAttribute.WEAK
OPTIONAL = FieldAttribute.OPTIONAL


class WeakData(MetaObject):
    intVal = field(int, WEAK, OPTIONAL)
    strVal = field(str, WEAK, OPTIONAL)


class LongValData(MetaObject):
    val = field(ScalarKind.ULONGLONG, default=0)


class WeakFieldClass(MetaObject):
    val = field(int, WEAK)


class FloatWeakFieldClass(MetaObject):
    val = field(ScalarKind.FLOAT, WEAK)


class InnerCl(MetaObject):
    val = field(int, WEAK)


class OuterCl(MetaObject):
    obj = field(InnerCl)


class Empty(MetaObject):
    pass


def test_exact_fields():
    exp = WeakData(42, "cthulhu")
    act = WeakData()
    serializer = to_serializer(act)
    serialize(serializer, JSON('{"intVal": 42, "strVal": "cthulhu"}'))
    assert act == exp


def test_extra_fields_throw():
    act = WeakData()
    serializer = to_serializer(act)
    with pytest.raises(SerializerError):
        serialize(
            serializer,
            JSON('{"intVal": 42, "strVal": "cthulhu", "otherVal": 100}'),
        )


def test_missing_fields_default():
    exp = WeakData(1918, "cthulhu")
    act = WeakData()
    act.intVal = exp.intVal
    serializer = to_serializer(act)
    serialize(serializer, JSON('{"strVal": "cthulhu"}'))
    assert act == exp


def test_long_val():
    top = 18446744073709551615
    act = LongValData()
    serializer = to_serializer(act)
    serialize(serializer, JSON(f'{{"val": {top}}}'))
    assert act == LongValData(top)


def test_float_to_integer_throw():
    act = WeakFieldClass()
    serializer = to_serializer(act)
    with pytest.raises(DeserializerError):
        serialize(serializer, JSON('{"val": 42.43}'))


def test_integer_to_float():
    act = FloatWeakFieldClass()
    serializer = to_serializer(act)
    serialize(serializer, JSON('{"val": 42}'))
    assert act == FloatWeakFieldClass(42)
    assert act.val == 42.0


def test_hierarchy_deserialize():
    act = OuterCl()
    serializer = to_serializer(act)
    serialize(serializer, JSON('{"obj": {"val": 42}}'))
    assert act == OuterCl(InnerCl(42))


def test_atom_deserialize():
    serializer = to_serializer(0)
    serialize(serializer, JSON("42"))
    assert serializer.value == 42


def test_serialize_empty():
    doc = JSON()
    serialize(doc.serializer(), Empty())
    assert str(doc) == "{}"


def test_serialize_hierarchy():
    doc = JSON()
    serialize(doc.serializer(), OuterCl(InnerCl(42)))
    assert str(doc) == '{"obj":{"val":42}}'


def test_serialize_atom():
    doc = JSON()
    serialize(doc.serializer(), 43)
    assert str(doc) == "43"


def test_default_document_is_null():
    doc = JSON()
    assert str(doc) == "null"
    assert doc.value is None


def test_parse_error():
    with pytest.raises(SerializerError):
        JSON("{not json")


def test_parse_rejects_nan():
    with pytest.raises(SerializerError):
        JSON("NaN")


def test_dump_sorts_keys():
    assert str(JSON('{"b": 1, "a": 2}')) == '{"a":2,"b":1}'


@pytest.mark.parametrize(
    "node, expected",
    [
        ({}, ContextType.NAME),
        ([], ContextType.INDEX),
        (1, ContextType.NONE),
        ("x", ContextType.NONE),
        (None, ContextType.NONE),
    ],
)
def test_json_context_type(node, expected):
    assert json_context_type(node) is expected
    assert JSONDeserializer(node).context_type() is expected


def test_list_round_trip():
    doc = JSON()
    serialize(doc.serializer(), [1, 2, 3])
    assert str(doc) == "[1,2,3]"
    assert deserialize(doc.deserializer(), [], list[int]) == [1, 2, 3]


def test_dict_read_in_key_order():
    target = deserialize(JSON('{"b": 2, "a": 1}').deserializer(), {}, dict[str, int])
    assert list(target.items()) == [("a", 1), ("b", 2)]


def test_null_into_int_raises():
    serializer = to_serializer(0)
    with pytest.raises(TypeSerializerError):
        serialize(serializer, JSON("null"))


def test_name_write_into_scalar_fails():
    doc = JSON("5")
    with pytest.raises(SerializerError) as info:
        doc.serializer().write(Scalar(ScalarKind.INT, 1), Context("x"))
    assert info.value.msg == "invalid context"


def test_index_write_pads_with_null():
    doc = JSON()
    doc.serializer().write(7, Context(2))
    assert str(doc) == "[null,null,7]"


def test_null_write_clears_value():
    doc = JSON('{"a": 5, "b": "text"}')
    serializer = doc.serializer()
    serializer.write(Null(), Context("a"))
    serializer.write(Null(), Context("b"))
    assert str(doc) == '{"a":0,"b":""}'


def test_non_scalar_write_rejected():
    doc = JSON()
    with pytest.raises(TypeSerializerError):
        JSONSerializer([None], 0).write(object(), Context())
    assert doc.value is None


def test_document_copy_through_serializers():
    src = JSON('{"a": [1, true, "x", null], "b": 1.5}')
    dst = JSON()
    serialize(dst.serializer(), src)
    assert str(dst) == '{"a":[1,true,"x",null],"b":1.5}'
    assert dst == src


def test_object_round_trip_through_document():
    doc = JSON()
    serialize(doc.serializer(), OuterCl(InnerCl(7)))
    act = OuterCl()
    serialize(to_serializer(act), doc)
    assert act == OuterCl(InnerCl(7))


def test_serializer_context_type_follows_node():
    doc = JSON("[1]")
    assert doc.serializer().context_type() is ContextType.INDEX
    assert JSON('{"a": 1}').serializer().context_type() is ContextType.NAME