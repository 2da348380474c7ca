# xserial

A small serialization framework built around two roles:

* a **deserializer** (`xserial.interfaces.Deserializer`) walks a value and
  hands each piece to a serializer through `visit`;
* a **serializer** (`xserial.interfaces.Serializer`) receives those pieces
  through `write`, each tagged with a `Context` from `xserial.context` (a
  field name, a list index, or nothing for a whole value), and stores them.

Any deserializer can feed any serializer, so annotated objects, lists, dicts,
scalars and JSON documents all convert into one another through the same path.
The package has no dependencies beyond the standard library.

## Installing

```
pip install .
```

Tests need pytest:

```
pip install ".[test]"
pytest
```

## Declaring objects

Subclass `MetaObject` from `xserial.meta` and declare fields with `field`:

```python
from xserial.meta import ClassAttribute, FieldAttribute, MetaObject, field

class Point(MetaObject):
    x = field(int, FieldAttribute.WEAK)
    y = field(int, FieldAttribute.WEAK)

class Line(MetaObject):
    begin = field(Point)
    end = field(Point)

p = Point(1, 2)          # positional values follow declaration order
p.class_name()           # "Point"
list(Point.fields())     # ["x", "y"]
```

A field's kind is a scalar kind (`bool`, `int`, `float`, `str` or a
`ScalarKind` from `xserial.typeutil`), a `list[...]`, a `dict[str, ...]`, or
another class with registered serializers. Field attributes:

* `FieldAttribute.WEAK` accepts numbers of other numeric kinds when they fit
  into the field's range; a floating-point value is never accepted by an
  integer field;
* `FieldAttribute.OPTIONAL` lets the field be absent on input; other fields
  must all be written or a `SerializerError` ("missing fields") is raised.

Declare a class as `class Name(MetaObject, attributes=ClassAttribute.OPEN)` to
have unknown incoming fields ignored instead of rejected.

## Converting values

`xserial.values` provides `to_serializer`, `to_deserializer`, `serialize`,
`deserialize`, `visit_value` and `write_value`, with `AtomSerializer`,
`SequenceSerializer` and `DictSerializer` and their deserializer
counterparts. A kind may be passed explicitly where it cannot be inferred
(for instance an empty list or dict):

```python
from xserial.values import deserialize, to_deserializer

copy = deserialize(to_deserializer(Line(Point(1, 2), Point(3, 4))), Line())
as_dict = deserialize(to_deserializer(Point(5, 6)), {}, dict[str, int])
number = deserialize(to_deserializer(42), 0)   # scalars are returned, not changed in place
```

`register_trait(cls, to_serializer, to_deserializer)` teaches the framework
how to handle instances of a further class.

Errors, all from `xserial.errors` and derived from `SerializationError`:

* `SerializerError`: an unknown or missing field, a wrong context, or JSON
  text that cannot be parsed;
* `TypeSerializerError` (a `SerializerError`): a value of the wrong kind or
  out of range;
* `DeserializerError`: a deserializer that cannot hand its values to the
  given serializer, or a JSON number no scalar kind accepts.

## JSON

`xserial.jsondoc.JSON` wraps a JSON document; `JSON()` is null and
`JSON(text)` parses text. Fill a document through `JSON.serializer()` and read
one through `JSON.deserializer()`:

```python
from xserial.jsondoc import JSON
from xserial.values import deserialize, serialize

doc = JSON()
serialize(doc.serializer(), Point(1, 2))
str(doc)                 # '{"x":1,"y":2}'

p = deserialize(JSON('{"x": 5, "y": 6}').deserializer(), Point())
```

`str()` writes compact JSON with keys sorted. Object members are handed over
in sorted key order.

## Sample

```
xserial-sample
```

Prints a point, a line, a list of integers, a list of points and a custom
record in a readable `{name:value, ...}` form, using
`xserial.sample.StringSerializer`.

## Limits

JSON is the only text format provided; the integer and floating-point kinds
are checked against fixed 8-, 16-, 32- and 64-bit and single/double precision
ranges.