import pytest

from xserial.typeutil import (
    Scalar,
    ScalarKind,
    can_assign,
    is_weak_convertible,
    kind_of,
)


def test_unsigned_char_limits():
    assert ScalarKind.UCHAR.limits() == (0, 255)


def test_unsigned_long_long_max_fits():
    highest = ScalarKind.ULONGLONG.limits()[1]
    assert can_assign(ScalarKind.ULONGLONG, highest)
    assert not can_assign(ScalarKind.ULONGLONG, highest + 1)
    assert not can_assign(ScalarKind.LONGLONG, highest)


def test_int_max_does_not_fit_signed_char():
    int_max = ScalarKind.INT.limits()[1]
    assert not can_assign(ScalarKind.SCHAR, int_max)
    assert can_assign(ScalarKind.INT, int_max)


def test_small_value_fits_everywhere_numeric():
    for kind in ScalarKind:
        if kind is ScalarKind.STRING or kind is ScalarKind.BOOL:
            continue
        assert can_assign(kind, 42)


def test_negative_value_does_not_fit_unsigned():
    for kind in (ScalarKind.UCHAR, ScalarKind.USHORT, ScalarKind.UINT,
                 ScalarKind.ULONG, ScalarKind.ULONGLONG):
        assert kind.limits()[0] == 0
        assert not can_assign(kind, -1)


def test_float_range_applies_to_integer_target():
    assert can_assign(ScalarKind.INT, 42.43)
    assert not can_assign(ScalarKind.INT, float("nan"))


def test_can_assign_rejects_string_kind():
    with pytest.raises(TypeError):
        can_assign(ScalarKind.STRING, 1)


def test_can_assign_rejects_non_number():
    with pytest.raises(TypeError):
        can_assign(ScalarKind.INT, "42")


def test_weak_convertible():
    assert is_weak_convertible(ScalarKind.CHAR)
    assert is_weak_convertible(ScalarKind.DOUBLE)
    assert not is_weak_convertible(ScalarKind.BOOL)
    assert not is_weak_convertible(ScalarKind.STRING)


def test_integer_and_floating_partition():
    for kind in ScalarKind:
        assert not (kind.is_integer() and kind.is_floating())
    assert ScalarKind.FLOAT.is_floating()
    assert ScalarKind.SHORT.is_integer()
    assert not ScalarKind.BOOL.is_integer()


def test_string_has_no_limits():
    with pytest.raises(TypeError):
        ScalarKind.STRING.limits()


def test_kind_of_plain_values():
    assert kind_of(True) is ScalarKind.BOOL
    assert kind_of(42) is ScalarKind.INT
    assert kind_of(42.13) is ScalarKind.DOUBLE
    assert kind_of("Hastur") is ScalarKind.STRING
    assert kind_of([1, 2]) is None


def test_kind_of_wide_integers():
    int_max = ScalarKind.INT.limits()[1]
    ull_max = ScalarKind.ULONGLONG.limits()[1]
    assert kind_of(int_max + 1) is ScalarKind.LONGLONG
    assert kind_of(ull_max) is ScalarKind.ULONGLONG
    with pytest.raises(OverflowError):
        kind_of(ull_max + 1)


def test_kind_of_scalar_uses_tag():
    assert kind_of(Scalar(ScalarKind.SCHAR, 64)) is ScalarKind.SCHAR


def test_scalar_range_checked():
    with pytest.raises(OverflowError):
        Scalar(ScalarKind.SCHAR, ScalarKind.INT.limits()[1])


def test_scalar_type_checked():
    with pytest.raises(TypeError):
        Scalar(ScalarKind.INT, "42")
    with pytest.raises(TypeError):
        Scalar(ScalarKind.BOOL, 1)
    with pytest.raises(TypeError):
        Scalar(ScalarKind.INT, 42.5)


def test_scalar_floating_converts_int():
    scalar = Scalar(ScalarKind.DOUBLE, 42)
    assert scalar.value == 42.0
    assert isinstance(scalar.value, float)


def test_scalar_float_rounds_to_single_precision():
    assert Scalar(ScalarKind.FLOAT, 0.5).value == 0.5
    rounded = Scalar(ScalarKind.FLOAT, 0.1).value
    assert abs(rounded - 0.1) < 1e-7
    assert Scalar(ScalarKind.FLOAT, rounded).value == rounded


def test_scalars_compare_by_kind_and_value():
    assert Scalar(ScalarKind.INT, 42) == Scalar(ScalarKind.INT, 42)
    assert not (Scalar(ScalarKind.INT, 42) == Scalar(ScalarKind.SHORT, 42))