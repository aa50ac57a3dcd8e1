import io
from datetime import datetime, timedelta
from fractions import Fraction

import pytest

from rdbcore.valuer import (
    Column,
    Command,
    DriverValue,
    Field,
    Message,
    MessageType,
    Nullable,
    ScanNullError,
    SqlErrors,
    TypeNotSupportedError,
    Valuer,
    assign_value,
)


def _valuer(fields=None, converter=None, names=("a", "b")):
    cmd = Command(sql="select", fields=fields or [], converter=converter)
    v = Valuer(cmd)
    cols = [Column(name=n, index=i) for i, n in enumerate(names)]
    v.columns(cols)
    return v, cols


def test_columns_builds_lookup_and_buffers():
    v, cols = _valuer()
    assert v.column_lookup["b"] is cols[1]
    assert len(v.buffer) == len(cols)
    assert all(b.null for b in v.buffer)


def test_fields_by_name_and_position():
    named = Field(name="b", null="nb")
    unnamed = Field(null="na")
    extra = Field(null="ignored")
    missing = Field(name="zzz", null="x")
    v, _ = _valuer(fields=[unnamed, named, extra, missing])
    assert v.fields[0] is unnamed
    assert v.fields[1] is named


def test_write_field_buffers_value():
    v, cols = _valuer()
    v.write_field(cols[0], DriverValue(value="hello"))
    assert v.buffer[0] == Nullable(null=False, value="hello")


def test_null_replaced_by_field_default():
    v, cols = _valuer(fields=[Field(null="null-value")])
    v.write_field(cols[0], DriverValue(null=True))
    assert v.buffer[0] == Nullable(null=False, value="null-value")


def test_null_without_default_stays_null():
    v, cols = _valuer()
    v.write_field(cols[1], DriverValue(null=True))
    assert v.buffer[1].null is True
    assert v.buffer[1].value is None


def test_chunked_values_are_joined_and_converted_once():
    calls = []

    def factory(col):
        def conv(c, n):
            calls.append(n.value)
            return n

        return conv

    v, cols = _valuer(converter=factory)
    first, second = b"ab", b"cd"
    v.write_field(cols[0], DriverValue(value=first, chunked=True, more=True))
    assert calls == []
    v.write_field(cols[0], DriverValue(value=second, chunked=True, more=False))
    assert v.buffer[0].value == first + second
    assert calls == [first + second]


def test_chunked_non_bytes_raises():
    v, cols = _valuer()
    v.write_field(cols[0], DriverValue(value=b"x", chunked=True, more=True))
    with pytest.raises(TypeError, match="chunked read"):
        v.write_field(cols[0], DriverValue(value="text", chunked=True))


def test_converter_applied():
    def factory(col):
        return lambda c, n: Nullable(null=n.null, value=(c.name, n.value))

    v, cols = _valuer(converter=factory)
    v.write_field(cols[1], DriverValue(value=5))
    assert v.buffer[1].value == ("b", 5)


def test_prep_nullable_target():
    v, cols = _valuer()
    target = Nullable()
    v.prep[0] = target
    v.write_field(cols[0], DriverValue(value="Dreaming boats."))
    assert target == Nullable(null=False, value="Dreaming boats.")


def test_prep_type_target_stores_converted():
    v, cols = _valuer()
    v.prep[0] = str
    v.write_field(cols[0], DriverValue(value=b"Fish"))
    assert v.buffer[0].value == "Fish"


def test_prep_null_into_plain_type_raises():
    v, cols = _valuer()
    v.prep[0] = str
    with pytest.raises(ScanNullError):
        v.write_field(cols[0], DriverValue(null=True))


def test_messages_and_done_raises():
    v, _ = _valuer()
    info = Message(MessageType.INFO, "note")
    err = Message(MessageType.ERROR, "bad thing", number=50000)
    v.message(info)
    v.message(err)
    assert v.infos == [info]
    with pytest.raises(SqlErrors) as exc:
        v.done()
    assert exc.value.messages == [err]
    assert v.eof is True


def test_done_clears_prep():
    v, _ = _valuer()
    v.prep[0] = str
    v.done()
    assert v.eof is True
    assert v.prep == [None, None]


def test_row_counts():
    v, _ = _valuer()
    v.row_scanned()
    v.row_scanned()
    v.rows_affected(3)
    assert v.row_count == 2
    assert v.affected == 3


COL = Column(name="col", index=0)


@pytest.mark.parametrize(
    "value,target",
    [
        ("DogIsFriend", str),
        (True, bool),
        (1234567, int),
        (89.1011, float),
        (Fraction(1234, 100), Fraction),
        (datetime(2015, 11, 18), datetime),
        (timedelta(seconds=90), timedelta),
        (bytes([23, 24, 25, 26, 27]), bytes),
    ],
)
def test_assign_round_trip(value, target):
    assert assign_value(COL, Nullable(null=False, value=value), target) == value


def test_assign_text_conversions():
    text = "héllo"
    assert assign_value(COL, Nullable(False, text), bytes) == text.encode("utf-8")
    assert assign_value(COL, Nullable(False, text.encode("utf-8")), str) == text


def test_assign_float_to_fraction_is_exact():
    x = 45.67
    got = assign_value(COL, Nullable(False, x), Fraction)
    assert float(got) == x


def test_assign_fraction_to_float():
    r = Fraction(1234, 100)
    assert assign_value(COL, Nullable(False, r), float) == float(r)


def test_assign_to_writer():
    buf = io.BytesIO()
    assign_value(COL, Nullable(False, "box"), buf)
    assign_value(COL, Nullable(False, b"!"), buf)
    assert buf.getvalue() == b"box!"


def test_assign_null_into_nullable():
    target = Nullable(null=False, value="old")
    assign_value(COL, Nullable(), target)
    assert target.null is True
    assert target.value is None


def test_assign_null_raises():
    with pytest.raises(ScanNullError):
        assign_value(COL, Nullable(null=True, value="x"), str)


def test_assign_mismatch_raises():
    with pytest.raises(TypeNotSupportedError, match="col"):
        assign_value(COL, Nullable(False, True), int)


def test_assign_unsupported_input():
    with pytest.raises(TypeNotSupportedError, match="Unsupported column type: col"):
        assign_value(COL, Nullable(False, object()), str)


def test_assigner_handles_first():
    def assigner(value, target):
        return ("handled", value)

    assert assign_value(COL, Nullable(False, 7), str, assigner) == ("handled", 7)


def test_assigner_not_implemented_falls_through():
    assert assign_value(COL, Nullable(False, 7), int, lambda v, t: NotImplemented) == 7