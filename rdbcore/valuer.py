"""Collects rows, columns and messages reported by a driver and assigns values."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Callable, Optional

from .types import Type

ColumnConverter = Callable[["Column", "Nullable"], "Nullable"]
Assigner = Callable[[Any, Any], Any]


@dataclass
class Column:
    """Describes one column of a result set."""

    name: str
    index: int
    generic: Type = Type.UNKNOWN


@dataclass
class Field:
    """Options for a result field; ``null`` is the value used in place of NULL."""

    name: str = ""
    null: Any = None


@dataclass
class Command:
    """A SQL command and how its results are read.

    ``converter`` is called with each column and returns a column converter
    or None; a column converter takes a column and a Nullable and returns
    the Nullable to use.
    """

    sql: str = ""
    fields: list[Field] = field(default_factory=list)
    converter: Optional[Callable[[Column], Optional[ColumnConverter]]] = None


@dataclass
class Nullable:
    """A value that may be NULL."""

    null: bool = True
    value: Any = None


@dataclass
class DriverValue:
    """A value as handed over by a driver."""

    value: Any = None
    null: bool = False
    chunked: bool = False
    more: bool = False
    must_copy: bool = False


class MessageType(Enum):
    INFO = "info"
    ERROR = "error"


@dataclass
class Message:
    """An informational or error message from the server."""

    type: MessageType
    message: str
    number: int = 0

    def __str__(self) -> str:
        return self.message


class SqlErrors(Exception):
    """One or more error messages reported by the server."""

    def __init__(self, messages: list[Message]):
        self.messages = list(messages)
        super().__init__("\n".join(str(m) for m in self.messages))


class ScanNullError(Exception):
    """A NULL value can only be scanned into a Nullable."""

    def __init__(self, message: str = "can only scan a null value into a Nullable"):
        super().__init__(message)


class TypeNotSupportedError(TypeError):
    """A value cannot be assigned to the requested target."""

    def __init__(self, column: Column, value: Any = None, target: Any = None):
        self.column = column
        if value is None and target is None:
            text = f"Unsupported column type: {column.name}"
        else:
            text = (
                f"Prep type ({_type_name(target)}) cannot fit data type "
                f"({type(value).__name__}) in {column.name}"
            )
        super().__init__(text)


def _type_name(target: Any) -> str:
    if isinstance(target, type):
        return target.__name__
    return type(target).__name__


def _fraction_to_decimal(value: Fraction) -> Decimal:
    return Decimal(value.numerator) / Decimal(value.denominator)


def _bytes_to_str(value: bytes | bytearray) -> str:
    return bytes(value).decode("utf-8", errors="replace")


# Ordered: bool before int, datetime before date.
_CONVERSIONS: list[tuple[type | tuple[type, ...], dict[type, Callable[[Any], Any]]]] = [
    (str, {str: str, bytes: lambda s: s.encode("utf-8")}),
    ((bytes, bytearray), {bytes: bytes, str: _bytes_to_str}),
    (bool, {bool: bool}),
    (int, {int: int}),
    (float, {float: float, Fraction: Fraction, Decimal: Decimal}),
    (Fraction, {Fraction: Fraction, float: float, Decimal: _fraction_to_decimal}),
    (Decimal, {Decimal: Decimal, Fraction: Fraction, float: float}),
    (datetime, {datetime: lambda v: v}),
    (date, {date: lambda v: v}),
    (time, {time: lambda v: v}),
    (timedelta, {timedelta: lambda v: v}),
]


def assign_value(
    column: Column,
    value: Nullable,
    target: Any,
    assign: Optional[Assigner] = None,
) -> Any:
    """Assign ``value`` to ``target`` and return what was assigned.

    A Nullable target receives the value as is, NULL included, and is
    returned. An object with a ``write`` method receives text or binary
    data and is returned. A type such as ``str``, ``int`` or ``Fraction``
    asks for the value converted to it; the converted value is returned.
    ``assign`` may handle the value first; it returns ``NotImplemented``
    when it does not.
    """
    if isinstance(target, Nullable):
        target.null = value.null
        target.value = value.value
        return target
    if value.null or value.value is None:
        raise ScanNullError()
    data = value.value
    if assign is not None:
        result = assign(data, target)
        if result is not NotImplemented:
            return result

    for kind, targets in _CONVERSIONS:
        if not isinstance(data, kind):
            continue
        if not isinstance(target, type) and callable(getattr(target, "write", None)):
            if isinstance(data, str):
                target.write(data.encode("utf-8"))
                return target
            if isinstance(data, (bytes, bytearray)):
                target.write(bytes(data))
                return target
            raise TypeNotSupportedError(column, data, target)
        convert = targets.get(target) if isinstance(target, type) else None
        if convert is None:
            raise TypeNotSupportedError(column, data, target)
        return convert(data)
    raise TypeNotSupportedError(column)


class Valuer:
    """Receives columns, values and messages from a driver for one command.

    Values for columns without a target in ``prep`` are kept in ``buffer``.
    A column whose target is a type gets its converted value stored in
    ``buffer`` as well.
    """

    def __init__(self, command: Command):
        self.command = command
        self.errors: list[Message] = []
        self.infos: list[Message] = []
        self.fields: list[Optional[Field]] = []
        self.eof = False
        self.schema: list[Column] = []
        self.column_lookup: dict[str, Column] = {}
        self.buffer: list[Nullable] = []
        self.prep: list[Any] = []
        self.convert: Optional[list[Optional[ColumnConverter]]] = None
        self.row_count = 0
        self.affected = 0

    def columns(self, columns: list[Column]) -> None:
        """Set up the schema of a new result set."""
        self.schema = list(columns)
        self.column_lookup = {col.name: col for col in self.schema}
        count = len(self.schema)
        self.buffer = [Nullable() for _ in range(count)]
        self.prep = [None] * count

        # Queries may return a different number of columns than fields
        # were given for; such fields are ignored.
        self.fields = [None] * count
        for position, fld in enumerate(self.command.fields):
            if not fld.name:
                if position < count:
                    self.fields[position] = fld
            else:
                col = self.column_lookup.get(fld.name)
                if col is not None:
                    self.fields[col.index] = fld

        if self.command.converter is not None:
            self.convert = [self.command.converter(col) for col in self.schema]
        else:
            self.convert = None

    def message(self, msg: Message) -> None:
        """Record a message from the server."""
        if msg.type is MessageType.INFO:
            self.infos.append(msg)
        elif msg.type is MessageType.ERROR:
            self.errors.append(msg)

    def row_scanned(self) -> None:
        """Count a row that has been read."""
        self.row_count += 1

    def done(self) -> None:
        """Mark the end of results; raise SqlErrors if errors were reported."""
        self.eof = True
        self.prep = [None] * len(self.prep)
        if self.errors:
            raise SqlErrors(self.errors)

    def rows_affected(self, count: int) -> None:
        """Record the number of rows affected."""
        self.affected = count

    def write_field(
        self,
        column: Column,
        value: DriverValue,
        assign: Optional[Assigner] = None,
    ) -> None:
        """Store or assign one value written by the driver."""
        index = column.index
        convert = self.convert[index] if self.convert is not None else None
        target = self.prep[index]

        fld = self.fields[index]
        if value.null and fld is not None and fld.null is not None:
            value.null = False
            value.value = fld.null

        if target is None:
            if value.chunked:
                self._write_chunk(column, value, convert)
                return
            out = Nullable(null=value.null, value=value.value)
            if convert is not None:
                out = convert(column, out)
            self.buffer[index] = out
            return

        out = Nullable(null=value.null, value=value.value)
        if convert is not None:
            out = convert(column, out)
        result = assign_value(column, out, target, assign)
        if isinstance(target, type):
            self.buffer[index] = Nullable(null=False, value=result)

    def _write_chunk(
        self,
        column: Column,
        value: DriverValue,
        convert: Optional[ColumnConverter],
    ) -> None:
        index = column.index
        existing = self.buffer[index]
        if existing.value is None:
            out = Nullable(null=value.null, value=value.value)
            if not value.more and convert is not None:
                out = convert(column, out)
            self.buffer[index] = out
            return
        chunk = value.value
        if not isinstance(chunk, (bytes, bytearray)):
            raise TypeError(
                f"Type not supported for chunked read: {type(chunk).__name__}"
            )
        existing.value = bytes(existing.value) + bytes(chunk)
        if not value.more and convert is not None:
            self.buffer[index] = convert(column, existing)