# rdbcore

Building blocks for a relational database client that do not depend on any
particular server: SQL type codes, and an object that collects the columns,
values and messages a driver reports for one command.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## `rdbcore.types`

- `Type` is an `IntEnum` of SQL type codes.
  - `Type.UNKNOWN` is 0.
  - The generic types `TEXT`, `BINARY`, `BOOL`, `INTEGER`, `FLOAT`, `DECIMAL`,
    `TIME` and `OTHER` run from 16 to 23.
  - The specific types start at 1024: `TYPE_TEXT`, `TYPE_ANSI_TEXT`,
    `TYPE_VAR_CHAR`, ..., `TYPE_INT32`, `TYPE_DECIMAL`, `TYPE_TIMESTAMPZ`,
    `TYPE_UUID`, `TYPE_JSON`, `TYPE_XML`, `TYPE_TABLE`.
  - Any other unsigned 32-bit integer is accepted as well, so `Type(0x10001)`
    gives a member named `TYPE_0x10001`. Values outside that range raise
    `ValueError`.
- `Type.is_generic()` is true for 16 <= value < 1024.
- `Type.is_driver()` is true for values at or above `TYPE_DRIVER_THRESH`
  (65536). This range is left for individual drivers.
- `NullType` is a singleton marker for an explicit SQL NULL. `NULL` is its one
  instance; it is falsy and prints as `NULL`.

## `rdbcore.valuer`

### Data classes

- `Column(name, index, generic=Type.UNKNOWN)`
- `Field(name="", null=None)`. A field with a `null` value uses it in place of
  SQL NULL. A field without a name applies to the column at the same position;
  a named field applies to the column with that name. Fields that match no
  column are ignored.
- `Command(sql="", fields=[], converter=None)`. If `converter` is given, it is
  called once per column and returns either a column converter or `None`. A
  column converter takes `(column, nullable)` and returns the `Nullable` to use.
- `Nullable(null=True, value=None)`
- `DriverValue(value=None, null=False, chunked=False, more=False, must_copy=False)`
- `Message(type, message, number=0)` with `MessageType.INFO` or `MessageType.ERROR`.

### `Valuer`

A driver calls these methods on `Valuer(command)`:

- `columns(columns)` starts a result set. It resets `schema`, `column_lookup`,
  `buffer` (one `Nullable` per column) and `prep` (one `None` per column), and
  it matches fields and converters to columns.
- `write_field(column, value, assign=None)` handles one value.
  - If `prep[column.index]` is `None`, the value is stored in
    `buffer[column.index]`.
  - Otherwise the value is passed to `assign_value` together with that target.
    If the target is a type, the converted result is also stored in the buffer.
  - For a chunked value, the first chunk is stored as it is. Later chunks must
    be `bytes` or `bytearray` and are appended; any other chunk raises
    `TypeError`. The converter runs once the chunk with `more=False` arrives.
- `message(msg)` appends the message to `infos` or `errors`.
- `row_scanned()` increments `row_count`.
- `rows_affected(count)` sets `affected`.
- `done()` sets `eof` and clears `prep`. If any error messages were recorded,
  it raises `SqlErrors`; its `messages` attribute holds them.

```python
from rdbcore.valuer import Column, Command, DriverValue, Field, Valuer

valuer = Valuer(Command(fields=[Field(null="null-value")]))
col = Column(name="MyAnimal", index=0)
valuer.columns([col])

valuer.write_field(col, DriverValue(value="Dreaming boats."))
valuer.buffer[0]   # Nullable(null=False, value='Dreaming boats.')

valuer.write_field(col, DriverValue(null=True))
valuer.buffer[0]   # Nullable(null=False, value='null-value')

valuer.prep[0] = str
valuer.write_field(col, DriverValue(value=b"Fish"))
valuer.buffer[0]   # Nullable(null=False, value='Fish')
```

### `assign_value(column, value, target, assign=None)`

This function puts a `Nullable` into a target and returns what was assigned.

- A `Nullable` target is updated in place, NULL included, and is returned.
- In every other case, a NULL value raises `ScanNullError`.
- If `assign` is given, it is called first as `assign(data, target)`. It should
  return `NotImplemented` when it does not handle the value.
- An object with a `write` method receives text (encoded as UTF-8) or bytes,
  and is returned.
- A type as target asks for a conversion:
  - `str` to `str` or `bytes`
  - `bytes` to `bytes` or `str`
  - `bool` to `bool`
  - `int` to `int`
  - `float`, `Fraction` and `Decimal` to any of the three
  - `datetime`, `date`, `time` and `timedelta` to their own type
- Any other combination raises `TypeNotSupportedError`, which is a `TypeError`.

## What this package does not do

It contains no driver. It does not open connections, run queries, pool
connections or handle transactions. Its only job is to receive what a driver
reports and make those values available.