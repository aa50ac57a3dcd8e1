"""SQL type identifiers shared by drivers, parameters and result columns."""

from __future__ import annotations

from enum import IntEnum

TYPE_DRIVER_THRESH = 0x00010000
"""Driver defined types start at this value."""

_MAX_TYPE = 0xFFFFFFFF


class NullType:
    """Marker for an explicit SQL NULL; there is only one instance."""

    _instance: NullType | None = None

    def __new__(cls) -> NullType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NULL"

    def __bool__(self) -> bool:
        return False


NULL = NullType()


class Type(IntEnum):
    """A SQL type code.

    Values from 16 up to 1024 are generic types, values from 1024 are
    specific types and values from ``TYPE_DRIVER_THRESH`` belong to drivers.
    Any unsigned 32 bit value is accepted, so drivers may use their own codes.
    """

    UNKNOWN = 0

    # Generic SQL types.
    TEXT = 16
    BINARY = 17
    BOOL = 18
    INTEGER = 19
    FLOAT = 20
    DECIMAL = 21
    TIME = 22
    OTHER = 23

    # Specific SQL types.
    TYPE_TEXT = 1024  # Unicode text with varying length.
    TYPE_ANSI_TEXT = 1025  # Ansi text with varying length.
    TYPE_VAR_CHAR = 1026  # Unicode text with varying length.
    TYPE_ANSI_VAR_CHAR = 1027  # Ansi text with varying length.
    TYPE_CHAR = 1028  # Unicode text with fixed length.
    TYPE_ANSI_CHAR = 1029  # Ansi text with fixed length.
    TYPE_BINARY = 1030
    TYPE_BOOL = 1031
    TYPE_UINT8 = 1032
    TYPE_UINT16 = 1033
    TYPE_UINT32 = 1034
    TYPE_UINT64 = 1035
    TYPE_INT8 = 1036
    TYPE_INT16 = 1037
    TYPE_INT32 = 1038
    TYPE_INT64 = 1039
    TYPE_SERIAL16 = 1040
    TYPE_SERIAL32 = 1041
    TYPE_SERIAL64 = 1042
    TYPE_FLOAT32 = 1043
    TYPE_FLOAT64 = 1044
    TYPE_DECIMAL = 1045
    TYPE_MONEY = 1046
    TYPE_TIMESTAMPZ = 1047  # Time, date and time zone.
    TYPE_DURATION = 1048
    TYPE_TIME = 1049  # Time of day only.
    TYPE_DATE = 1050  # Date only.
    TYPE_TIMESTAMP = 1051  # Date and time, no time zone.
    TYPE_UUID = 1052
    TYPE_ENUM = 1053
    TYPE_RANGE = 1054
    TYPE_ARRAY = 1055
    TYPE_JSON = 1056
    TYPE_XML = 1057
    TYPE_TABLE = 1058

    @classmethod
    def _missing_(cls, value: object) -> Type | None:
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _MAX_TYPE:
            member = int.__new__(cls, value)
            member._name_ = f"TYPE_{value:#x}"
            member._value_ = value
            return member
        return None

    def is_driver(self) -> bool:
        """True if this is a driver defined type."""
        return self >= TYPE_DRIVER_THRESH

    def is_generic(self) -> bool:
        """True if this is a generic type."""
        return 16 <= self < 1024