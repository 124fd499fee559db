"""Typed cell values and their display / JSON renderings.

Every cell of a result is either ``None`` (CQL null) or a :class:`CqlValue`.
Collections hold nested ``CqlValue`` items (or ``None``) to any depth; the
two render functions recurse over them and fall back to ``repr`` for any kind
they do not know, so rendering never raises.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional
import math
import struct
import uuid

from cassandra.util import SortedSet

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class CqlType(Enum):
    TEXT = 'text'
    ASCII = 'ascii'
    BOOLEAN = 'boolean'
    INT = 'int'
    BIGINT = 'bigint'
    FLOAT = 'float'
    DOUBLE = 'double'
    UUID = 'uuid'
    TIMEUUID = 'timeuuid'
    TIMESTAMP = 'timestamp'
    LIST = 'list'
    SET = 'set'
    MAP = 'map'
    OTHER = 'other'


SCALAR_NUMBER_TYPES = (CqlType.INT, CqlType.BIGINT, CqlType.FLOAT, CqlType.DOUBLE)


@dataclass(frozen=True)
class CqlValue:
    """A non-null cell value tagged with its CQL kind.

    LIST and SET carry a tuple of ``Optional[CqlValue]``; MAP carries a tuple
    of ``(key, value)`` pairs of the same.
    """
    kind: CqlType
    value: Any

    @classmethod
    def text(cls, s: str) -> 'CqlValue':
        return cls(CqlType.TEXT, s)

    @classmethod
    def list_of(cls, *items: Optional['CqlValue']) -> 'CqlValue':
        return cls(CqlType.LIST, tuple(items))

    @classmethod
    def set_of(cls, *items: Optional['CqlValue']) -> 'CqlValue':
        return cls(CqlType.SET, tuple(items))

    @classmethod
    def map_of(cls, *pairs) -> 'CqlValue':
        return cls(CqlType.MAP, tuple(pairs))

    @classmethod
    def from_native(cls, obj: Any, cql_type: Any = None) -> Optional['CqlValue']:
        """Tag a value as returned by the Python driver.

        ``cql_type`` is the driver's column type (``ResultSet.column_types``)
        when known; it tells a CQL ``float`` apart from a ``double`` and is
        passed down to collection elements. ``bool`` is checked before
        ``int`` since it is a subclass of it.
        """
        if obj is None:
            return None
        if isinstance(obj, CqlValue):
            return obj
        if isinstance(obj, bool):
            return cls(CqlType.BOOLEAN, obj)
        if isinstance(obj, int):
            kind = CqlType.INT if INT32_MIN <= obj <= INT32_MAX else CqlType.BIGINT
            return cls(kind, obj)
        if isinstance(obj, float):
            return cls(CqlType.FLOAT if _typename(cql_type) == 'float' else CqlType.DOUBLE, obj)
        if isinstance(obj, str):
            return cls(CqlType.TEXT, obj)
        if isinstance(obj, uuid.UUID):
            return cls(CqlType.TIMEUUID if obj.version == 1 else CqlType.UUID, obj)
        if isinstance(obj, datetime):
            return cls(CqlType.TIMESTAMP, obj)
        if isinstance(obj, Mapping):
            key_type, value_type = _subtype(cql_type, 0), _subtype(cql_type, 1)
            return cls(CqlType.MAP, tuple((cls.from_native(k, key_type), cls.from_native(v, value_type))
                                          for k, v in obj.items()))
        item_type = _subtype(cql_type, 0)
        if isinstance(obj, (list, tuple)):
            return cls(CqlType.LIST, tuple(cls.from_native(v, item_type) for v in obj))
        if isinstance(obj, (set, frozenset, SortedSet)):
            return cls(CqlType.SET, tuple(cls.from_native(v, item_type) for v in obj))
        return cls(CqlType.OTHER, obj)


def _typename(cql_type: Any) -> Optional[str]:
    return getattr(cql_type, 'typename', None)


def _subtype(cql_type: Any, index: int) -> Any:
    subtypes = getattr(cql_type, 'subtypes', None) or ()
    return subtypes[index] if index < len(subtypes) else None


def _as_float32(value: float) -> float:
    return struct.unpack('<f', struct.pack('<f', value))[0]


def _float32_value(value: Any) -> float:
    """Shortest decimal that reads back as the same single-precision value."""
    value = float(value)
    if not math.isfinite(value):
        return value
    try:
        target = _as_float32(value)
    except OverflowError:
        return value
    for digits in range(1, 10):
        candidate = float(f"{target:.{digits}g}")
        if _as_float32(candidate) == target:
            return candidate
    return target


def _timestamp_text(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return repr(value)


def render_display(v: Optional[CqlValue]) -> str:
    """Render a cell for table and CSV output."""
    if v is None:
        return 'NULL'
    kind, value = v.kind, v.value
    try:
        if kind in (CqlType.TEXT, CqlType.ASCII):
            return str(value)
        if kind == CqlType.BOOLEAN:
            return 'true' if value else 'false'
        if kind == CqlType.FLOAT:
            return str(_float32_value(value))
        if kind in SCALAR_NUMBER_TYPES:
            return str(value)
        if kind in (CqlType.UUID, CqlType.TIMEUUID):
            return str(value)
        if kind == CqlType.TIMESTAMP:
            return _timestamp_text(value)
        if kind == CqlType.LIST:
            return '[' + ', '.join(render_display(item) for item in value) + ']'
        if kind == CqlType.SET:
            return '{' + ', '.join(render_display(item) for item in value) + '}'
        if kind == CqlType.MAP:
            return '{' + ', '.join(f"{render_display(k)}: {render_display(val)}" for k, val in value) + '}'
    except (TypeError, ValueError):
        # payload does not match its tag
        pass
    return repr(value)


def render_json(v: Optional[CqlValue]) -> Any:
    """Render a cell as a JSON-serializable Python value.

    Maps become a list of ``[key, value]`` pairs since CQL map keys are not
    necessarily text. Non-finite floats become ``None``.
    """
    if v is None:
        return None
    kind, value = v.kind, v.value
    try:
        if kind in (CqlType.TEXT, CqlType.ASCII):
            return str(value)
        if kind == CqlType.BOOLEAN:
            return bool(value)
        if kind in SCALAR_NUMBER_TYPES and isinstance(value, (int, float)) and not isinstance(value, bool):
            if isinstance(value, float):
                if not math.isfinite(value):
                    # NaN and infinities have no JSON spelling
                    return None
                if kind == CqlType.FLOAT:
                    return _float32_value(value)
            return value
        if kind in (CqlType.UUID, CqlType.TIMEUUID):
            return str(value)
        if kind == CqlType.TIMESTAMP:
            return _timestamp_text(value)
        if kind in (CqlType.LIST, CqlType.SET):
            return [render_json(item) for item in value]
        if kind == CqlType.MAP:
            return [[render_json(k), render_json(val)] for k, val in value]
    except (TypeError, ValueError):
        pass
    return repr(value)


__all__ = ['CqlType', 'CqlValue', 'render_display', 'render_json']
