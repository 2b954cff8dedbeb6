"""Canonical half-open timestamp intervals.

An interval is a ``sqlalchemy.dialects.postgresql.Range`` of datetimes, in one
of these states:

- empty (``Range(empty=True)``), covering no time at all;
- bounded on both sides, ``[begin, end)``;
- unbounded on one side (``begin`` or ``end`` is ``None``);
- unbounded on both sides (``Range(None, None)``), covering every instant.

Empty and unbounded-on-both-sides are different values and must stay that way.
``Range.__bool__`` is false for an empty range, so presence checks in this
package compare against ``None`` instead of relying on truthiness.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import StrEnum
from typing import Any, Optional, Tuple

from sqlalchemy.dialects.postgresql import Range

from infrastructure.database.tstzrange_fields.errors import ConversionError

EMPTY_SENTINEL = "empty"
HALF_OPEN_BOUNDS = "[)"


class WholeValueKind(StrEnum):
    """Shapes accepted when assigning a whole interval, in match order."""

    CANONICAL = "canonical"
    UNBOUNDED = "unbounded"
    EMPTY = "empty"
    STRUCTURED = "structured"
    UNSUPPORTED = "unsupported"


def empty_interval() -> Range:
    return Range(empty=True)


def unbounded_interval() -> Range:
    return Range(None, None, bounds=HALF_OPEN_BOUNDS)


def value_to_time(value: Any) -> Optional[datetime]:
    """Convert a loosely typed endpoint into a datetime, or ``None`` when absent."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ConversionError(value, str(exc)) from exc
    raise ConversionError(value, f"unsupported type {type(value).__name__}")


def normalize(raw_begin: Any, raw_end: Any) -> Range:
    """Build an interval from two optional endpoints.

    Both endpoints absent yields the empty interval, not the unbounded one.
    Endpoint order is not checked.
    """

    begin = value_to_time(raw_begin)
    end = value_to_time(raw_end)
    if begin is None and end is None:
        return empty_interval()
    return Range(begin, end, bounds=HALF_OPEN_BOUNDS)


def decompose(interval: Range) -> Tuple[Optional[datetime], Optional[datetime]]:
    if interval.isempty:
        return None, None
    return interval.lower, interval.upper


def covers(interval: Range, instant: datetime) -> bool:
    """Return True if ``instant`` falls inside ``interval``; empty covers nothing."""

    if interval.isempty:
        return False
    return interval.contains(instant)


def _is_positive_infinity(value: Any) -> bool:
    return isinstance(value, float) and math.isinf(value) and value > 0


def classify_whole_value(value: Any) -> WholeValueKind:
    if isinstance(value, Range):
        return WholeValueKind.CANONICAL
    if _is_positive_infinity(value):
        return WholeValueKind.UNBOUNDED
    if value is None or (isinstance(value, str) and value == EMPTY_SENTINEL):
        return WholeValueKind.EMPTY
    if isinstance(value, Mapping):
        return WholeValueKind.STRUCTURED
    if not isinstance(value, (str, bytes)) and (hasattr(value, "begin") or hasattr(value, "end")):
        return WholeValueKind.STRUCTURED
    return WholeValueKind.UNSUPPORTED


def _extract_endpoints(value: Any) -> Tuple[Any, Any]:
    if isinstance(value, Mapping):
        return value.get("begin"), value.get("end")
    return getattr(value, "begin", None), getattr(value, "end", None)


def coerce_whole_value(value: Any) -> Range:
    """Map anything assignable to a whole interval field onto a canonical interval.

    Raises ``TypeError`` for shapes outside the accepted set, and
    ``ConversionError`` when a structured value carries an unparsable endpoint.
    """

    kind = classify_whole_value(value)
    if kind is WholeValueKind.CANONICAL:
        return value
    if kind is WholeValueKind.UNBOUNDED:
        return unbounded_interval()
    if kind is WholeValueKind.EMPTY:
        return empty_interval()
    if kind is WholeValueKind.STRUCTURED:
        begin, end = _extract_endpoints(value)
        return normalize(begin, end)
    raise TypeError(
        f"Cannot assign {type(value).__name__} value {value!r} to a tstzrange field; "
        "expected a Range, math.inf, 'empty', None, a mapping or an object with begin/end"
    )
