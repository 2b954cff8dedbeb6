from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.dialects.postgresql import Range

from infrastructure.database.tstzrange_fields.interval import (
    coerce_whole_value,
    decompose,
    normalize,
)


class IntervalStorage(Protocol):
    """Per-record raw slot holding the stored interval (or ``None`` when absent)."""

    def get(self, record: Any, field_name: str) -> Optional[Range]:
        ...

    def set(self, record: Any, field_name: str, value: Range) -> None:
        ...


class MappedAttributeStorage:
    """Reads and writes the slot as a plain attribute of the record."""

    def get(self, record: Any, field_name: str) -> Optional[Range]:
        return getattr(record, field_name, None)

    def set(self, record: Any, field_name: str, value: Range) -> None:
        setattr(record, field_name, value)


class IntervalAccessors:
    """Whole-value and endpoint accessors for one interval field.

    The slot stores a single composite value, so the endpoint setters read the
    other endpoint, build a new interval, and replace the whole value. That
    sequence is not atomic; callers sharing a record across threads have to
    serialize access to it.
    """

    def __init__(self, field_name: str, storage: IntervalStorage) -> None:
        self.field_name = field_name
        self.storage = storage

    @property
    def begin_name(self) -> str:
        return f"{self.field_name}_begin"

    @property
    def end_name(self) -> str:
        return f"{self.field_name}_end"

    def accessor_names(self) -> Dict[str, str]:
        return {
            "whole": self.field_name,
            "begin": self.begin_name,
            "end": self.end_name,
        }

    def get_whole(self, record: Any) -> Optional[Range]:
        return self.storage.get(record, self.field_name)

    def set_whole(self, record: Any, value: Any) -> None:
        interval = coerce_whole_value(value)
        self.storage.set(record, self.field_name, interval)

    def get_begin(self, record: Any) -> Optional[datetime]:
        interval = self.get_whole(record)
        if interval is None:
            return None
        return decompose(interval)[0]

    def set_begin(self, record: Any, value: Any) -> None:
        current_end = self.get_end(record)
        self.set_whole(record, normalize(value, current_end))

    def get_end(self, record: Any) -> Optional[datetime]:
        interval = self.get_whole(record)
        if interval is None:
            return None
        return decompose(interval)[1]

    def set_end(self, record: Any, value: Any) -> None:
        current_begin = self.get_begin(record)
        self.set_whole(record, normalize(current_begin, value))

    def begin_property(self) -> property:
        return property(self.get_begin, self.set_begin, doc=f"Lower bound of {self.field_name}.")

    def end_property(self) -> property:
        return property(self.get_end, self.set_end, doc=f"Exclusive upper bound of {self.field_name}.")
