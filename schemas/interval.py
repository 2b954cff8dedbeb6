from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator
from sqlalchemy.dialects.postgresql import Range

from infrastructure.database.tstzrange_fields.interval import (
    decompose,
    empty_interval,
    normalize,
    unbounded_interval,
    value_to_time,
)


class IntervalPayload(BaseModel):
    """Serializable form of a tstzrange value.

    ``begin``/``end`` of ``None`` mean unbounded on that side. ``empty`` marks
    the interval that covers nothing, which is not the same as both sides
    being unbounded. Use ``to_interval`` to store a payload; assigning the
    payload object itself goes through begin/end extraction, which reads two
    missing sides as empty.
    """

    begin: Optional[datetime] = None
    end: Optional[datetime] = None
    empty: bool = False

    @field_validator("begin", "end", mode="before")
    @classmethod
    def _parse_timestamp(cls, value):
        return value_to_time(value)

    @model_validator(mode="after")
    def _empty_has_no_bounds(self):
        if self.empty and (self.begin is not None or self.end is not None):
            raise ValueError("an empty interval cannot carry begin or end")
        return self

    @classmethod
    def from_interval(cls, interval: Optional[Range]) -> Optional["IntervalPayload"]:
        if interval is None:
            return None
        if interval.isempty:
            return cls(empty=True)
        begin, end = decompose(interval)
        return cls(begin=begin, end=end)

    def to_interval(self) -> Range:
        if self.empty:
            return empty_interval()
        if self.begin is None and self.end is None:
            return unbounded_interval()
        return normalize(self.begin, self.end)
