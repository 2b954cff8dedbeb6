from .errors import ConversionError, TstzRangeConfigurationError
from .interval import (
    EMPTY_SENTINEL,
    WholeValueKind,
    classify_whole_value,
    coerce_whole_value,
    covers,
    decompose,
    empty_interval,
    normalize,
    unbounded_interval,
    value_to_time,
)
from .accessors import IntervalAccessors, IntervalStorage, MappedAttributeStorage
from .plugin import register_tstzrange_fields, tstzrange_fields

__all__ = [
    "ConversionError",
    "TstzRangeConfigurationError",
    "EMPTY_SENTINEL",
    "WholeValueKind",
    "classify_whole_value",
    "coerce_whole_value",
    "covers",
    "decompose",
    "empty_interval",
    "normalize",
    "unbounded_interval",
    "value_to_time",
    "IntervalAccessors",
    "IntervalStorage",
    "MappedAttributeStorage",
    "register_tstzrange_fields",
    "tstzrange_fields",
]
