"""Attach tstzrange accessors to SQLAlchemy models.

Example::

    @tstzrange_fields("active_during")
    class Lease(Base):
        __tablename__ = "leases"

        id = Column(Integer, primary_key=True)
        active_during = Column(TSTZRANGE, nullable=True)

    lease = Lease()
    lease.active_during_begin = datetime.now(timezone.utc)
    lease.active_during_end = "2030-01-01T00:00:00+00:00"
    lease.active_during = math.inf      # unbounded on both sides
    lease.active_during_end = None      # unbounded end
    lease.active_during = None          # empty
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import event, inspect as sa_inspect
from sqlalchemy.dialects.postgresql import TSTZRANGE
from sqlalchemy.orm import Mapper

from config import settings
from infrastructure.database.tstzrange_fields.accessors import (
    IntervalAccessors,
    IntervalStorage,
    MappedAttributeStorage,
)
from infrastructure.database.tstzrange_fields.errors import TstzRangeConfigurationError
from infrastructure.database.tstzrange_fields.interval import coerce_whole_value, normalize

logger = logging.getLogger(__name__)

REGISTRY_ATTRIBUTE = "__tstzrange_fields__"


def _flatten_field_names(fields: Iterable[Any]) -> List[str]:
    names: List[str] = []
    for field in fields:
        if isinstance(field, (list, tuple, set)):
            names.extend(_flatten_field_names(field))
        else:
            names.append(str(field))
    return names


def _require_mapper(model: type) -> Mapper:
    mapper = sa_inspect(model, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise TstzRangeConfigurationError(
            f"tstzrange_fields requires a mapped SQLAlchemy model; {model!r} is not mapped."
        )
    return mapper


def _require_tstzrange_column(mapper: Mapper, field_name: str) -> None:
    if field_name not in mapper.columns:
        raise TstzRangeConfigurationError(
            f"tstzrange_fields: {mapper.class_.__name__} has no mapped column {field_name!r}."
        )
    column = mapper.columns[field_name]
    if not isinstance(column.type, TSTZRANGE):
        raise TstzRangeConfigurationError(
            f"tstzrange_fields requires {mapper.class_.__name__}.{field_name} to be a TSTZRANGE column, "
            f"got {column.type!r}."
        )


def _coerce_on_set(target, value, oldvalue, initiator):
    return coerce_whole_value(value)


def _require_free_accessor_name(mapper: Mapper, name: str) -> None:
    if mapper.has_property(name):
        raise TstzRangeConfigurationError(
            f"tstzrange_fields: {mapper.class_.__name__}.{name} is already a mapped attribute."
        )


def _attach_property(model: type, name: str, prop: property) -> None:
    if name in vars(model):
        logger.warning("Replacing existing attribute %s.%s with a tstzrange accessor", model.__name__, name)
    setattr(model, name, prop)


def register_tstzrange_fields(
    model: type,
    *fields: Any,
    storage: Optional[IntervalStorage] = None,
) -> Dict[str, IntervalAccessors]:
    """Generate ``<field>``, ``<field>_begin`` and ``<field>_end`` accessors on ``model``.

    With no field names the configured default (``period`` unless
    ``TSTZRANGE_DEFAULT_FIELD`` says otherwise) is used.
    """

    mapper = _require_mapper(model)
    names = _flatten_field_names(fields) or [settings.TSTZRANGE_DEFAULT_FIELD]
    storage = storage or MappedAttributeStorage()
    registry: Dict[str, IntervalAccessors] = dict(vars(model).get(REGISTRY_ATTRIBUTE, {}))

    # Validate every field before attaching anything to the model.
    pending = [IntervalAccessors(name, storage) for name in names]
    for accessors in pending:
        _require_tstzrange_column(mapper, accessors.field_name)
        _require_free_accessor_name(mapper, accessors.begin_name)
        _require_free_accessor_name(mapper, accessors.end_name)

    for accessors in pending:
        name = accessors.field_name
        _attach_property(model, accessors.begin_name, accessors.begin_property())
        _attach_property(model, accessors.end_name, accessors.end_property())
        if name not in registry:
            event.listen(getattr(model, name), "set", _coerce_on_set, retval=True, propagate=True)
        registry[name] = accessors
        logger.debug("Registered tstzrange accessors for %s.%s", model.__name__, name)

    setattr(model, REGISTRY_ATTRIBUTE, registry)
    model.new_tstzrange = staticmethod(normalize)
    return registry


def tstzrange_fields(*fields: Any, storage: Optional[IntervalStorage] = None):
    """Class decorator form of :func:`register_tstzrange_fields`."""

    def decorate(model: type) -> type:
        register_tstzrange_fields(model, *fields, storage=storage)
        return model

    return decorate
