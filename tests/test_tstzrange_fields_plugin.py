import sys
import math
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import Column, Integer, String
from sqlalchemy.dialects.postgresql import TSTZRANGE, Range
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm.attributes import set_committed_value

from config import settings
from infrastructure.database.models.leases import Lease, MaintenanceWindow
from infrastructure.database.tstzrange_fields import (
    ConversionError,
    IntervalAccessors,
    TstzRangeConfigurationError,
    covers,
    empty_interval,
    normalize,
    register_tstzrange_fields,
    tstzrange_fields,
)
from schemas.interval import IntervalPayload

LocalBase = declarative_base()

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
EARLY = NOW - timedelta(days=1)
LATE = NOW + timedelta(days=2)


@tstzrange_fields("booked_during", ["billed_during"])
class _Reservation(LocalBase):
    __tablename__ = "plugin_test_reservations"

    id = Column(Integer, primary_key=True)
    booked_during = Column(TSTZRANGE)
    billed_during = Column(TSTZRANGE)


def _lease(**kwargs):
    return Lease(name="unit lease", **kwargs)


def test_generates_all_accessor_names():
    lease = _lease()
    for name in (
        "active_during",
        "active_during_begin",
        "active_during_end",
    ):
        assert hasattr(lease, name)
    assert set(Lease.__tstzrange_fields__) == {"active_during"}
    assert isinstance(Lease.__tstzrange_fields__["active_during"], IntervalAccessors)


def test_multiple_fields_can_be_registered():
    assert set(_Reservation.__tstzrange_fields__) == {"booked_during", "billed_during"}
    reservation = _Reservation()
    reservation.booked_during_begin = EARLY
    reservation.billed_during_end = LATE
    assert reservation.booked_during == normalize(EARLY, None)
    assert reservation.billed_during == normalize(None, LATE)


def test_default_field_name_is_used_without_arguments(monkeypatch):
    monkeypatch.setattr(settings, "TSTZRANGE_DEFAULT_FIELD", "period")
    Base = declarative_base()

    class Shift(Base):
        __tablename__ = "plugin_test_shifts"

        id = Column(Integer, primary_key=True)
        period = Column(TSTZRANGE)

    register_tstzrange_fields(Shift)

    shift = Shift()
    shift.period_begin = NOW
    assert shift.period == normalize(NOW, None)
    assert shift.period_end is None


def test_new_tstzrange_is_exposed_on_the_model():
    assert Lease.new_tstzrange(None, None) == empty_interval()
    assert Lease.new_tstzrange(EARLY, LATE) == normalize(EARLY, LATE)


def test_unmapped_class_is_rejected():
    class NotAModel:
        period = None

    with pytest.raises(TstzRangeConfigurationError):
        register_tstzrange_fields(NotAModel, "period")


def test_missing_column_is_rejected():
    Base = declarative_base()

    class NoRange(Base):
        __tablename__ = "plugin_test_no_range"

        id = Column(Integer, primary_key=True)

    with pytest.raises(TstzRangeConfigurationError, match="no mapped column"):
        register_tstzrange_fields(NoRange, "period")


def test_non_tstzrange_column_is_rejected():
    Base = declarative_base()

    class TextPeriod(Base):
        __tablename__ = "plugin_test_text_period"

        id = Column(Integer, primary_key=True)
        period = Column(String)

    with pytest.raises(TstzRangeConfigurationError, match="TSTZRANGE"):
        register_tstzrange_fields(TextPeriod, "period")


def test_accessor_name_clashing_with_mapped_column_is_rejected():
    Base = declarative_base()

    class Clash(Base):
        __tablename__ = "plugin_test_clash"

        id = Column(Integer, primary_key=True)
        period = Column(TSTZRANGE)
        period_begin = Column(String)

    with pytest.raises(TstzRangeConfigurationError, match="already a mapped attribute"):
        register_tstzrange_fields(Clash, "period")


def test_new_record_slot_is_absent():
    lease = _lease()
    assert lease.active_during is None
    assert lease.active_during_begin is None
    assert lease.active_during_end is None


def test_assigning_none_creates_empty_interval():
    lease = _lease(active_during=None)
    assert lease.active_during is not None
    assert lease.active_during.isempty


def test_infinity_gives_unbounded_interval():
    lease = _lease(active_during=None)
    lease.active_during = math.inf
    assert lease.active_during_begin is None
    assert lease.active_during_end is None
    assert not lease.active_during.isempty
    assert lease.active_during.lower_inf
    assert lease.active_during.upper_inf


def test_empty_string_resets_interval():
    lease = _lease()
    lease.active_during_begin = EARLY
    lease.active_during_end = EARLY + timedelta(days=1)
    assert not lease.active_during.isempty

    lease.active_during = "empty"
    assert lease.active_during.isempty
    assert lease.active_during_begin is None
    assert lease.active_during_end is None


def test_get_set_begin():
    lease = _lease(active_during=None)
    lease.active_during_begin = EARLY
    assert lease.active_during_begin == EARLY

    lease.active_during_begin = EARLY.isoformat()
    assert lease.active_during_begin == EARLY

    lease.active_during_begin = None
    assert lease.active_during_begin is None


def test_get_set_end():
    lease = _lease(active_during=None)
    lease.active_during_end = LATE
    assert lease.active_during_end == LATE

    lease.active_during_end = LATE.isoformat()
    assert lease.active_during_end == LATE

    lease.active_during_end = None
    assert lease.active_during_end is None


def test_constructor_accepts_endpoint_keywords():
    lease = _lease(active_during_begin=None, active_during_end=None)
    assert lease.active_during.isempty

    lease = _lease(active_during_begin=NOW, active_during_end=NOW + timedelta(hours=1))
    assert not covers(lease.active_during, NOW - timedelta(minutes=30))
    assert covers(lease.active_during, NOW + timedelta(minutes=30))
    assert not covers(lease.active_during, NOW + timedelta(minutes=90))

    lease = _lease(active_during_begin=None, active_during_end=NOW)
    assert covers(lease.active_during, NOW - timedelta(minutes=30))
    assert not covers(lease.active_during, NOW + timedelta(minutes=30))

    lease = _lease(active_during_begin=NOW, active_during_end=None)
    assert not covers(lease.active_during, NOW - timedelta(minutes=30))
    assert covers(lease.active_during, NOW + timedelta(minutes=30))


def test_raw_absent_slot_is_rebuilt_from_endpoint_setters():
    lease = _lease()
    set_committed_value(lease, "active_during", None)
    assert lease.active_during is None

    lease.active_during_end = NOW
    assert lease.active_during.lower is None
    assert lease.active_during.upper == NOW

    set_committed_value(lease, "active_during", None)
    lease.active_during_begin = NOW
    assert lease.active_during.lower == NOW
    assert lease.active_during.upper is None


@pytest.mark.parametrize(
    "value",
    [
        Range(EARLY, LATE, bounds="[)"),
        IntervalPayload(begin=EARLY, end=LATE),
        {"begin": EARLY, "end": LATE},
        {"begin": EARLY.isoformat(), "end": LATE.isoformat()},
    ],
)
def test_whole_value_accepts_begin_end_forms(value):
    window = MaintenanceWindow()
    window.period = value
    assert window.period_begin == EARLY
    assert window.period_end == LATE


def test_empty_mapping_assigns_empty():
    window = MaintenanceWindow(period={"begin": EARLY, "end": LATE})
    window.period = {}
    assert window.period.isempty


def test_unrecognized_value_raises_and_keeps_previous():
    lease = _lease(active_during={"begin": EARLY, "end": LATE})
    previous = lease.active_during

    with pytest.raises(TypeError):
        lease.active_during = 1

    assert lease.active_during == previous


def test_unparsable_endpoint_raises_and_keeps_previous():
    lease = _lease(active_during={"begin": EARLY, "end": LATE})
    previous = lease.active_during

    with pytest.raises(ConversionError):
        lease.active_during_begin = "whenever"
    with pytest.raises(ConversionError):
        lease.active_during = {"begin": EARLY, "end": "later"}

    assert lease.active_during == previous


def test_failed_registration_leaves_model_untouched():
    Base = declarative_base()

    class Mixed(Base):
        __tablename__ = "plugin_test_mixed"

        id = Column(Integer, primary_key=True)
        period = Column(TSTZRANGE)
        bad = Column(String)

    with pytest.raises(TstzRangeConfigurationError, match="TSTZRANGE"):
        register_tstzrange_fields(Mixed, "period", "bad")

    assert not hasattr(Mixed, "period_begin")
    assert not hasattr(Mixed, "period_end")
    assert "__tstzrange_fields__" not in vars(Mixed)

    record = Mixed()
    record.period = None
    assert record.period is None


def test_failed_clash_check_leaves_earlier_fields_unregistered():
    Base = declarative_base()

    class LateClash(Base):
        __tablename__ = "plugin_test_late_clash"

        id = Column(Integer, primary_key=True)
        period = Column(TSTZRANGE)
        window = Column(TSTZRANGE)
        window_end = Column(String)

    with pytest.raises(TstzRangeConfigurationError, match="already a mapped attribute"):
        register_tstzrange_fields(LateClash, "period", "window")

    assert not hasattr(LateClash, "period_begin")
    record = LateClash()
    record.period = None
    assert record.period is None
