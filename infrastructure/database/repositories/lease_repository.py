from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models.leases import Lease, MaintenanceWindow
from schemas.interval import IntervalPayload

logger = logging.getLogger(__name__)


def _interval_input(value: Any) -> Any:
    # Payloads keep the empty/unbounded distinction only through to_interval().
    if isinstance(value, IntervalPayload):
        return value.to_interval()
    return value


class LeaseRepository:
    """Persistence helpers for leases and their active periods."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_lease(
        self,
        *,
        name: str,
        active_during: Any = None,
        active_during_begin: Any = None,
        active_during_end: Any = None,
        notes: Optional[str] = None,
    ) -> Lease:
        lease = Lease(name=name, notes=notes, active_during=_interval_input(active_during))
        if active_during_begin is not None:
            lease.active_during_begin = active_during_begin
        if active_during_end is not None:
            lease.active_during_end = active_during_end
        self.db.add(lease)
        await self.db.flush()
        return lease

    async def get_lease(self, lease_id: int) -> Optional[Lease]:
        stmt = select(Lease).where(Lease.id == lease_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_leases(self, lease_ids: Sequence[int]) -> list[Lease]:
        unique_ids = {lease_id for lease_id in lease_ids if lease_id is not None}
        if not unique_ids:
            return []
        stmt = select(Lease).where(Lease.id.in_(unique_ids)).order_by(Lease.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def set_active_during(self, lease_id: int, value: Any) -> Optional[Lease]:
        lease = await self.get_lease(lease_id)
        if not lease:
            return None
        lease.active_during = _interval_input(value)
        await self.db.flush()
        logger.debug("Lease %s active_during set to %r", lease_id, lease.active_during)
        return lease

    async def set_active_bounds(
        self,
        lease_id: int,
        *,
        begin: Any = None,
        end: Any = None,
    ) -> Optional[Lease]:
        lease = await self.get_lease(lease_id)
        if not lease:
            return None
        lease.active_during_begin = begin
        lease.active_during_end = end
        await self.db.flush()
        return lease


class MaintenanceWindowRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_window(self, *, period: Any = None, description: Optional[str] = None) -> MaintenanceWindow:
        window = MaintenanceWindow(description=description, period=_interval_input(period))
        self.db.add(window)
        await self.db.flush()
        return window

    async def get_window(self, window_id: int) -> Optional[MaintenanceWindow]:
        stmt = select(MaintenanceWindow).where(MaintenanceWindow.id == window_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
