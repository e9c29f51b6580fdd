"""Device state store - profile upsert and geofence state bookkeeping."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Device
from ..schemas.ingest import LocationFix
from ..utils.db_utils import dialect_insert, retry_on_lock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceSnapshot:
    """Geofence transition state of a device at one point in time."""
    device_id: str
    last_geofence_inside: Optional[bool]
    last_alert_at: Optional[datetime]
    state_version: int


class DeviceStore:
    """Read-modify-write access to the per-device state record."""

    async def upsert(
        self,
        session: AsyncSession,
        fix: LocationFix,
        seen_at: datetime,
        now: datetime,
    ) -> DeviceSnapshot:
        """Create or refresh a device and return its transition state.

        registered_at and is_active are only written on insert. The profile
        fields are refreshed on every call; hardware fields missing from the
        fix keep their stored value. The geofence state columns are never
        touched here, so the returned row carries their values from before
        this call.
        """
        insert = dialect_insert(session)
        stmt = insert(Device).values(
            device_id=fix.device_id,
            device_name=fix.device_name,
            manufacturer=fix.manufacturer,
            model=fix.model,
            os_version=fix.os_version,
            last_seen=seen_at,
            registered_at=now,
            is_active=True,
            state_version=0,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Device.device_id],
            set_={
                "device_name": stmt.excluded.device_name,
                "manufacturer": func.coalesce(stmt.excluded.manufacturer, Device.manufacturer),
                "model": func.coalesce(stmt.excluded.model, Device.model),
                "os_version": func.coalesce(stmt.excluded.os_version, Device.os_version),
                "last_seen": stmt.excluded.last_seen,
                "updated_at": now,
            },
        ).returning(
            Device.last_geofence_inside,
            Device.last_alert_at,
            Device.state_version,
        )

        result = await session.execute(stmt)
        row = result.one()
        await retry_on_lock(session.commit)

        return DeviceSnapshot(
            device_id=fix.device_id,
            last_geofence_inside=row.last_geofence_inside,
            last_alert_at=row.last_alert_at,
            state_version=row.state_version,
        )

    async def get_snapshot(self, session: AsyncSession, device_id: str) -> Optional[DeviceSnapshot]:
        """Read the current transition state of a device."""
        result = await session.execute(
            select(
                Device.last_geofence_inside,
                Device.last_alert_at,
                Device.state_version,
            ).where(Device.device_id == device_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return DeviceSnapshot(
            device_id=device_id,
            last_geofence_inside=row.last_geofence_inside,
            last_alert_at=row.last_alert_at,
            state_version=row.state_version,
        )

    async def set_geofence_state(
        self,
        session: AsyncSession,
        device_id: str,
        inside: bool,
        alerted_at: Optional[datetime] = None,
        expected_version: Optional[int] = None,
        commit: bool = True,
    ) -> bool:
        """Persist geofence membership, and the alert time when one fired.

        With expected_version the write only applies if no other request has
        written the state since that version was read. Returns whether the
        row was updated. With commit=False the caller owns the transaction,
        so further writes can be committed together with the state.
        """
        values = {
            "last_geofence_inside": inside,
            "state_version": Device.state_version + 1,
        }
        if alerted_at is not None:
            values["last_alert_at"] = alerted_at

        stmt = update(Device).where(Device.device_id == device_id)
        if expected_version is not None:
            stmt = stmt.where(Device.state_version == expected_version)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        result = await session.execute(stmt)
        if commit:
            await retry_on_lock(session.commit)
        return result.rowcount == 1


# Global instance
device_store = DeviceStore()
