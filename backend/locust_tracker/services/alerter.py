"""Alerter service - geofence entry detection, cooldown and notification dispatch."""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..models import Alert
from ..schemas.ingest import LocationFix
from ..utils.db_utils import retry_on_lock
from ..utils.time_utils import utcnow
from .device_store import DeviceSnapshot, device_store
from .email_sender import email_sender_service, EmailConfig
from .geofence import Geofence, GeofenceResult, get_geofence
from .push_sender import push_sender_service, PushConfig

logger = logging.getLogger(__name__)

# Attempts at the compare-and-swap state write before writing unconditionally
MAX_STATE_ATTEMPTS = 5


@dataclass(frozen=True)
class TransitionDecision:
    """Outcome of comparing a new fix with the previous device state."""
    entered: bool
    cooldown_ok: bool

    @property
    def fire(self) -> bool:
        return self.entered and self.cooldown_ok


def evaluate_transition(
    previous_inside: Optional[bool],
    previous_alert_at: Optional[datetime],
    now_inside: bool,
    now: datetime,
    cooldown: timedelta,
) -> TransitionDecision:
    """Decide whether a fix is an alertable geofence entry.

    Unknown previous state counts as outside, so a first fix inside the
    fence is an entry. Exits never alert.
    """
    entered = now_inside and previous_inside is not True
    cooldown_ok = previous_alert_at is None or (now - previous_alert_at) >= cooldown
    return TransitionDecision(entered=entered, cooldown_ok=cooldown_ok)


class AlertEngine:
    """Turns geofence transitions into alerts and notifications."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock

    @property
    def cooldown(self) -> timedelta:
        return timedelta(minutes=settings.alert_cooldown_minutes)

    def _email_config(self) -> EmailConfig:
        return EmailConfig(
            from_address=settings.alert_email_from or "",
            to_address=settings.alert_email_to or "",
            mailgun_api_key=settings.mailgun_api_key or "",
            mailgun_domain=settings.mailgun_domain or "",
            mailgun_api_base=settings.mailgun_api_base,
            smtp_host=settings.smtp_host or "",
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username or "",
            smtp_password=settings.smtp_password or "",
            smtp_use_tls=settings.smtp_use_tls,
            timeout=settings.notification_timeout_seconds,
        )

    def _push_config(self) -> PushConfig:
        return PushConfig(
            subject=settings.vapid_subject or "",
            public_key=settings.vapid_public_key or "",
            private_key=settings.vapid_private_key or "",
            timeout=settings.notification_timeout_seconds,
        )

    def _build_email_subject(self, fix: LocationFix) -> str:
        return f"Geofence entry: {fix.device_name}"

    def _build_email_body(
        self,
        fix: LocationFix,
        geofence: Geofence,
        result: GeofenceResult,
        timestamp: datetime,
    ) -> str:
        lines = [
            f"Device: {fix.device_name} ({fix.device_id})",
            f"Geofence: {geofence.name} ({geofence.radius_km:g} km)",
            "Status: ENTERED",
            f"Distance from center: {result.distance_km:.2f} km",
            f"Location: https://maps.google.com/?q={fix.latitude},{fix.longitude}",
            f"Time: {timestamp.isoformat(timespec='milliseconds')}Z",
        ]
        return "\n".join(lines) + "\n"

    def _build_push_payload(self, fix: LocationFix, geofence: Geofence) -> dict:
        return {
            "title": "Geofence alert",
            "body": f"{fix.device_name} entered {geofence.name}",
            "data": {"deviceId": fix.device_id},
        }

    def _build_alert(self, fix: LocationFix, result: GeofenceResult, timestamp: datetime) -> Alert:
        return Alert(
            device_id=fix.device_id,
            device_name=fix.device_name,
            latitude=fix.latitude,
            longitude=fix.longitude,
            distance_from_center_km=result.distance_km,
            timestamp=timestamp,
            email_sent=False,
            push_sent=False,
        )

    async def _claim_transition(
        self,
        session: AsyncSession,
        fix: LocationFix,
        result: GeofenceResult,
        snapshot: DeviceSnapshot,
        timestamp: datetime,
        now: datetime,
    ) -> Tuple[TransitionDecision, Optional[Alert]]:
        """Decide on the transition and persist the new state atomically.

        The state write is conditional on the version read with the snapshot.
        If a concurrent fix for the same device wrote first, re-read and
        decide again, so one transition yields at most one alert. A fired
        alert is committed in the same transaction as the state that claims
        it, so the cooldown never starts without an Alert row.
        """
        device_id = fix.device_id
        for attempt in range(MAX_STATE_ATTEMPTS):
            decision = evaluate_transition(
                snapshot.last_geofence_inside,
                snapshot.last_alert_at,
                result.inside,
                now,
                self.cooldown,
            )
            claimed = await device_store.set_geofence_state(
                session,
                device_id,
                result.inside,
                alerted_at=now if decision.fire else None,
                expected_version=snapshot.state_version,
                commit=False,
            )
            if claimed:
                alert = None
                if decision.fire:
                    alert = self._build_alert(fix, result, timestamp)
                    session.add(alert)
                try:
                    await retry_on_lock(session.commit)
                except SQLAlchemyError:
                    await session.rollback()
                    raise
                return decision, alert

            await session.rollback()
            logger.info(f"Device {device_id} state changed concurrently, re-evaluating (attempt {attempt + 1})")
            snapshot = await device_store.get_snapshot(session, device_id)

        logger.warning(f"Device {device_id} state kept changing, recording membership without alert")
        await device_store.set_geofence_state(session, device_id, result.inside)
        return TransitionDecision(entered=False, cooldown_ok=False), None

    async def _deliver_email(self, subject: str, body: str) -> bool:
        config = self._email_config()
        try:
            return await asyncio.wait_for(
                email_sender_service.send_email(config, subject, body),
                timeout=config.timeout,
            )
        except (TimeoutError, asyncio.TimeoutError):
            logger.error(f"Email alert timed out after {config.timeout}s")
            return False
        except Exception as e:
            logger.error(f"Email alert failed: {type(e).__name__}: {e}")
            return False

    async def _deliver_push(self, session: AsyncSession, payload: dict) -> bool:
        try:
            push_sender_service.configure(self._push_config())
            success_count, _ = await push_sender_service.send_to_all_subscriptions(session, payload)
            return success_count > 0
        except Exception as e:
            logger.error(f"Push alert failed: {type(e).__name__}: {e}")
            return False

    async def evaluate(
        self,
        session: AsyncSession,
        fix: LocationFix,
        result: GeofenceResult,
        snapshot: DeviceSnapshot,
        timestamp: datetime,
        now: Optional[datetime] = None,
    ) -> Optional[Alert]:
        """Apply one fix to the device state machine.

        Returns the created Alert when the fix is an entry outside the
        cooldown window, otherwise None. Notification failures are recorded
        on the alert and never raised.
        """
        now = now or self.clock()
        decision, alert = await self._claim_transition(session, fix, result, snapshot, timestamp, now)

        if alert is None:
            if decision.entered:
                logger.info(f"Entry of {fix.device_id} suppressed by cooldown")
            return None

        geofence = get_geofence()
        logger.info(f"Geofence entry alert {alert.id} for {fix.device_name} ({fix.device_id})")

        # Both channels run to completion; neither can cancel the other
        email_sent, push_sent = await asyncio.gather(
            self._deliver_email(
                self._build_email_subject(fix),
                self._build_email_body(fix, geofence, result, timestamp),
            ),
            self._deliver_push(session, self._build_push_payload(fix, geofence)),
            return_exceptions=True,
        )

        alert.email_sent = email_sent is True
        alert.push_sent = push_sent is True
        await retry_on_lock(session.commit)

        logger.info(f"Alert {alert.id} delivery: email={alert.email_sent}, push={alert.push_sent}")
        return alert


# Global instance
alert_engine = AlertEngine()
