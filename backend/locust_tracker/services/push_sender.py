"""Push notification sender service using Web Push (VAPID)."""
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Optional

from pywebpush import webpush, WebPushException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.push_subscription import PushSubscription

logger = logging.getLogger(__name__)


@dataclass
class PushConfig:
    """VAPID configuration."""
    subject: str = ""  # mailto: or https: contact
    public_key: str = ""
    private_key: str = ""
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.subject and self.public_key and self.private_key)


class PushSenderService:
    """Service for sending browser push notifications."""

    def __init__(self):
        self._config: Optional[PushConfig] = None

    def configure(self, config: PushConfig):
        """Set the VAPID configuration used for sending."""
        self._config = config
        if not config.enabled:
            logger.debug("Push notifications not configured (VAPID keys missing)")

    def _deliver(self, subscription: PushSubscription, data: str):
        """Deliver to one subscription. Blocking, run in a worker thread."""
        webpush(
            subscription_info={
                "endpoint": subscription.endpoint,
                "keys": {"p256dh": subscription.p256dh, "auth": subscription.auth},
            },
            data=data,
            vapid_private_key=self._config.private_key,
            vapid_claims={"sub": self._config.subject},
            timeout=self._config.timeout,
        )

    async def send_notification(self, subscription: PushSubscription, payload: dict) -> bool:
        """Send a push notification to a single subscription.

        Args:
            subscription: Stored browser subscription
            payload: JSON-serialisable notification payload, delivered as-is

        Returns:
            True if the push service accepted the notification
        """
        if not self._config or not self._config.enabled:
            logger.debug("Push notifications not configured, skipping")
            return False

        endpoint_display = subscription.endpoint[:48]
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._deliver, subscription, json.dumps(payload)),
                timeout=self._config.timeout,
            )
            logger.info(f"Push notification sent to {endpoint_display}...")
            return True
        except WebPushException as e:
            status = e.response.status_code if e.response is not None else "n/a"
            logger.warning(f"Push notification failed ({status}) for {endpoint_display}...: {e}")
            return False
        except (TimeoutError, asyncio.TimeoutError):
            logger.warning(f"Push notification timed out for {endpoint_display}...")
            return False
        except Exception as e:
            logger.error(f"Failed to send push notification: {type(e).__name__}: {e}")
            return False

    async def send_to_all_subscriptions(
        self,
        session: AsyncSession,
        payload: dict,
    ) -> tuple[int, int]:
        """Send a push notification to every registered subscription.

        A failed delivery never stops the loop. Dead endpoints are kept.

        Returns:
            Tuple of (success_count, failure_count)
        """
        if not self._config or not self._config.enabled:
            return (0, 0)

        result = await session.execute(select(PushSubscription))
        subscriptions = result.scalars().all()

        if not subscriptions:
            logger.debug("No registered subscriptions for push notification")
            return (0, 0)

        success_count = 0
        failure_count = 0

        for subscription in subscriptions:
            if await self.send_notification(subscription, payload):
                success_count += 1
            else:
                failure_count += 1

        logger.info(
            f"Push notifications sent: {success_count} success, {failure_count} failed"
        )
        return (success_count, failure_count)


# Global instance
push_sender_service = PushSenderService()
