"""Browser push subscription API endpoints."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..models import PushSubscription
from ..schemas.push import PushSubscriptionCreate, PushSubscribeResponse, PushPublicKeyResponse
from ..utils.db_utils import dialect_insert, retry_on_lock
from ..utils.time_utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/push", tags=["push"])


@router.get("/public-key", response_model=PushPublicKeyResponse)
async def get_public_key():
    """VAPID public key the browser needs to subscribe."""
    return PushPublicKeyResponse(public_key=settings.vapid_public_key or "")


@router.post("/subscribe", response_model=PushSubscribeResponse)
async def subscribe(
    request: PushSubscriptionCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a browser for alert notifications.

    If the endpoint already exists, its keys are replaced. Otherwise a new
    record is created. Both happen in one INSERT ... ON CONFLICT statement,
    so concurrent registrations of the same browser cannot collide.
    """
    now = utcnow()
    insert = dialect_insert(db)
    stmt = insert(PushSubscription).values(
        endpoint=request.endpoint,
        p256dh=request.keys.p256dh,
        auth=request.keys.auth,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[PushSubscription.endpoint],
        set_={
            "p256dh": stmt.excluded.p256dh,
            "auth": stmt.excluded.auth,
            "updated_at": now,
        },
    )
    await db.execute(stmt)
    await retry_on_lock(db.commit)

    logger.info(f"Push subscription registered: {request.endpoint[:48]}...")
    return PushSubscribeResponse(ok=True)
