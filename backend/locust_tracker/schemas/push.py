"""Push subscription schemas."""
from pydantic import BaseModel, Field

from .ingest import CamelModel


class PushSubscriptionKeys(BaseModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class PushSubscriptionCreate(BaseModel):
    """Subscription object produced by the browser Push API."""
    endpoint: str = Field(..., pattern=r"^https?://\S+$")
    keys: PushSubscriptionKeys


class PushSubscribeResponse(BaseModel):
    ok: bool = True


class PushPublicKeyResponse(CamelModel):
    public_key: str
