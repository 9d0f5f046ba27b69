"""Health endpoint -- live store ping plus relay configuration state."""

from fastapi import APIRouter

from chatrelay.infra.db import is_store_connected
from chatrelay.infra.time_utils import to_iso, utc_now

from .deps import AppConfigDep, MongoClientDep, RelayClientDep
from .models import (
    RELAY_CONFIGURED,
    RELAY_NOT_CONFIGURED,
    STORE_CONNECTED,
    STORE_DISCONNECTED,
    HealthResponse,
)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(
    mongo_client: MongoClientDep,
    relay_client: RelayClientDep,
    config: AppConfigDep,
) -> HealthResponse:
    """Always 200; the body reports what is degraded."""
    connected = await is_store_connected(
        mongo_client, config.third_party.mongodb_ping_timeout
    )
    return HealthResponse(
        store=STORE_CONNECTED if connected else STORE_DISCONNECTED,
        relay=RELAY_CONFIGURED if relay_client.configured else RELAY_NOT_CONFIGURED,
        timestamp=to_iso(utc_now()),
    )
