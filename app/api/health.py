from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.dependencies import get_user_store
from app.models.schemas import HealthResponse
from app.services.user_store import UserStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(store: UserStore = Depends(get_user_store)):
    return HealthResponse(
        server="running",
        store="connected" if store.available else "not connected",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
