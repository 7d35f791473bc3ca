from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from shortener_app.config import settings
from shortener_app.dependencies import get_url_service
from shortener_app.network import is_trusted
from shortener_app.schemas.url import StatsResponse
from shortener_app.services.url_service import URLService

router = APIRouter(tags=["internal"])


def require_trusted_subnet(x_real_ip: Optional[str] = Header(None)) -> str:
    """Reject callers whose X-Real-IP is outside the configured subnet"""
    if not is_trusted(x_real_ip, settings.trusted_subnet):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return x_real_ip


@router.get("/api/internal/stats", response_model=StatsResponse)
async def get_stats(
    _client_ip: str = Depends(require_trusted_subnet),
    url_service: URLService = Depends(get_url_service)
):
    """Aggregate URL and user counts"""
    return await url_service.get_stats()


@router.get("/ping")
async def ping(url_service: URLService = Depends(get_url_service)):
    """Storage liveness; StorageError becomes 500 in the app error handler"""
    await url_service.ping()
    return {"status": "ok"}
