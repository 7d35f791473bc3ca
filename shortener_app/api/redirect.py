from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse

from shortener_app.dependencies import get_url_service
from shortener_app.services.url_service import URLService
from shortener_app.storage.exceptions import URLDeletedError, URLNotFoundError

router = APIRouter(tags=["redirect"])


@router.get("/")
async def missing_short_code():
    """A bare GET / carries no code to resolve"""
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty value")


@router.get("/{short_code}")
async def redirect_to_original_url(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    307 with Location on success, 410 if the code was deleted, 400 if the
    code is unknown.
    """
    try:
        original_url = await url_service.resolve(short_code)
    except URLDeletedError:
        return Response(status_code=status.HTTP_410_GONE)
    except URLNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Short URL not found"
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
