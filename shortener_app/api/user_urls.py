from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from shortener_app.auth.session import UserSession, get_user_session, set_session_cookie
from shortener_app.dependencies import get_url_service
from shortener_app.services.url_service import URLService

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/urls")
async def get_user_urls(
    session: UserSession = Depends(get_user_session),
    url_service: URLService = Depends(get_url_service)
):
    """
    List the caller's URLs.

    204 when the caller has no session yet or owns nothing.
    """
    if session.is_new:
        return set_session_cookie(Response(status_code=status.HTTP_204_NO_CONTENT), session)

    urls = await url_service.list_user_urls(session.user_id)
    if not urls:
        return set_session_cookie(Response(status_code=status.HTTP_204_NO_CONTENT), session)

    response = JSONResponse([url.model_dump() for url in urls], status_code=status.HTTP_200_OK)
    return set_session_cookie(response, session)


@router.delete("/urls", status_code=status.HTTP_202_ACCEPTED)
async def delete_user_urls(
    short_codes: List[str] = Body(...),
    session: UserSession = Depends(get_user_session),
    url_service: URLService = Depends(get_url_service)
):
    """
    Queue a soft delete of the caller's codes and answer 202 right away.

    The outcome is not reported; codes owned by someone else are ignored.
    """
    if session.is_new:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not await url_service.schedule_delete(session.user_id, short_codes):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Delete queue unavailable"
        )

    return set_session_cookie(Response(status_code=status.HTTP_202_ACCEPTED), session)
