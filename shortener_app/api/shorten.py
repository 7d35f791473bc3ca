from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from shortener_app.auth.session import UserSession, get_user_session, set_session_cookie
from shortener_app.dependencies import get_url_service
from shortener_app.schemas.url import BatchShortenItem, ShortenRequest, ShortenResponse
from shortener_app.services.url_service import URLService

router = APIRouter(tags=["shorten"])


def _created_or_conflict(created: bool) -> int:
    return status.HTTP_201_CREATED if created else status.HTTP_409_CONFLICT


@router.post("/", status_code=status.HTTP_201_CREATED, response_class=PlainTextResponse)
async def shorten_text(
    request: Request,
    session: UserSession = Depends(get_user_session),
    url_service: URLService = Depends(get_url_service)
):
    """
    Shorten the raw URL in the request body.

    201 with the short URL, or 409 with the existing short URL when the
    original URL was already shortened. An empty body answers 201 with an
    empty payload.
    """
    body = await request.body()
    try:
        original_url = body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Body is not UTF-8 text")

    if not original_url:
        response = Response(status_code=status.HTTP_201_CREATED, media_type="text/plain")
        return set_session_cookie(response, session)

    short_url, created = await url_service.shorten(original_url, session.user_id)
    response = PlainTextResponse(short_url, status_code=_created_or_conflict(created))
    return set_session_cookie(response, session)


@router.post("/api/shorten", status_code=status.HTTP_201_CREATED)
async def shorten_json(
    payload: ShortenRequest,
    session: UserSession = Depends(get_user_session),
    url_service: URLService = Depends(get_url_service)
):
    """Same as POST / with a {"url": ...} body and a {"result": ...} response"""
    original_url = payload.url
    if not original_url:
        response = Response(status_code=status.HTTP_201_CREATED, media_type="application/json")
        return set_session_cookie(response, session)

    short_url, created = await url_service.shorten(original_url, session.user_id)
    response = JSONResponse(
        ShortenResponse(result=short_url).model_dump(),
        status_code=_created_or_conflict(created)
    )
    return set_session_cookie(response, session)


@router.post("/api/shorten/batch", status_code=status.HTTP_201_CREATED)
async def shorten_batch(
    items: List[BatchShortenItem],
    session: UserSession = Depends(get_user_session),
    url_service: URLService = Depends(get_url_service)
):
    """Shorten several URLs; correlation ids are echoed in input order"""
    if not items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Batch is empty")

    results = await url_service.shorten_batch(items, session.user_id)
    response = JSONResponse(
        [result.model_dump() for result in results],
        status_code=status.HTTP_201_CREATED
    )
    return set_session_cookie(response, session)
