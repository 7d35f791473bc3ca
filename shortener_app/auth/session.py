import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request, Response
from pydantic import BaseModel

from shortener_app.config import settings

ALGORITHM = "HS256"


class UserSession(BaseModel):
    """
    Identity of the caller.

    is_new is True when the request carried no valid token and a fresh
    identity was minted for it.
    """
    user_id: str
    token: str
    is_new: bool = False


def build_token(user_id: str, expires_in: Optional[int] = None) -> str:
    """Sign a token whose subject is `user_id`."""
    if expires_in is None:
        expires_in = settings.token_exp_seconds
    expire = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    return jwt.encode({"sub": user_id, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_user_id(token: Optional[str]) -> Optional[str]:
    """Return the subject of a valid token, or None if missing, expired or forged."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None
    return payload.get("sub") or None


def get_user_session(request: Request) -> UserSession:
    """FastAPI dependency: read the session cookie, mint a new identity if needed."""
    token = request.cookies.get(settings.auth_cookie_name)
    user_id = decode_user_id(token)
    if user_id is not None:
        return UserSession(user_id=user_id, token=token)

    user_id = str(uuid.uuid4())
    return UserSession(user_id=user_id, token=build_token(user_id), is_new=True)


def set_session_cookie(response: Response, session: UserSession) -> Response:
    """
    Attach (or refresh) the session cookie on an outgoing response.

    The token is re-signed for the same user so its expiry matches the
    cookie's max-age.
    """
    session.token = build_token(session.user_id)
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=session.token,
        max_age=settings.token_exp_seconds,
        httponly=True,
        path="/",
    )
    return response
