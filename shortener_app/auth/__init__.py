"""
Cookie-carried session identity (signed JWT with an opaque subject).
"""

from .session import UserSession, build_token, decode_user_id, get_user_session, set_session_cookie

__all__ = [
    "UserSession",
    "build_token",
    "decode_user_id",
    "get_user_session",
    "set_session_cookie",
]
