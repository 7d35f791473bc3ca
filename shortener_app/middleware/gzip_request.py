# Inflates request bodies whose Content-Encoding header is gzip

import gzip
import logging
import zlib

from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class GzipRequestMiddleware:
    """
    ASGI middleware: routes see the decompressed body, without the
    Content-Encoding header and with a matching Content-Length.

    Response compression is left to starlette's GZipMiddleware.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        if "gzip" not in headers.get("content-encoding", "").lower():
            await self.app(scope, receive, send)
            return

        compressed = b""
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            compressed += message.get("body", b"")
            more_body = message.get("more_body", False)

        try:
            body = gzip.decompress(compressed)
        except (OSError, EOFError, zlib.error) as e:
            logger.info("Rejected %s %s: bad gzip body: %s", scope["method"], scope["path"], e)
            response = PlainTextResponse("Invalid gzip body", status_code=400)
            await response(scope, receive, send)
            return

        raw_headers = [
            (name, value) for name, value in scope["headers"]
            if name not in (b"content-encoding", b"content-length")
        ]
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))
        scope = dict(scope, headers=raw_headers)

        body_sent = False

        async def receive_inflated() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, receive_inflated, send)
