"""
Permissive cross-origin middleware.

Every response gets the same CORS headers, with or without an `Origin`
request header, including 500s for unhandled errors. Preflight (`OPTIONS`)
requests are answered here with an empty 200 and never reach the routes.
"""

from __future__ import annotations

from starlette.datastructures import MutableHeaders
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class AllowAllCORSMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=200, headers=CORS_HEADERS)
            await response(scope, receive, send)
            return

        response_started = False

        async def send_with_cors(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = MutableHeaders(scope=message)
                headers.update(CORS_HEADERS)
            await send(message)

        try:
            await self.app(scope, receive, send_with_cors)
        except Exception:
            # This middleware runs inside ServerErrorMiddleware, whose 500
            # would otherwise go out without the headers.
            if not response_started:
                response = PlainTextResponse("Internal Server Error", status_code=500, headers=CORS_HEADERS)
                await response(scope, receive, send)
            raise
