"""
App-wide exception handlers.

Error responses are plain text carrying the underlying error message.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match


def allowed_methods(request: Request) -> list[str]:
    """
    Methods served by the routes registered on the request's path, in
    registration order.
    """
    methods: list[str] = []
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.NONE:
            continue
        for method in getattr(route, "methods", None) or ():
            if method not in methods:
                methods.append(method)
    return methods


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    headers = dict(exc.headers or {})
    if exc.status_code == 405:
        # Starlette only lists the methods of the first route on the path.
        headers["Allow"] = ", ".join(allowed_methods(request))
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=headers)


def register(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
