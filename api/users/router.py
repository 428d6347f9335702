"""
Users API endpoints.

`/users` supports exactly two operations:
- GET  -> list all users
- POST -> create one user

Any other method gets 405 with `Allow: GET, POST` (see core/errors.py).
OPTIONS never gets here (answered by the CORS middleware).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from core.db import STORE_ERRORS, Database, get_database

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users", response_model=list[schemas.User])
async def list_users(database: Database = Depends(get_database)) -> list[dict]:
    try:
        return await repository.list_users(database)
    except STORE_ERRORS as exc:
        logger.warning("list_users_failed error=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


@router.post("/users", status_code=status.HTTP_201_CREATED, response_class=PlainTextResponse)
async def create_user(
    request: Request,
    database: Database = Depends(get_database),
) -> str:
    # The body is JSON whatever the Content-Type; browsers send text/plain
    # for requests that skip the preflight.
    body = await request.body()
    try:
        user = schemas.User.model_validate_json(body)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    # Duplicate keys and other insert failures are all reported as 400.
    try:
        await repository.create_user(database, uuid=user.uuid, name=user.name)
    except STORE_ERRORS as exc:
        logger.warning("create_user_failed uuid=%s error=%s", user.uuid, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return "user added"
