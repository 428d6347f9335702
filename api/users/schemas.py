"""
Pydantic schemas for the users resource.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class User(BaseModel):
    # Column sizes match the `users` table (see core/bootstrap.py).
    uuid: str = Field(..., max_length=36)
    name: str = Field(..., min_length=1, max_length=100)
