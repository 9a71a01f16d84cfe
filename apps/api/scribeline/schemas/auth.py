"""Signed-in caller schema."""

from pydantic import BaseModel, Field


class AuthPrincipal(BaseModel):
    user_id: str = Field(min_length=1)
    email: str | None = None
