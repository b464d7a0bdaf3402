"""Pydantic schemas for admin login."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)


class SessionUser(BaseModel):
    id: str
    email: str
    role: str


class SessionResponse(BaseModel):
    authenticated: bool
    user: SessionUser | None = None
