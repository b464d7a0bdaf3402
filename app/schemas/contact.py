"""Pydantic schemas for the public contact form."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

MAX_EMAIL_LENGTH = 200


class ContactMessageCreate(BaseModel):
    """Body of ``POST /api/contact``."""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    message: str = Field(..., min_length=10, max_length=2000)

    @field_validator("email")
    @classmethod
    def _limit_email_length(cls, value: str) -> str:
        if len(value) > MAX_EMAIL_LENGTH:
            raise ValueError(f"Email must be at most {MAX_EMAIL_LENGTH} characters")
        return value
