"""Pydantic models for user profiles (no consent required)."""

from typing import Optional

from pydantic import BaseModel


class FacebookUserInfo(BaseModel):
    """User info from the Facebook User Profile API (public fields only)."""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_pic: Optional[str] = None
    locale: Optional[str] = None
    timezone: Optional[float] = None
