"""Pydantic schemas for links and the public profile.

LinkRead is the owner's view (includes user_id). PublicLink is the
projection shown on a profile page and leaves the owner out.

Request bounds mirror the column sizes in db/models.py so oversized input
is a 400 here instead of a database error later.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# links.order is a 32-bit INTEGER column
ORDER_MIN = -(2**31)
ORDER_MAX = 2**31 - 1

TITLE_MAX_LENGTH = 255
URL_MAX_LENGTH = 2048


class LinkCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=TITLE_MAX_LENGTH)
    url: Optional[str] = Field(None, max_length=URL_MAX_LENGTH)
    order: Optional[int] = Field(None, ge=ORDER_MIN, le=ORDER_MAX)


class LinkUpdate(BaseModel):
    """Partial update — only the supplied fields change."""
    title: Optional[str] = Field(None, max_length=TITLE_MAX_LENGTH)
    url: Optional[str] = Field(None, max_length=URL_MAX_LENGTH)
    order: Optional[int] = Field(None, ge=ORDER_MIN, le=ORDER_MAX)


class LinkRead(BaseModel):
    id: int
    user_id: int
    title: str
    url: str
    order: int
    click_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class LinkEnvelope(BaseModel):
    message: str
    link: LinkRead


class MessageResponse(BaseModel):
    message: str


class PublicLink(BaseModel):
    id: int
    title: str
    url: str
    order: int
    click_count: int

    model_config = {"from_attributes": True}


class PublicProfile(BaseModel):
    username: str
    profile_picture_url: Optional[str] = None
    links: list[PublicLink] = []
