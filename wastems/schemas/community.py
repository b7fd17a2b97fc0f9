"""Cleaning-event API schemas."""

from datetime import date
from typing import Literal

from pydantic import Field

from wastems.schemas.common import CamelModel, partial_model

EventStatus = Literal["scheduled", "ongoing", "completed", "cancelled"]


class EventCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    date: date
    area: str = Field(..., min_length=1)
    organizer: str = Field(..., min_length=1)
    description: str | None = None
    max_participants: int = Field(default=100, ge=1, le=500)
    ulb_id: str | None = None
    participants: list[str] | None = None
    status: EventStatus | None = None
    photos: list[str] | None = None


EventUpdate = partial_model(EventCreate)


class EventRegistrationRequest(CamelModel):
    participant_id: str | None = Field(default=None, description="Defaults to the caller")
