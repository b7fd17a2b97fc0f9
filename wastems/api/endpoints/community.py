"""Community API: cleaning drives and participant sign-up."""

from typing import Annotated

from fastapi import APIRouter, Depends

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import CurrentUser, ensure_self_or_roles, repository
from wastems.core.constants import SUPERVISOR_OR_ABOVE
from wastems.domain.exceptions import ValidationException
from wastems.infrastructure.firebase.collections import COLLECTION_CLEANING_EVENTS
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.community import EventCreate, EventRegistrationRequest, EventUpdate
from wastems.shared.listing import field_equals

router = APIRouter()

EventRepo = Annotated[DocumentRepository, Depends(repository(COLLECTION_CLEANING_EVENTS, "Event"))]

EVENTS = CrudResource(
    collection=COLLECTION_CLEANING_EVENTS,
    label="Event",
    plural="events",
    create_model=EventCreate,
    update_model=EventUpdate,
    search_fields=("name", "area", "organizer"),
    filter_predicate=field_equals("status"),
    defaults=lambda: {"participants": [], "status": "scheduled"},
    write_roles=SUPERVISOR_OR_ABOVE,
)


@router.post("/events/{event_id}/register")
async def register_for_event(
    event_id: str,
    events: EventRepo,
    user: CurrentUser,
    body: EventRegistrationRequest | None = None,
) -> dict:
    """Add a participant (the caller unless staff name someone) once."""
    participant_id = (body.participant_id if body else None) or user.id
    ensure_self_or_roles(user, participant_id, SUPERVISOR_OR_ABOVE)
    event = await events.get_or_404(event_id)
    if event.get("status") in ("completed", "cancelled"):
        raise ValidationException("Event is not open for registration", field="status")
    participants = list(event.get("participants") or [])
    if participant_id in participants:
        raise ValidationException("Already registered for this event", field="participantId")
    if len(participants) >= (event.get("maxParticipants") or 0):
        raise ValidationException("Event is full", field="maxParticipants")
    record = await events.update(event_id, {"participants": participants + [participant_id]})
    return {
        "success": True,
        "message": "Registered for event successfully",
        "data": {
            "eventId": event_id,
            "participantId": participant_id,
            "participantCount": len(record.get("participants") or []),
        },
    }


register_crud_routes(router, EVENTS, base="/events")
