"""
Event endpoints for API v1.

Managing events requires a session: the administrator may act on any
company, a company only on itself.  Registration and the public event
lookup need no session; they back the public registration form.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from registration_api.app.core.security import ensure_company_access, get_current_user
from registration_api.app.schemas.event import (
    EventCreate,
    EventCreateResult,
    EventList,
    EventUpdate,
    EventUpdateResult,
    RegistrationTable,
)
from registration_api.app.schemas.registration import PublicEvent, RegistrationCreate, RegistrationResult
from registration_api.app.services.company_service import CompanyService
from registration_api.app.services.event_service import EventService
from registration_api.app.services.registration_service import RegistrationService


router = APIRouter()


def _require(value: Optional[str], detail: str) -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    return value


@router.get("", response_model=EventList)
async def list_events(
    company: Optional[str] = Query(None, description="Company name"),
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> EventList:
    """List a company's events with their registration counts."""
    company = _require(company, "Company name is required")
    ensure_company_access(current_user, company)
    try:
        events = await EventService.list_events(company)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return EventList(events=events)


@router.post("", response_model=EventCreateResult)
async def create_event(
    event: EventCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> EventCreateResult:
    """Create an event, enabled by default, and return its registration link."""
    _require(event.company_name, "Company name and event name are required")
    _require(event.event_name, "Company name and event name are required")
    ensure_company_access(current_user, event.company_name, "create events for")
    try:
        created = await EventService.create_event(event)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return EventCreateResult(event=created)


@router.patch("", response_model=EventUpdateResult)
async def update_event(
    update: EventUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> EventUpdateResult:
    """Enable/disable an event or replace its banner."""
    _require(update.company_name, "Company name and event name are required")
    _require(update.event_name, "Company name and event name are required")
    ensure_company_access(current_user, update.company_name, "update events for")
    try:
        updated = await EventService.update_event(update)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return EventUpdateResult(event=updated)


@router.delete("", response_model=Dict[str, Any])
async def delete_event(
    company: Optional[str] = Query(None),
    event: Optional[str] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> Dict[str, Any]:
    """Delete an event together with its registrations."""
    company = _require(company, "Company name and event name are required")
    event = _require(event, "Company name and event name are required")
    ensure_company_access(current_user, company, "delete events for")
    try:
        await EventService.delete_event(company, event)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": f"Event {event} deleted successfully"}


@router.get("/registrations", response_model=RegistrationTable)
async def list_registrations(
    company: Optional[str] = Query(None),
    event: Optional[str] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> RegistrationTable:
    """Return the registrations of an event for the company dashboard."""
    company = _require(company, "Company name and event name are required")
    event = _require(event, "Company name and event name are required")
    ensure_company_access(current_user, company)
    try:
        return await EventService.list_registrations(company, event)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/registrations/export")
async def export_registrations(
    company: Optional[str] = Query(None),
    event: Optional[str] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> Response:
    """Download the registrations of an event as CSV."""
    company = _require(company, "Company name and event name are required")
    event = _require(event, "Company name and event name are required")
    ensure_company_access(current_user, company)
    try:
        content = await EventService.export_registrations_csv(company, event)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    file_name = EventService.export_file_name(company, event)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/public", response_model=PublicEvent)
async def get_public_event(
    company: Optional[str] = Query(None),
    event: Optional[str] = Query(None),
) -> PublicEvent:
    """Return what the public registration page shows for an event.

    ``enabled`` is false when either the company or the event is
    disabled.
    """
    company = _require(company, "Company name and event name are required")
    event = _require(event, "Company name and event name are required")
    owner = await CompanyService.get_company_by_name(company)
    if owner is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    found = await EventService.get_public_event(company, event)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return PublicEvent(company=owner.name, name=found.name, image=found.image, enabled=owner.enabled and found.enabled)


@router.post("/register", response_model=RegistrationResult)
async def register_for_event(registration: RegistrationCreate) -> RegistrationResult:
    """Register for an event through the public form."""
    try:
        return await RegistrationService.register(registration)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
