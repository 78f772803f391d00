"""
Pydantic models for events.

An event is identified by its name within a company.  Requests use
the camelCase keys the dashboards send (``companyName``,
``eventName``); both camelCase and snake_case are accepted.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventCreate(BaseModel):
    """Schema for creating an event."""

    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(..., alias="companyName", examples=["Acme Events"])
    event_name: str = Field(..., alias="eventName", examples=["Spring Hackathon"])
    image: Optional[str] = Field(None, description="Base64 encoded banner")


class EventUpdate(BaseModel):
    """Schema for enabling/disabling an event or replacing its banner."""

    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(..., alias="companyName")
    event_name: str = Field(..., alias="eventName")
    enabled: Optional[bool] = None
    image: Optional[str] = None


class EventRead(BaseModel):
    """Schema for reading an event from the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    image: Optional[str] = None
    enabled: bool = True
    registrations: int = 0


class EventCreated(EventRead):
    """Response for a newly created event, with its public form link."""

    registration_url: str = Field(..., alias="registrationUrl")


class RegistrationTable(BaseModel):
    """Registrations of an event as shown on the company dashboard."""

    headers: List[str]
    registrations: List[Dict[str, str]]


class EventList(BaseModel):
    events: List[EventRead]


class EventCreateResult(BaseModel):
    success: bool = True
    event: EventCreated


class EventUpdateResult(BaseModel):
    success: bool = True
    event: EventRead
