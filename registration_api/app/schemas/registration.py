"""
Pydantic models for public event registration.

Fields are optional at the schema level so that a missing field gets
the same "All fields are required" answer as a blank one; the
registration service performs the validation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegistrationCreate(BaseModel):
    """Payload sent by the public registration form."""

    model_config = ConfigDict(populate_by_name=True)

    company_name: Optional[str] = Field(None, alias="companyName", examples=["Acme Events"])
    event_name: Optional[str] = Field(None, alias="eventName", examples=["Spring Hackathon"])
    name: Optional[str] = Field(None, examples=["Jane Doe"])
    phone: Optional[str] = Field(None, examples=["01012345678"])
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    gender: Optional[str] = Field(None, examples=["Female"])
    college: Optional[str] = Field(None, examples=["Engineering"])
    status: Optional[str] = Field(None, examples=["Student"])
    national_id: Optional[str] = Field(None, alias="nationalId", examples=["29801011234567"])
    image: Optional[str] = Field(None, description="Optional base64 encoded photo")


class RegistrationRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    registration_date: str = Field(..., alias="registrationDate")


class RegistrationResult(BaseModel):
    success: bool = True
    message: str = "Registration successful"
    registration: RegistrationRead


class PublicEvent(BaseModel):
    """What the public registration page needs to render its form."""

    company: str
    name: str
    image: Optional[str] = None
    enabled: bool = True
