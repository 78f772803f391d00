"""
Pydantic models for company tenants.

Companies are created and edited by the administrator.  The password
is accepted on create/update but never returned.  ``image`` on input
is base64 image data (optionally a ``data:`` URL); on output it is the
hosted image URL.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CompanyBase(BaseModel):
    name: str = Field(..., examples=["Acme Events"])
    username: str = Field(..., examples=["acme"])


class CompanyCreate(CompanyBase):
    """Schema for creating a company."""

    password: str = Field(..., examples=["strongpassword"])
    image: Optional[str] = Field(None, description="Base64 encoded logo")


class CompanyUpdate(BaseModel):
    """Schema for updating a company.

    Only fields that are provided (and non‑empty) are changed.
    """

    id: str = Field(..., examples=["company_1717171717171"])
    name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    image: Optional[str] = None
    enabled: Optional[bool] = None


class CompanyRead(CompanyBase):
    """Schema for reading a company from the API."""

    id: str
    image: Optional[str] = None
    enabled: bool = True


class CompanyRecord(CompanyRead):
    """A company row including the stored password hash."""

    password_hash: str = ""
    row_index: int = Field(0, description="0-based row in the companies sheet")

    def public(self) -> CompanyRead:
        return CompanyRead(
            id=self.id,
            name=self.name,
            username=self.username,
            image=self.image,
            enabled=self.enabled,
        )
