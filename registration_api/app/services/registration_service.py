"""
Public event registration.

Anyone with an event's link can register.  A registration is refused
when the company or the event is disabled, or when the same email or
phone number is already registered for the event.  The duplicate check
and the row insert run back to back, with no ``await`` between them and
under the spreadsheet write lock, so two submissions cannot both pass
the check.
"""

import logging
import re
import time
from datetime import datetime, timezone
from typing import List
from urllib.parse import unquote

from registration_api.app.core import tables
from registration_api.app.core.sheets import write_lock
from registration_api.app.core.tables import Table
from registration_api.app.schemas.registration import RegistrationCreate, RegistrationRead, RegistrationResult
from registration_api.app.services.company_service import CompanyService
from registration_api.app.services.event_service import EVENT_HEADERS, EventService, is_event_enabled
from registration_api.app.services.image_service import ImageService


logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9]{10,15}$")

REQUIRED_FIELDS = (
    "company_name",
    "event_name",
    "name",
    "phone",
    "email",
    "gender",
    "college",
    "status",
    "national_id",
)


def utc_timestamp() -> str:
    """Current time as ISO‑8601 UTC with milliseconds, e.g. ``2025-01-31T09:30:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _column_value(table: Table, row: List[str], column: str) -> str:
    index = table.column(column)
    if index == -1 or index >= len(row):
        return ""
    return row[index]


class RegistrationService:
    """Service validating and storing public registrations."""

    @classmethod
    def validate(cls, data: RegistrationCreate) -> RegistrationCreate:
        """Return a copy of ``data`` with whitespace stripped.

        The public form forwards the company name from its URL, so a
        percent-encoded name is decoded.  Raises ``ValueError`` for blank
        fields, a malformed email or a phone number that is not 10 to 15
        digits.
        """
        values = {}
        missing = []
        for field in REQUIRED_FIELDS:
            value = (getattr(data, field) or "").strip()
            if field == "company_name":
                value = unquote(value).strip()
            if not value:
                missing.append(field)
            values[field] = value
        if missing:
            logger.info("Registration rejected, missing fields: %s", ", ".join(missing))
            raise ValueError("All fields are required")
        if not EMAIL_RE.match(values["email"]):
            raise ValueError("Invalid email format")
        if not PHONE_RE.match(values["phone"]):
            raise ValueError("Invalid phone number format")
        return data.model_copy(update=values)

    @classmethod
    def is_registered(cls, table: Table, email: str, phone: str) -> bool:
        # Skip the settings row.
        for row in table.rows[1:]:
            if _column_value(table, row, "Email") == email or _column_value(table, row, "Phone") == phone:
                return True
        return False

    @classmethod
    async def register(cls, data: RegistrationCreate) -> RegistrationResult:
        """Register a person for an event.

        Raises ``ValueError`` for invalid input or a duplicate,
        ``LookupError`` if the company or event does not exist and
        ``PermissionError`` if either is disabled.
        """
        data = cls.validate(data)
        logger.info("Registration request for %s / %s from %s", data.company_name, data.event_name, data.email)

        company = await CompanyService.get_company_by_name(data.company_name)
        if company is None:
            raise LookupError("Company not found")
        if not company.enabled:
            raise PermissionError("Registration is unavailable for this company")

        table = EventService.find_event_table(data.company_name, data.event_name)
        if not is_event_enabled(table):
            raise PermissionError("Registration has ended for this event")
        if cls.is_registered(table, data.email, data.phone):
            raise ValueError("You are already registered for this event")

        image_url = ""
        if data.image:
            image_url = await ImageService.upload_image(
                f"registration_{data.event_name}_{data.phone}_{int(time.time() * 1000)}.jpg",
                data.image,
                "registrations",
            ) or ""

        registration_date = utc_timestamp()
        values = {
            "Name": data.name,
            "Phone": data.phone,
            "Email": data.email,
            "Gender": data.gender,
            "College": data.college,
            "Status": data.status,
            "National ID": data.national_id,
            "Registration Date": registration_date,
            "Image": image_url,
        }
        with write_lock:
            # Re-read under the lock; the event may have changed meanwhile.
            table = EventService.find_event_table(data.company_name, data.event_name)
            if not is_event_enabled(table):
                raise PermissionError("Registration has ended for this event")
            if cls.is_registered(table, data.email, data.phone):
                raise ValueError("You are already registered for this event")
            header = table.header or EVENT_HEADERS
            row = [values.get(column, "") for column in header]
            tables.add_to_table(data.company_name, data.event_name, row)

        logger.info("Registered %s for %s / %s", data.email, data.company_name, data.event_name)
        return RegistrationResult(
            registration=RegistrationRead(name=data.name, email=data.email, registration_date=registration_date),
        )
