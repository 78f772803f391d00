"""
Business logic for events.

Every event is a table inside its company's sheet.  The table has a
fixed header row (:data:`EVENT_HEADERS`); the first row below the
header stores the event's banner image and enabled flag, and every
following row is one registration.
"""

import csv
import io
import logging
import time
from typing import Dict, List, Optional
from urllib.parse import quote

from registration_api.app.core import tables
from registration_api.app.core.config import settings
from registration_api.app.core.sheets import SheetNotFoundError, write_lock
from registration_api.app.core.tables import Table, TableNotFoundError
from registration_api.app.schemas.event import EventCreate, EventCreated, EventRead, EventUpdate, RegistrationTable
from registration_api.app.services.image_service import ImageService


logger = logging.getLogger(__name__)

EVENT_HEADERS = [
    "Name",
    "Phone",
    "Email",
    "Gender",
    "College",
    "Status",  # Student or Graduate
    "National ID",
    "Registration Date",
    "Image",
    "Enabled",
]

# Columns describing the event itself rather than a registrant.
SETTINGS_COLUMNS = {"Enabled"}


def _settings_row(table: Table) -> List[str]:
    return list(table.rows[0]) if table.rows else []


def _settings_value(table: Table, column: str) -> str:
    index = table.column(column)
    row = _settings_row(table)
    if index == -1 or index >= len(row):
        return ""
    return row[index]


def is_event_enabled(table: Table) -> bool:
    """An event is enabled unless its settings row says ``false``."""
    return _settings_value(table, "Enabled") != "false"


def _table_to_event(table: Table) -> EventRead:
    return EventRead(
        id=table.name,
        name=table.name,
        image=_settings_value(table, "Image") or None,
        enabled=is_event_enabled(table),
        registrations=max(0, len(table.rows) - 1),
    )


def registration_url(company_name: str, event_name: str) -> str:
    base = settings.public_base_url.rstrip("/")
    return f"{base}/{quote(company_name, safe='')}/{quote(event_name, safe='')}"


class EventService:
    """Service for managing a company's events and reading their registrations."""

    @classmethod
    def _company_tables(cls, company_name: str) -> List[Table]:
        try:
            return tables.list_tables(company_name)
        except SheetNotFoundError:
            raise LookupError("Company not found") from None

    @classmethod
    def find_event_table(cls, company_name: str, event_name: str) -> Table:
        """Return the table of an event; raises ``LookupError`` if missing."""
        for table in cls._company_tables(company_name):
            if table.name == event_name:
                return table
        raise LookupError("Event not found")

    @classmethod
    async def list_events(cls, company_name: str) -> List[EventRead]:
        """Return every event of a company with its registration count."""
        logger.debug("Getting events for company %s", company_name)
        return [_table_to_event(t) for t in cls._company_tables(company_name)]

    @classmethod
    async def get_event(cls, company_name: str, event_name: str) -> EventRead:
        return _table_to_event(cls.find_event_table(company_name, event_name))

    @classmethod
    async def create_event(cls, data: EventCreate) -> EventCreated:
        """Create the event table, enabled, with an optional banner.

        Raises ``ValueError`` for blank names or a duplicate event and
        ``LookupError`` if the company has no sheet.
        """
        company_name = data.company_name.strip()
        event_name = data.event_name.strip()
        if not company_name or not event_name:
            raise ValueError("Company name and event name are required")
        existing = cls._company_tables(company_name)
        if any(t.name == event_name for t in existing):
            raise ValueError("Event already exists")

        image_url = None
        if data.image:
            image_url = await ImageService.upload_image(
                f"event_{company_name}_{event_name}_{int(time.time() * 1000)}.jpg", data.image, "events"
            )

        first_row = [""] * len(EVENT_HEADERS)
        first_row[EVENT_HEADERS.index("Image")] = image_url or ""
        first_row[EVENT_HEADERS.index("Enabled")] = "true"
        try:
            tables.create_table(company_name, event_name, EVENT_HEADERS, first_row)
        except ValueError:
            raise ValueError("Event already exists") from None
        logger.info("Created event %s for company %s", event_name, company_name)
        return EventCreated(
            id=event_name,
            name=event_name,
            image=image_url,
            enabled=True,
            registrations=0,
            registration_url=registration_url(company_name, event_name),
        )

    @classmethod
    async def update_event(cls, data: EventUpdate) -> EventRead:
        """Change an event's enabled flag and/or banner image.

        Older tables without an ``Enabled`` column get one added.
        Raises ``LookupError`` if the event does not exist.
        """
        table = cls.find_event_table(data.company_name, data.event_name)
        image_url = None
        if data.image:
            image_url = await ImageService.upload_image(
                f"event_{data.company_name}_{data.event_name}_{int(time.time() * 1000)}.jpg",
                data.image,
                "events",
            )

        with write_lock:
            table = cls.find_event_table(data.company_name, data.event_name)
            header = list(table.header)
            first_row = _settings_row(table)
            header_changed = False
            if image_url and "Image" not in header:
                header.append("Image")
                header_changed = True
            if data.enabled is not None and "Enabled" not in header:
                header.append("Enabled")
                header_changed = True
            first_row.extend([""] * (len(header) - len(first_row)))

            if image_url:
                first_row[header.index("Image")] = image_url
            if data.enabled is not None:
                first_row[header.index("Enabled")] = "true" if data.enabled else "false"

            if header_changed:
                tables.update_table_data(data.company_name, data.event_name, 0, header)
            tables.update_table_data(data.company_name, data.event_name, 1, first_row)
            updated = cls.find_event_table(data.company_name, data.event_name)
        logger.info("Updated event %s for company %s", data.event_name, data.company_name)
        return _table_to_event(updated)

    @classmethod
    async def delete_event(cls, company_name: str, event_name: str) -> None:
        """Delete an event and all of its registrations."""
        try:
            tables.delete_table(company_name, event_name)
        except (SheetNotFoundError, TableNotFoundError):
            raise LookupError("Event not found") from None
        logger.info("Deleted event %s for company %s", event_name, company_name)

    @classmethod
    async def list_registrations(cls, company_name: str, event_name: str) -> RegistrationTable:
        """Return the registrant columns and one mapping per registration."""
        table = cls.find_event_table(company_name, event_name)
        columns = [(i, h) for i, h in enumerate(table.header) if h and h not in SETTINGS_COLUMNS]
        registrations: List[Dict[str, str]] = []
        # Skip the settings row.
        for row in table.rows[1:]:
            registrations.append({h: (row[i] if i < len(row) else "") for i, h in columns})
        return RegistrationTable(headers=[h for _, h in columns], registrations=registrations)

    @classmethod
    async def export_registrations_csv(cls, company_name: str, event_name: str) -> str:
        """Render the registrations of an event as CSV text."""
        data = await cls.list_registrations(company_name, event_name)
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(data.headers)
        for registration in data.registrations:
            writer.writerow([registration.get(h, "") for h in data.headers])
        return buffer.getvalue()

    @classmethod
    def export_file_name(cls, company_name: str, event_name: str) -> str:
        return f"{company_name}_{event_name}_registrations.csv"

    @classmethod
    async def get_public_event(cls, company_name: str, event_name: str) -> Optional[EventRead]:
        """Return an event for the public form, or ``None`` if it does not exist."""
        try:
            return await cls.get_event(company_name, event_name)
        except LookupError:
            return None
