"""
Business logic for company tenants.

Companies live in the ``companies`` sheet, one row per company::

    ID | Name | Username | Password | Image | Enabled

Each company also owns a sheet named after it which holds its event
tables (see ``EventService``).  Deleting a company removes its row but
keeps that sheet so registrations are not lost.
"""

import logging
import time
from typing import List, Optional

from registration_api.app.core import tables
from registration_api.app.core.security import hash_password, verify_password
from registration_api.app.core.sheets import SheetNotFoundError, write_lock
from registration_api.app.schemas.company import CompanyCreate, CompanyRead, CompanyRecord, CompanyUpdate
from registration_api.app.services.image_service import ImageService


logger = logging.getLogger(__name__)

COMPANIES_SHEET = "companies"
COMPANY_HEADERS = ["ID", "Name", "Username", "Password", "Image", "Enabled"]

ID, NAME, USERNAME, PASSWORD, IMAGE, ENABLED = range(len(COMPANY_HEADERS))


def _now_ms() -> int:
    return int(time.time() * 1000)


def _same_name(a: str, b: str) -> bool:
    # Names double as sheet titles, which ignore case.
    return a.casefold() == b.casefold()


def _cell(row: List[str], index: int) -> str:
    return row[index] if index < len(row) else ""


def _row_to_company(row: List[str], row_index: int) -> CompanyRecord:
    return CompanyRecord(
        id=_cell(row, ID),
        name=_cell(row, NAME),
        username=_cell(row, USERNAME),
        password_hash=_cell(row, PASSWORD),
        image=_cell(row, IMAGE) or None,
        # Rows written before the column existed count as enabled.
        enabled=_cell(row, ENABLED) != "false",
        row_index=row_index,
    )


def _company_to_row(company: CompanyRecord) -> List[str]:
    return [
        company.id,
        company.name,
        company.username,
        company.password_hash,
        company.image or "",
        "true" if company.enabled else "false",
    ]


class CompanyService:
    """Service for managing companies in the ``companies`` sheet."""

    @classmethod
    def _records(cls) -> List[CompanyRecord]:
        try:
            data = tables.get_sheet_data(COMPANIES_SHEET)
        except SheetNotFoundError:
            return []
        # Row 0 is the header.
        return [_row_to_company(row, i) for i, row in enumerate(data) if i > 0 and row]

    @classmethod
    async def ensure_sheet(cls) -> None:
        tables.ensure_sheet(COMPANIES_SHEET, COMPANY_HEADERS)

    @classmethod
    async def list_companies(cls) -> List[CompanyRead]:
        return [c.public() for c in cls._records()]

    @classmethod
    async def get_company(cls, company_id: str) -> Optional[CompanyRead]:
        for company in cls._records():
            if company.id == company_id:
                return company.public()
        return None

    @classmethod
    async def get_company_by_name(cls, name: str) -> Optional[CompanyRead]:
        for company in cls._records():
            if company.name == name:
                return company.public()
        return None

    @classmethod
    async def authenticate(cls, username: str, password: str) -> Optional[CompanyRead]:
        """Return the company for valid credentials, otherwise ``None``.

        Raises ``PermissionError`` when the credentials belong to a
        disabled company.
        """
        for company in cls._records():
            if company.username != username:
                continue
            if not company.enabled:
                logger.info("Login refused for disabled company %s", username)
                raise PermissionError("Company account is disabled. Please contact the administrator.")
            if verify_password(password, company.password_hash):
                return company.public()
            return None
        return None

    @classmethod
    async def create_company(cls, data: CompanyCreate) -> CompanyRead:
        """Add a company row and create the company's sheet.

        Raises ``ValueError`` if a required field is blank or the
        username or name is already taken.
        """
        name = data.name.strip()
        username = data.username.strip()
        if not name or not username or not data.password:
            raise ValueError("Name, username, and password are required")
        if _same_name(name, COMPANIES_SHEET):
            raise ValueError("Company name is reserved")

        await cls.ensure_sheet()
        company_id = f"company_{_now_ms()}"
        image_url = None
        if data.image:
            image_url = await ImageService.upload_image(
                f"company_{company_id}_{_now_ms()}.jpg", data.image, "companies"
            )

        with write_lock:
            existing = cls._records()
            if any(c.username == username for c in existing):
                raise ValueError("Username already exists")
            if any(_same_name(c.name, name) for c in existing) or tables.sheet_exists(name):
                raise ValueError("Company name already exists")
            taken_ids = {c.id for c in existing}
            stamp = _now_ms()
            while company_id in taken_ids:
                stamp += 1
                company_id = f"company_{stamp}"
            company = CompanyRecord(
                id=company_id,
                name=name,
                username=username,
                password_hash=hash_password(data.password),
                image=image_url,
                enabled=True,
            )
            # A company row always has a sheet behind it.
            tables.create_sheet(name)
            tables.append_to_sheet(COMPANIES_SHEET, [_company_to_row(company)])
        logger.info("Created company %s (%s)", name, company_id)
        return company.public()

    @classmethod
    async def update_company(cls, data: CompanyUpdate) -> CompanyRead:
        """Update the provided fields of a company in place.

        Raises ``LookupError`` for an unknown ID and ``ValueError`` if
        the new username or name belongs to another company.
        """
        image_url = None
        if data.image:
            if await cls.get_company(data.id) is None:
                raise LookupError("Company not found")
            image_url = await ImageService.upload_image(
                f"company_{data.id}_{_now_ms()}.jpg", data.image, "companies"
            )

        with write_lock:
            records = cls._records()
            company = next((c for c in records if c.id == data.id), None)
            if company is None:
                raise LookupError("Company not found")
            others = [c for c in records if c.id != data.id]
            username = (data.username or "").strip()
            name = (data.name or "").strip()
            if username and username != company.username and any(c.username == username for c in others):
                raise ValueError("Username already exists")
            if name and not _same_name(name, company.name):
                if _same_name(name, COMPANIES_SHEET):
                    raise ValueError("Company name is reserved")
                if any(_same_name(c.name, name) for c in others) or tables.sheet_exists(name):
                    raise ValueError("Company name already exists")

            old_name = company.name
            if name:
                company.name = name
            if username:
                company.username = username
            if data.password:
                company.password_hash = hash_password(data.password)
            if image_url:
                company.image = image_url
            if data.enabled is not None:
                company.enabled = data.enabled

            if company.name != old_name:
                if tables.sheet_exists(old_name):
                    tables.rename_sheet(old_name, company.name)
                else:
                    tables.create_sheet(company.name)
            tables.update_row(COMPANIES_SHEET, company.row_index, _company_to_row(company))
        logger.info("Updated company %s (%s)", company.name, company.id)
        return company.public()

    @classmethod
    async def delete_company(cls, company_id: str) -> str:
        """Delete the company row and return the company's name.

        The company's sheet is left in place.  Raises ``LookupError`` if
        the company does not exist.
        """
        with write_lock:
            company = next((c for c in cls._records() if c.id == company_id), None)
            if company is None:
                raise LookupError("Company not found")
            tables.delete_row(COMPANIES_SHEET, company.row_index)
        logger.info("Deleted company %s (%s)", company.name, company_id)
        return company.name

    @classmethod
    async def set_password(cls, username: str, password: str) -> CompanyRead:
        """Replace the password hash of the company with ``username``."""
        if not password:
            raise ValueError("Empty password is not allowed")
        with write_lock:
            company = next((c for c in cls._records() if c.username == username), None)
            if company is None:
                raise LookupError(f"No company with username {username}")
            company.password_hash = hash_password(password)
            tables.update_row(COMPANIES_SHEET, company.row_index, _company_to_row(company))
        return company.public()
