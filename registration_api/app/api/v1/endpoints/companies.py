"""
Company endpoints for API v1.

All routes are restricted to the administrator.  They back the admin
dashboard: list, create, edit, enable/disable and delete companies.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from registration_api.app.core.security import ADMIN, require_types
from registration_api.app.schemas.company import CompanyCreate, CompanyRead, CompanyUpdate
from registration_api.app.services.company_service import CompanyService


router = APIRouter()


@router.get("", response_model=Dict[str, List[CompanyRead]])
async def list_companies(current_user: dict = Depends(require_types(ADMIN))) -> Dict[str, List[CompanyRead]]:
    """List all companies.  Password hashes are never returned."""
    return {"companies": await CompanyService.list_companies()}


@router.get("/{company_id}", response_model=CompanyRead)
async def get_company(company_id: str, current_user: dict = Depends(require_types(ADMIN))) -> CompanyRead:
    company = await CompanyService.get_company(company_id)
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return company


@router.post("", response_model=Dict[str, Any])
async def create_company(
    company: CompanyCreate,
    current_user: dict = Depends(require_types(ADMIN)),
) -> Dict[str, Any]:
    """Create a company and its sheet.

    Returns 400 when a field is missing or the username or name is
    already in use.
    """
    try:
        created = await CompanyService.create_company(company)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "company": created}


@router.patch("", response_model=Dict[str, Any])
async def update_company(
    update: CompanyUpdate,
    current_user: dict = Depends(require_types(ADMIN)),
) -> Dict[str, Any]:
    """Update a company's details or toggle its ``enabled`` flag."""
    try:
        updated = await CompanyService.update_company(update)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "company": updated}


@router.delete("", response_model=Dict[str, Any])
async def delete_company(
    company_id: Optional[str] = Query(None, alias="id", description="ID of the company to delete"),
    current_user: dict = Depends(require_types(ADMIN)),
) -> Dict[str, Any]:
    """Delete a company.  Its sheet and event data are kept."""
    if not company_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Company ID is required")
    try:
        name = await CompanyService.delete_company(company_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": f"Company {name} deleted successfully"}
