"""
Login and session endpoints for API v1.

There are two kinds of sessions: the single administrator, whose
credentials come from the environment, and companies, whose
credentials are stored in the ``companies`` sheet.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from registration_api.app.core.security import (
    ADMIN,
    COMPANY,
    check_admin_credentials,
    create_access_token,
    get_current_user,
)
from registration_api.app.schemas.auth import LoginRequest, SessionUser, Token
from registration_api.app.services.company_service import CompanyService


router = APIRouter()


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest) -> Token:
    """Authenticate an admin or a company and return a bearer token.

    A disabled company gets 403 with an explanatory message; any other
    failure is 401.
    """
    if credentials.type == ADMIN:
        if not check_admin_credentials(credentials.username, credentials.password):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        token = create_access_token({"sub": credentials.username, "type": ADMIN, "id": "admin", "name": "Admin"})
        return Token(access_token=token)

    try:
        company = await CompanyService.authenticate(credentials.username, credentials.password)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if company is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token(
        {
            "sub": company.username,
            "type": COMPANY,
            "id": company.id,
            "name": company.name,
            "image": company.image,
        }
    )
    return Token(access_token=token)


@router.get("/session", response_model=SessionUser)
async def read_session(current_user: Dict[str, Any] = Depends(get_current_user)) -> SessionUser:
    """Return the current session as used by the dashboards."""
    return SessionUser(
        id=current_user.get("id", ""),
        name=current_user.get("name"),
        image=current_user.get("image"),
        type=current_user.get("type", ""),
    )
