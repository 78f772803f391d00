"""
Security helpers for password hashing and session tokens.

Sessions are JSON Web Tokens signed with HMAC‑SHA256 and sent as
``Authorization: Bearer <token>``.  A token carries the session type
(``admin`` or ``company``), the company ID and name, and an ``exp``
timestamp.  Company passwords are hashed with PBKDF2‑HMAC‑SHA256 and
stored as ``salthex$hashhex`` in the ``companies`` sheet.  Rows
written by older deployments hold bcrypt hashes (``$2a$...``);
those are still accepted at login.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Dict, Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


ADMIN = "admin"
COMPANY = "company"

PBKDF2_ITERATIONS = 100_000
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT with the given claims.

    Parameters
    ----------
    data : dict
        Claims to embed, e.g. ``{"sub": "acme", "type": "company"}``.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        ``header.payload.signature``, each part base64url encoded.
    """
    to_encode = dict(data)
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a token's signature and expiry and return its claims.

    Returns ``None`` for malformed, tampered or expired tokens.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, settings.secret_key)
        if not hmac.compare_digest(expected_sig, _b64_url_decode(signature_b64)):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


def hash_password(password: str) -> str:
    """Hash a password with a random 16‑byte salt.

    Returns the salt and the derived key in hex, joined by ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored hash.

    Accepts ``salthex$hashhex`` PBKDF2 hashes and bcrypt hashes.
    """
    if isinstance(hashed_password, str) and hashed_password.startswith(BCRYPT_PREFIXES):
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            return False
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


def check_admin_credentials(username: str, password: str) -> bool:
    """Compare against ``ADMIN_USERNAME``/``ADMIN_PASSWORD`` in constant time."""
    if not settings.admin_username or not settings.admin_password:
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.admin_username.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))
    return user_ok and pass_ok


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict[str, Any]:
    """Dependency returning the claims of the current session.

    Company sessions are re‑checked against the ``companies`` sheet on
    every request: a company that was deleted or disabled after login
    loses access immediately, and a renamed company sees its new name.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") == ADMIN:
        return payload
    if payload.get("type") != COMPANY:
        raise _unauthorized("Invalid or expired token")

    from registration_api.app.services.company_service import CompanyService

    company = await CompanyService.get_company(payload.get("id", ""))
    if company is None:
        raise _unauthorized("Company no longer exists")
    if not company.enabled:
        raise _unauthorized("Company account disabled")
    payload["name"] = company.name
    payload["image"] = company.image
    return payload


def require_types(*session_types: str) -> Callable[..., Any]:
    """Dependency factory restricting a route to the given session types.

    Use ``Depends(require_types(ADMIN))`` for admin‑only routes.
    """

    async def _type_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user.get("type") not in session_types:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        return current_user

    return _type_dependency


def ensure_company_access(current_user: Dict[str, Any], company_name: str, action: str = "access") -> None:
    """Raise 403 unless the session is the admin or the company itself."""
    if current_user.get("type") == ADMIN:
        return
    if current_user.get("name") != company_name:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Unauthorized to {action} this company's events",
        )
