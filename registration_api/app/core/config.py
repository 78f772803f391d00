"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so that
the API starts with an in‑memory spreadsheet and without image
hosting; point ``GOOGLE_SHEET_ID`` and the ``GITHUB_*`` variables at
real resources for a deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Event Registration API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # The single administrator account.  It is not stored in the
    # spreadsheet; an empty username disables admin login entirely.
    admin_username: str = os.getenv("ADMIN_USERNAME", "")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "")

    # Google spreadsheet holding the ``companies`` sheet and one sheet
    # per company.  When ``google_sheet_id`` is empty the in‑memory
    # backend is used instead.
    google_sheet_id: str = os.getenv("GOOGLE_SHEET_ID", "")
    google_credentials_file: str = os.getenv("GOOGLE_CREDENTIALS_FILE", "google_creds.json")

    # GitHub repository used as image hosting.  Uploads are skipped when
    # the token, owner or repository is missing.
    github_token: str = os.getenv("GITHUB_TOKEN", "")
    github_owner: str = os.getenv("GITHUB_OWNER", "")
    github_repo: str = os.getenv("GITHUB_REPO", "")
    github_branch: str = os.getenv("GITHUB_BRANCH", "main")
    github_api_url: str = os.getenv("GITHUB_API_URL", "https://api.github.com")

    # Base URL of the public site, used to build registration links.
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:3000")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
