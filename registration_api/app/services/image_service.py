"""
Image hosting on a GitHub repository.

Company logos, event banners and registrant photos are committed to a
GitHub repository through the contents API and served from
``raw.githubusercontent.com``.  Upload failures are logged and reported
as ``None`` so that a broken image never blocks creating a company or
an event.
"""

import base64
import binascii
import logging
import re
from typing import Optional

import httpx

from registration_api.app.core.config import settings


logger = logging.getLogger(__name__)


def safe_file_name(file_name: str) -> str:
    """Replace characters that would break a repository path with ``_``."""
    return re.sub(r"[^A-Za-z0-9._-]", "_", file_name)


def strip_data_url(data: str) -> str:
    """Return the base64 payload of ``data``, dropping a ``data:...;base64,`` prefix."""
    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data


class ImageService:
    """Uploads images and returns their public URL."""

    @classmethod
    def is_configured(cls) -> bool:
        return bool(settings.github_token and settings.github_owner and settings.github_repo)

    @classmethod
    def public_url(cls, path: str) -> str:
        return (
            f"https://raw.githubusercontent.com/{settings.github_owner}/"
            f"{settings.github_repo}/{settings.github_branch}/{path}"
        )

    @classmethod
    async def upload_image(cls, file_name: str, data: str, folder: str) -> Optional[str]:
        """Commit ``data`` as ``<folder>/<file_name>`` and return its raw URL.

        ``data`` is base64 image content, optionally as a data URL.
        Returns ``None`` if hosting is not configured, the content is
        not valid base64 or GitHub rejects the request.
        """
        if not cls.is_configured():
            logger.warning("Image hosting is not configured; skipping upload of %s", file_name)
            return None
        content = strip_data_url(data.strip())
        try:
            base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Image %s is not valid base64; skipping upload", file_name)
            return None

        path = f"{folder}/{safe_file_name(file_name)}"
        url = (
            f"{settings.github_api_url.rstrip('/')}/repos/"
            f"{settings.github_owner}/{settings.github_repo}/contents/{path}"
        )
        headers = {
            "Authorization": f"Bearer {settings.github_token}",
            "Accept": "application/vnd.github+json",
        }
        payload = {
            "message": f"Upload {path}",
            "content": content,
            "branch": settings.github_branch,
        }
        try:
            response = httpx.put(url, headers=headers, json=payload, timeout=30)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("GitHub rejected upload of %s (%s): %s", path, exc.response.status_code, exc.response.text)
            return None
        except httpx.HTTPError as exc:
            logger.error("Failed to upload %s: %s", path, exc)
            return None
        logger.info("Uploaded image %s", path)
        return cls.public_url(path)
