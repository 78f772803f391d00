"""
Application package initializer.

The project is organised by concern: ``core`` holds configuration,
logging, security and the spreadsheet store, ``services`` hold the
business rules for companies, events and registrations, and
``api/v1/endpoints`` expose them over HTTP.  Versioning is handled by
grouping routers under the ``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
