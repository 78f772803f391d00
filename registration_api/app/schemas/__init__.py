"""
Pydantic schema definitions for API payloads.

Each domain (companies, events, registrations, auth) defines its own
Pydantic models for request and response bodies.  Schemas are separate
from the sheet row layout so that the API representation does not
depend on column order.
"""
