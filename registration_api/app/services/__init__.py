"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to the
spreadsheet store through ``core.tables``.  API handlers never touch
sheet rows directly.
"""
