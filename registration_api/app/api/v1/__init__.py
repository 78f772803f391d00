"""
Version 1 of the API.

Bundles the company, event, registration and auth endpoints consumed
by the admin and company dashboards and the public registration form.
"""
