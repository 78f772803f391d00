"""
Top‑level package for the Event Registration API.

This file makes ``registration_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``registration_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
