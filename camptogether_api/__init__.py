"""
Top-level package for the CampTogether API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``camptogether_api.app.main:app``.
"""

__all__ = []
