"""
Application package initializer.

The project is organised into logical layers: ``core`` (configuration,
logging, authentication, authorization and storage), ``schemas``
(request and response models), ``services`` (business logic) and
``api`` (versioned HTTP routers).
"""

from .main import app  # noqa: F401
