"""
Application package initializer.

The package is organised into ``core`` (configuration, logging,
database, errors, localization, pagination), ``schemas`` (pydantic
models), ``services`` (list business logic and persistence) and
``api`` (versioned FastAPI routers).
"""

from .main import app  # noqa: F401
