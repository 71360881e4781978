"""Domain errors raised by the catalog services.

Routers translate these into ``HTTPException`` responses; the services never
import FastAPI.
"""

from typing import Optional


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Request input is missing or malformed (400)."""

    status_code = 400

    def __init__(self, message: str, *, fields: Optional[list[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


class NotFoundError(CatalogError):
    """No entity exists for the requested id (404)."""

    status_code = 404


class DependencyError(CatalogError):
    """The datastore or the file storage failed (500).

    ``message`` is safe to return to clients; the cause is only logged.
    """

    status_code = 500


__all__ = ["CatalogError", "DependencyError", "NotFoundError", "ValidationError"]
