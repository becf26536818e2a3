"""Catalog exceptions for error handling."""

from typing import Optional


class CatalogError(Exception):
    """Base exception for catalog operations."""

    pass


class DuplicateError(CatalogError):
    """Raised when a song with the same path is already stored."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Song already in catalog: {path}")


class DuplicateNameError(CatalogError):
    """Raised when a genre with the same name already exists."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Genre '{name}' already exists")


class NotFoundError(CatalogError):
    """Raised when the target record does not exist (e.g. double delete)."""

    def __init__(self, kind: str, record_id: int, message: Optional[str] = None):
        self.kind = kind
        self.record_id = record_id
        super().__init__(message or f"{kind.capitalize()} #{record_id} not found")


class InvalidNameError(CatalogError):
    """Raised when a title or genre name is empty or whitespace-only."""

    pass
