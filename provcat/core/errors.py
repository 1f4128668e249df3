"""Error types raised while ingesting the provider catalog."""


class CatalogError(Exception):
    """Base exception for all catalog ingestion errors."""

    def __str__(self) -> str:
        return self.args[0] if self.args else "Catalog ingestion failed"


class CatalogTransportError(CatalogError):
    """Raised when the catalog cannot be requested (connection or HTTP status)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CatalogReadError(CatalogError):
    """Raised when the response body cannot be fully read."""


class CatalogDecodeError(CatalogError):
    """Raised when the payload is not valid JSON or does not match the schema."""


__all__ = [
    "CatalogError",
    "CatalogTransportError",
    "CatalogReadError",
    "CatalogDecodeError",
]
