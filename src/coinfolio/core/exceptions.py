"""Application-level exceptions."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class DataSourceUnavailable(AppError):
    """Raised when the external price source fails, times out or returns garbage.

    Recoverable: callers should retry later.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message, code="DATA_SOURCE_UNAVAILABLE")


class UnknownAsset(AppError):
    """Raised when an identifier does not resolve within the ranked universe."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Asset not found: {identifier}", code="UNKNOWN_ASSET")


class InvalidPurchase(AppError):
    """Raised when a purchase has a non-positive quantity or unit price."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_PURCHASE")


class PersistenceFailure(AppError):
    """Raised when the owner store cannot be read or written."""

    def __init__(self, message: str):
        super().__init__(message, code="PERSISTENCE_FAILURE")
