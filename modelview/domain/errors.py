"""
Domain-specific errors for the model-to-REST adapter.

All errors raised from the domain and application layers are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class ModelViewError(Exception):
    """Base error for all model view errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(ModelViewError):
    """Raised when a request body or identifier cannot be decoded."""


class KeyConversionError(ValidationError):
    """Raised when a wire identifier has no lossless native key."""

    def __init__(self, identifier: int, reason: str) -> None:
        super().__init__(f"cannot convert {identifier} into primary key: {reason}")
        self.identifier = identifier
        self.reason = reason


class PrimaryKeyNotFoundError(ModelViewError):
    """Raised when no row matches the requested primary key."""

    def __init__(self, pk: int) -> None:
        super().__init__(f"instance not found with primary key: {pk}")
        self.pk = pk


class StorageError(ModelViewError):
    """Raised when the storage layer fails. Wraps the underlying cause."""

    def __init__(self, source: BaseException) -> None:
        super().__init__(f"query database failed: {source}")
        self.source = source


class InternalError(ModelViewError):
    """Catch-all for failures that fit no other category."""

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message)


class RegistrationError(ModelViewError):
    """Raised at startup when a model cannot be adapted."""
