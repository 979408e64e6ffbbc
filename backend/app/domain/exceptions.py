"""Domain-specific exceptions — framework-independent."""


class ValidationError(Exception):
    """Raised when a background payload is malformed or incomplete."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class UploadError(Exception):
    """Raised when the asset store fails to accept a binary.

    Provider-agnostic — raised by the Cloudinary and local adapters alike.
    """

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        prefix = f"[{provider}] {status_code}" if status_code is not None else f"[{provider}]"
        super().__init__(f"{prefix}: {message}")


class StorageError(Exception):
    """Raised when the record store fails to read or write."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Record store {operation} failed: {message}")
