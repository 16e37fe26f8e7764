"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
CONFLICT = "CONFLICT"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: int | None = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            message = f"{entity} not found"
        else:
            message = f"{entity} with id {entity_id} not found"
        super().__init__(message)


class ConflictError(DomainError):
    """Raised when a request violates a business invariant (ownership, availability, lifecycle state)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class DuplicateResourceError(ConflictError):
    """Raised when attempting to create a resource that would violate a uniqueness constraint."""

    pass


class DomainValidationError(DomainError):
    """Raised when input fails domain validation before any storage access (e.g. rating out of bounds)."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)
