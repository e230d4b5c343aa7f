"""Domain layer errors.

Each error maps onto one HTTP status at the API boundary.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Input or business-rule validation failed."""

    pass


class NotAuthenticatedError(DomainError):
    """Raised when a request carries no valid identity."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ForbiddenError(DomainError):
    """Raised when an authenticated user may not act on a resource."""

    def __init__(self, message: str):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str, message: str | None = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(message or f"{resource} not found")


class ConflictError(DomainError):
    """Raised when a write cannot be completed because of conflicting state."""

    pass
