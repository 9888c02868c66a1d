"""
Domain exception hierarchy.

Services raise these; the application registers a single handler that maps
each one to a stable error ``code`` and HTTP status. Storage-layer details
never reach the response body.

Usage:
    from fieldcrm.core.exceptions import NotFoundError

    raise NotFoundError(resource="Service request", resource_id=record_id)
"""

from uuid import UUID


class CRMError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "error"
    status_code = 400

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(CRMError):
    """Raised when a record does not exist within the caller's organization.

    Used for BOTH genuinely missing records AND records owned by another
    organization, so the response never confirms cross-tenant existence.
    The id is kept on the exception for logs only.
    """

    code = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: UUID | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class InvalidStatusError(CRMError):
    """Raised when a requested status is not a member of the document type's enum."""

    code = "invalid_status"
    status_code = 422

    def __init__(self, resource: str, value: str, allowed: list[str]) -> None:
        self.resource = resource
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid {resource} status '{value}'",
            details={"allowed": allowed},
        )


class InvalidStatusTransitionError(InvalidStatusError):
    """Raised in strict workflow mode when a record tries to leave a terminal status."""

    def __init__(self, resource: str, current: str, value: str) -> None:
        self.resource = resource
        self.value = value
        self.current = current
        self.allowed = []
        CRMError.__init__(
            self,
            f"{resource} in terminal status '{current}' cannot move to '{value}'",
            details={"current": current},
        )


class ReferentialIntegrityError(CRMError):
    """Raised when a referenced record is missing or belongs to another organization."""

    code = "referential_integrity"
    status_code = 422

    def __init__(self, field: str, value: UUID | str | None) -> None:
        self.field = field
        self.value = value
        super().__init__(
            f"Referenced record for '{field}' not found",
            details={"field": field},
        )


class DuplicateCodeError(CRMError):
    """Raised when every attempt to insert a document collided on its generated code."""

    code = "duplicate_code"
    status_code = 409

    def __init__(self, resource: str, document_code: str) -> None:
        self.resource = resource
        self.document_code = document_code
        super().__init__(
            f"Could not allocate a unique {resource} number",
            details={"last_code": document_code},
        )


class RecordInUseError(CRMError):
    """Raised when deleting a record that numbered documents still reference."""

    code = "record_in_use"
    status_code = 409

    def __init__(self, resource: str, resource_id: UUID | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} is referenced by other records and cannot be deleted")


class AlreadyExistsError(CRMError):
    """Raised when a caller-chosen identifier (item code, serial number) is taken in the organization."""

    code = "already_exists"
    status_code = 409

    def __init__(self, resource: str, field: str, value: str) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(
            f"{resource} with {field} '{value}' already exists",
            details={"field": field},
        )
