"""Domain-specific exceptions with user-ready messages for the part tracker."""


class BusinessLogicException(Exception):
    """Base exception class for business logic errors.

    All business logic exceptions include user-ready messages that can be
    displayed directly in the UI without client-side message construction.
    """

    def __init__(self, message: str, error_code: str) -> None:
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class InvalidInputException(BusinessLogicException):
    """Exception raised when a numeric or enumerated input is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="INVALID_INPUT")


class MissingRequiredFieldException(BusinessLogicException):
    """Exception raised when a required field is absent or empty."""

    def __init__(self, fields: list[str], message: str | None = None) -> None:
        self.fields = fields
        if message is None:
            message = f"Missing required field(s): {', '.join(fields)}"
        super().__init__(message, error_code="MISSING_REQUIRED_FIELD")


class RecordNotFoundException(BusinessLogicException):
    """Exception raised when a requested record is not found."""

    def __init__(self, resource_type: str, identifier: str | int) -> None:
        message = f"{resource_type} with ID '{identifier}' not found"
        super().__init__(message, error_code="RECORD_NOT_FOUND")


class ResourceConflictException(BusinessLogicException):
    """Exception raised when attempting to create a resource that already exists."""

    def __init__(self, resource_type: str, identifier: str | int) -> None:
        message = f"A {resource_type.lower()} with ID '{identifier}' already exists. Please use a unique ID."
        super().__init__(message, error_code="RESOURCE_CONFLICT")


class InsufficientQuantityException(BusinessLogicException):
    """Exception raised when a check-out asks for more than is on hand."""

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        message = f"Cannot check out more parts than available (requested {requested}, have {available})"
        super().__init__(message, error_code="INSUFFICIENT_QUANTITY")


class NoOpRejectedException(BusinessLogicException):
    """Exception raised when a status update would not change the status."""

    def __init__(self, message: str = "Please select a new status to update.") -> None:
        super().__init__(message, error_code="NO_OP_REJECTED")


class InvalidOperationException(BusinessLogicException):
    """Exception raised when an operation cannot be performed due to business rules."""

    def __init__(self, operation: str, cause: str) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Cannot {operation} because {cause}"
        super().__init__(message, error_code="INVALID_OPERATION")


class ConcurrentModificationException(BusinessLogicException):
    """Exception raised when a part changed underneath a write."""

    def __init__(self, part_id: str, detail: str = "it was modified by another request") -> None:
        self.part_id = part_id
        message = f"Part '{part_id}' could not be updated because {detail}"
        super().__init__(message, error_code="CONCURRENT_MODIFICATION")


class StoreUnavailableException(BusinessLogicException):
    """Exception raised when the part record store cannot be reached."""

    def __init__(self, cause: str) -> None:
        message = f"Part store is unavailable: {cause}"
        super().__init__(message, error_code="STORE_UNAVAILABLE")
