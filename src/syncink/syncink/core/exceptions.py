class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an entry, request or user id is unknown."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class DuplicateEntryError(ValidationError):
    """A work entry already exists for this user and date."""


class InvalidTargetError(ValidationError):
    """A retroactive request targets an entry that is not Auto-Absent."""


class EmptyReasonError(ValidationError):
    """A retroactive request was submitted without a reason."""


class DuplicatePendingRequestError(ValidationError):
    """The entry already has a pending retroactive request."""


class AlreadyReviewedError(ValidationError):
    """The retroactive request has already been approved or rejected."""
