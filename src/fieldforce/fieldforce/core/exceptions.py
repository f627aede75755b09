class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable ``code`` so callers can tell failures apart
    without parsing messages.
    """

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation"


class UnauthorizedError(DomainError):
    """Raised when the actor's role cannot perform this action at all."""

    code = "unauthorized"


class ForbiddenError(DomainError):
    """Raised when the role may act, but not on this particular target."""

    code = "forbidden"


class InvalidTargetError(DomainError):
    """Raised when a referenced employee has the wrong role for a relationship."""

    code = "invalid_target"


class OrphanSupervisorError(DomainError):
    """Raised when assigning under a BDM that has no manager of its own."""

    code = "orphan_supervisor"


class NotFoundError(DomainError):
    code = "not_found"


class ProductNotFoundError(NotFoundError):
    code = "product_not_found"


class NotPendingError(DomainError):
    code = "not_pending"


class NotRejectedError(DomainError):
    code = "not_rejected"


class NotOwnerError(DomainError):
    code = "not_owner"


class AlreadyResubmittedError(DomainError):
    """Raised when a rejected report already has its one replacement."""

    code = "already_resubmitted"
