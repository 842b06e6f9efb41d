"""Domain layer errors.

The taxonomy is deliberately fine-grained: callers can render precise
guidance, while the HTTP layer decides how much of it to reveal.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Malformed input or a violated input constraint."""

    pass


class UnauthenticatedError(DomainError):
    """No credential, or a credential that failed verification."""

    pass


class UnauthorizedError(DomainError):
    """Valid credential, but insufficient ownership or capability."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            f"User {user_id} is not authorized to manage {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InviteValidationError(DomainError):
    """Base for the ordered invite validation failures."""

    pass


class InviteNotFoundError(InviteValidationError, NotFoundError):
    """No invite matches the supplied code or email."""

    def __init__(self, identifier: str):
        NotFoundError.__init__(self, "Invite", identifier)


class InviteNotActiveError(InviteValidationError):
    """The invite's stored status is not active."""

    pass


class InviteExpiredError(InviteValidationError):
    """The invite's expires_at has passed."""

    pass


class InviteUsageExceededError(InviteValidationError):
    """The invite has no remaining redemptions."""

    pass


class InviteAlreadyRevokedError(DomainError):
    """Revoke was requested for an invite that is already revoked."""

    pass


class ServiceUnavailableError(DomainError):
    """The backing store stayed unavailable after every retry.

    This is an infrastructure failure and must never be reported as a
    client error.
    """

    def __init__(self, operation: str, attempts: int):
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"Store unavailable for {operation} after {attempts} attempts"
        )
