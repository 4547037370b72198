"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error.

    Raised before any write reaches the store.
    """

    pass


class NotAuthorizedError(DomainError):
    """Raised when a user attempts an action reserved for another role."""

    def __init__(self, action: str, user_id: str):
        self.action = action
        self.user_id = user_id
        super().__init__(f"User {user_id} is not authorized to {action}")


class AuthenticationRequiredError(DomainError):
    """Raised when an action needs a signed-in user.

    Carries the path of the authentication entry point the caller should
    be sent to.
    """

    def __init__(self, action: str, redirect_to: str = "/login"):
        self.action = action
        self.redirect_to = redirect_to
        super().__init__(f"Authentication required to {action}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class PersistenceError(DomainError):
    """Raised when the store rejects or fails a read or write."""

    pass
