"""
Domain Error Taxonomy

Every rule violation in the services is raised as one of these errors before
anything is written. The API layer turns them into the response envelope with
the message passed through verbatim and the class's HTTP status code.
"""


class DomainError(Exception):
    """Base class for expected, caller-visible failures."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.message!r}>"


class ValidationError(DomainError):
    """Missing or malformed input."""
    status_code = 400


class NotFoundError(DomainError):
    """Referenced entity does not exist (or must look as if it does not)."""
    status_code = 404


class AuthorizationError(DomainError):
    """Caller does not own the entity it is acting on."""
    status_code = 403


class ConflictError(DomainError):
    """Entity would violate a uniqueness rule, e.g. a second restaurant per owner."""
    status_code = 409


class PreconditionError(DomainError):
    """Entities exist but are in the wrong state for the operation."""
    status_code = 400
