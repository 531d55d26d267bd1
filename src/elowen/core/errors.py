"""
Elowen - Error taxonomy.

- CollaboratorFailure: the AI service failed or answered with a malformed
  payload. Recoverable; the user retries the same action.
- InvariantViolation: a programming error (duplicate analysis id, routine
  committed without an assessment). Never caught by the session.
- NotFoundWarning: a stale id reached the store. Logged, never raised.
"""


class ElowenError(Exception):
    """Base class for Elowen errors."""


class CollaboratorFailure(ElowenError):
    """The AI collaborator call failed or returned an unusable response."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class InvariantViolation(ElowenError):
    """A store invariant would be broken by this update."""


class NotFoundWarning(UserWarning):
    """A referenced routine step no longer exists."""
