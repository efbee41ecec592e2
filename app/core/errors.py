"""Domain error taxonomy. Each error carries the HTTP status it renders as."""


class BoardError(Exception):
    """Base class for errors raised by board, archive and analytics services."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputValidationError(BoardError):
    """Malformed, missing or out-of-range input."""

    status_code = 400


class AuthenticationError(BoardError):
    """Missing or invalid credentials."""

    status_code = 401


class AuthorizationError(BoardError):
    """Authenticated caller lacks the capability for this operation."""

    status_code = 403


class NotFoundError(BoardError):
    status_code = 404


class ConflictError(BoardError):
    """Resource already exists (e.g. duplicate username)."""

    status_code = 409


class InternalError(BoardError):
    """Persistence or unexpected failure. Message is safe to show to callers."""

    status_code = 500


class ArchiveTransitionError(InternalError):
    """Archive insert and live-story removal could not be committed together."""
