"""Error taxonomy shared by services, routes and the CLI.

Every error is local and recoverable by the caller; nothing here is retried
automatically. ``status_code`` is the HTTP status the API answers with.
"""


class WortschatzError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(WortschatzError):
    """A required external dependency (oracle credential, admin password) is missing."""

    status_code = 400


class ValidationError(WortschatzError):
    """Caller input is malformed or insufficient."""

    status_code = 400


class AuthenticationError(WortschatzError):
    """Request lacks a valid session."""

    status_code = 401


class NotFoundError(WortschatzError):
    """Referenced entry does not exist."""

    status_code = 404


class DuplicateTermError(WortschatzError):
    """Another entry already uses this term."""

    status_code = 409


class UpstreamError(WortschatzError):
    """The oracle was reachable but failed or returned unusable output."""

    status_code = 502
