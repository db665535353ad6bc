"""Exceptions shared by the persistence and account layers."""


class MusicStreamError(Exception):
    """Base exception for musicstream operations."""

    pass


class ValidationError(MusicStreamError):
    """Raised when user input is rejected."""

    pass


class ConflictError(MusicStreamError):
    """Raised when a unique value (email, username) is already taken."""

    pass


class AuthenticationError(MusicStreamError):
    """Raised when credentials or a session are missing or wrong."""

    pass


class PermissionDeniedError(MusicStreamError):
    """Raised when acting on a resource owned by someone else."""

    pass


class NotFoundError(MusicStreamError):
    """Raised when a row does not exist."""

    pass
