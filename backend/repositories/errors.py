"""Errors raised by repositories when a write cannot be applied."""


class RepositoryError(Exception):
    """Base class for expected repository outcomes other than success."""


class ConflictError(RepositoryError):
    """A row with the same primary key already exists."""


class NotFoundError(RepositoryError):
    """No row matched the write."""
