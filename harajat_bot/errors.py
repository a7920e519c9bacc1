"""Exceptions shared by the storage layer and the dialogue controller."""


class ValidationError(ValueError):
    """User input that cannot be accepted; the user is asked again."""


class StorageError(Exception):
    """A backend call failed (unreachable, constraint violation, ...)."""


class NotFoundError(Exception):
    """The record targeted by an operation does not exist for this owner."""


__all__ = ["ValidationError", "StorageError", "NotFoundError"]
