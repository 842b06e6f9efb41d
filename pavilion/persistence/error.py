"""Persistence layer errors."""


class PersistenceError(Exception):
    """Base persistence error."""

    pass


class TransientStoreError(PersistenceError):
    """A store failure that is expected to clear on retry.

    Raised by repositories (and test doubles) to signal a temporary
    unavailability that the store gateway should retry.
    """

    pass


class DuplicateCodeError(PersistenceError):
    """An invite with the same code already exists."""

    pass
