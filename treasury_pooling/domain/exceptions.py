"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class SnapshotNotFoundError(DomainException):
    """No saved snapshot exists under the requested name"""

    pass


class InvalidSnapshotError(DomainException):
    """Stored snapshot payload cannot be read back as an entries list"""

    pass
