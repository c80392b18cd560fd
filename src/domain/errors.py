"""Domain exceptions raised by services and translated at the route boundary."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for HR admin domain errors."""

    pass


class NotFoundError(DomainError):
    """Raised when an operation targets a nonexistent record."""

    pass


class ConflictError(DomainError):
    """Raised when a uniqueness constraint would be violated."""

    pass


class PermissionDeniedError(DomainError):
    """Raised when the acting role is not allowed to perform an operation."""

    pass


class RoleAssignmentError(PermissionDeniedError):
    """Raised when the acting role may not grant the requested role."""

    pass


class InvalidCredentialsError(DomainError):
    """Raised for every kind of login failure, without saying which."""

    pass


class ImportFileError(DomainError):
    """Raised when an uploaded spreadsheet cannot be processed at all."""

    pass
