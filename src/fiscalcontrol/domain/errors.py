"""Shared domain error messages and error types."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fiscalcontrol.domain.entities import PaymentRecord


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested payment record does not exist."""


class ForbiddenError(DomainError):
    """Actor role is not allowed to perform the requested action."""


class InvalidStateError(DomainError):
    """Transition attempted on a record that can no longer change."""


class StoreUnavailableError(DomainError):
    """The record store could not be reached or its write lock was busy.

    When raised from a registration, ``record`` holds the locally built
    record so the caller can keep it and warn that it was not persisted.
    """

    def __init__(self, message: str, record: Optional["PaymentRecord"] = None):
        super().__init__(message)
        self.record = record


def record_not_found(record_id: str) -> str:
    """Return message for missing payment record."""
    return f"Payment record '{record_id}' not found"


def already_terminal(record_id: str, status: str) -> str:
    """Return message for a transition on a closed record."""
    return f"Payment record '{record_id}' is already {status} and cannot change"


def action_forbidden(role: str, action: str) -> str:
    """Return message when a role lacks a capability."""
    return f"Role '{role}' is not allowed to {action.lower()} payments"


def store_lock_timeout(timeout: float) -> str:
    """Return message when the store write lock could not be acquired."""
    return f"Record store is busy: write lock not acquired within {timeout:g}s"


def store_failure(detail: str) -> str:
    """Return message for a store transport failure."""
    return f"Record store unavailable: {detail}"
