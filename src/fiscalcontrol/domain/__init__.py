"""Domain layer for fiscalcontrol application.

Services live in their own modules (lifecycle, reminders, summary) and are
imported from there, so the store layer can import entities without pulling
the services in.
"""

from fiscalcontrol.domain.entities import (
    Action,
    Actor,
    PaymentInput,
    PaymentRecord,
    PaymentStatus,
    PaymentType,
    Role,
)
from fiscalcontrol.domain.errors import (
    DomainError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)

__all__ = [
    "Action",
    "Actor",
    "PaymentInput",
    "PaymentRecord",
    "PaymentStatus",
    "PaymentType",
    "Role",
    "DomainError",
    "ForbiddenError",
    "InvalidStateError",
    "NotFoundError",
    "StoreUnavailableError",
    "ValidationError",
]
