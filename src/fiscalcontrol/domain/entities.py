"""Domain model entities for fiscalcontrol.

These are pure data classes representing business concepts, independent of
the storage schema. Rows written by older clients (display labels for payment
types, the two-state ``Pending``/``Paid`` vocabulary) are normalised here so
the rest of the domain only sees the canonical values.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class PaymentType(str, Enum):
    """Closed set of payment categories."""

    FISCAL = "Fiscal"
    PARAFISCAL = "Parafiscal"
    PUBLIC_SERVICE = "PublicService"
    MUNICIPAL = "Municipal"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return _PAYMENT_TYPE_LABELS[self]

    @classmethod
    def parse(cls, value: Union[str, "PaymentType"]) -> "PaymentType":
        """Parse a payment type from its value, member name or display label.

        Raises:
            ValueError: If the value matches no payment type
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in (member.value.lower(), member.name.lower(), member.label.lower()):
                return member
        raise ValueError(f"Unknown payment type '{value}'")


_PAYMENT_TYPE_LABELS = {
    PaymentType.FISCAL: "Fiscal (Impuestos)",
    PaymentType.PARAFISCAL: "Parafiscal (SSO, INCES, etc.)",
    PaymentType.PUBLIC_SERVICE: "Servicio Público",
    PaymentType.MUNICIPAL: "Impuesto Municipal",
    PaymentType.OTHER: "Otro",
}


class PaymentStatus(str, Enum):
    """Lifecycle states of a payment record."""

    PENDING_REVIEW = "PendingReview"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (PaymentStatus.APPROVED, PaymentStatus.REJECTED)

    @classmethod
    def parse(cls, value: Union[str, "PaymentStatus", None]) -> "PaymentStatus":
        """Parse a status, mapping the legacy two-state vocabulary.

        Empty values are treated as PendingReview, like rows appended without
        a status column.

        Raises:
            ValueError: If the value matches no status
        """
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.PENDING_REVIEW
        key = str(value).strip().lower().replace(" ", "")
        for member in cls:
            if key == member.value.lower():
                return member
        if key in _LEGACY_STATUSES:
            return _LEGACY_STATUSES[key]
        raise ValueError(f"Unknown payment status '{value}'")


_LEGACY_STATUSES = {
    "pending": PaymentStatus.PENDING_REVIEW,
    "paid": PaymentStatus.APPROVED,
}


class Role(str, Enum):
    """Actor roles."""

    ADMIN = "admin"
    PAYER = "payer"
    VIEWER = "viewer"

    @classmethod
    def parse(cls, value: Union[str, "Role"]) -> "Role":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown role '{value}'") from None


class Action(str, Enum):
    """Operations guarded by the capability table."""

    REGISTER = "Register"
    APPROVE = "Approve"
    REJECT = "Reject"
    READ = "Read"

    @classmethod
    def parse(cls, value: Union[str, "Action"]) -> "Action":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key == member.value.lower():
                return member
        raise ValueError(f"Unknown action '{value}'")


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation."""

    name: str
    role: Role


@dataclass(frozen=True)
class PaymentInput:
    """Unvalidated registration data as received from a client."""

    organism: Optional[str]
    amount: Union[Decimal, int, float, str, None]
    payment_date_real: Union[date, str, None]
    payment_type: Union[PaymentType, str, None] = None
    date_registered: Union[date, str, None] = None
    unit_code: Optional[str] = None
    unit_name: Optional[str] = None
    municipality: Optional[str] = None
    description: Optional[str] = None
    contact_phone: Optional[str] = None


@dataclass(frozen=True)
class PaymentRecord:
    """Payment record domain entity."""

    id: str
    organism: str
    payment_type: PaymentType
    amount: Decimal
    date_registered: date
    payment_date_real: date
    status: PaymentStatus = PaymentStatus.PENDING_REVIEW
    unit_code: Optional[str] = None
    unit_name: Optional[str] = None
    municipality: Optional[str] = None
    description: Optional[str] = None
    contact_phone: Optional[str] = None
    created_at: Optional[datetime] = field(default=None, compare=False)


@dataclass(frozen=True)
class BudgetSummary:
    """Spending aggregate for one payment type."""

    payment_type: PaymentType
    total_spent: Decimal
    projected_annual: Decimal
    count: int


@dataclass(frozen=True)
class PaymentSummary:
    """Dashboard aggregates over a set of payment records."""

    total_spent: Decimal
    record_count: int
    pending_amount: Decimal
    projected_annual: Decimal
    by_type: tuple[BudgetSummary, ...]
    upcoming_deadlines: tuple[PaymentRecord, ...]
