"""Payment lifecycle domain service."""

import logging
import re
import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from fiscalcontrol.database.base import RecordStore
from fiscalcontrol.domain.entities import (
    Action,
    Actor,
    PaymentInput,
    PaymentRecord,
    PaymentStatus,
    PaymentType,
)
from fiscalcontrol.domain.errors import (
    InvalidStateError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
    already_terminal,
    record_not_found,
)
from fiscalcontrol.domain.messages import review_message
from fiscalcontrol.domain.permissions import require_permission
from fiscalcontrol.notifications.dispatcher import Dispatcher, Notification, dispatch_safely
from fiscalcontrol.utils.amount_parser import parse_amount, require_non_negative, to_cents
from fiscalcontrol.utils.date_parser import coerce_date

logger = logging.getLogger(__name__)

# (current status, action) -> resulting status
TRANSITIONS: dict[tuple[PaymentStatus, Action], PaymentStatus] = {
    (PaymentStatus.PENDING_REVIEW, Action.APPROVE): PaymentStatus.APPROVED,
    (PaymentStatus.PENDING_REVIEW, Action.REJECT): PaymentStatus.REJECTED,
}

_PHONE_SEPARATORS = re.compile(r"[\s\-().+]")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Strip separators from a phone number; empty input gives None.

    Raises:
        ValidationError: If anything other than digits remains
    """
    if phone is None:
        return None
    digits = _PHONE_SEPARATORS.sub("", str(phone))
    if not digits:
        return None
    if not digits.isdigit():
        raise ValidationError(f"Invalid contact phone '{phone}'")
    return digits


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class PaymentLifecycleService:
    """Service for registering payments and moving them through review.

    The store is the source of truth. Listings are served from a snapshot of
    the store that is dropped on every register or transition.
    """

    def __init__(
        self,
        store: RecordStore,
        dispatcher: Optional[Dispatcher] = None,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize lifecycle service.

        Args:
            store: Record store instance
            dispatcher: Optional dispatcher for review outcome messages
            clock: Returns the current date, used for missing registration dates
        """
        self.store = store
        self.dispatcher = dispatcher
        self.clock = clock
        self._cache: Optional[list[PaymentRecord]] = None
        self._unsynced: list[PaymentRecord] = []

    def build_record(self, data: PaymentInput) -> PaymentRecord:
        """Validate registration input and build a new PendingReview record.

        Args:
            data: Raw registration input

        Returns:
            Record with a fresh ID, not yet persisted

        Raises:
            ValidationError: If a required field is missing or a value is invalid
        """
        organism = _clean_text(data.organism)
        if organism is None:
            raise ValidationError("Organism is required")

        if _is_blank(data.amount):
            raise ValidationError("Amount is required")
        amount = self._coerce_amount(data.amount)
        try:
            require_non_negative(amount)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if _is_blank(data.payment_date_real):
            raise ValidationError("Payment date is required")
        try:
            payment_date_real = coerce_date(data.payment_date_real)
        except ValueError as e:
            raise ValidationError(f"Invalid payment date: {e}") from e

        if _is_blank(data.date_registered):
            date_registered = self.clock()
        else:
            try:
                date_registered = coerce_date(data.date_registered)
            except ValueError as e:
                raise ValidationError(f"Invalid registration date: {e}") from e

        if _is_blank(data.payment_type):
            payment_type = PaymentType.FISCAL
        else:
            try:
                payment_type = PaymentType.parse(data.payment_type)
            except ValueError as e:
                raise ValidationError(str(e)) from e

        return PaymentRecord(
            id=str(uuid.uuid4()),
            organism=organism,
            payment_type=payment_type,
            amount=amount,
            date_registered=date_registered,
            payment_date_real=payment_date_real,
            status=PaymentStatus.PENDING_REVIEW,
            unit_code=_clean_text(data.unit_code),
            unit_name=_clean_text(data.unit_name),
            municipality=_clean_text(data.municipality),
            description=_clean_text(data.description),
            contact_phone=normalize_phone(data.contact_phone),
        )

    @staticmethod
    def _coerce_amount(value) -> Decimal:
        if isinstance(value, bool):
            raise ValidationError(f"Invalid amount: {value!r}")
        try:
            if isinstance(value, Decimal):
                amount = value
            elif isinstance(value, (int, float)):
                amount = Decimal(str(value))
            else:
                return parse_amount(value)
            return to_cents(amount)
        except ValueError as e:
            raise ValidationError(f"Invalid amount: {e}") from e

    def register(self, data: PaymentInput, actor: Actor) -> PaymentRecord:
        """Register a new payment.

        Args:
            data: Raw registration input
            actor: Who is registering

        Returns:
            The persisted record, status PendingReview

        Raises:
            ForbiddenError: If the actor's role cannot register
            ValidationError: If the input is invalid
            StoreUnavailableError: If persistence failed; ``error.record``
                holds the record, which is also kept in unsynced_records()
        """
        require_permission(actor, Action.REGISTER)
        record = self.build_record(data)

        try:
            stored = self.store.create_record(record)
        except StoreUnavailableError as e:
            self._unsynced.append(record)
            logger.warning("Payment %s kept locally only: %s", record.id, e)
            raise StoreUnavailableError(str(e), record=record) from e
        finally:
            self._invalidate()

        logger.info(
            "%s (%s) registered payment %s for %s, amount %s",
            actor.name,
            actor.role.value,
            stored.id,
            stored.organism,
            stored.amount,
        )
        return stored

    def transition(self, record_id: str, action: Action | str, actor: Actor) -> PaymentRecord:
        """Approve or reject a pending payment.

        Checks run in this order: the record must exist, must not be in a
        terminal state, and the actor's role must hold the capability.

        Args:
            record_id: Record to review
            action: Approve or Reject
            actor: Who is reviewing

        Returns:
            The updated record

        Raises:
            ValidationError: If action is not Approve or Reject
            NotFoundError: If no record has record_id
            InvalidStateError: If the record is already Approved or Rejected
            ForbiddenError: If the actor's role lacks the capability
        """
        try:
            action = Action.parse(action)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if action not in (Action.APPROVE, Action.REJECT):
            raise ValidationError(f"'{action.value}' is not a review action")

        record = self.store.get_record(record_id)
        if record is None:
            raise NotFoundError(record_not_found(record_id))

        if record.status.is_terminal:
            raise InvalidStateError(already_terminal(record_id, record.status.value))

        require_permission(actor, action)

        target = TRANSITIONS[(record.status, action)]
        try:
            updated = self.store.update_status(record_id, target, expected_status=record.status)
        finally:
            self._invalidate()

        logger.info(
            "%s (%s) moved payment %s from %s to %s",
            actor.name,
            actor.role.value,
            record_id,
            record.status.value,
            updated.status.value,
        )
        self._notify_review(updated, actor)
        return updated

    def _notify_review(self, record: PaymentRecord, actor: Actor) -> None:
        if self.dispatcher is None:
            return
        if not record.contact_phone:
            logger.debug("Payment %s has no contact phone, review not notified", record.id)
            return
        dispatch_safely(
            self.dispatcher,
            Notification(phone=record.contact_phone, message=review_message(record, actor.name)),
        )

    def get_record(self, record_id: str) -> Optional[PaymentRecord]:
        """Get record by ID, or None."""
        return self.store.get_record(record_id)

    def require_record(self, record_id: str) -> PaymentRecord:
        """Get record by ID.

        Raises:
            NotFoundError: If no record has record_id
        """
        record = self.store.get_record(record_id)
        if record is None:
            raise NotFoundError(record_not_found(record_id))
        return record

    def list_records(
        self,
        search: Optional[str] = None,
        payment_type: Optional[PaymentType] = None,
        status: Optional[PaymentStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        newest_first: bool = True,
        refresh: bool = False,
        include_unsynced: bool = True,
    ) -> list[PaymentRecord]:
        """List records with optional filters, sorted by payment date.

        Records kept locally after a failed registration are listed with the
        stored ones unless include_unsynced is False.

        Args:
            search: Case-insensitive text matched against organism,
                description and municipality
            payment_type: Only records of this type
            status: Only records in this status
            start_date: Only records due on or after this date
            end_date: Only records due on or before this date
            newest_first: Sort by payment date descending (default) or ascending
            refresh: Reload from the store even if a snapshot is cached
            include_unsynced: Also list records from unsynced_records()
        """
        if refresh:
            self._invalidate()
        if self._cache is None:
            self._cache = self.store.list_records()

        records = self._cache
        if include_unsynced and self._unsynced:
            stored_ids = {r.id for r in records}
            records = records + [r for r in self._unsynced if r.id not in stored_ids]
        if search:
            needle = search.strip().lower()
            records = [
                r
                for r in records
                if needle in r.organism.lower()
                or needle in (r.description or "").lower()
                or needle in (r.municipality or "").lower()
            ]
        if payment_type is not None:
            records = [r for r in records if r.payment_type == payment_type]
        if status is not None:
            records = [r for r in records if r.status == status]
        if start_date is not None:
            records = [r for r in records if r.payment_date_real >= start_date]
        if end_date is not None:
            records = [r for r in records if r.payment_date_real <= end_date]

        return sorted(records, key=lambda r: r.payment_date_real, reverse=newest_first)

    def unsynced_records(self) -> list[PaymentRecord]:
        """Records registered while the store was unavailable."""
        return list(self._unsynced)

    def _invalidate(self) -> None:
        self._cache = None
