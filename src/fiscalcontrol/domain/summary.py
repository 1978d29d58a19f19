"""Payment summary domain service."""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from fiscalcontrol.database.base import RecordStore
from fiscalcontrol.domain.entities import (
    BudgetSummary,
    PaymentRecord,
    PaymentStatus,
    PaymentSummary,
    PaymentType,
)

# Annual projection is a flat monthly extrapolation
PROJECTION_FACTOR = 12
UPCOMING_WINDOW_DAYS = 30
UPCOMING_LIMIT = 5


class SummaryService:
    """Service for building dashboard aggregates."""

    def __init__(self, store: RecordStore):
        """Initialize summary service.

        Args:
            store: Record store instance
        """
        self.store = store

    def build_summary(
        self,
        today: Optional[date] = None,
        records: Optional[Sequence[PaymentRecord]] = None,
    ) -> PaymentSummary:
        """Build totals, a per-type breakdown and upcoming deadlines.

        Args:
            today: Reference date for upcoming deadlines, defaults to today
            records: Records to summarise; read from the store when omitted

        Returns:
            PaymentSummary
        """
        if today is None:
            today = date.today()
        if records is None:
            records = self.store.list_records()

        total_spent = sum((r.amount for r in records), Decimal("0.00"))
        pending_amount = sum(
            (r.amount for r in records if r.status == PaymentStatus.PENDING_REVIEW),
            Decimal("0.00"),
        )

        return PaymentSummary(
            total_spent=total_spent,
            record_count=len(records),
            pending_amount=pending_amount,
            projected_annual=total_spent * PROJECTION_FACTOR,
            by_type=tuple(self.summarize_by_type(records)),
            upcoming_deadlines=tuple(self.upcoming_deadlines(records, today)),
        )

    def summarize_by_type(self, records: Sequence[PaymentRecord]) -> list[BudgetSummary]:
        """Aggregate spending per payment type, in enum order."""
        totals: dict[PaymentType, Decimal] = defaultdict(lambda: Decimal("0.00"))
        counts: dict[PaymentType, int] = defaultdict(int)
        for record in records:
            totals[record.payment_type] += record.amount
            counts[record.payment_type] += 1

        return [
            BudgetSummary(
                payment_type=payment_type,
                total_spent=totals[payment_type],
                projected_annual=totals[payment_type] * PROJECTION_FACTOR,
                count=counts[payment_type],
            )
            for payment_type in PaymentType
            if counts[payment_type]
        ]

    def upcoming_deadlines(
        self,
        records: Sequence[PaymentRecord],
        today: date,
        window_days: int = UPCOMING_WINDOW_DAYS,
        limit: int = UPCOMING_LIMIT,
    ) -> list[PaymentRecord]:
        """Return the next open payments due within window_days, soonest first."""
        horizon = today + timedelta(days=window_days)
        upcoming = [
            r
            for r in records
            if r.status != PaymentStatus.REJECTED and today <= r.payment_date_real <= horizon
        ]
        upcoming.sort(key=lambda r: r.payment_date_real)
        return upcoming[:limit]
