"""Due-date reminder sweep.

The sweep is a pure scan over a snapshot of records: it keeps no cursor and no
log of what was already sent, so running it twice on the same day sends the
same reminders twice, and a day the trigger misses is never caught up.
Scheduling is left to whatever runs ``fiscalcontrol remind`` (cron, a systemd
timer, ...).
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, Optional

from fiscalcontrol.database.base import RecordStore
from fiscalcontrol.domain.entities import PaymentRecord, PaymentStatus
from fiscalcontrol.domain.messages import reminder_message
from fiscalcontrol.notifications.dispatcher import Dispatcher, Notification, dispatch_safely

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 3

# Approved payments still have to be settled on their due date
REMINDER_STATUSES = frozenset({PaymentStatus.PENDING_REVIEW, PaymentStatus.APPROVED})


@dataclass(frozen=True)
class DueReminder:
    """A record that reached the reminder horizon."""

    record: PaymentRecord
    days_remaining: int

    def to_notification(self) -> Notification:
        return Notification(
            phone=self.record.contact_phone,
            message=reminder_message(self.record, self.days_remaining),
        )


def days_until(due: date, today: date | datetime) -> int:
    """Whole days from today's midnight to the due date's midnight, rounded up."""
    if isinstance(today, datetime):
        today = today.date()
    delta = datetime.combine(due, time.min) - datetime.combine(today, time.min)
    return math.ceil(delta / timedelta(days=1))


def find_due_reminders(
    records: Iterable[PaymentRecord],
    today: date | datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> Iterator[DueReminder]:
    """Yield records due in exactly horizon_days days.

    Only records whose status is in REMINDER_STATUSES and that have a contact
    phone are considered. A record due in horizon_days - 1 or
    horizon_days + 1 days is never yielded.

    Args:
        records: Snapshot of records; pass a sequence to scan it more than once
        today: Reference date (a datetime is truncated to its date)
        horizon_days: Exact number of days before the due date
    """
    for record in records:
        if record.status not in REMINDER_STATUSES or not record.contact_phone:
            continue
        remaining = days_until(record.payment_date_real, today)
        if remaining == horizon_days:
            yield DueReminder(record=record, days_remaining=remaining)


@dataclass
class SweepReport:
    """Outcome of one sweep run."""

    run_date: date
    horizon_days: int
    reminders: list[DueReminder] = field(default_factory=list)
    sent: int = 0
    failed: int = 0
    dry_run: bool = False


class ReminderSweep:
    """Reads every record from the store and dispatches due-date reminders."""

    def __init__(self, store: RecordStore, dispatcher: Dispatcher):
        """Initialize reminder sweep.

        Args:
            store: Record store instance
            dispatcher: Dispatcher used to deliver reminders
        """
        self.store = store
        self.dispatcher = dispatcher

    def run(
        self,
        today: Optional[date] = None,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        dry_run: bool = False,
    ) -> SweepReport:
        """Run the sweep once.

        Args:
            today: Reference date, defaults to the current date
            horizon_days: Exact number of days before the due date
            dry_run: Compute the reminders without dispatching them

        Returns:
            SweepReport with the matched reminders and delivery counts
        """
        if today is None:
            today = date.today()

        records = self.store.list_records()
        report = SweepReport(
            run_date=today,
            horizon_days=horizon_days,
            reminders=list(find_due_reminders(records, today, horizon_days)),
            dry_run=dry_run,
        )
        if dry_run:
            return report

        for reminder in report.reminders:
            if dispatch_safely(self.dispatcher, reminder.to_notification()):
                report.sent += 1
            else:
                report.failed += 1

        logger.info(
            "Reminder sweep for %s: %d of %d records due in %d days, %d sent, %d failed",
            today.isoformat(),
            len(report.reminders),
            len(records),
            horizon_days,
            report.sent,
            report.failed,
        )
        return report
