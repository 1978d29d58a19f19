"""Tests for the due-date reminder sweep."""

import pytest
from datetime import date, datetime, timedelta

from fiscalcontrol.domain.entities import PaymentStatus
from fiscalcontrol.domain.reminders import (
    DEFAULT_HORIZON_DAYS,
    ReminderSweep,
    days_until,
    find_due_reminders,
)
from conftest import TODAY


class TestFindDueReminders:
    """Tests for the pure reminder scan."""

    def test_record_due_in_three_days(self, make_record):
        record = make_record(payment_date_real=TODAY + timedelta(days=3))

        reminders = list(find_due_reminders([record], TODAY))

        assert len(reminders) == 1
        assert reminders[0].record == record
        assert reminders[0].days_remaining == 3

    @pytest.mark.parametrize("offset", [-1, 0, 1, 2, 4, 5, 30])
    def test_only_exact_horizon_matches(self, make_record, offset):
        record = make_record(payment_date_real=TODAY + timedelta(days=offset))
        assert list(find_due_reminders([record], TODAY)) == []

    @pytest.mark.parametrize("phone", [None, ""])
    def test_record_without_phone_is_skipped(self, make_record, phone):
        record = make_record(contact_phone=phone)
        assert list(find_due_reminders([record], TODAY)) == []

    def test_approved_records_are_reminded(self, make_record):
        record = make_record(status=PaymentStatus.APPROVED)
        assert len(list(find_due_reminders([record], TODAY))) == 1

    def test_rejected_records_are_skipped(self, make_record):
        record = make_record(status=PaymentStatus.REJECTED)
        assert list(find_due_reminders([record], TODAY)) == []

    def test_custom_horizon(self, make_record):
        records = [
            make_record(payment_date_real=TODAY + timedelta(days=3)),
            make_record(payment_date_real=TODAY + timedelta(days=7)),
        ]
        reminders = list(find_due_reminders(records, TODAY, horizon_days=7))
        assert [r.days_remaining for r in reminders] == [7]

    def test_same_input_gives_same_result(self, make_record):
        records = [
            make_record(payment_date_real=TODAY + timedelta(days=3)),
            make_record(payment_date_real=TODAY + timedelta(days=3), contact_phone="584149999999"),
            make_record(payment_date_real=TODAY + timedelta(days=2)),
        ]

        first = list(find_due_reminders(records, TODAY))
        second = list(find_due_reminders(records, TODAY))

        assert first == second
        assert len(first) == 2

    def test_is_lazy(self, make_record):
        def records():
            yield make_record()
            raise AssertionError("scanned past the first match")

        reminders = find_due_reminders(records(), TODAY)
        assert next(reminders).days_remaining == 3

    def test_datetime_today_is_truncated(self, make_record):
        record = make_record(payment_date_real=TODAY + timedelta(days=3))
        late_evening = datetime.combine(TODAY, datetime.min.time()).replace(hour=23, minute=59)
        assert len(list(find_due_reminders([record], late_evening))) == 1

    def test_reminder_notification(self, make_record):
        record = make_record(organism="SENIAT", payment_date_real=date(2024, 3, 15))
        notification = next(find_due_reminders([record], TODAY)).to_notification()

        assert notification.phone == "584121234567"
        assert "SENIAT" in notification.message
        assert "$100.00" in notification.message
        assert "2024-03-15" in notification.message
        assert "3 días" in notification.message
        assert "Pendiente de revisión" in notification.message


@pytest.mark.parametrize(
    "due,today,expected",
    [
        (date(2024, 3, 15), date(2024, 3, 12), 3),
        (date(2024, 3, 12), date(2024, 3, 12), 0),
        (date(2024, 3, 10), date(2024, 3, 12), -2),
        (date(2024, 3, 1), date(2024, 2, 27), 3),  # leap year
    ],
)
def test_days_until(due, today, expected):
    assert days_until(due, today) == expected


class TestReminderSweep:
    """Tests for running the sweep against a store."""

    def test_sweep_sends_reminder(self, lifecycle_service, temp_store, dispatcher, make_input, payer):
        record = lifecycle_service.register(
            make_input(organism="SENIAT", amount=100, payment_date_real=TODAY + timedelta(days=3)),
            payer,
        )

        report = ReminderSweep(temp_store, dispatcher).run(today=TODAY)

        assert report.sent == 1
        assert report.failed == 0
        assert [r.record.id for r in report.reminders] == [record.id]
        assert report.reminders[0].days_remaining == DEFAULT_HORIZON_DAYS
        assert dispatcher.sent[0].phone == "584121234567"

    def test_sweep_without_phone_sends_nothing(self, lifecycle_service, temp_store, dispatcher, make_input, payer):
        lifecycle_service.register(make_input(contact_phone=""), payer)

        report = ReminderSweep(temp_store, dispatcher).run(today=TODAY)

        assert report.reminders == []
        assert dispatcher.sent == []

    def test_sweep_run_twice_resends(self, lifecycle_service, temp_store, dispatcher, make_input, payer):
        lifecycle_service.register(make_input(), payer)
        sweep = ReminderSweep(temp_store, dispatcher)

        sweep.run(today=TODAY)
        sweep.run(today=TODAY)

        assert len(dispatcher.sent) == 2

    def test_missed_day_is_not_caught_up(self, lifecycle_service, temp_store, dispatcher, make_input, payer):
        lifecycle_service.register(make_input(), payer)

        report = ReminderSweep(temp_store, dispatcher).run(today=TODAY + timedelta(days=1))

        assert report.reminders == []

    def test_dry_run_does_not_dispatch(self, lifecycle_service, temp_store, dispatcher, make_input, payer):
        lifecycle_service.register(make_input(), payer)

        report = ReminderSweep(temp_store, dispatcher).run(today=TODAY, dry_run=True)

        assert len(report.reminders) == 1
        assert report.dry_run
        assert report.sent == 0
        assert dispatcher.sent == []

    def test_dispatch_failures_are_counted(
        self, lifecycle_service, temp_store, failing_dispatcher, make_input, payer
    ):
        lifecycle_service.register(make_input(), payer)
        lifecycle_service.register(make_input(organism="IVSS"), payer)

        report = ReminderSweep(temp_store, failing_dispatcher).run(today=TODAY)

        assert report.sent == 0
        assert report.failed == 2
        assert len(failing_dispatcher.attempts) == 2

    def test_unexpected_dispatch_errors_do_not_stop_sweep(
        self, lifecycle_service, temp_store, broken_dispatcher, make_input, payer
    ):
        lifecycle_service.register(make_input(), payer)
        lifecycle_service.register(make_input(organism="IVSS"), payer)

        report = ReminderSweep(temp_store, broken_dispatcher).run(today=TODAY)

        assert report.sent == 0
        assert report.failed == 2
        assert len(broken_dispatcher.attempts) == 2

    def test_sweep_on_empty_store(self, temp_store, dispatcher):
        report = ReminderSweep(temp_store, dispatcher).run(today=TODAY)
        assert report.reminders == []
        assert report.run_date == TODAY
