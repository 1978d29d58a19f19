"""Tests for CLI commands."""

import re
from datetime import date, timedelta

import pytest
from fiscalcontrol.cli.main import cli
from fiscalcontrol.domain.entities import PaymentStatus


def _invoke(cli_runner, temp_store, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_store.database_path, *args])


def _register(cli_runner, temp_store, *extra, role="payer"):
    return _invoke(
        cli_runner,
        temp_store,
        "register",
        "--role",
        role,
        "--organism",
        "SENIAT",
        "--amount",
        "100",
        "--due-date",
        "2024-03-15",
        *extra,
    )


def _registered_id(result) -> str:
    match = re.search(r"Registered payment (\S+)", result.output)
    assert match is not None, result.output
    return match.group(1)


def test_register(cli_runner, temp_store):
    result = _register(cli_runner, temp_store, "--phone", "+58 412 1234567")

    assert result.exit_code == 0, result.output
    assert "Registered payment" in result.output
    assert "Status: PendingReview" in result.output
    assert "Reminder phone: 584121234567" in result.output
    assert len(temp_store.list_records()) == 1


def test_register_viewer_forbidden(cli_runner, temp_store):
    result = _register(cli_runner, temp_store, role="viewer")

    assert result.exit_code == 1
    assert "not allowed" in result.output
    assert temp_store.list_records() == []


def test_register_negative_amount(cli_runner, temp_store):
    result = _invoke(
        cli_runner,
        temp_store,
        "register",
        "--role",
        "admin",
        "--organism",
        "SENIAT",
        "--amount",
        "-10",
        "--due-date",
        "2024-03-15",
    )
    assert result.exit_code == 1
    assert "negative" in result.output


def test_history_empty(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "history")
    assert result.exit_code == 0
    assert "No payments found" in result.output


def test_history_lists_records(cli_runner, temp_store):
    _register(cli_runner, temp_store, "--type", "Parafiscal")

    result = _invoke(cli_runner, temp_store, "history")

    assert result.exit_code == 0
    assert "Found 1 payment(s)" in result.output
    assert "SENIAT" in result.output
    assert "Parafiscal" in result.output


def test_history_filters(cli_runner, temp_store):
    _register(cli_runner, temp_store)

    result = _invoke(cli_runner, temp_store, "history", "--status", "Approved")

    assert "No payments found" in result.output


def test_history_rejects_period_with_dates(cli_runner, temp_store):
    result = _invoke(
        cli_runner, temp_store, "history", "--period", "this-month", "--start-date", "2024-01-01"
    )
    assert result.exit_code == 1


def test_approve_and_reject(cli_runner, temp_store):
    first = _registered_id(_register(cli_runner, temp_store))
    second = _registered_id(_register(cli_runner, temp_store))

    approved = _invoke(cli_runner, temp_store, "approve", first, "--role", "viewer", "--actor", "Auditor")
    rejected = _invoke(cli_runner, temp_store, "reject", second, "--role", "admin")

    assert approved.exit_code == 0, approved.output
    assert "is now Approved" in approved.output
    assert rejected.exit_code == 0, rejected.output
    assert temp_store.get_record(second).status == PaymentStatus.REJECTED


def test_approve_as_payer_fails(cli_runner, temp_store):
    record_id = _registered_id(_register(cli_runner, temp_store))

    result = _invoke(cli_runner, temp_store, "approve", record_id, "--role", "payer")

    assert result.exit_code == 1
    assert temp_store.get_record(record_id).status == PaymentStatus.PENDING_REVIEW


def test_approve_unknown_record(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "approve", "missing", "--role", "admin")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_remind(cli_runner, temp_store):
    _register(cli_runner, temp_store, "--phone", "584121234567")

    result = _invoke(cli_runner, temp_store, "remind", "--today", "2024-03-12")

    assert result.exit_code == 0, result.output
    assert "584121234567" in result.output
    assert "Sent 1 reminder(s), 0 failed." in result.output


def test_remind_dry_run(cli_runner, temp_store):
    _register(cli_runner, temp_store, "--phone", "584121234567")

    result = _invoke(cli_runner, temp_store, "remind", "--today", "2024-03-12", "--dry-run")

    assert "Dry run: 1 reminder(s) not sent." in result.output


def test_remind_nothing_due(cli_runner, temp_store):
    _register(cli_runner, temp_store, "--phone", "584121234567")

    result = _invoke(cli_runner, temp_store, "remind", "--today", "2024-03-11")

    assert result.exit_code == 0
    assert "No payments due in 3 days." in result.output


def test_summary(cli_runner, temp_store):
    _register(cli_runner, temp_store)

    result = _invoke(cli_runner, temp_store, "summary", "--today", "2024-03-12")

    assert result.exit_code == 0, result.output
    assert "Total paid:         $100.00" in result.output
    assert "Fiscal (Impuestos)" in result.output
    assert "2024-03-15" in result.output
