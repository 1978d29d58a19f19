"""Shared pytest fixtures for fiscalcontrol tests."""

import tempfile
import os
from datetime import date, timedelta
from decimal import Decimal
import pytest

from fiscalcontrol.database.factories import create_sqlite_store
from fiscalcontrol.domain.entities import (
    Actor,
    PaymentInput,
    PaymentRecord,
    PaymentStatus,
    PaymentType,
    Role,
)
from fiscalcontrol.domain.lifecycle import PaymentLifecycleService
from fiscalcontrol.domain.summary import SummaryService
from fiscalcontrol.notifications.dispatcher import DispatchError, Dispatcher, LogDispatcher

TODAY = date(2024, 3, 12)


class FailingDispatcher(Dispatcher):
    """Dispatcher whose relay always refuses the message."""

    def __init__(self, error=None):
        self.attempts = []
        self.error = error or DispatchError("relay down")

    def send(self, notification):
        self.attempts.append(notification)
        raise self.error


@pytest.fixture
def temp_store():
    """Create a temporary record store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path, lock_timeout=0.5)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def dispatcher():
    """Dispatcher that records messages instead of sending them."""
    return LogDispatcher()


@pytest.fixture
def failing_dispatcher():
    return FailingDispatcher()


@pytest.fixture
def broken_dispatcher():
    """Dispatcher that fails with an error outside the relay contract."""
    return FailingDispatcher(ConnectionResetError("socket closed"))


@pytest.fixture
def lifecycle_service(temp_store, dispatcher):
    """Create a PaymentLifecycleService with a temporary store."""
    return PaymentLifecycleService(temp_store, dispatcher, clock=lambda: TODAY)


@pytest.fixture
def summary_service(temp_store):
    """Create a SummaryService with a temporary store."""
    return SummaryService(temp_store)


@pytest.fixture
def admin():
    return Actor(name="Administrador Principal", role=Role.ADMIN)


@pytest.fixture
def payer():
    return Actor(name="Operador de Pagos", role=Role.PAYER)


@pytest.fixture
def auditor():
    return Actor(name="Auditor Visor", role=Role.VIEWER)


@pytest.fixture
def make_input():
    """Build a valid PaymentInput, overriding any field."""

    def _make(**overrides):
        fields = dict(
            organism="SENIAT",
            amount="100.00",
            payment_date_real=(TODAY + timedelta(days=3)).isoformat(),
            payment_type="Fiscal",
            contact_phone="584121234567",
        )
        fields.update(overrides)
        return PaymentInput(**fields)

    return _make


@pytest.fixture
def make_record():
    """Build a PaymentRecord directly, bypassing validation."""
    counter = iter(range(1, 10_000))

    def _make(**overrides):
        fields = dict(
            id=f"rec-{next(counter)}",
            organism="SENIAT",
            payment_type=PaymentType.FISCAL,
            amount=Decimal("100.00"),
            date_registered=TODAY,
            payment_date_real=TODAY + timedelta(days=3),
            status=PaymentStatus.PENDING_REVIEW,
            contact_phone="584121234567",
        )
        fields.update(overrides)
        return PaymentRecord(**fields)

    return _make


@pytest.fixture
def sample_record(lifecycle_service, make_input, payer):
    """Register a sample pending payment."""
    return lifecycle_service.register(make_input(), payer)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
