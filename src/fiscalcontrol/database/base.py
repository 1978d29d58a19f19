"""Abstract record store interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from fiscalcontrol.domain.entities import PaymentRecord, PaymentStatus


class RecordStore(ABC):
    """Abstract append-only store of payment records.

    Implementations serialise writes themselves and raise
    StoreUnavailableError when they cannot.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create the records table if it does not exist yet."""
        pass

    @abstractmethod
    def create_record(self, record: PaymentRecord) -> PaymentRecord:
        """Append a record. Returns it with the server timestamp set."""
        pass

    @abstractmethod
    def get_record(self, record_id: str) -> Optional[PaymentRecord]:
        """Get record by ID."""
        pass

    @abstractmethod
    def list_records(self) -> list[PaymentRecord]:
        """List all records in insertion order."""
        pass

    @abstractmethod
    def update_status(
        self,
        record_id: str,
        status: PaymentStatus,
        expected_status: Optional[PaymentStatus] = None,
    ) -> PaymentRecord:
        """Rewrite the status cell of a record.

        Args:
            record_id: Record to update
            status: New status
            expected_status: If given, the update only applies when the stored
                status still equals it

        Returns:
            The updated record

        Raises:
            NotFoundError: If no record has record_id
            InvalidStateError: If the stored status differs from expected_status
        """
        pass
