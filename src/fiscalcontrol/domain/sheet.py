"""Sheet export and legacy sheet import."""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, TextIO

from fiscalcontrol.database.base import RecordStore
from fiscalcontrol.domain.entities import (
    Action,
    Actor,
    PaymentRecord,
    PaymentStatus,
    PaymentType,
)
from fiscalcontrol.domain.errors import StoreUnavailableError
from fiscalcontrol.domain.lifecycle import normalize_phone
from fiscalcontrol.domain.permissions import require_permission
from fiscalcontrol.utils.amount_parser import parse_amount, require_non_negative
from fiscalcontrol.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

# Header row of the payment register sheet, in column order
COLUMN_HEADERS = (
    "ID",
    "Fecha Registro",
    "Organismo",
    "Tipo Pago",
    "Monto",
    "Fecha Pago Real",
    "Código Unidad",
    "Nombre Unidad",
    "Municipio",
    "Estado",
    "Descripción",
    "Teléfono",
    "Timestamp",
)

REQUIRED_HEADERS = ("ID", "Organismo", "Monto", "Fecha Pago Real")


def record_to_row(record: PaymentRecord) -> list[str]:
    """Flatten a record into sheet cells, in COLUMN_HEADERS order."""
    return [
        record.id,
        record.date_registered.isoformat(),
        record.organism,
        record.payment_type.value,
        f"{record.amount:.2f}",
        record.payment_date_real.isoformat(),
        record.unit_code or "",
        record.unit_name or "",
        record.municipality or "",
        record.status.value,
        record.description or "",
        record.contact_phone or "",
        record.created_at.isoformat() if record.created_at else "",
    ]


def write_sheet(records: Iterable[PaymentRecord], out: TextIO) -> int:
    """Write records as CSV with the sheet header row.

    Returns:
        Number of data rows written
    """
    writer = csv.writer(out)
    writer.writerow(COLUMN_HEADERS)
    count = 0
    for record in records:
        writer.writerow(record_to_row(record))
        count += 1
    return count


def row_to_record(row: dict[str, str | None]) -> PaymentRecord:
    """Parse one sheet row into a PaymentRecord.

    Legacy type labels and status words are accepted. A missing
    registration date falls back to the timestamp column, then to the
    due date.

    Raises:
        ValueError: If a required cell is missing or unparseable
    """
    cells = {key: (value or "").strip() for key, value in row.items() if key}
    for header in REQUIRED_HEADERS:
        if not cells.get(header):
            raise ValueError(f"Missing {header}")

    due = parse_date(cells["Fecha Pago Real"])
    created_at = None
    if cells.get("Timestamp"):
        try:
            created_at = datetime.fromisoformat(cells["Timestamp"].replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Ignoring unparseable timestamp %r", cells["Timestamp"])

    if cells.get("Fecha Registro"):
        registered = parse_date(cells["Fecha Registro"])
    elif created_at is not None:
        registered = created_at.date()
    else:
        registered = due

    return PaymentRecord(
        id=cells["ID"],
        organism=cells["Organismo"],
        payment_type=PaymentType.parse(cells.get("Tipo Pago") or PaymentType.FISCAL.value),
        amount=require_non_negative(parse_amount(cells["Monto"])),
        date_registered=registered,
        payment_date_real=due,
        status=PaymentStatus.parse(cells.get("Estado")),
        unit_code=cells.get("Código Unidad") or None,
        unit_name=cells.get("Nombre Unidad") or None,
        municipality=cells.get("Municipio") or None,
        description=cells.get("Descripción") or None,
        contact_phone=normalize_phone(cells.get("Teléfono")),
        created_at=created_at,
    )


class SheetImportService:
    """Service for loading an exported payment sheet into the store."""

    def __init__(self, store: RecordStore):
        self.store = store

    def import_sheet(self, csv_file_path: str, actor: Actor) -> dict[str, Any]:
        """Import records from a CSV export of the payment sheet.

        Records keep their original id and status. Rows whose id is
        already stored are skipped.

        Args:
            csv_file_path: Path to CSV file
            actor: Who is importing; needs permission to register

        Returns:
            Dict with import statistics:
            - imported: number of records stored
            - skipped: number of rows whose id already exists
            - errors: list of error messages

        Raises:
            ForbiddenError: If the actor may not register payments
            FileNotFoundError: If the CSV file doesn't exist
            ValueError: If required columns are missing
            StoreUnavailableError: If the store fails mid-import
        """
        require_permission(actor, Action.REGISTER)

        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        imported = 0
        skipped = 0
        errors = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                raise ValueError("CSV file has no columns")
            headers = [h.strip() for h in reader.fieldnames]
            missing = [h for h in REQUIRED_HEADERS if h not in headers]
            if missing:
                raise ValueError(f"CSV file missing required columns: {', '.join(missing)}")
            reader.fieldnames = headers

            for row_num, row in enumerate(reader, start=2):  # header is row 1
                try:
                    record = row_to_record(row)
                    if self.store.get_record(record.id) is not None:
                        skipped += 1
                        continue
                    self.store.create_record(record)
                    imported += 1
                except StoreUnavailableError:
                    raise
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")

        logger.info(
            "Imported %d record(s) from %s (%d skipped, %d errors)",
            imported,
            csv_path,
            skipped,
            len(errors),
        )
        return {"imported": imported, "skipped": skipped, "errors": errors}
