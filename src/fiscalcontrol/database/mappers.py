"""Mapper functions to convert between domain records and table rows."""

from fiscalcontrol.domain import entities as domain
from fiscalcontrol.database.models import PaymentRow


def row_to_domain(row: PaymentRow) -> domain.PaymentRecord:
    """Convert a PaymentRow into a domain PaymentRecord.

    Legacy payment type labels and status values are normalised.
    """
    return domain.PaymentRecord(
        id=row.id,
        organism=row.organism,
        payment_type=domain.PaymentType.parse(row.payment_type),
        amount=row.amount,
        date_registered=row.date_registered,
        payment_date_real=row.payment_date_real,
        status=domain.PaymentStatus.parse(row.status),
        unit_code=row.unit_code,
        unit_name=row.unit_name,
        municipality=row.municipality,
        description=row.description,
        contact_phone=row.contact_phone or None,
        created_at=row.created_at,
    )


def domain_to_row(record: domain.PaymentRecord) -> PaymentRow:
    """Build a new PaymentRow from a domain PaymentRecord.

    created_at is left to the column default unless the record carries one.
    """
    row = PaymentRow(
        id=record.id,
        date_registered=record.date_registered,
        organism=record.organism,
        payment_type=record.payment_type.value,
        amount=record.amount,
        payment_date_real=record.payment_date_real,
        unit_code=record.unit_code,
        unit_name=record.unit_name,
        municipality=record.municipality,
        status=record.status.value,
        description=record.description,
        contact_phone=record.contact_phone,
    )
    if record.created_at is not None:
        row.created_at = record.created_at
    return row
