"""Message templates for reminders and review outcomes."""

from decimal import Decimal

from fiscalcontrol.domain.entities import PaymentRecord, PaymentStatus

_STATUS_LABELS = {
    PaymentStatus.PENDING_REVIEW: "Pendiente de revisión",
    PaymentStatus.APPROVED: "Aprobado",
    PaymentStatus.REJECTED: "Rechazado",
}


def format_amount(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def status_label(status: PaymentStatus) -> str:
    return _STATUS_LABELS[status]


def reminder_message(record: PaymentRecord, days_remaining: int) -> str:
    """Build the due-date reminder text."""
    return (
        "🔔 *Recordatorio de Pago* 🔔\n\n"
        f"El pago para *{record.organism}* por un monto de *{format_amount(record.amount)}* "
        f"vence en {days_remaining} días ({record.payment_date_real.isoformat()}).\n"
        f"Estado actual: {status_label(record.status)}.\n\n"
        "Por favor tome sus previsiones."
    )


def review_message(record: PaymentRecord, actor_name: str) -> str:
    """Build the text sent after an approve/reject decision."""
    return (
        "📋 *Revisión de Pago* 📋\n\n"
        f"El pago para *{record.organism}* por un monto de *{format_amount(record.amount)}* "
        f"fue marcado como *{status_label(record.status)}* por {actor_name}."
    )
