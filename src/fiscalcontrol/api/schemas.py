"""Request and response shapes for the JSON endpoint."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from fiscalcontrol.domain.entities import Actor, PaymentInput, PaymentRecord, Role


class ActorIn(BaseModel):
    name: str = "anonymous"
    role: str

    def to_actor(self) -> Actor:
        return Actor(name=self.name, role=Role.parse(self.role))


class PaymentData(BaseModel):
    """Registration fields as sent by the form, camelCase on the wire.

    Client-side ``id`` and ``status`` values are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    organism: Optional[str] = None
    payment_type: Optional[str] = Field(None, alias="paymentType")
    amount: Optional[Union[Decimal, str]] = None
    date_registered: Optional[str] = Field(None, alias="dateRegistered")
    payment_date_real: Optional[str] = Field(None, alias="paymentDateReal")
    unit_code: Optional[str] = Field(None, alias="unitCode")
    unit_name: Optional[str] = Field(None, alias="unitName")
    municipality: Optional[str] = None
    description: Optional[str] = None
    contact_phone: Optional[str] = Field(None, alias="contactPhone")

    def to_input(self) -> PaymentInput:
        return PaymentInput(
            organism=self.organism,
            amount=self.amount,
            payment_date_real=self.payment_date_real,
            payment_type=self.payment_type,
            date_registered=self.date_registered,
            unit_code=self.unit_code,
            unit_name=self.unit_name,
            municipality=self.municipality,
            description=self.description,
            contact_phone=self.contact_phone,
        )


class ReadFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search: Optional[str] = None
    payment_type: Optional[str] = Field(None, alias="paymentType")
    status: Optional[str] = None
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    newest_first: bool = Field(True, alias="newestFirst")


class ApiRequest(BaseModel):
    """Body of ``POST /``. ``action`` defaults to ``create``."""

    action: str = "create"
    data: Optional[PaymentData] = None
    actor: Optional[ActorIn] = None
    id: Optional[str] = None
    transition: Optional[str] = None
    filters: Optional[ReadFilters] = None


def record_to_dict(record: PaymentRecord) -> dict[str, Any]:
    """Serialize a record with the sheet's camelCase keys."""
    return {
        "id": record.id,
        "dateRegistered": record.date_registered.isoformat(),
        "organism": record.organism,
        "paymentType": record.payment_type.value,
        "amount": float(record.amount),
        "paymentDateReal": record.payment_date_real.isoformat(),
        "unitCode": record.unit_code or "",
        "unitName": record.unit_name or "",
        "municipality": record.municipality or "",
        "status": record.status.value,
        "description": record.description or "",
        "contactPhone": record.contact_phone or "",
        "timestamp": record.created_at.isoformat() if record.created_at else None,
    }
