"""SQLAlchemy models for the fiscalcontrol record table."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()

class PaymentRow(Base):
    """One row of the payment register."""

    __tablename__ = "payment_records"

    row_number = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False, index=True)
    date_registered = Column(Date, nullable=False)
    organism = Column(String, nullable=False)
    payment_type = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_date_real = Column(Date, nullable=False)
    unit_code = Column(String, nullable=True)
    unit_name = Column(String, nullable=True)
    municipality = Column(String, nullable=True)
    status = Column(String, nullable=False)
    description = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_engine_for(database_url: str) -> Engine:
    """Create a SQLAlchemy engine without touching the schema."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # API requests run on worker threads
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=False, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory bound to engine."""
    return sessionmaker(bind=engine)
