from datetime import datetime

from pydantic import BaseModel, field_validator
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, ForeignKey, func, CheckConstraint, Index
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.contact_preference import ContactPreference
from enums.quote_status import QuoteStatus
from enums.quote_urgency import QuoteUrgency
from models.base import Base


class Quote(Base):
    __tablename__ = 'quotes'

    id = Column(Integer, primary_key=True)
    quote_number = Column(String(32), nullable=False, unique=True)
    # Guests may ask for a quote, so the account is optional
    user_id = Column(Integer, ForeignKey('users.id'), nullable=True)

    # Customer
    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_company = Column(String(200), nullable=True)

    # Vehicle
    vehicle_make = Column(String(100), nullable=False)
    vehicle_model = Column(String(100), nullable=False)
    vehicle_year = Column(Integer, nullable=False)
    vehicle_vin = Column(String(32), nullable=True)
    vehicle_engine = Column(String(100), nullable=True)
    vehicle_trim = Column(String(100), nullable=True)

    # Requested parts: [{"name", "description", "quantity", "notes"}]
    items = Column(JSON, nullable=False, default=list)
    message = Column(Text, nullable=True)
    urgency = Column(SQLEnum(QuoteUrgency), nullable=False, default=QuoteUrgency.MEDIUM)
    preferred_contact = Column(SQLEnum(ContactPreference), nullable=False, default=ContactPreference.EMAIL)

    # Staff response
    status = Column(SQLEnum(QuoteStatus), nullable=False, default=QuoteStatus.PENDING)
    quoted_price_cents = Column(Integer, nullable=True)
    quotation_notes = Column(Text, nullable=True)
    quoted_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    quoted_at = Column(DateTime, nullable=True)
    valid_until = Column(DateTime, nullable=True)
    responded_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    user = relationship('User', foreign_keys=[user_id], backref='quotes')

    __table_args__ = (
        CheckConstraint('quoted_price_cents IS NULL OR quoted_price_cents >= 0', name='check_quote_price_non_negative'),
        Index('ix_quotes_status_urgency', 'status', 'urgency'),
        Index('ix_quotes_user_id', 'user_id'),
    )


class QuoteItemDTO(BaseModel):
    name: str
    description: str | None = None
    quantity: int = 1
    notes: str | None = None


class QuoteDTO(BaseModel):
    id: int | None = None
    quote_number: str | None = None
    user_id: int | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    customer_company: str | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None
    vehicle_year: int | None = None
    vehicle_vin: str | None = None
    vehicle_engine: str | None = None
    vehicle_trim: str | None = None
    items: list[QuoteItemDTO] = []
    message: str | None = None
    urgency: QuoteUrgency | None = None
    preferred_contact: ContactPreference | None = None
    status: QuoteStatus | None = None
    quoted_price_cents: int | None = None
    quotation_notes: str | None = None
    quoted_by: int | None = None
    quoted_at: datetime | None = None
    valid_until: datetime | None = None
    responded_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator('items', mode='before')
    @classmethod
    def validate_items(cls, v):
        if v is None:
            return []
        return v
