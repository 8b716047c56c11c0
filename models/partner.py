from datetime import datetime

from pydantic import BaseModel, field_validator
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, ForeignKey, Numeric, func, CheckConstraint, Index
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.business_type import BusinessType
from enums.partner_level import PartnerLevel
from enums.partner_status import PartnerStatus
from models.base import Base


class PartnerApplication(Base):
    __tablename__ = 'partner_applications'

    id = Column(Integer, primary_key=True)
    application_number = Column(String(32), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)

    # Business information
    business_name = Column(String(200), nullable=False)
    business_type = Column(SQLEnum(BusinessType), nullable=False)
    registration_number = Column(String(100), nullable=True)
    vat_number = Column(String(100), nullable=True)
    years_in_operation = Column(Integer, nullable=False, default=0)
    location = Column(String(100), nullable=False)
    address = Column(String(300), nullable=False)

    # Contact
    contact_name = Column(String(200), nullable=False)
    contact_position = Column(String(100), nullable=True)
    contact_phone = Column(String(50), nullable=False)
    contact_email = Column(String(200), nullable=False)

    # Business profile
    specialization = Column(JSON, nullable=False, default=list)
    monthly_volume = Column(String(50), nullable=True)
    current_suppliers = Column(Text, nullable=True)
    additional_info = Column(Text, nullable=True)

    # Review
    status = Column(SQLEnum(PartnerStatus), nullable=False, default=PartnerStatus.PENDING)
    partner_level = Column(SQLEnum(PartnerLevel), nullable=True)
    discount_rate = Column(Numeric(5, 2), nullable=True)
    credit_limit_cents = Column(Integer, nullable=True)
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)

    terms_accepted = Column(Boolean, nullable=False, default=False)
    marketing_consent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    user = relationship('User', foreign_keys=[user_id], backref='partner_applications')

    __table_args__ = (
        CheckConstraint('years_in_operation >= 0', name='check_partner_years_non_negative'),
        CheckConstraint('discount_rate IS NULL OR (discount_rate >= 0 AND discount_rate <= 50)',
                        name='check_partner_discount_range'),
        Index('ix_partner_applications_user_status', 'user_id', 'status'),
    )


class PartnerApplicationDTO(BaseModel):
    id: int | None = None
    application_number: str | None = None
    user_id: int | None = None
    business_name: str | None = None
    business_type: BusinessType | None = None
    registration_number: str | None = None
    vat_number: str | None = None
    years_in_operation: int | None = 0
    location: str | None = None
    address: str | None = None
    contact_name: str | None = None
    contact_position: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    specialization: list[str] = []
    monthly_volume: str | None = None
    current_suppliers: str | None = None
    additional_info: str | None = None
    status: PartnerStatus | None = None
    partner_level: PartnerLevel | None = None
    discount_rate: float | None = None
    credit_limit_cents: int | None = None
    admin_notes: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    terms_accepted: bool | None = False
    marketing_consent: bool | None = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator('specialization', mode='before')
    @classmethod
    def validate_specialization(cls, v):
        if v is None:
            return []
        return v
