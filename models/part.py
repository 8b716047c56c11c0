from datetime import datetime

from pydantic import BaseModel, field_validator
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, CheckConstraint, Index, func
from sqlalchemy import Enum as SQLEnum

from enums.currency import Currency
from enums.part_condition import PartCondition
from models.base import Base


# A catalog part; stock is a counter, prices are stored in cents
class Part(Base):
    __tablename__ = 'parts'

    id = Column(Integer, primary_key=True)
    part_number = Column(String(64), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False)
    subcategory = Column(String(100), nullable=True)
    brand = Column(String(100), nullable=False)
    manufacturer = Column(String(100), nullable=True)

    # Vehicle compatibility
    vehicle_make = Column(String(100), nullable=True)
    vehicle_model = Column(String(100), nullable=True)
    condition = Column(SQLEnum(PartCondition), nullable=False, default=PartCondition.NEW)

    # Pricing (minor units)
    price_cents = Column(Integer, nullable=False)
    cost_price_cents = Column(Integer, nullable=True)
    currency = Column(SQLEnum(Currency), nullable=False, default=Currency.MUR)

    # Inventory
    stock = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    sku = Column(String(64), nullable=True, unique=True)
    location = Column(String(100), nullable=True)

    image_url = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('price_cents >= 0', name='check_part_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_part_stock_non_negative'),
        Index('ix_parts_category', 'category'),
        Index('ix_parts_brand', 'brand'),
        Index('ix_parts_vehicle_make', 'vehicle_make'),
    )


class PartDTO(BaseModel):
    id: int | None = None
    part_number: str | None = None
    name: str | None = None
    description: str | None = ""
    category: str | None = None
    subcategory: str | None = None
    brand: str | None = None
    manufacturer: str | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None
    condition: PartCondition | None = PartCondition.NEW
    price_cents: int | None = None
    cost_price_cents: int | None = None
    currency: Currency | None = Currency.MUR
    stock: int | None = 0
    low_stock_threshold: int | None = 5
    sku: str | None = None
    location: str | None = None
    image_url: str | None = None
    tags: list[str] = []
    is_active: bool | None = True
    is_featured: bool | None = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator('tags', mode='before')
    @classmethod
    def validate_tags(cls, v):
        """Tags may come back from the JSON column as None."""
        if v is None:
            return []
        return v

    @property
    def in_stock(self) -> bool:
        return (self.stock or 0) > 0
