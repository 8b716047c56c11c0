from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, DateTime, ForeignKey, String, Text, Numeric, func, CheckConstraint, Index
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.currency import Currency
from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from models.base import Base
from models.orderItem import OrderItemDTO


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True)
    order_number = Column(String(32), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING)

    # Totals (minor units), fixed at submission
    subtotal_cents = Column(Integer, nullable=False)
    shipping_cents = Column(Integer, nullable=False, default=0)
    tax_cents = Column(Integer, nullable=False)
    total_cents = Column(Integer, nullable=False)
    tax_rate = Column(Numeric(5, 4), nullable=False)
    currency = Column(SQLEnum(Currency), nullable=False)

    # Shipping
    shipping_method = Column(String(50), nullable=False)
    shipping_name = Column(String(200), nullable=False)
    shipping_email = Column(String(200), nullable=False)
    shipping_phone = Column(String(50), nullable=False)
    shipping_street = Column(String(300), nullable=False)
    shipping_city = Column(String(100), nullable=False)
    shipping_postal_code = Column(String(20), nullable=True)
    shipping_country = Column(String(100), nullable=False, default="Mauritius")
    tracking_number = Column(String(100), nullable=True)
    estimated_delivery = Column(DateTime, nullable=True)

    # Payment
    payment_method = Column(SQLEnum(PaymentMethod), nullable=False)
    payment_status = Column(SQLEnum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    paid_at = Column(DateTime, nullable=True)

    customer_notes = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
    confirmed_at = Column(DateTime, nullable=True)
    shipped_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    # Relations
    user = relationship('User', backref='orders')
    items = relationship('OrderItem', back_populates='order', cascade='all, delete-orphan', lazy='selectin')

    __table_args__ = (
        CheckConstraint('subtotal_cents >= 0', name='check_order_subtotal_non_negative'),
        CheckConstraint('total_cents = subtotal_cents + shipping_cents + tax_cents', name='check_order_total_sum'),
        Index('ix_orders_user_created', 'user_id', 'created_at'),
    )


class OrderDTO(BaseModel):
    id: int | None = None
    order_number: str | None = None
    user_id: int | None = None
    status: OrderStatus | None = None
    subtotal_cents: int | None = None
    shipping_cents: int | None = 0
    tax_cents: int | None = None
    total_cents: int | None = None
    tax_rate: float | None = None
    currency: Currency | None = None
    shipping_method: str | None = None
    shipping_name: str | None = None
    shipping_email: str | None = None
    shipping_phone: str | None = None
    shipping_street: str | None = None
    shipping_city: str | None = None
    shipping_postal_code: str | None = None
    shipping_country: str | None = None
    tracking_number: str | None = None
    estimated_delivery: datetime | None = None
    payment_method: PaymentMethod | None = None
    payment_status: PaymentStatus | None = None
    paid_at: datetime | None = None
    customer_notes: str | None = None
    admin_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    items: list[OrderItemDTO] = []
