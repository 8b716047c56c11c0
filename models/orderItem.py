from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base import Base


# Snapshot of a part at purchase time, survives later catalog edits
class OrderItem(Base):
    __tablename__ = 'order_items'

    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_order_item_positive_quantity'),
        CheckConstraint('unit_price_cents >= 0', name='ck_order_item_price_non_negative'),
        Index('ix_order_items_order_id', 'order_id'),
        Index('ix_order_items_unique', 'order_id', 'part_id', unique=True),
    )

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    part_id = Column(Integer, ForeignKey('parts.id'), nullable=False)
    part_number = Column(String(64), nullable=False)
    name = Column(String(200), nullable=False)
    unit_price_cents = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    line_total_cents = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")


class OrderItemDTO(BaseModel):
    id: int | None = None
    order_id: int | None = None
    part_id: int | None = None
    part_number: str | None = None
    name: str | None = None
    unit_price_cents: int | None = None
    quantity: int | None = None
    line_total_cents: int | None = None
