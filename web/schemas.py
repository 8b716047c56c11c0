"""
Request bodies of the REST API.

Field names are camelCase on the wire and snake_case in Python. Money comes
in as decimal amounts and is converted to cents before it reaches a service.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from enums.business_type import BusinessType
from enums.contact_preference import ContactPreference
from enums.order_status import OrderStatus
from enums.part_condition import PartCondition
from enums.partner_level import PartnerLevel
from enums.partner_status import PartnerStatus
from enums.payment_method import PaymentMethod
from enums.quote_status import QuoteStatus
from enums.quote_urgency import QuoteUrgency
from enums.user_role import UserRole
from utils.money import to_cents


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PartCreateRequest(CamelModel):
    part_number: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    category: str = Field(..., min_length=1)
    subcategory: str | None = None
    brand: str | None = None
    manufacturer: str | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None
    condition: PartCondition = PartCondition.NEW
    price: Decimal = Field(..., ge=0)
    cost_price: Decimal | None = Field(None, ge=0)
    stock: int = Field(0, ge=0)
    low_stock_threshold: int | None = Field(None, ge=0)
    sku: str | None = None
    location: str | None = None
    image_url: str | None = None
    tags: list[str] = []
    is_featured: bool = False

    def to_values(self) -> dict:
        values = self.model_dump(exclude={"price", "cost_price"})
        values["price_cents"] = to_cents(self.price)
        if self.cost_price is not None:
            values["cost_price_cents"] = to_cents(self.cost_price)
        return values


class PartUpdateRequest(CamelModel):
    part_number: str | None = Field(None, min_length=1, max_length=64)
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = None
    subcategory: str | None = None
    brand: str | None = None
    manufacturer: str | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None
    condition: PartCondition | None = None
    price: Decimal | None = Field(None, ge=0)
    cost_price: Decimal | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    low_stock_threshold: int | None = Field(None, ge=0)
    sku: str | None = None
    location: str | None = None
    image_url: str | None = None
    tags: list[str] | None = None
    is_active: bool | None = None
    is_featured: bool | None = None

    def to_values(self) -> dict:
        """Only the fields the client actually sent."""
        values = self.model_dump(exclude_unset=True, exclude={"price", "cost_price"})
        if self.price is not None:
            values["price_cents"] = to_cents(self.price)
        if self.cost_price is not None:
            values["cost_price_cents"] = to_cents(self.cost_price)
        return values


class OrderLineRequest(CamelModel):
    part_id: int
    quantity: int = Field(..., ge=1)


class AddressRequest(CamelModel):
    # Blank values are reported by ShippingService with the offending field
    name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    postal_code: str | None = None
    country: str | None = None


class ShippingRequest(CamelModel):
    method: str
    address: AddressRequest = AddressRequest()


class PaymentRequest(CamelModel):
    method: PaymentMethod


class OrderCreateRequest(CamelModel):
    items: list[OrderLineRequest] = []
    shipping: ShippingRequest
    payment: PaymentRequest
    tax_rate: float | None = None
    notes: str | None = Field(None, max_length=1000)


class OrderUpdateRequest(CamelModel):
    status: OrderStatus | None = None
    tracking_number: str | None = Field(None, max_length=100)
    admin_notes: str | None = None


class PartnerApplicationRequest(CamelModel):
    business_name: str = Field(..., min_length=2, max_length=200)
    business_type: BusinessType
    registration_number: str | None = None
    vat_number: str | None = None
    years_in_operation: int = Field(0, ge=0)
    location: str = Field(..., min_length=2)
    address: str = Field(..., min_length=5)
    contact_name: str = Field(..., min_length=2)
    contact_position: str | None = None
    contact_phone: str = Field(..., min_length=8)
    contact_email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    specialization: list[str] = []
    monthly_volume: str | None = None
    current_suppliers: str | None = None
    additional_info: str | None = None
    terms_accepted: bool = False
    marketing_consent: bool = False


class PartnerReviewRequest(CamelModel):
    status: PartnerStatus
    partner_level: PartnerLevel | None = None
    discount_rate: float | None = None
    credit_limit: Decimal | None = Field(None, ge=0)
    admin_notes: str | None = None

    @property
    def credit_limit_cents(self) -> int | None:
        return None if self.credit_limit is None else to_cents(self.credit_limit)


class UserUpdateRequest(CamelModel):
    name: str | None = Field(None, min_length=1)
    email: str | None = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str | None = None
    role: UserRole | None = None
    email_verified: bool | None = None
    is_active: bool | None = None
    admin_notes: str | None = None


class CartAddRequest(CamelModel):
    part_id: int


class CartQuantityRequest(CamelModel):
    quantity: int


class QuoteCustomerRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(..., min_length=1)
    company: str | None = None


class QuoteVehicleRequest(CamelModel):
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    year: int
    vin: str | None = Field(None, max_length=32)
    engine: str | None = None
    trim: str | None = None


class QuoteItemRequest(CamelModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    quantity: int = Field(..., gt=0)
    notes: str | None = None


class QuoteCreateRequest(CamelModel):
    customer: QuoteCustomerRequest
    vehicle: QuoteVehicleRequest
    items: list[QuoteItemRequest] = Field(..., min_length=1)
    message: str | None = None
    urgency: QuoteUrgency = QuoteUrgency.MEDIUM
    preferred_contact: ContactPreference = ContactPreference.EMAIL

    def to_values(self) -> dict:
        """Flattened into QuoteDTO field names."""
        return {
            "customer_name": self.customer.name,
            "customer_email": self.customer.email,
            "customer_phone": self.customer.phone,
            "customer_company": self.customer.company,
            "vehicle_make": self.vehicle.make,
            "vehicle_model": self.vehicle.model,
            "vehicle_year": self.vehicle.year,
            "vehicle_vin": self.vehicle.vin,
            "vehicle_engine": self.vehicle.engine,
            "vehicle_trim": self.vehicle.trim,
            "items": [item.model_dump() for item in self.items],
            "message": self.message,
            "urgency": self.urgency,
            "preferred_contact": self.preferred_contact,
        }


class QuoteUpdateRequest(CamelModel):
    quoted_price: Decimal | None = Field(None, ge=0)
    quotation_notes: str | None = None
    valid_until: datetime | None = None
    status: QuoteStatus | None = None

    @property
    def quoted_price_cents(self) -> int | None:
        return None if self.quoted_price is None else to_cents(self.quoted_price)
