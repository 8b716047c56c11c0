"""
DTO -> JSON shapes of the REST API (camelCase keys, amounts as decimals).
"""

from models.order import OrderDTO
from models.part import PartDTO
from models.partner import PartnerApplicationDTO
from models.quote import QuoteDTO
from models.user import UserDTO
from services.catalog_query import total_pages
from utils.money import from_cents


def _amount(cents: int | None) -> float | None:
    if cents is None:
        return None
    return float(from_cents(cents))


def _value(enum_member):
    return enum_member.value if enum_member is not None else None


def part_to_dict(part: PartDTO, include_cost: bool = False) -> dict:
    data = {
        "id": part.id,
        "partNumber": part.part_number,
        "name": part.name,
        "description": part.description,
        "category": part.category,
        "subcategory": part.subcategory,
        "brand": part.brand,
        "manufacturer": part.manufacturer,
        "vehicleMake": part.vehicle_make,
        "vehicleModel": part.vehicle_model,
        "condition": _value(part.condition),
        "price": _amount(part.price_cents),
        "currency": _value(part.currency),
        "stock": part.stock,
        "inStock": part.in_stock,
        "lowStockThreshold": part.low_stock_threshold,
        "sku": part.sku,
        "location": part.location,
        "imageUrl": part.image_url,
        "tags": part.tags,
        "isActive": part.is_active,
        "isFeatured": part.is_featured,
        "createdAt": part.created_at,
        "updatedAt": part.updated_at,
    }
    if include_cost:
        data["costPrice"] = _amount(part.cost_price_cents)
    return data


def order_to_dict(order: OrderDTO) -> dict:
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "userId": order.user_id,
        "status": _value(order.status),
        "items": [
            {
                "partId": item.part_id,
                "partNumber": item.part_number,
                "name": item.name,
                "price": _amount(item.unit_price_cents),
                "quantity": item.quantity,
                "total": _amount(item.line_total_cents),
            }
            for item in order.items
        ],
        "subtotal": _amount(order.subtotal_cents),
        "shippingCost": _amount(order.shipping_cents),
        "tax": _amount(order.tax_cents),
        "total": _amount(order.total_cents),
        "taxRate": order.tax_rate,
        "currency": _value(order.currency),
        "shipping": {
            "method": order.shipping_method,
            "address": {
                "name": order.shipping_name,
                "email": order.shipping_email,
                "phone": order.shipping_phone,
                "street": order.shipping_street,
                "city": order.shipping_city,
                "postalCode": order.shipping_postal_code,
                "country": order.shipping_country,
            },
            "trackingNumber": order.tracking_number,
        },
        "payment": {
            "method": _value(order.payment_method),
            "status": _value(order.payment_status),
            "paidAt": order.paid_at,
        },
        "notes": order.customer_notes,
        "adminNotes": order.admin_notes,
        "estimatedDelivery": order.estimated_delivery,
        "createdAt": order.created_at,
        "updatedAt": order.updated_at,
        "confirmedAt": order.confirmed_at,
        "shippedAt": order.shipped_at,
        "deliveredAt": order.delivered_at,
        "cancelledAt": order.cancelled_at,
    }


def order_summary(order: OrderDTO) -> dict:
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "status": _value(order.status),
        "total": _amount(order.total_cents),
        "createdAt": order.created_at,
        "estimatedDelivery": order.estimated_delivery,
    }


def tracking_to_dict(order: OrderDTO, timeline: list[dict]) -> dict:
    """Public tracking view: no address, no notes, no customer id."""
    return {
        "orderNumber": order.order_number,
        "status": _value(order.status),
        "createdAt": order.created_at,
        "estimatedDelivery": order.estimated_delivery,
        "actualDelivery": order.delivered_at,
        "trackingNumber": order.tracking_number,
        "shipping": {"method": order.shipping_method},
        "payment": {"method": _value(order.payment_method), "status": _value(order.payment_status)},
        "items": [
            {
                "name": item.name,
                "partNumber": item.part_number,
                "quantity": item.quantity,
                "price": _amount(item.unit_price_cents),
            }
            for item in order.items
        ],
        "total": _amount(order.total_cents),
        "timeline": timeline,
    }


def partner_to_dict(application: PartnerApplicationDTO) -> dict:
    return {
        "id": application.id,
        "applicationNumber": application.application_number,
        "userId": application.user_id,
        "businessName": application.business_name,
        "businessType": _value(application.business_type),
        "registrationNumber": application.registration_number,
        "vatNumber": application.vat_number,
        "yearsInOperation": application.years_in_operation,
        "location": application.location,
        "address": application.address,
        "contactName": application.contact_name,
        "contactPosition": application.contact_position,
        "contactPhone": application.contact_phone,
        "contactEmail": application.contact_email,
        "specialization": application.specialization,
        "monthlyVolume": application.monthly_volume,
        "currentSuppliers": application.current_suppliers,
        "additionalInfo": application.additional_info,
        "status": _value(application.status),
        "partnerLevel": _value(application.partner_level),
        "discountRate": application.discount_rate,
        "creditLimit": _amount(application.credit_limit_cents),
        "adminNotes": application.admin_notes,
        "reviewedBy": application.reviewed_by,
        "reviewedAt": application.reviewed_at,
        "approvedAt": application.approved_at,
        "rejectedAt": application.rejected_at,
        "termsAccepted": application.terms_accepted,
        "marketingConsent": application.marketing_consent,
        "createdAt": application.created_at,
        "updatedAt": application.updated_at,
    }


def quote_to_dict(quote: QuoteDTO) -> dict:
    return {
        "id": quote.id,
        "quoteNumber": quote.quote_number,
        "userId": quote.user_id,
        "customer": {
            "name": quote.customer_name,
            "email": quote.customer_email,
            "phone": quote.customer_phone,
            "company": quote.customer_company,
        },
        "vehicle": {
            "make": quote.vehicle_make,
            "model": quote.vehicle_model,
            "year": quote.vehicle_year,
            "vin": quote.vehicle_vin,
            "engine": quote.vehicle_engine,
            "trim": quote.vehicle_trim,
        },
        "items": [item.model_dump() for item in quote.items],
        "message": quote.message,
        "urgency": _value(quote.urgency),
        "preferredContact": _value(quote.preferred_contact),
        "status": _value(quote.status),
        "quotedPrice": _amount(quote.quoted_price_cents),
        "quotationNotes": quote.quotation_notes,
        "quotedBy": quote.quoted_by,
        "quotedAt": quote.quoted_at,
        "validUntil": quote.valid_until,
        "respondedAt": quote.responded_at,
        "createdAt": quote.created_at,
        "updatedAt": quote.updated_at,
    }


def quote_summary(quote: QuoteDTO) -> dict:
    return {
        "id": quote.id,
        "quoteNumber": quote.quote_number,
        "status": _value(quote.status),
        "vehicle": {"make": quote.vehicle_make, "model": quote.vehicle_model, "year": quote.vehicle_year},
        "createdAt": quote.created_at,
    }


def user_to_dict(user: UserDTO) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": _value(user.role),
        "phone": user.phone,
        "address": {
            "street": user.street,
            "city": user.city,
            "postalCode": user.postal_code,
            "country": user.country,
        },
        "emailVerified": user.email_verified,
        "isActive": user.is_active,
        "adminNotes": user.admin_notes,
        "createdAt": user.created_at,
        "lastLoginAt": user.last_login_at,
    }


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": total_pages(total, limit),
    }
