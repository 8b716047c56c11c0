import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

import config
from enums.message_scope import MessageScope
from enums.order_status import OrderStatus
from models.order import OrderDTO
from models.partner import PartnerApplicationDTO
from models.quote import QuoteDTO
from utils.localizator import Localizator
from utils.money import format_amount

TEMPLATES_DIR = Path(__file__).parent.parent / "templates" / "email"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

# Customer-facing wording per order status
ORDER_STATUS_MESSAGES = {
    OrderStatus.CONFIRMED: "Your order has been confirmed and is being prepared for shipment.",
    OrderStatus.PROCESSING: "Your order is currently being processed and prepared for shipment.",
    OrderStatus.SHIPPED: "Great news! Your order has been shipped and is on its way to you.",
    OrderStatus.DELIVERED: "Your order has been delivered successfully. We hope you're satisfied with your purchase!",
    OrderStatus.CANCELLED: "Your order has been cancelled. If you have any questions, please contact our support team.",
    OrderStatus.REFUNDED: "Your payment has been refunded.",
}


class EmailService:
    """
    Renders e-mail templates and hands them to SMTP.

    Delivery never raises: a missing EMAIL_HOST skips sending, and transport
    failures are logged and reported as False.
    """

    @staticmethod
    def render(template_name: str, **context) -> tuple[str, str]:
        context.setdefault("store_name", config.EMAIL_FROM_NAME)
        context.setdefault("storefront_url", config.STOREFRONT_URL)
        html = _env.get_template(f"{template_name}.html").render(**context)
        text = _env.get_template(f"{template_name}.txt").render(**context)
        return html, text

    @staticmethod
    def build_message(to: str, subject: str, html: str, text: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr((config.EMAIL_FROM_NAME, config.EMAIL_USER))
        message["To"] = to
        message.set_content(text)
        message.add_alternative(html, subtype="html")
        return message

    @staticmethod
    def _deliver(message: EmailMessage) -> None:
        with smtplib.SMTP(config.EMAIL_HOST, config.EMAIL_PORT, timeout=30) as smtp:
            if config.EMAIL_USE_TLS:
                smtp.starttls()
            if config.EMAIL_USER:
                smtp.login(config.EMAIL_USER, config.EMAIL_PASS)
            smtp.send_message(message)

    @staticmethod
    async def send(to: str, subject: str, template_name: str, **context) -> bool:
        if not to:
            logging.warning(f"E-mail '{template_name}' has no recipient, skipped")
            return False
        if not config.EMAIL_HOST:
            logging.info(f"EMAIL_HOST not configured, skipping '{template_name}' e-mail")
            return False
        try:
            html, text = EmailService.render(template_name, **context)
            message = EmailService.build_message(to, subject, html, text)
            await asyncio.to_thread(EmailService._deliver, message)
            logging.info(f"E-mail '{template_name}' sent")
            return True
        except Exception as e:
            logging.error(f"Failed to send '{template_name}' e-mail: {e}")
            return False


class NotificationService:

    @staticmethod
    def _amounts(order: OrderDTO) -> dict[str, str]:
        symbol = Localizator.get_currency_symbol()
        return {
            "subtotal": format_amount(order.subtotal_cents, symbol),
            "shipping": format_amount(order.shipping_cents, symbol),
            "tax": format_amount(order.tax_cents, symbol),
            "total": format_amount(order.total_cents, symbol),
        }

    @staticmethod
    async def order_confirmation(order: OrderDTO) -> bool:
        symbol = Localizator.get_currency_symbol()
        items = [
            {
                "name": item.name,
                "part_number": item.part_number,
                "quantity": item.quantity,
                "line_total": format_amount(item.line_total_cents, symbol),
            }
            for item in order.items
        ]
        subject = Localizator.get_text(MessageScope.COMMON, "order_confirmation_subject").format(
            order_number=order.order_number
        )
        return await EmailService.send(
            order.shipping_email, subject, "order_confirmation",
            order=order,
            items=items,
            totals=NotificationService._amounts(order),
            payment_method=order.payment_method.value if order.payment_method else "",
            estimated_delivery=order.estimated_delivery.strftime("%d %B %Y") if order.estimated_delivery else None,
        )

    @staticmethod
    async def order_status_update(order: OrderDTO) -> bool:
        status_title = Localizator.get_text(MessageScope.COMMON, f"status_{order.status.value}")
        subject = Localizator.get_text(MessageScope.COMMON, "order_status_subject").format(
            order_number=order.order_number
        )
        return await EmailService.send(
            order.shipping_email, subject, "order_status_update",
            order=order,
            status_title=status_title,
            status_message=ORDER_STATUS_MESSAGES.get(order.status, ""),
        )

    @staticmethod
    async def partner_application_received(application: PartnerApplicationDTO) -> bool:
        subject = Localizator.get_text(MessageScope.COMMON, "partner_confirmation_subject").format(
            application_number=application.application_number
        )
        return await EmailService.send(application.contact_email, subject, "partner_confirmation",
                                       application=application)

    @staticmethod
    async def partner_application_to_admin(application: PartnerApplicationDTO) -> bool:
        subject = Localizator.get_text(MessageScope.ADMIN, "new_partner_application_subject").format(
            business_name=application.business_name
        )
        return await EmailService.send(config.ADMIN_EMAIL, subject, "partner_admin_notification",
                                       application=application)

    @staticmethod
    async def partner_status_update(application: PartnerApplicationDTO) -> bool:
        status_title = Localizator.get_text(MessageScope.COMMON, f"status_{application.status.value}")
        subject = Localizator.get_text(MessageScope.COMMON, "partner_status_subject").format(
            application_number=application.application_number
        )
        credit_limit = None
        if application.credit_limit_cents:
            credit_limit = format_amount(application.credit_limit_cents, Localizator.get_currency_symbol())
        return await EmailService.send(
            application.contact_email, subject, "partner_status_update",
            application=application,
            status_title=status_title,
            credit_limit=credit_limit,
        )

    @staticmethod
    async def quote_to_admin(quote: QuoteDTO) -> bool:
        subject = Localizator.get_text(MessageScope.ADMIN, "new_quote_subject").format(
            quote_number=quote.quote_number,
            urgency=quote.urgency.value.upper(),
        )
        return await EmailService.send(config.ADMIN_EMAIL, subject, "quote_admin_notification", quote=quote)

    @staticmethod
    async def quote_received(quote: QuoteDTO) -> bool:
        subject = Localizator.get_text(MessageScope.COMMON, "quote_confirmation_subject").format(
            quote_number=quote.quote_number
        )
        return await EmailService.send(quote.customer_email, subject, "quote_confirmation", quote=quote)

    @staticmethod
    async def quote_response(quote: QuoteDTO) -> bool:
        subject = Localizator.get_text(MessageScope.COMMON, "quote_response_subject").format(
            quote_number=quote.quote_number
        )
        return await EmailService.send(
            quote.customer_email, subject, "quote_response",
            quote=quote,
            quoted_price=format_amount(quote.quoted_price_cents, Localizator.get_currency_symbol()),
            valid_until=quote.valid_until.strftime("%d %B %Y") if quote.valid_until else None,
        )
