"""
HTML email templates for order confirmations.

Two audiences:
- customer: receipt-style confirmation with delivery estimate and tracking link
- admin: operational summary with the customer's contact details

Templates are plain strings with {variable} placeholders rendered with
str.format. Inline styles only (no <style> blocks), since mail clients strip
them; this also keeps literal braces out of the markup. Every value that came
from the checkout payload is HTML-escaped before substitution.

Rendering is pure: the same request and the same `now` produce the same
message. `now` only feeds the informational order date and delivery date.
"""

from datetime import datetime, timedelta
from html import escape
from typing import Optional

from order_email.models import EmailMessage, NotificationRequest, OrderItem
from shared.config import Settings


EXPEDITED_KEYWORD = "express"

WHATSAPP_URL = "https://wa.me/923488875456"
INSTAGRAM_URL = "https://instagram.com/skarduorganics"
FACEBOOK_URL = "https://facebook.com/skarduorganics"
STORE_ADDRESS = "Office 403, 4th floor, Building Park Lane<br>E 11/2 Islamabad, Pakistan"


# =============================================================================
# Formatting helpers
# =============================================================================

def format_amount(value: float) -> str:
    """Rupee amount with thousands separators: 1500 -> '1,500', 99.5 -> '99.50'."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_shipping(cost: float) -> str:
    return "FREE" if cost == 0 else f"Rs {format_amount(cost)}"


def format_order_date(now: datetime) -> str:
    # e.g. "October 19, 2026, 03:45 PM"
    return f"{now:%B} {now.day}, {now:%Y, %I:%M %p}"


def format_delivery_date(day: datetime) -> str:
    # e.g. "Monday, October 24, 2026"
    return f"{day:%A, %B} {day.day}, {day:%Y}"


def is_expedited(shipping_method: str) -> bool:
    return EXPEDITED_KEYWORD in shipping_method.lower()


def delivery_estimate(shipping_method: str, now: datetime) -> tuple[str, datetime]:
    """
    Business-day window and estimated arrival for a shipping method.

    Returns:
        ("1-2", now + 2 days) for expedited methods, else ("4-5", now + 5 days)
    """
    if is_expedited(shipping_method):
        return "1-2", now + timedelta(days=2)
    return "4-5", now + timedelta(days=5)


# =============================================================================
# Customer template
# =============================================================================

CUSTOMER_ITEM_ROW = """
    <tr>
      <td style="padding: 16px 12px; border-bottom: 1px solid #e5e7eb; font-weight: 500; color: #1A3C34;">{name}</td>
      <td style="padding: 16px 12px; border-bottom: 1px solid #e5e7eb; text-align: center; color: #6b7280;">{quantity}</td>
      <td style="padding: 16px 12px; border-bottom: 1px solid #e5e7eb; text-align: right; color: #374151;">Rs {price}</td>
      <td style="padding: 16px 12px; border-bottom: 1px solid #e5e7eb; text-align: right; font-weight: 600; color: #1A3C34;">Rs {line_total}</td>
    </tr>"""

CUSTOMER_EMAIL = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Order Confirmation - {store_name}</title>
</head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f3f4f6;">
  <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff;">

    <div style="background-color: #1A3C34; padding: 40px 30px; text-align: center;">
      <h1 style="color: #C8A165; margin: 0; font-size: 32px;">{store_name}</h1>
      <p style="color: #d1d5db; margin: 8px 0 0 0; font-size: 14px;">100% Natural &amp; Organic Products from the Himalayas</p>
    </div>

    <div style="background-color: #dcfce7; padding: 24px; text-align: center; border-bottom: 3px solid #22c55e;">
      <h2 style="color: #166534; margin: 0; font-size: 24px;">Thanks for your order!</h2>
      <p style="color: #15803d; margin: 8px 0 0 0;">We've received your order and will begin processing it right away.</p>
    </div>

    <div style="padding: 40px 30px;">
      <p style="color: #374151; font-size: 16px; line-height: 1.6;">
        Hi <strong>{customer_name}</strong>,<br><br>
        Thank you for shopping with {store_name}! Your order has been confirmed and will be on its way soon.
      </p>

      <div style="background-color: #f8f9fa; border-radius: 12px; padding: 20px; margin-bottom: 24px; border-left: 4px solid #C8A165;">
        <p style="color: #6b7280; font-size: 12px; text-transform: uppercase; margin: 0 0 4px 0;">Order Number</p>
        <p style="color: #1A3C34; font-size: 18px; font-weight: 700; margin: 0;">#{order_id}</p>
      </div>

      <table style="width: 100%; margin-bottom: 24px;">
        <tr><td style="padding: 8px 0; color: #6b7280;">Order Date:</td><td style="text-align: right; color: #1A3C34;">{order_date}</td></tr>
        <tr><td style="padding: 8px 0; color: #6b7280;">Payment Method:</td><td style="text-align: right; color: #1A3C34;">{payment_method}</td></tr>
        <tr><td style="padding: 8px 0; color: #6b7280;">Shipping Method:</td><td style="text-align: right; color: #1A3C34;">{shipping_method}</td></tr>
        <tr><td style="padding: 8px 0; color: #6b7280;">Estimated Delivery:</td><td style="text-align: right; color: #22c55e; font-weight: 600;">{estimated_delivery}</td></tr>
      </table>

      <h3 style="color: #1A3C34; margin: 0 0 16px 0;">Order Items</h3>
      <table style="width: 100%; border-collapse: collapse; margin-bottom: 24px;">
        <thead>
          <tr style="background-color: #1A3C34;">
            <th style="padding: 14px 12px; text-align: left; color: #ffffff;">Product</th>
            <th style="padding: 14px 12px; text-align: center; color: #ffffff;">Qty</th>
            <th style="padding: 14px 12px; text-align: right; color: #ffffff;">Price</th>
            <th style="padding: 14px 12px; text-align: right; color: #ffffff;">Total</th>
          </tr>
        </thead>
        <tbody>{items}
        </tbody>
      </table>

      <table style="width: 100%; background-color: #1A3C34; border-radius: 12px; padding: 24px; margin-bottom: 32px;">
        <tr><td style="padding: 8px 0; color: #d1d5db;">Subtotal:</td><td style="text-align: right; color: #ffffff;">Rs {subtotal}</td></tr>
        <tr><td style="padding: 8px 0; color: #d1d5db;">Shipping:</td><td style="text-align: right; color: #ffffff;">{shipping}</td></tr>
        <tr><td style="padding: 16px 0 8px 0; color: #C8A165; font-size: 18px; font-weight: 700;">Total:</td><td style="text-align: right; color: #C8A165; font-size: 20px; font-weight: 700;">Rs {total}</td></tr>
      </table>

      <h3 style="color: #1A3C34; margin: 0 0 16px 0;">Shipping Address</h3>
      <div style="background-color: #f8f9fa; border-radius: 12px; padding: 20px; margin-bottom: 32px; border-left: 4px solid #C8A165;">
        <p style="margin: 0; color: #374151; line-height: 1.8;">
          <strong>{recipient_name}</strong><br>
          {street}<br>
          {city}, {postal_code}<br>
          Pakistan<br>
          Phone: {phone}
        </p>
      </div>

      <div style="background-color: #fef3c7; border-radius: 12px; padding: 24px; margin-bottom: 32px; border: 1px solid #fcd34d;">
        <h4 style="color: #92400e; margin: 0 0 12px 0;">What happens next?</h4>
        <ol style="margin: 0; padding-left: 20px; color: #78350f; line-height: 1.8;">
          <li>We'll prepare your order for shipping</li>
          <li>You'll receive a shipping confirmation with tracking details</li>
          <li>Your order will arrive within {delivery_days} business days</li>
        </ol>
      </div>

      <div style="text-align: center; margin-bottom: 32px;">
        <a href="{track_url}" style="display: inline-block; background-color: #C8A165; color: #1A3C34; padding: 16px 40px; border-radius: 50px; text-decoration: none; font-weight: 700;">Track Your Order</a>
      </div>

      <div style="text-align: center; padding-top: 24px; border-top: 1px solid #e5e7eb;">
        <p style="color: #6b7280; margin: 0 0 8px 0;">Need help with your order?</p>
        <p style="margin: 0;">
          <a href="mailto:{support_email}" style="color: #C8A165; font-weight: 600; text-decoration: none;">{support_email}</a>
          <span style="color: #d1d5db; margin: 0 8px;">|</span>
          <a href="{whatsapp_url}" style="color: #22c55e; font-weight: 600; text-decoration: none;">WhatsApp</a>
        </p>
      </div>
    </div>

    <div style="background-color: #1A3C34; padding: 32px; text-align: center;">
      <p style="color: #C8A165; margin: 0 0 8px 0; font-size: 18px; font-weight: 700;">{store_name}</p>
      <p style="color: #9ca3af; margin: 0 0 16px 0; font-size: 12px; line-height: 1.6;">{store_address}</p>
      <p style="margin: 0 0 16px 0;">
        <a href="{site_url}" style="color: #C8A165; text-decoration: none; margin: 0 8px;">Website</a> |
        <a href="{instagram_url}" style="color: #C8A165; text-decoration: none; margin: 0 8px;">Instagram</a> |
        <a href="{facebook_url}" style="color: #C8A165; text-decoration: none; margin: 0 8px;">Facebook</a>
      </p>
      <p style="color: #6b7280; margin: 0; font-size: 11px;">&copy; {year} {store_name}. All rights reserved.</p>
    </div>
  </div>
</body>
</html>
"""

CUSTOMER_SUBJECT = "Order Confirmed! \U0001F389 #{order_id} | {store_name}"


# =============================================================================
# Admin template
# =============================================================================

ADMIN_ITEM_ROW = """
    <tr>
      <td style="padding: 12px; border-bottom: 1px solid #e5e7eb;">{name}</td>
      <td style="padding: 12px; border-bottom: 1px solid #e5e7eb; text-align: center;">{quantity}</td>
      <td style="padding: 12px; border-bottom: 1px solid #e5e7eb; text-align: right;">Rs {price}</td>
      <td style="padding: 12px; border-bottom: 1px solid #e5e7eb; text-align: right; font-weight: bold;">Rs {line_total}</td>
    </tr>"""

ADMIN_EMAIL = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>New Order Received - #{order_id}</title>
</head>
<body style="margin: 0; padding: 20px; font-family: Arial, sans-serif; background-color: #f3f4f6;">
  <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 12px; overflow: hidden;">
    <div style="background-color: #1A3C34; padding: 24px; text-align: center;">
      <h1 style="color: #C8A165; margin: 0; font-size: 20px;">New Order Received!</h1>
    </div>

    <div style="padding: 30px;">
      <div style="background-color: #dcfce7; padding: 16px; border-radius: 8px; margin-bottom: 24px; text-align: center;">
        <p style="margin: 0; color: #166534; font-size: 24px; font-weight: bold;">Order #{order_id}</p>
        <p style="margin: 8px 0 0 0; color: #15803d;">{order_date}</p>
      </div>

      <h3 style="color: #1A3C34; border-bottom: 2px solid #C8A165; padding-bottom: 8px;">Customer Details</h3>
      <table style="width: 100%; margin-bottom: 24px;">
        <tr><td style="padding: 8px 0; color: #6b7280;">Name:</td><td style="font-weight: bold;">{customer_name}</td></tr>
        <tr><td style="padding: 8px 0; color: #6b7280;">Email:</td><td><a href="mailto:{customer_email}" style="color: #1A3C34;">{customer_email}</a></td></tr>
        <tr><td style="padding: 8px 0; color: #6b7280;">Phone:</td><td><a href="tel:{phone}" style="color: #1A3C34;">{phone}</a></td></tr>
        <tr><td style="padding: 8px 0; color: #6b7280;">Address:</td><td>{street}, {city}, {postal_code}</td></tr>
      </table>

      <h3 style="color: #1A3C34; border-bottom: 2px solid #C8A165; padding-bottom: 8px;">Order Information</h3>
      <table style="width: 100%; margin-bottom: 24px;">
        <tr><td style="padding: 8px 0; color: #6b7280;">Payment:</td><td style="font-weight: bold;">{payment_method}</td></tr>
        <tr><td style="padding: 8px 0; color: #6b7280;">Shipping:</td><td style="font-weight: bold;">{shipping_method}</td></tr>
      </table>

      <h3 style="color: #1A3C34; border-bottom: 2px solid #C8A165; padding-bottom: 8px;">Order Items</h3>
      <table style="width: 100%; border-collapse: collapse; margin-bottom: 24px;">
        <thead>
          <tr style="background-color: #f3f4f6;">
            <th style="padding: 12px; text-align: left;">Product</th>
            <th style="padding: 12px; text-align: center;">Qty</th>
            <th style="padding: 12px; text-align: right;">Price</th>
            <th style="padding: 12px; text-align: right;">Total</th>
          </tr>
        </thead>
        <tbody>{items}
        </tbody>
      </table>

      <table style="width: 100%; background-color: #1A3C34; color: #ffffff; padding: 20px; border-radius: 8px;">
        <tr><td style="padding: 4px 0;">Subtotal:</td><td style="text-align: right;">Rs {subtotal}</td></tr>
        <tr><td style="padding: 4px 0;">Shipping:</td><td style="text-align: right;">{shipping}</td></tr>
        <tr><td style="padding: 12px 0 0 0; font-size: 20px; font-weight: bold; color: #C8A165;">TOTAL:</td><td style="padding: 12px 0 0 0; text-align: right; font-size: 20px; font-weight: bold; color: #C8A165;">Rs {total}</td></tr>
      </table>
    </div>

    <div style="background-color: #f3f4f6; padding: 16px; text-align: center;">
      <p style="margin: 0; color: #6b7280; font-size: 12px;">This is an automated notification from {store_name}</p>
    </div>
  </div>
</body>
</html>
"""

ADMIN_SUBJECT = "\U0001F6D2 New Order #{order_id} - Rs {total} | {customer_name}"


# =============================================================================
# Rendering
# =============================================================================

def _render_items(items: list[OrderItem], row_template: str) -> str:
    return "".join(
        row_template.format(
            name=escape(item.name),
            quantity=item.quantity,
            price=format_amount(item.price),
            line_total=format_amount(item.line_total),
        )
        for item in items
    )


def _common_context(request: NotificationRequest, settings: Settings, now: datetime) -> dict:
    """Values shared by both audiences, already escaped."""
    address = request.shipping_address
    return {
        "store_name": escape(settings.store_name),
        "order_id": escape(request.order_id),
        "customer_name": escape(request.customer_name),
        "order_date": format_order_date(now),
        "payment_method": escape(request.payment_method),
        "shipping_method": escape(request.shipping_method),
        "subtotal": format_amount(request.subtotal),
        "shipping": format_shipping(request.shipping_cost),
        "total": format_amount(request.total),
        "street": escape(address.address),
        "city": escape(address.city),
        "postal_code": escape(address.postal_code),
        "phone": escape(address.phone),
    }


def render_customer_email(
    request: NotificationRequest,
    settings: Settings,
    now: Optional[datetime] = None,
) -> EmailMessage:
    """Render the buyer's order confirmation."""
    now = now or datetime.now()
    delivery_days, arrival = delivery_estimate(request.shipping_method, now)

    html = CUSTOMER_EMAIL.format(
        **_common_context(request, settings, now),
        items=_render_items(request.order_items, CUSTOMER_ITEM_ROW),
        estimated_delivery=format_delivery_date(arrival),
        delivery_days=delivery_days,
        recipient_name=escape(request.shipping_address.full_name),
        track_url=escape(f"{settings.site_url}/#/orders"),
        site_url=escape(settings.site_url),
        support_email=escape(settings.support_email),
        whatsapp_url=WHATSAPP_URL,
        instagram_url=INSTAGRAM_URL,
        facebook_url=FACEBOOK_URL,
        store_address=STORE_ADDRESS,
        year=now.year,
    )
    subject = CUSTOMER_SUBJECT.format(order_id=request.order_id, store_name=settings.store_name)
    return EmailMessage(sender=settings.customer_sender, to=[request.to], subject=subject, html=html)


def render_admin_email(
    request: NotificationRequest,
    settings: Settings,
    now: Optional[datetime] = None,
) -> EmailMessage:
    """
    Render the operator's new-order notification.

    Raises:
        ValueError: If no administrator mailbox is configured
    """
    if not settings.admin_email:
        raise ValueError("No administrator mailbox configured")
    now = now or datetime.now()

    html = ADMIN_EMAIL.format(
        **_common_context(request, settings, now),
        items=_render_items(request.order_items, ADMIN_ITEM_ROW),
        customer_email=escape(request.to),
    )
    subject = ADMIN_SUBJECT.format(
        order_id=request.order_id,
        total=format_amount(request.total),
        customer_name=request.customer_name,
    )
    return EmailMessage(sender=settings.admin_sender, to=[settings.admin_email], subject=subject, html=html)
