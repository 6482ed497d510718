from __future__ import annotations

"""Payment confirmation emails for bookings.

`send_booking_confirmation` is the error boundary for the notification path:
it never raises, so it can run as a background task after the webhook
acknowledgement without affecting it.
"""

import html
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from booking_api import config
from booking_api.services.email_resend import ResendEmailError, ResendNotConfigured, send_email

logger = logging.getLogger("booking_notifications")

CONFIRMATION_SUBJECT = "Your Mass Booking is Confirmed"


@dataclass(frozen=True)
class ConfirmationEmail:
    to: str
    subject: str
    text: str
    html: str


def format_amount(amount: Any, symbol: Optional[str] = None) -> str:
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    if isinstance(amount, int):
        return f"{symbol}{amount:,}"
    if isinstance(amount, float):
        return f"{symbol}{amount:,.2f}"
    return f"{symbol}{amount}"


def format_date(value: Any) -> str:
    """Render a stored date as e.g. `1 January 2024`."""

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if isinstance(value, (date, datetime)):
        return f"{value.day} {value:%B %Y}"
    return str(value or "")


def _date_range(booking: Mapping[str, Any]) -> tuple[str, Optional[str]]:
    start = format_date(booking.get("startDate"))
    end = booking.get("endDate")
    return start, (format_date(end) if end else None)


def build_confirmation_email(booking: Mapping[str, Any], *, sender_name: Optional[str] = None) -> ConfirmationEmail:
    sender_name = sender_name or config.EMAIL_SENDER_NAME
    name = str(booking.get("name") or "")
    amount = format_amount(booking.get("amount"))
    start, end = _date_range(booking)
    time_str = str(booking.get("time") or "")

    period = f"{start} to {end}" if end else start

    text_body = (
        f"Hi {name},\n\n"
        f"We have received your payment of {amount} for your mass booking on {period} at {time_str}.\n\n"
        "Thank you for your booking! We will notify you of any further updates.\n\n"
        f"God bless,\n{sender_name}\n"
    )

    esc = html.escape
    period_html = f"<strong>{esc(start)}</strong>"
    if end:
        period_html += f" to <strong>{esc(end)}</strong>"

    html_body = f"""
<p>Hi <strong>{esc(name)}</strong>,</p>
<p>We have received your payment of <strong>{esc(amount)}</strong> for your mass booking on {period_html} at <strong>{esc(time_str)}</strong>.</p>
<p>Thank you for your booking! We will notify you of any further updates.</p>
<p>God bless,<br/>{esc(sender_name)}</p>
""".strip()

    return ConfirmationEmail(
        to=str(booking.get("email") or ""),
        subject=CONFIRMATION_SUBJECT,
        text=text_body,
        html=html_body,
    )


async def send_booking_confirmation(booking: Mapping[str, Any]) -> bool:
    """Email the booker that their payment arrived. Returns True when sent."""

    booking_id = booking.get("_id")

    if not config.ENABLE_BOOKING_EMAILS:
        logger.info("Booking emails disabled; skipping confirmation for %s", booking_id)
        return False

    message = build_confirmation_email(booking)
    if not message.to:
        logger.warning("Booking %s has no email address; confirmation not sent", booking_id)
        return False

    try:
        await send_email(
            to_email=message.to,
            subject=message.subject,
            html=message.html,
            text=message.text,
            sender_name=config.EMAIL_SENDER_NAME,
        )
    except ResendNotConfigured as exc:
        logger.warning("Email relay not configured, confirmation for %s not sent: %s", booking_id, exc)
        return False
    except ResendEmailError as exc:
        logger.error("Error sending confirmation for booking %s: %s", booking_id, exc)
        return False
    except Exception:
        logger.exception("Unexpected error sending confirmation for booking %s", booking_id)
        return False

    logger.info("Confirmation email sent to %s", message.to)
    return True
