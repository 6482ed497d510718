from __future__ import annotations

"""Application-level feature flags and configuration.

Everything is read from the process environment once at import time.
`server.py` loads a local `.env` (if present) before this module is imported.
"""

import os


def _env_flag(name: str, default: bool = True) -> bool:
    """Read a boolean-like flag from environment.

    Accepted falsy values: "0", "false", "off", "no" (case-insensitive).
    Anything else (or unset) falls back to `default`.
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in {"0", "false", "off", "no"}:
        return False
    if value in {"1", "true", "on", "yes"}:
        return True
    return default


# Application constants
API_PREFIX = "/api"
APP_NAME = "Booking API"
APP_VERSION = "1.0.0"
SERVICE_NAME = "booking-api"

DEFAULT_PORT = 5000

# Feature flags
ENABLE_BOOKING_EMAILS: bool = _env_flag("ENABLE_BOOKING_EMAILS", default=True)

# Notification formatting
EMAIL_SENDER_NAME = os.environ.get("EMAIL_SENDER_NAME", "St. Catherine Parish")
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₦")

# Payment processor
PAYMENT_SUCCESS_EVENT = "charge.success"
PAYSTACK_SIGNATURE_HEADER = "X-Paystack-Signature"


def listen_port() -> int:
    return int(os.environ.get("PORT", DEFAULT_PORT))


def cors_origins() -> list[str]:
    return os.environ.get("CORS_ORIGINS", "*").split(",")


def paystack_webhook_secret() -> str:
    """Shared secret for callback signatures; empty string disables the check."""

    return os.environ.get("PAYSTACK_WEBHOOK_SECRET", "")
