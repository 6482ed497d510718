from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

import httpx

logger = logging.getLogger("email_resend")

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendNotConfigured(Exception):
    pass


class ResendEmailError(Exception):
    pass


async def send_email(
    *,
    to_email: str,
    subject: str,
    html: str,
    text: Optional[str] = None,
    sender_name: Optional[str] = None,
    reply_to: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> dict:
    """Send a single email via Resend.

    - `sender_name` is shown as the display name of the configured from-address
    - Returns parsed JSON response from Resend
    """

    api_key = _get_resend_api_key()
    sender = _get_resend_from_email()
    if sender_name:
        sender = f'"{sender_name}" <{sender}>'

    payload: dict = {
        "from": sender,
        "to": [to_email],
        "subject": subject,
        "html": html,
    }

    if text:
        payload["text"] = text

    if reply_to:
        payload["reply_to"] = [reply_to]
    elif os.environ.get("RESEND_REPLY_TO_EMAIL"):
        payload["reply_to"] = [os.environ["RESEND_REPLY_TO_EMAIL"]]

    final_headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
    if headers:
        final_headers.update(headers)

    async with httpx.AsyncClient(timeout=15.0) as client:
        try:
            resp = await client.post(RESEND_EMAILS_URL, json=payload, headers=final_headers)
        except httpx.HTTPError as exc:  # network or timeout
            logger.exception("Resend email request failed: %s", exc)
            raise ResendEmailError("RESEND_REQUEST_FAILED") from exc

    if resp.status_code >= 400:
        try:
            data = resp.json()
        except ValueError:
            data = {"error": resp.text}
        logger.error("Resend email API error %s: %s", resp.status_code, data)
        raise ResendEmailError("RESEND_API_ERROR")

    try:
        data = resp.json()
    except ValueError:
        data = {"id": None}

    logger.info("Resend email sent to %s (id=%s)", to_email, data.get("id"))
    return data


def _get_resend_api_key() -> str:
    key = os.environ.get("RESEND_API_KEY")
    if not key:
        raise ResendNotConfigured("RESEND_API_KEY is not set")
    return key


def _get_resend_from_email() -> str:
    sender = os.environ.get("RESEND_FROM_EMAIL") or os.environ.get("SENDER_EMAIL")
    if not sender:
        raise ResendNotConfigured("RESEND_FROM_EMAIL is not set")
    return sender
