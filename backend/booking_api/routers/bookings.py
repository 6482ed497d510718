from __future__ import annotations

"""Bookings HTTP contract:
- POST /api/bookings
- GET  /api/bookings?status=
- POST /api/bookings/webhook/payment (alias: /webhook/paystack)
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from booking_api import config
from booking_api.db import get_db
from booking_api.services import booking_service
from booking_api.services.booking_notifications import send_booking_confirmation
from booking_api.services.payment_webhook import handle_payment_webhook
from booking_api.utils import serialize_doc

router = APIRouter(prefix=f"{config.API_PREFIX}/bookings", tags=["bookings"])

WEBHOOK_ACK = "Webhook received"


@router.post("", status_code=201)
async def create_booking(payload: Dict[str, Any] = Body(...), db=Depends(get_db)):
    """Create a booking in pending status. refId defaults to paymentId."""

    booking = await booking_service.create_booking(db, payload)
    return JSONResponse(status_code=201, content=serialize_doc(booking))


@router.get("")
async def list_bookings(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    db=Depends(get_db),
):
    bookings = await booking_service.list_bookings(db, status=status_filter or None)
    return serialize_doc(bookings)


@router.post("/webhook/payment", response_class=PlainTextResponse)
@router.post("/webhook/paystack", response_class=PlainTextResponse, include_in_schema=False)
async def payment_webhook(request: Request, background_tasks: BackgroundTasks, db=Depends(get_db)):
    """Payment processor callback.

    Acknowledged with 200 whether or not a booking matched; only a bad
    signature is rejected. The confirmation email is sent after the response.
    """

    raw_body = await request.body()
    signature = request.headers.get(config.PAYSTACK_SIGNATURE_HEADER)

    result = await handle_payment_webhook(db, raw_body, signature)
    if result.should_notify:
        background_tasks.add_task(send_booking_confirmation, result.booking)

    return PlainTextResponse(WEBHOOK_ACK, status_code=200)
