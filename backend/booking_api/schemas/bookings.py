from __future__ import annotations

import math
import re
from datetime import date
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


EXTENSION_KEY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]{0,63}$")
RESERVED_KEYS = frozenset({"id", "_id", "status", "createdAt", "updatedAt"})
MAX_EXTENSION_FIELDS = 20

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class BookingCreate(BaseModel):
    """Client payload for a new booking.

    Known booking fields are typed; any other top-level key is kept as an
    extension field, provided it is a plain identifier holding a JSON scalar.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", str_strip_whitespace=True)

    payment_id: str = Field(..., alias="paymentId", min_length=1)
    ref_id: Optional[str] = Field(default=None, alias="refId")
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    amount: Union[int, float]
    time: str = Field(..., min_length=1)
    start_date: date = Field(..., alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")

    @field_validator("amount", mode="before")
    @classmethod
    def _reject_boolean_amount(cls, v: Any) -> Any:
        # bool is an int subclass; lax mode would store true as 1
        if isinstance(v, bool):
            raise ValueError("amount must be a positive number")
        return v

    @field_validator("amount")
    @classmethod
    def _positive_amount(cls, v: Union[int, float]) -> Union[int, float]:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("amount must be a positive number")
        return v

    @model_validator(mode="after")
    def _check_dates_and_extensions(self) -> "BookingCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")

        extra = self.model_extra or {}
        if len(extra) > MAX_EXTENSION_FIELDS:
            raise ValueError(f"at most {MAX_EXTENSION_FIELDS} extra fields are allowed")
        for key, value in extra.items():
            if key in RESERVED_KEYS:
                raise ValueError(f"{key} cannot be set by the client")
            if not EXTENSION_KEY_RE.match(key):
                raise ValueError(f"invalid field name {key!r}")
            if value is not None and not isinstance(value, (str, int, float, bool)):
                raise ValueError(f"{key} must be a string, number, boolean or null")
            if isinstance(value, float) and not math.isfinite(value):
                raise ValueError(f"{key} must be a finite number")
        return self

    @property
    def extensions(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class PaymentEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    reference: Optional[str] = None


class PaymentEvent(BaseModel):
    """Envelope of a payment processor callback: `{event, data: {reference, ...}}`."""

    model_config = ConfigDict(extra="allow")

    event: str = ""
    data: PaymentEventData = Field(default_factory=PaymentEventData)


def validation_message(exc: ValidationError, prefix: str = "Booking validation failed") -> str:
    """Flatten pydantic errors into one human-readable line."""

    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return f"{prefix}: " + ", ".join(parts)
