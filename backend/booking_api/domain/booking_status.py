from __future__ import annotations

from typing import Literal


BookingStatus = Literal[
    "pending",
    "paid",
]

STATUS_PENDING: BookingStatus = "pending"
STATUS_PAID: BookingStatus = "paid"


_ALLOWED_TRANSITIONS = {
    "pending": {"paid"},
    # Re-applying "paid" is how duplicate payment callbacks land.
    "paid": {"paid"},
}


def statuses_allowing(target: str) -> list[str]:
    """Return every current status from which `target` may be applied.

    Used as part of the update filter so the transition check and the write
    happen in one store operation.
    """

    return sorted(current for current, allowed in _ALLOWED_TRANSITIONS.items() if target in allowed)


def is_new_transition(previous_status: str | None, target: str) -> bool:
    """True when writing `target` over `previous_status` actually changes the booking."""

    return previous_status != target
