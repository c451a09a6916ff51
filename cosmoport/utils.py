"""
Shared helpers for time and number handling.

Ship production dates travel as epoch milliseconds on the wire and are stored
as naive UTC datetimes; decimal rounding follows the half-up rule used for
speed and rating.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_TWO_PLACES = Decimal("0.01")


def round_half_up(value: float, places: Decimal = _TWO_PLACES) -> float:
    """
    Round a float to two decimals, halves going away from zero.

    The float's shortest decimal form is rounded, not its binary expansion,
    so 0.125 becomes 0.13 and 2.675 becomes 2.68.

    Examples:
        >>> round_half_up(0.125)
        0.13
        >>> round_half_up(39.999)
        40.0
    """
    return float(Decimal(repr(value)).quantize(places, rounding=ROUND_HALF_UP))


def to_utc_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def from_epoch_millis(millis: int) -> datetime:
    """Build a naive UTC datetime from epoch milliseconds."""
    # timedelta arithmetic keeps working past the platform's time_t range
    return to_utc_naive(EPOCH + timedelta(milliseconds=millis))


def to_epoch_millis(moment: datetime) -> int:
    """Epoch milliseconds for a datetime; naive values are taken as UTC."""
    aware = moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    return (aware - EPOCH) // timedelta(milliseconds=1)
