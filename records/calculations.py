"""Date helpers and the contract cancellation-date calculation."""

from datetime import date
from dateutil.relativedelta import relativedelta
from typing import Optional, Union, TYPE_CHECKING

from .cancellation_info import CancellationInfo

if TYPE_CHECKING:
    from .contract import Contract


def parse_date(
    value: Union[str, date, None], fallback: Optional[date] = None
) -> Optional[date]:
    """Parse an ISO date string, returning fallback when missing or malformed."""
    if isinstance(value, date):
        return value
    if not value:
        return fallback
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return fallback


def add_months(start: date, months: int) -> date:
    """
    Add calendar months to a date.

    The day of month is clamped to the last valid day of the target month,
    so Jan 31 + 1 month is Feb 28 (or 29).
    """
    return start + relativedelta(months=months)


def months_between(start: date, end: date) -> float:
    """
    Elapsed months from start to end, counting days as 1/30 of a month.

    Rounded to two decimals and never negative.
    """
    years = end.year - start.year
    months = end.month - start.month
    days = end.day - start.day
    total = years * 12 + months + days / 30.0
    if total < 0:
        return 0.0
    return round(total, 2)


def calc_min_end(start: date, minimum_months: int) -> date:
    """End of the initial commitment period."""
    return add_months(start, minimum_months)


def calc_cancellation_date(
    start: date,
    minimum_months: int,
    extension_months: int,
    notice_months: int,
    today: date,
) -> date:
    """
    Next date by which notice must be given to avoid renewal.

    - No extension: min_end - notice, or today once that has passed
    - With extension: roll the period end forward until it is not before
      today, then subtract the notice period. If that deadline has passed,
      use the following period boundary instead.
    """
    min_end = calc_min_end(start, minimum_months)

    if extension_months == 0:
        cancellation = add_months(min_end, -notice_months)
        if cancellation < today:
            return today
        return cancellation

    period_end = min_end
    while period_end < today:
        period_end = add_months(period_end, extension_months)

    cancellation = add_months(period_end, -notice_months)
    if cancellation < today:
        period_end = add_months(period_end, extension_months)
        cancellation = add_months(period_end, -notice_months)
    return cancellation


def compute_cancellation_info(
    contract: "Contract", today: Optional[date] = None
) -> CancellationInfo:
    """
    Calculate the cancellation deadline and expiry of a contract.

    Fixed-term contracts (with an end date) only report whether they have
    expired. Open-ended contracts report the next cancellation deadline.
    """
    if today is None:
        today = date.today()

    if contract.end_date:
        end = parse_date(contract.end_date)
        return CancellationInfo(expired=end is not None and end < today)

    start = parse_date(contract.start_date)
    if start is None:
        return CancellationInfo()

    cancellation = calc_cancellation_date(
        start,
        contract.minimum_duration_months or 0,
        contract.extension_duration_months or 0,
        contract.notice_period_months or 0,
        today,
    )
    return CancellationInfo(cancellation_date=cancellation.isoformat())
