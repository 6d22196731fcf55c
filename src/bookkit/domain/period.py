"""Reporting period resolution."""

from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from bookkit.domain.entities import Granularity, Period
from bookkit.domain.errors import ValidationError


def quarter_of_month(month: int) -> int:
    """Return the 1-based calendar quarter for a 1-based month number."""
    return (month - 1) // 3 + 1


def resolve_period(
    granularity: Granularity | str, year: int, month: Optional[int] = None
) -> Period:
    """Convert a (granularity, year, month) selection into a date range.

    Args:
        granularity: "month", "quarter" or "year"
        year: Calendar year
        month: Month number (1-12); required for month and quarter granularity.
            For quarters any month inside the quarter selects it.

    Returns:
        Period with inclusive start and end dates

    Raises:
        ValidationError: If granularity, year or month is invalid
    """
    try:
        granularity = Granularity(granularity)
    except ValueError:
        raise ValidationError(
            f"Unknown granularity '{granularity}'. Supported: month, quarter, year"
        )

    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year: {year}")

    if granularity == Granularity.YEAR:
        return Period(
            granularity=granularity,
            start_date=date(year, 1, 1),
            end_date=date(year, 12, 31),
            label=str(year),
        )

    if month is None:
        raise ValidationError(f"Month is required for {granularity.value} periods")
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}. Must be between 1 and 12")

    if granularity == Granularity.MONTH:
        start_date = date(year, month, 1)
        end_date = start_date + relativedelta(months=1) - timedelta(days=1)
        return Period(
            granularity=granularity,
            start_date=start_date,
            end_date=end_date,
            label=start_date.strftime("%B %Y"),
        )

    quarter = quarter_of_month(month)
    start_date = date(year, (quarter - 1) * 3 + 1, 1)
    end_date = start_date + relativedelta(months=3) - timedelta(days=1)
    return Period(
        granularity=granularity,
        start_date=start_date,
        end_date=end_date,
        label=f"Q{quarter} {year}",
    )
