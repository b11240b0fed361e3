"""Date range rules shared by availability checks.

Ranges are inclusive on both ends at date granularity: a stay ending on
the 12th and one starting on the 12th overlap.
"""

from datetime import date

from app.core.exceptions import ValidationError


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive overlap test."""
    return start_a <= end_b and end_a >= start_b


def validate_date_range(start_date: date | None, end_date: date | None) -> None:
    """Require both dates with start on or before end."""
    if start_date is None or end_date is None:
        raise ValidationError("Start and end dates are required")
    if start_date > end_date:
        raise ValidationError("start_date must be on or before end_date")


def validate_price(price, field: str = "price") -> None:
    if price is None:
        raise ValidationError(f"{field} is required")
    if price <= 0:
        raise ValidationError(f"{field} must be greater than zero")
