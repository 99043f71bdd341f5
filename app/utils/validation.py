from decimal import Decimal
from typing import Optional, Union

from app.core.exceptions.errors import ErrorDetail, ValidationException

Number = Union[int, float, Decimal]


def not_empty(value: Optional[str], field: str) -> Optional[ErrorDetail]:
    if value is None or not value.strip():
        return ErrorDetail(field=field, message=f"{field} cannot be null or empty.")
    return None


def max_length(value: Optional[str], limit: int, field: str) -> Optional[ErrorDetail]:
    if value is not None and len(value) > limit:
        return ErrorDetail(
            field=field, message=f"{field} cannot exceed {limit} characters."
        )
    return None


def min_value(value: Optional[Number], minimum: Number, field: str) -> Optional[ErrorDetail]:
    if value is None or value < minimum:
        return ErrorDetail(field=field, message=f"{field} must be at least {minimum}.")
    return None


def raise_if_errors(*results: Optional[ErrorDetail]) -> None:
    """Raise a single ValidationException carrying every failed check."""
    errors = [result for result in results if result is not None]
    if errors:
        raise ValidationException(errors)
