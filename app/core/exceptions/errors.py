from typing import List

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    field: str
    message: str


class NotFoundException(Exception):
    """An entity, or the whole collection, does not exist."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationException(Exception):
    """One or more request fields failed validation."""

    def __init__(self, errors: List[ErrorDetail]):
        super().__init__("Validation failed")
        self.errors = list(errors)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationException":
        return cls([ErrorDetail(field=field, message=message)])
