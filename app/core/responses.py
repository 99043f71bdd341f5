from datetime import datetime
from typing import Any, Generic, List, TypeVar

from fastapi import status
from pydantic import BaseModel, Field

from app.core.exceptions.errors import ErrorDetail

T = TypeVar("T")

TIMESTAMP_FORMAT = "%d %B, %Y %I:%M:%S %p"


def _timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class APIResponse(BaseModel, Generic[T]):
    success: bool
    message: str = ""
    data: T | None = None
    errors: List[ErrorDetail] | None = None
    status_code: int = status.HTTP_200_OK
    timestamp: str = Field(default_factory=_timestamp)


def send_success(
    message: str = "Success", data: Any = None, status_code: int = status.HTTP_200_OK
) -> APIResponse:
    return APIResponse(
        success=True, message=message, data=data, status_code=status_code
    )


def send_error(
    message: str = "Error",
    errors: List[ErrorDetail] | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> APIResponse:
    return APIResponse(
        success=False, message=message, errors=errors, status_code=status_code
    )
