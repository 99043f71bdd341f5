from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from app.core.exceptions.errors import ErrorDetail, NotFoundException, ValidationException
from app.core.responses import send_error
from app.utils.logging import get_logger


def _respond(message: str, status_code: int, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=send_error(
            message=message, errors=errors, status_code=status_code
        ).model_dump(mode="json"),
    )


def register_exception_handlers(app):
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger = get_logger()
        logger.opt(exception=exc).error(
            f"Unhandled exception for {request.method} {request.url}: {exc!r}\n"
            f"User-Agent: {request.headers.get('user-agent')}"
        )
        return _respond(
            "An unexpected error occurred.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            [ErrorDetail(field="Internal Error", message="An unexpected error occurred.")],
        )

    @app.exception_handler(NotFoundException)
    async def not_found_exception_handler(request: Request, exc: NotFoundException):
        logger = get_logger()
        logger.warning(f"Not found for {request.method} {request.url}: {exc.message}")
        return _respond(
            exc.message,
            status.HTTP_404_NOT_FOUND,
            [ErrorDetail(field="Not Found", message=exc.message)],
        )

    @app.exception_handler(ValidationException)
    async def domain_validation_exception_handler(
        request: Request, exc: ValidationException
    ):
        logger = get_logger()
        logger.warning(
            f"Validation failed for {request.method} {request.url}: "
            f"{[error.model_dump() for error in exc.errors]}"
        )
        return _respond("Validation failed", status.HTTP_400_BAD_REQUEST, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        logger = get_logger()
        raw_errors = exc.errors()
        logger.warning(
            f"Request validation error for {request.method} {request.url}: {raw_errors}"
        )

        friendly_errors = []
        for error in raw_errors:
            field = ".".join(map(str, error["loc"]))
            if field.startswith("body."):
                field = field.replace("body.", "", 1)
            friendly_errors.append(ErrorDetail(field=field, message=error["msg"]))

        return _respond(
            "Validation failed", status.HTTP_422_UNPROCESSABLE_ENTITY, friendly_errors
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        logger = get_logger()
        detail = str(exc.orig) if hasattr(exc, "orig") else "Database integrity error"
        logger.error(f"Integrity error for {request.method} {request.url}: {detail}")
        return _respond(
            "The request conflicts with existing data.",
            status.HTTP_409_CONFLICT,
            [ErrorDetail(field="Conflict", message="Database integrity constraint violated.")],
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger = get_logger()
        logger.warning(
            f"HTTP {exc.status_code} for {request.method} {request.url}: {exc.detail}"
        )
        return _respond(str(exc.detail), exc.status_code)
