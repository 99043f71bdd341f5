from app.db.schemas.client import ClientRequest
from app.utils.validation import max_length, not_empty, raise_if_errors


def validate_client_request(request: ClientRequest) -> None:
    raise_if_errors(
        not_empty(request.name, "name"),
        max_length(request.name, 100, "name"),
        not_empty(request.email, "email"),
        max_length(request.email, 100, "email"),
        max_length(request.phone, 50, "phone"),
        max_length(request.company_name, 255, "company_name"),
    )
