from app.db.models.client import Client
from app.db.schemas.client import ClientRequest, ClientResponse
from app.services.base import EntityService
from app.validators.client import validate_client_request


class ClientService(EntityService[Client, ClientRequest, ClientResponse]):
    prefix = "client"
    entity_name = "Clients"
    label = "Client"
    model = Client
    response_model = ClientResponse

    def validate(self, request: ClientRequest) -> None:
        validate_client_request(request)
