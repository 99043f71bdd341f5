from fastapi import APIRouter, status

from app.core.dependencies import ClientServiceDependency
from app.core.responses import APIResponse, send_success
from app.db.schemas.client import ClientRequest, ClientResponse

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("/", response_model=APIResponse[list[ClientResponse]])
async def list_clients(service: ClientServiceDependency):
    return send_success(message="Fetched", data=await service.get_all())


@router.get("/{client_id}", response_model=APIResponse[ClientResponse])
async def get_client(client_id: int, service: ClientServiceDependency):
    return send_success(message="Fetched", data=await service.get_by_id(client_id))


@router.post(
    "/",
    response_model=APIResponse[ClientResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_client(request: ClientRequest, service: ClientServiceDependency):
    return send_success(
        message="Created",
        data=await service.create(request),
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{client_id}", response_model=APIResponse[ClientResponse])
async def update_client(
    client_id: int, request: ClientRequest, service: ClientServiceDependency
):
    return send_success(message="Updated", data=await service.update(client_id, request))


@router.delete("/{client_id}", response_model=APIResponse[str])
async def delete_client(client_id: int, service: ClientServiceDependency):
    await service.delete(client_id)
    return send_success(message="Deleted", data="Success")
