from app.db.models.client import Client
from app.repositories.base import SQLAlchemyRepository


class ClientRepository(SQLAlchemyRepository[Client]):
    model = Client
