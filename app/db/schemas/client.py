from pydantic import BaseModel, ConfigDict
from typing import Optional


# Field rules are enforced by app.validators, not by the schema.
class ClientRequest(BaseModel):
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    company_name: Optional[str] = None


class ClientResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    company_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
