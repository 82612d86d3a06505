from pydantic import BaseModel
from typing import Generic, Optional, TypeVar
from uuid import UUID

T = TypeVar("T")


class UserToken(BaseModel):
    """Claims of a bearer token issued by the auth service."""
    user_id: str
    session_id: Optional[str] = None
    # every billing call runs inside this organization
    org_id: Optional[UUID] = None
    name: Optional[str] = None
    account_type: str
    status: Optional[str] = None
    exp: Optional[int] = None


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
