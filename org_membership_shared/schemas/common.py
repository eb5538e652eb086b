from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


# Privilege order: member < admin < owner
ROLE_RANK: dict["Role", int] = {
    Role.MEMBER: 0,
    Role.ADMIN: 1,
    Role.OWNER: 2,
}


class ErrorBody(BaseModel):
    code: str
    message: str
    status: int
    details: Optional[list] = None


class ErrorResponse(BaseModel):
    error: ErrorBody
