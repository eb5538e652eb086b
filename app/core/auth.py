"""
Caller identity for the HTTP boundary.

Authentication happens upstream; by the time a request reaches this service
the caller is identified by ``Authorization: Bearer <user-uuid>``. This module
only turns that header into a user id. Authorization decisions live in
app.services.roles.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader

from app.core.errors import AuthenticationRequiredError

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


def _parse_bearer(authorization: Optional[str]) -> Optional[uuid.UUID]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[7:].strip()
    try:
        return uuid.UUID(token)
    except ValueError:
        raise AuthenticationRequiredError("Invalid bearer identity")


async def get_acting_user_id(
    authorization: Optional[str] = Depends(api_key_header),
) -> Optional[uuid.UUID]:
    """Resolve the caller, or None for anonymous requests."""
    return _parse_bearer(authorization)


async def require_acting_user_id(
    user_id: Optional[uuid.UUID] = Depends(get_acting_user_id),
) -> uuid.UUID:
    """Like get_acting_user_id, but anonymous callers get a 401."""
    if user_id is None:
        raise AuthenticationRequiredError("Authentication required")
    return user_id
