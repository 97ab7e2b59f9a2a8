"""
Notes API - Bearer Token Authorization
======================================

What:  FastAPI dependencies that authenticate a bearer token and enforce
       scopes on the canonical /v1 write routes.
How:   The token table (token → scopes) comes from the application settings
       on `app.state.settings`.

    Authorization header missing / not Bearer / unknown token → 401
    Known token without every required scope                   → 403

Legacy /notes routes do not use these dependencies.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Coroutine, FrozenSet, Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notes_api.exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

SCOPE_NOTES_WRITE = "notes:write"
SCOPE_NOTES_DELETE = "notes:delete"

# auto_error=False so a missing header reaches our own 401 handler
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    token: str
    scopes: FrozenSet[str]


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> AuthContext:
    """Resolve the bearer token to its scope set."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing or invalid bearer token")

    scopes = request.app.state.settings.auth_tokens.get(credentials.credentials)
    if scopes is None:
        logger.warning("Rejected unknown bearer token for %s %s", request.method, request.url.path)
        raise UnauthorizedError("Invalid token")

    return AuthContext(token=credentials.credentials, scopes=scopes)


def require_scopes(*required: str) -> Callable[..., Coroutine[None, None, AuthContext]]:
    """
    Build a dependency that authenticates and then checks `required` scopes.

    Usage:
        @router.post("/", dependencies=[Depends(require_scopes(SCOPE_NOTES_WRITE))])
    """

    async def dependency(auth: AuthContext = Depends(authenticate)) -> AuthContext:
        missing = set(required) - auth.scopes
        if missing:
            raise ForbiddenError(required=required)
        return auth

    return dependency
