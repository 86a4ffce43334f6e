"""Authorization gate.

Two independent dependencies:
- get_current_identity: bearer token -> Identity, or 401
- require_roles(...): Identity role membership, or 403

Routers are included with both, e.g.:

    api_router.include_router(
        admin.router,
        prefix="/api/admin",
        dependencies=[
            Depends(get_current_identity),
            Depends(require_roles(Role.SYSTEM_ADMIN)),
        ],
    )

The identity dependency runs first, so a missing or bad token is always 401
before any role check. require_roles also depends on get_current_identity;
FastAPI caches it per request, so handlers can ask for the identity too.
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ratings_api.errors import Forbidden, Unauthenticated
from ratings_api.models import Role
from ratings_api.services.credentials import CredentialService, Identity

# auto_error=False so a missing header surfaces as our own 401 body
_bearer = HTTPBearer(auto_error=False)


def get_credentials(request: Request) -> CredentialService:
    """Credential service configured for this application."""
    return request.app.state.credentials


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    service: CredentialService = Depends(get_credentials),
) -> Identity:
    """Decode the bearer token into the caller's identity."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No token provided")
    return service.decode_token(credentials.credentials)


def ensure_role(identity: Identity, allowed: frozenset[Role]) -> Identity:
    """Return identity if its role is allowed, else raise Forbidden."""
    if identity.role not in allowed:
        raise Forbidden()
    return identity


def require_roles(*roles: Role) -> Callable[..., Awaitable[Identity]]:
    """Build a dependency admitting only the given roles."""
    if not roles:
        raise ValueError("require_roles() needs at least one role")
    allowed = frozenset(Role(role) for role in roles)

    async def role_dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        return ensure_role(identity, allowed)

    return role_dependency
