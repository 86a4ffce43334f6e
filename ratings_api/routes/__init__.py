"""API routes.

Every role-restricted router is gated twice at inclusion: identity (401)
and role membership (403).
"""

from fastapi import APIRouter, Depends

from ratings_api.models import Role
from ratings_api.routes import admin, auth, owner, user
from ratings_api.routes.deps import get_current_identity, require_roles
from ratings_api.schemas import ErrorResponse

api_router = APIRouter()

_GATED_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    403: {"model": ErrorResponse, "description": "Role not permitted"},
}

# Signup/login are public; change-password gates itself on identity
api_router.include_router(auth.router, prefix="/api/auth", tags=["auth"])

api_router.include_router(
    admin.router,
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(get_current_identity), Depends(require_roles(Role.SYSTEM_ADMIN))],
    responses=_GATED_RESPONSES,
)

api_router.include_router(
    owner.router,
    prefix="/api/owner",
    tags=["owner"],
    dependencies=[Depends(get_current_identity), Depends(require_roles(Role.STORE_OWNER))],
    responses=_GATED_RESPONSES,
)

api_router.include_router(
    user.router,
    prefix="/api/user",
    tags=["user"],
    dependencies=[Depends(get_current_identity), Depends(require_roles(Role.NORMAL_USER))],
    responses=_GATED_RESPONSES,
)
