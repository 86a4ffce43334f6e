"""Auth endpoints.

POST /api/auth/signup          - self-registration (NORMAL_USER)
POST /api/auth/login           - any role
POST /api/auth/change-password - any authenticated role
"""

from fastapi import APIRouter, Depends, status

from ratings_api.routes.deps import get_credentials, get_current_identity
from ratings_api.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UserOut,
)
from ratings_api.services import users as user_service
from ratings_api.services.credentials import CredentialService, Identity
from ratings_api.stores.postgres import get_session

router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    credentials: CredentialService = Depends(get_credentials),
) -> AuthResponse:
    async with get_session() as session:
        user, token = await user_service.signup(session, credentials, payload)
        return AuthResponse(
            message="Signup successful",
            token=token,
            user=UserOut.model_validate(user),
        )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    credentials: CredentialService = Depends(get_credentials),
) -> AuthResponse:
    async with get_session() as session:
        user, token = await user_service.authenticate(
            session, credentials, payload.email, payload.password
        )
        return AuthResponse(
            message="Login successful",
            token=token,
            user=UserOut.model_validate(user),
        )


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    identity: Identity = Depends(get_current_identity),
    credentials: CredentialService = Depends(get_credentials),
) -> MessageResponse:
    async with get_session() as session:
        await user_service.change_password(session, credentials, identity.id, payload)
    return MessageResponse(message="Password updated successfully")
