"""Auth API — registration, login, current user.

- POST /auth/register → create a new account
- POST /auth/login → email/password → bearer token
- GET /auth/me → the authenticated user's record
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from linkbio.auth.dependencies import get_current_user, get_token_service
from linkbio.auth.jwt import CurrentIdentity, TokenService
from linkbio.db.engine import get_db
from linkbio.errors import AuthenticationError
from linkbio.schemas.user import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserRead,
)
from linkbio.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _svc(request: Request, db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, bcrypt_rounds=request.app.state.settings.bcrypt_rounds)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_svc)):
    """Create a new user account."""
    user = await svc.register(
        username=body.username, email=body.email, password=body.password
    )
    return RegisterResponse(user=UserRead.model_validate(user))


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    svc: UserService = Depends(_svc),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with email and password → bearer token."""
    user = await svc.authenticate(email=body.email, password=body.password)
    return TokenResponse(token=tokens.issue(user.id, user.username))


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Get the current authenticated user's info."""
    user = await svc.get(identity.user_id)
    if user is None:
        # Token outlived its account; treat it like any other bad token.
        raise AuthenticationError()
    return user
