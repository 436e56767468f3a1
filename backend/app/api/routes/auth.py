"""Authentication routes: password login, registration and OAuth."""

from urllib.parse import urlencode

from fastapi import APIRouter, status
from fastapi.responses import RedirectResponse

from app.api.deps import AppSettings, CurrentUser, DBSession
from app.core.config import Settings
from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger
from app.core.security import create_access_token, create_oauth_state, verify_oauth_state
from app.models.user import User
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserResponse,
)
from app.services import auth_service
from app.services.credentials import OAuthVerifier, PasswordVerifier
from app.services.oauth import get_oauth_client

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(settings: Settings, user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(settings, user.id),
        user=UserResponse.model_validate(user),
    )


def _client_redirect(settings: Settings, **params: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.CLIENT_URL}?{urlencode(params)}")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: DBSession, settings: AppSettings) -> AuthResponse:
    """Create a local account and log it in."""
    user = await auth_service.register_user(db, data.name, data.email, data.password)
    return _auth_response(settings, user)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: DBSession, settings: AppSettings) -> AuthResponse:
    """Log in with email and password."""
    user = await PasswordVerifier().verify(db, data)
    logger.info("User logged in", user_id=user.id)
    return _auth_response(settings, user)


@router.get("/me", response_model=MeResponse)
async def me(user: CurrentUser) -> MeResponse:
    """Get the current user."""
    return MeResponse(user=UserResponse.model_validate(user))


# ============================================================================
# OAuth
# ============================================================================

# Parameterized paths stay below the fixed ones ("/me" would match "/{provider}")


@router.get("/{provider}")
async def oauth_login(provider: str, settings: AppSettings) -> RedirectResponse:
    """Redirect to the provider's consent screen (``google`` or ``github``)."""
    client = get_oauth_client(settings, provider)
    state = create_oauth_state(settings, provider)
    return RedirectResponse(client.authorization_url(state))


@router.get("/{provider}/callback")
async def oauth_callback(
    provider: str,
    db: DBSession,
    settings: AppSettings,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Finish the OAuth flow and hand the token to the client app."""
    client = get_oauth_client(settings, provider)
    try:
        if error:
            raise AuthenticationError(f"Provider returned error: {error}")
        verify_oauth_state(settings, state, provider)
        user = await OAuthVerifier(client).verify(db, code)
    except AuthenticationError as e:
        logger.warning("OAuth login failed", provider=provider, reason=e.message)
        return _client_redirect(settings, error="oauth_failed")

    logger.info("User logged in with OAuth", user_id=user.id, provider=provider)
    return _client_redirect(settings, token=create_access_token(settings, user.id))
