"""Credential verifiers.

Each login method implements the same ``CredentialVerifier`` capability:
take a credential, return the matching ``User`` or raise
``AuthenticationError``. The route decides which verifier handles a request.
"""

from typing import Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import AuthenticationError, InvalidCredentialsError
from app.core.logging import get_logger
from app.core.security import decode_access_token, verify_password
from app.models.user import User
from app.schemas.user import LoginRequest
from app.services import auth_service
from app.services.oauth import OAuthClient

logger = get_logger(__name__)

CredentialT = TypeVar("CredentialT", contravariant=True)


class CredentialVerifier(Protocol[CredentialT]):
    async def verify(self, db: AsyncSession, credential: CredentialT) -> User: ...


class PasswordVerifier:
    """Email and password against the stored bcrypt hash."""

    async def verify(self, db: AsyncSession, credential: LoginRequest) -> User:
        user = await auth_service.get_user_by_email(db, credential.email)
        # Same message for unknown email and wrong password
        if user is None or not verify_password(credential.password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")
        return user


class TokenVerifier:
    """Bearer token issued by ``create_access_token``."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def verify(self, db: AsyncSession, credential: str | None) -> User:
        if not credential:
            raise AuthenticationError("Not authenticated")

        user_id = decode_access_token(self.settings, credential)
        user = await auth_service.get_user(db, user_id)
        if user is None:
            logger.warning("Valid token but user not found", user_id=user_id)
            raise AuthenticationError("User account not found")
        return user


class OAuthVerifier:
    """Authorization code from a provider callback."""

    def __init__(self, client: OAuthClient) -> None:
        self.client = client

    async def verify(self, db: AsyncSession, credential: str | None) -> User:
        if not credential:
            raise AuthenticationError("Missing authorization code")

        access_token = await self.client.exchange_code(credential)
        profile = await self.client.fetch_profile(access_token)
        return await auth_service.upsert_oauth_user(db, profile)
