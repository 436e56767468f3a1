"""Password hashing and bearer tokens."""

from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings
from app.core.exceptions import AuthenticationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    # OAuth accounts have no password
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(settings: Settings, user_id: int) -> str:
    """Issue a token whose only claim (besides expiry) is the user id."""
    expire = datetime.now(UTC) + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    payload = {"id": user_id, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> int:
    """Return the user id carried by ``token``.

    Raises:
        AuthenticationError: If the token is expired, tampered with or has
            no usable id claim.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except JWTError as e:
        raise AuthenticationError("Token verification failed") from e

    user_id = payload.get("id")
    if not isinstance(user_id, int):
        raise AuthenticationError("Invalid token payload")
    return user_id


def create_oauth_state(settings: Settings, provider: str) -> str:
    """Sign a short-lived ``state`` value for the OAuth redirect round trip."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.OAUTH_STATE_EXPIRE_MINUTES)
    payload = {"provider": provider, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_oauth_state(settings: Settings, state: str | None, provider: str) -> None:
    if not state:
        raise AuthenticationError("Missing OAuth state")
    try:
        payload = jwt.decode(state, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise AuthenticationError("Invalid OAuth state") from e
    if payload.get("provider") != provider:
        raise AuthenticationError("Invalid OAuth state")
