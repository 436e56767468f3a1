"""User accounts: registration, lookup and OAuth upsert."""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.core.logging import get_logger
from app.core.security import get_password_hash
from app.models.user import User
from app.schemas.user import OAuthProfile

logger = get_logger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, name: str, email: str, password: str) -> User:
    """Create a local account.

    Raises:
        ConflictError: If the email is already registered.

    Note: This function commits the transaction.
    """
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("User already exists")

    user = User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        auth_provider="local",
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise ConflictError("User already exists") from e
    await db.refresh(user)

    logger.info("User registered", user_id=user.id)
    return user


async def upsert_oauth_user(db: AsyncSession, profile: OAuthProfile) -> User:
    """Find the user for an OAuth identity, creating one on first login.

    An existing account matches on provider identity or on email, so a user
    who registered with a password and later signs in with Google with the
    same email lands on the same account.

    Note: This function commits the transaction.
    """
    result = await db.execute(
        select(User)
        .where(
            or_(
                (User.provider_id == profile.provider_id)
                & (User.auth_provider == profile.provider),
                User.email == profile.email,
            )
        )
        .order_by(User.id)
        .limit(1)
    )
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = User(
        name=profile.name,
        email=profile.email,
        auth_provider=profile.provider,
        provider_id=profile.provider_id,
        avatar=profile.avatar,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("User created from OAuth login", user_id=user.id, provider=profile.provider)
    return user
