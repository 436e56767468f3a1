"""User and authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: str | None = None


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse


class OAuthProfile(BaseModel):
    """Identity returned by an OAuth provider."""

    provider: str
    provider_id: str
    name: str
    email: str
    avatar: str | None = None
