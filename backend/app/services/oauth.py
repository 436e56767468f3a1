"""OAuth 2.0 authorization-code clients for Google and GitHub."""

from abc import ABC, abstractmethod
from urllib.parse import urlencode

import httpx

from app.core.config import Settings
from app.core.exceptions import AuthenticationError, ProviderNotConfiguredError
from app.core.logging import get_logger
from app.schemas.user import OAuthProfile

logger = get_logger(__name__)

HTTP_TIMEOUT = httpx.Timeout(15.0)


class OAuthClient(ABC):
    """Authorization-code flow against one provider.

    Subclasses fill in the endpoints and ``fetch_profile``.
    """

    name: str
    authorize_url: str
    token_url: str
    scope: str

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self._transport = transport

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=HTTP_TIMEOUT, transport=self._transport)

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
        }
        if self.callback_url:
            params["redirect_uri"] = self.callback_url
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token."""
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
        }
        if self.callback_url:
            data["redirect_uri"] = self.callback_url

        try:
            async with self._http() as client:
                response = await client.post(
                    self.token_url, data=data, headers={"Accept": "application/json"}
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("OAuth code exchange failed", provider=self.name, error=str(e))
            raise AuthenticationError("OAuth code exchange failed") from e

        if not isinstance(payload, dict):
            payload = {}
        access_token = payload.get("access_token")
        if not access_token:
            logger.warning(
                "OAuth token response without access token",
                provider=self.name,
                error=payload.get("error"),
            )
            raise AuthenticationError("OAuth code exchange failed")
        return access_token

    @abstractmethod
    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        """Load the signed-in user's identity with ``access_token``."""

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        access_token: str,
        expected: type = dict,
    ):
        try:
            response = await client.get(
                url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("OAuth profile request failed", provider=self.name, error=str(e))
            raise AuthenticationError("Could not load OAuth profile") from e

        if not isinstance(payload, expected):
            logger.warning("Unexpected OAuth profile response", provider=self.name, url=url)
            raise AuthenticationError("Could not load OAuth profile")
        return payload


class GoogleOAuthClient(OAuthClient):
    name = "google"
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://openidconnect.googleapis.com/v1/userinfo"
    scope = "openid profile email"

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        async with self._http() as client:
            info = await self._get_json(client, self.userinfo_url, access_token)

        sub = info.get("sub")
        email = info.get("email")
        if not sub:
            raise AuthenticationError("Google profile has no account id")
        if not email:
            raise AuthenticationError("Google account has no email")
        return OAuthProfile(
            provider=self.name,
            provider_id=str(sub),
            name=info.get("name") or email,
            email=email,
            avatar=info.get("picture"),
        )


class GitHubOAuthClient(OAuthClient):
    name = "github"
    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    user_url = "https://api.github.com/user"
    emails_url = "https://api.github.com/user/emails"
    scope = "user:email"

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        async with self._http() as client:
            info = await self._get_json(client, self.user_url, access_token)
            if info.get("id") is None:
                raise AuthenticationError("GitHub profile has no account id")

            email = info.get("email")
            if not email:
                # Private emails are only listed on the emails endpoint
                emails = await self._get_json(client, self.emails_url, access_token, list)
                email = next(
                    (
                        e.get("email")
                        for e in emails
                        if isinstance(e, dict) and e.get("primary") and e.get("verified")
                    ),
                    None,
                )

        github_id = str(info["id"])
        login = info.get("login") or github_id
        return OAuthProfile(
            provider=self.name,
            provider_id=github_id,
            name=info.get("name") or login,
            email=email or f"{login}@github.local",
            avatar=info.get("avatar_url"),
        )


def get_oauth_client(
    settings: Settings,
    provider: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> OAuthClient:
    """Build the client for ``provider`` from settings.

    Raises:
        ProviderNotConfiguredError: If the provider is unknown or has no
            client credentials.
    """
    if provider == "google":
        client_cls: type[OAuthClient] = GoogleOAuthClient
        creds = (settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET)
        callback_url = settings.GOOGLE_CALLBACK_URL
    elif provider == "github":
        client_cls = GitHubOAuthClient
        creds = (settings.GITHUB_CLIENT_ID, settings.GITHUB_CLIENT_SECRET)
        callback_url = settings.GITHUB_CALLBACK_URL
    else:
        raise ProviderNotConfiguredError(f"Unknown login provider: {provider}")

    client_id, client_secret = creds
    if not client_id or not client_secret:
        raise ProviderNotConfiguredError(f"{provider.capitalize()} login is not configured")
    return client_cls(client_id, client_secret, callback_url, transport=transport)
