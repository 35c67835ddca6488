"""
GitHub App authentication.

Exchanges a short-lived app JWT for an installation access token. Credentials
are created per delivery and handed to the client explicitly; nothing is
cached on the module.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import jwt
from pydantic import BaseModel

from schema_police.services.github_client import GitHubClient
from schema_police.utils.logging import get_logger

logger = get_logger(__name__)

# GitHub rejects app JWTs valid for more than ten minutes
JWT_LIFETIME_SECONDS = 600
JWT_CLOCK_DRIFT_SECONDS = 60


class InstallationCredentials(BaseModel):
    """Access token scoped to one app installation."""

    installation_id: str
    token: str
    expires_at: Optional[str] = None


class GitHubAppAuth:
    """Creates installation-scoped GitHub clients for a GitHub App."""

    def __init__(
        self,
        app_id: str,
        private_key: str,
        base_url: str = "https://api.github.com",
        timeout: float = 5.0,
        user_agent: str = "graphql-schema-police",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id
        self._private_key = private_key
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def generate_jwt(self, now: Optional[int] = None) -> str:
        """Sign an RS256 JWT identifying the app."""
        issued_at = int(now if now is not None else time.time()) - JWT_CLOCK_DRIFT_SECONDS
        claims = {
            "iat": issued_at,
            "exp": issued_at + JWT_LIFETIME_SECONDS,
            "iss": str(self.app_id),
        }
        return jwt.encode(claims, self._private_key, algorithm="RS256")

    def _client(self, token: str, token_type: str) -> GitHubClient:
        return GitHubClient(
            token,
            base_url=self.base_url,
            timeout=self.timeout,
            user_agent=self.user_agent,
            token_type=token_type,
            transport=self._transport,
        )

    def app_client(self) -> GitHubClient:
        """Client authenticated as the app itself (JWT)."""
        return self._client(self.generate_jwt(), "Bearer")

    async def get_bot_login(self) -> str:
        """Login the app posts comments as, e.g. ``graphql-police[bot]``."""
        async with self.app_client() as client:
            app = await client.get_authenticated_app()
        return f"{app['slug']}[bot]"

    async def create_installation_credentials(self, installation_id: str) -> InstallationCredentials:
        """
        Authenticate as installation ``installation_id``.

        Raises:
            GitHubAPIError: If GitHub refuses the token exchange
            httpx.HTTPError: On transport failure
        """
        async with self.app_client() as client:
            data = await client.create_installation_token(installation_id)

        logger.debug(
            "Created installation token",
            extra={"installation_id": installation_id, "expires_at": data.get("expires_at")}
        )
        return InstallationCredentials(
            installation_id=installation_id,
            token=data["token"],
            expires_at=data.get("expires_at"),
        )

    @asynccontextmanager
    async def installation_client(self, installation_id: str) -> AsyncIterator[GitHubClient]:
        """Yield a client authenticated as the installation, closed on exit."""
        credentials = await self.create_installation_credentials(installation_id)
        client = self._client(credentials.token, "token")
        try:
            yield client
        finally:
            await client.close()


def get_github_app_auth() -> GitHubAppAuth:
    """
    Factory function to create GitHubAppAuth with settings from config.

    Raises:
        ValueError: If the app id or private key is not configured
    """
    from schema_police.config import settings

    if not settings.github_app_id:
        raise ValueError("GITHUB_APP_ID must be set")

    return GitHubAppAuth(
        app_id=settings.github_app_id,
        private_key=settings.load_private_key(),
        base_url=settings.github_api_url,
        timeout=settings.request_timeout_seconds,
        user_agent=settings.user_agent,
    )
