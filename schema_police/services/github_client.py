"""
GitHub REST API client.

Thin async wrapper around ``httpx.AsyncClient`` exposing the handful of
endpoints the schema compatibility pipeline needs. A client is bound to one
set of installation credentials and lives for a single webhook delivery.
"""

import time
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from schema_police.utils.logging import get_logger, log_api_call

logger = get_logger(__name__)

GITHUB_MEDIA_TYPE = "application/vnd.github+json"


class GitHubAPIError(Exception):
    """Non-success response from the GitHub API."""

    def __init__(self, status_code: int, message: str, url: Optional[str] = None):
        super().__init__(f"GitHub API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.url = url


class GitHubNotFoundError(GitHubAPIError):
    """The requested resource does not exist (HTTP 404)."""


class GitHubClient:
    """Async GitHub API client authenticated with a single token."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 5.0,
        user_agent: str = "graphql-schema-police",
        token_type: str = "token",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            token: Installation access token (or app JWT with ``token_type="Bearer"``)
            base_url: GitHub API root
            timeout: Per-request timeout in seconds; requests are never retried
            user_agent: User-Agent header value
            token_type: Authorization scheme
            transport: Optional transport override
        """
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
            headers={
                "Authorization": f"{token_type} {token}",
                "Accept": GITHUB_MEDIA_TYPE,
                "User-Agent": user_agent,
            },
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        start = time.monotonic()
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log_api_call(logger, "github", url, method, error=str(e))
            raise

        duration_ms = (time.monotonic() - start) * 1000
        if response.is_success:
            log_api_call(logger, "github", url, method, response.status_code, duration_ms)
            return response

        message = self._error_message(response)
        log_api_call(logger, "github", url, method, response.status_code, duration_ms, error=message)
        if response.status_code == 404:
            raise GitHubNotFoundError(404, message, url)
        raise GitHubAPIError(response.status_code, message, url)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(data, dict) and data.get("message"):
            return data["message"]
        return response.reason_phrase

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._request("GET", url, params=params)
        return response.json()

    async def get_content(self, owner: str, repo: str, path: str, ref: str) -> Dict[str, Any]:
        """GET /repos/{owner}/{repo}/contents/{path}?ref={ref}"""
        return await self.get_json(f"/repos/{owner}/{repo}/contents/{quote(path, safe='/')}", params={"ref": ref})

    async def get_commit(self, owner: str, repo: str, sha: str) -> Dict[str, Any]:
        """GET /repos/{owner}/{repo}/commits/{sha}"""
        return await self.get_json(f"/repos/{owner}/{repo}/commits/{sha}")

    async def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]:
        """GET /repos/{owner}/{repo}/pulls/{number}"""
        return await self.get_json(f"/repos/{owner}/{repo}/pulls/{number}")

    async def compare_commits(self, owner: str, repo: str, base: str, head: str) -> Dict[str, Any]:
        """GET /repos/{owner}/{repo}/compare/{base}...{head}"""
        return await self.get_json(f"/repos/{owner}/{repo}/compare/{base}...{head}")

    async def list_issue_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        page: int = 1,
        per_page: int = 50,
    ) -> Tuple[List[Dict[str, Any]], bool]:
        """
        Fetch one page of issue comments.

        Returns:
            Tuple of (comments on this page, whether a next page exists)
        """
        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/issues/{number}/comments",
            params={"per_page": per_page, "page": page},
        )
        return response.json(), "next" in response.links

    async def create_issue_comment(self, owner: str, repo: str, number: int, body: str) -> Dict[str, Any]:
        """POST /repos/{owner}/{repo}/issues/{number}/comments"""
        response = await self._request(
            "POST", f"/repos/{owner}/{repo}/issues/{number}/comments", json={"body": body}
        )
        return response.json()

    async def update_issue_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Dict[str, Any]:
        """PATCH /repos/{owner}/{repo}/issues/comments/{comment_id}"""
        response = await self._request(
            "PATCH", f"/repos/{owner}/{repo}/issues/comments/{comment_id}", json={"body": body}
        )
        return response.json()

    async def get_authenticated_app(self) -> Dict[str, Any]:
        """GET /app (requires JWT authentication)"""
        return await self.get_json("/app")

    async def create_installation_token(self, installation_id: str) -> Dict[str, Any]:
        """POST /app/installations/{installation_id}/access_tokens (requires JWT authentication)"""
        response = await self._request("POST", f"/app/installations/{installation_id}/access_tokens")
        return response.json()
