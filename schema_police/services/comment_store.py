"""
Comment Store component.

Finds the bot's existing comment on a pull request and creates or updates it.
"""

from typing import Optional

from schema_police.models.comment import BotComment
from schema_police.services.github_client import GitHubClient
from schema_police.utils.logging import get_logger

logger = get_logger(__name__)


class CommentScanIncomplete(Exception):
    """The page ceiling was reached before the last page of comments."""

    def __init__(self, repository: str, number: int, pages: int):
        super().__init__(f"Stopped scanning comments on {repository}#{number} after {pages} pages")
        self.repository = repository
        self.number = number
        self.pages = pages


class CommentStore:
    """Reads and writes this bot's pull request comment."""

    def __init__(
        self,
        client: GitHubClient,
        bot_login: str,
        page_size: int = 50,
        max_pages: int = 20,
    ):
        """
        Initialize the store.

        Args:
            client: Installation-scoped GitHub client
            bot_login: Login the bot comments as (``<app-slug>[bot]``)
            page_size: Comments requested per page
            max_pages: Upper bound on pages scanned when looking for the bot comment
        """
        self.client = client
        self.bot_login = bot_login
        self.page_size = page_size
        self.max_pages = max_pages

    def _is_bot_comment(self, comment: dict) -> bool:
        user = comment.get("user") or {}
        return user.get("login") == self.bot_login

    async def find_bot_comment(self, owner: str, repo: str, number: int) -> Optional[BotComment]:
        """
        Return the first comment authored by the bot, scanning pages in order.

        Returns:
            The bot comment, or None when no page contains one

        Raises:
            CommentScanIncomplete: If more pages remain after ``max_pages``
        """
        page = 1
        while page <= self.max_pages:
            comments, has_next = await self.client.list_issue_comments(
                owner, repo, number, page=page, per_page=self.page_size
            )

            for comment in comments:
                if self._is_bot_comment(comment):
                    user = comment["user"]
                    return BotComment(
                        id=comment["id"],
                        author_login=user["login"],
                        author_id=user.get("id"),
                        body=comment.get("body"),
                    )

            if not has_next:
                return None
            page += 1

        raise CommentScanIncomplete(f"{owner}/{repo}", number, self.max_pages)

    async def create(self, owner: str, repo: str, number: int, body: str) -> BotComment:
        data = await self.client.create_issue_comment(owner, repo, number, body)
        return BotComment(id=data["id"], author_login=self.bot_login, body=data.get("body"))

    async def update(self, owner: str, repo: str, comment_id: int, body: str) -> BotComment:
        data = await self.client.update_issue_comment(owner, repo, comment_id, body)
        return BotComment(id=data.get("id", comment_id), author_login=self.bot_login, body=data.get("body"))
