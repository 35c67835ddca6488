"""
Merge base resolution.

The base sha carried by the webhook is the base branch tip when the event was
sent and goes stale as the branch advances. The merge base is asked for at
analysis time instead.
"""

from typing import Optional

import httpx

from schema_police.services.github_client import GitHubAPIError, GitHubClient
from schema_police.utils.logging import get_logger

logger = get_logger(__name__)


class MergeBaseResolver:
    """Resolves the common ancestor of a pull request's head and base."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def resolve_base(self, head_owner: str, head_repo: str, pr_number: int) -> Optional[str]:
        """
        Resolve the merge-base commit sha for a pull request.

        Args:
            head_owner: Owner login of the head repository
            head_repo: Name of the head repository
            pr_number: Pull request number

        Returns:
            The merge-base sha, or None when it cannot be determined reliably
        """
        try:
            pull_request = await self.client.get_pull_request(head_owner, head_repo, pr_number)
            base = pull_request["base"]
            head_sha = pull_request["head"]["sha"]
            base_repo = base["repo"]

            comparison = await self.client.compare_commits(
                base_repo["owner"]["login"],
                base_repo["name"],
                base["ref"],
                head_sha,
            )
            merge_base_sha = comparison["merge_base_commit"]["sha"]
        except (GitHubAPIError, httpx.HTTPError, KeyError, TypeError) as e:
            logger.warning(
                f"Could not resolve merge base for {head_owner}/{head_repo}#{pr_number}: {e}",
                extra={"pr_number": pr_number, "repository": f"{head_owner}/{head_repo}"}
            )
            return None

        logger.debug(f"Merge base for #{pr_number} is {merge_base_sha}")
        return merge_base_sha
