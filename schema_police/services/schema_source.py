"""
Schema Source component.

Reads file contents and commit file lists from a repository. File contents are
returned transport-encoded; decoding happens in the diff engine.
"""

from typing import List

import httpx

from schema_police.models.file_change import ChangedFile, FileContent
from schema_police.services.github_client import GitHubAPIError, GitHubClient, GitHubNotFoundError
from schema_police.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OPT_IN_PATH = ".github/graphql-schema-police.yml"


class FileFetchError(Exception):
    """A single file's content could not be retrieved."""

    def __init__(self, path: str, ref: str, message: str, not_found: bool = False):
        super().__init__(f"Could not fetch {path}@{ref}: {message}")
        self.path = path
        self.ref = ref
        self.not_found = not_found


class RenamedWithoutChanges(Exception):
    """A schema file was renamed with no content delta; nothing to analyse."""

    def __init__(self, filename: str):
        super().__init__(f"Schema file {filename} renamed, but no changes detected.")
        self.filename = filename


class SchemaSource:
    """Retrieves schema files and commit metadata through the GitHub API."""

    def __init__(self, client: GitHubClient, opt_in_path: str = DEFAULT_OPT_IN_PATH):
        self.client = client
        self.opt_in_path = opt_in_path

    async def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> FileContent:
        """
        Retrieve file content at a specific ref.

        Raises:
            FileFetchError: If the file is missing, is a directory, or the request fails
        """
        try:
            data = await self.client.get_content(owner, repo, path, ref)
        except GitHubNotFoundError as e:
            raise FileFetchError(path, ref, e.message, not_found=True) from e
        except (GitHubAPIError, httpx.HTTPError) as e:
            raise FileFetchError(path, ref, str(e)) from e

        if not isinstance(data, dict) or "content" not in data:
            # Directories come back as a list of entries
            raise FileFetchError(path, ref, "not a regular file")

        return FileContent(
            path=path,
            ref=ref,
            content=data["content"],
            encoding=data.get("encoding", "base64"),
            html_url=data.get("html_url"),
        )

    async def get_files_from_commit(self, owner: str, repo: str, sha: str) -> List[ChangedFile]:
        """List the files changed by commit ``sha``."""
        commit = await self.client.get_commit(owner, repo, sha)
        return [ChangedFile.from_github(item) for item in commit.get("files") or []]

    async def has_opt_in_file(self, owner: str, repo: str, ref: str) -> bool:
        """
        Check whether the repository opted in at ``ref``.

        Only presence matters; the file content is not interpreted.
        """
        try:
            await self.get_file_content(owner, repo, self.opt_in_path, ref)
        except FileFetchError as e:
            logger.info(
                f"Opt-in file {self.opt_in_path} unavailable in {owner}/{repo}@{ref}",
                extra={"repository": f"{owner}/{repo}", "not_found": e.not_found}
            )
            return False
        return True
