"""
Unit tests for the schema source.
"""

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from schema_police.models.file_change import FileStatus
from schema_police.services.github_client import GitHubAPIError
from schema_police.services.schema_source import FileFetchError, SchemaSource

from tests.fakes import HEAD_SHA, MERGE_BASE_SHA, OPT_IN_PATH, OWNER, REPO, encode


@pytest.mark.asyncio
async def test_get_file_content_returns_encoded_content(fake_github):
    fake_github.add_file("schema.graphql", HEAD_SHA, "type Query { a: Int }")
    source = SchemaSource(fake_github)

    content = await source.get_file_content(OWNER, REPO, "schema.graphql", HEAD_SHA)

    assert content.path == "schema.graphql"
    assert content.ref == HEAD_SHA
    assert content.content == encode("type Query { a: Int }")
    assert content.encoding == "base64"
    assert content.html_url.endswith(f"/blob/{HEAD_SHA}/schema.graphql")


@pytest.mark.asyncio
async def test_get_file_content_not_found(fake_github):
    source = SchemaSource(fake_github)

    with pytest.raises(FileFetchError) as exc_info:
        await source.get_file_content(OWNER, REPO, "missing.graphql", HEAD_SHA)

    assert exc_info.value.not_found
    assert exc_info.value.path == "missing.graphql"


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    GitHubAPIError(500, "Server Error"),
    httpx.ConnectTimeout("timed out"),
])
async def test_get_file_content_transport_errors(fake_github, error):
    fake_github.fetch_errors[("schema.graphql", HEAD_SHA)] = error
    source = SchemaSource(fake_github)

    with pytest.raises(FileFetchError) as exc_info:
        await source.get_file_content(OWNER, REPO, "schema.graphql", HEAD_SHA)

    assert not exc_info.value.not_found


@pytest.mark.asyncio
async def test_get_file_content_rejects_directories():
    client = Mock()
    client.get_content = AsyncMock(return_value=[{"name": "a.graphql", "type": "file"}])

    with pytest.raises(FileFetchError):
        await SchemaSource(client).get_file_content(OWNER, REPO, "schemas", HEAD_SHA)


@pytest.mark.asyncio
async def test_get_files_from_commit(fake_github):
    fake_github.commit_files = [
        {"filename": "schema.graphql", "status": "modified", "changes": 4},
        {"filename": "new.gql", "previous_filename": "old.gql", "status": "renamed", "changes": 0},
        {"filename": "README.md", "status": "added", "changes": 10},
    ]

    files = await SchemaSource(fake_github).get_files_from_commit(OWNER, REPO, HEAD_SHA)

    assert [f.filename for f in files] == ["schema.graphql", "new.gql", "README.md"]
    assert files[1].status == FileStatus.RENAMED
    assert files[1].previous_filename == "old.gql"
    assert files[1].is_unchanged_rename


@pytest.mark.asyncio
async def test_get_files_from_commit_without_files():
    client = Mock()
    client.get_commit = AsyncMock(return_value={"sha": HEAD_SHA})

    assert await SchemaSource(client).get_files_from_commit(OWNER, REPO, HEAD_SHA) == []


@pytest.mark.asyncio
async def test_has_opt_in_file(fake_github):
    source = SchemaSource(fake_github)

    assert await source.has_opt_in_file(OWNER, REPO, MERGE_BASE_SHA)
    assert not await source.has_opt_in_file(OWNER, REPO, HEAD_SHA)
    assert ("get_content", (OWNER, REPO, OPT_IN_PATH, MERGE_BASE_SHA)) in fake_github.calls


@pytest.mark.asyncio
async def test_has_opt_in_file_custom_path(fake_github):
    fake_github.add_file("config/police.yml", MERGE_BASE_SHA, "")
    source = SchemaSource(fake_github, opt_in_path="config/police.yml")

    assert await source.has_opt_in_file(OWNER, REPO, MERGE_BASE_SHA)
