"""
Unit tests for the GitHub REST client.
"""

import json

import httpx
import pytest

from schema_police.services.github_client import GitHubAPIError, GitHubClient, GitHubNotFoundError


def make_client(handler, **kwargs) -> GitHubClient:
    return GitHubClient("ghs_token", base_url="https://api.github.test", transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_requests_carry_auth_and_accept_headers():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"files": []})

    async with make_client(handler, user_agent="police-test") as client:
        await client.get_commit("octo", "api", "abc")

    request = seen[0]
    assert request.url.path == "/repos/octo/api/commits/abc"
    assert request.headers["Authorization"] == "token ghs_token"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert request.headers["User-Agent"] == "police-test"


@pytest.mark.asyncio
async def test_get_content_passes_ref():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/octo/api/contents/schema/schema.graphql"
        assert request.url.params["ref"] == "abc"
        return httpx.Response(200, json={"content": "dHlwZQ==", "encoding": "base64"})

    async with make_client(handler) as client:
        data = await client.get_content("octo", "api", "schema/schema.graphql", "abc")

    assert data["content"] == "dHlwZQ=="


@pytest.mark.asyncio
async def test_get_content_escapes_path_segments():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.raw_path == b"/repos/octo/api/contents/schema/v1%23beta%3F.graphql?ref=abc"
        assert request.url.path == "/repos/octo/api/contents/schema/v1#beta?.graphql"
        assert dict(request.url.params) == {"ref": "abc"}
        return httpx.Response(200, json={"content": "dHlwZQ==", "encoding": "base64"})

    async with make_client(handler) as client:
        data = await client.get_content("octo", "api", "schema/v1#beta?.graphql", "abc")

    assert data["encoding"] == "base64"


@pytest.mark.asyncio
async def test_not_found_raises_not_found_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    async with make_client(handler) as client:
        with pytest.raises(GitHubNotFoundError) as exc_info:
            await client.get_content("octo", "api", "missing.graphql", "abc")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Not Found"


@pytest.mark.asyncio
async def test_server_error_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="upstream down")

    async with make_client(handler) as client:
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.get_pull_request("octo", "api", 7)

    assert not isinstance(exc_info.value, GitHubNotFoundError)
    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "upstream down"


@pytest.mark.asyncio
async def test_timeouts_propagate_without_retry():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_client(handler) as client:
        with pytest.raises(httpx.ReadTimeout):
            await client.get_commit("octo", "api", "abc")

    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_list_issue_comments_reports_next_page():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["per_page"] == "50"
        page = int(request.url.params["page"])
        headers = {}
        if page == 1:
            headers["Link"] = (
                '<https://api.github.test/repos/octo/api/issues/7/comments?page=2>; rel="next", '
                '<https://api.github.test/repos/octo/api/issues/7/comments?page=2>; rel="last"'
            )
        return httpx.Response(200, json=[{"id": page}], headers=headers)

    async with make_client(handler) as client:
        first, first_has_next = await client.list_issue_comments("octo", "api", 7, page=1)
        second, second_has_next = await client.list_issue_comments("octo", "api", 7, page=2)

    assert first == [{"id": 1}] and first_has_next
    assert second == [{"id": 2}] and not second_has_next


@pytest.mark.asyncio
async def test_create_and_update_comment_bodies():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201, json={"id": 55, "body": json.loads(request.content)["body"]})

    async with make_client(handler) as client:
        await client.create_issue_comment("octo", "api", 7, "hello")
        await client.update_issue_comment("octo", "api", 55, "updated")

    assert (requests[0].method, requests[0].url.path) == ("POST", "/repos/octo/api/issues/7/comments")
    assert json.loads(requests[0].content) == {"body": "hello"}
    assert (requests[1].method, requests[1].url.path) == ("PATCH", "/repos/octo/api/issues/comments/55")
    assert json.loads(requests[1].content) == {"body": "updated"}


@pytest.mark.asyncio
async def test_compare_commits_path():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/octo/api/compare/main...abc"
        return httpx.Response(200, json={"merge_base_commit": {"sha": "base"}})

    async with make_client(handler) as client:
        data = await client.compare_commits("octo", "api", "main", "abc")

    assert data["merge_base_commit"]["sha"] == "base"
