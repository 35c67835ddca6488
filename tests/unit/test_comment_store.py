"""
Unit tests for the comment store.
"""

import pytest

from schema_police.services.comment_store import CommentScanIncomplete, CommentStore

from tests.fakes import BOT_LOGIN, OWNER, PR_NUMBER, REPO, make_comment


def human_comments(count: int, start_id: int = 1):
    return [make_comment(start_id + i, "octocat") for i in range(count)]


@pytest.mark.asyncio
async def test_find_bot_comment_on_first_page(fake_github):
    fake_github.comments = human_comments(3) + [make_comment(99, BOT_LOGIN, "old verdict")]
    store = CommentStore(fake_github, BOT_LOGIN)

    comment = await store.find_bot_comment(OWNER, REPO, PR_NUMBER)

    assert comment.id == 99
    assert comment.author_login == BOT_LOGIN
    assert comment.author_id == 990
    assert comment.body == "old verdict"


@pytest.mark.asyncio
async def test_find_bot_comment_scans_pages_in_order(fake_github):
    """The first matching comment wins, scanning page by page."""
    fake_github.comments = (
        human_comments(5)
        + [make_comment(100, BOT_LOGIN)]
        + human_comments(2, start_id=200)
        + [make_comment(101, BOT_LOGIN)]
    )
    store = CommentStore(fake_github, BOT_LOGIN, page_size=2)

    comment = await store.find_bot_comment(OWNER, REPO, PR_NUMBER)

    assert comment.id == 100
    pages = [args[3] for name, args in fake_github.calls if name == "list_issue_comments"]
    assert pages == [1, 2, 3]


@pytest.mark.asyncio
async def test_find_bot_comment_returns_none_after_last_page(fake_github):
    fake_github.comments = human_comments(5)
    store = CommentStore(fake_github, BOT_LOGIN, page_size=2)

    assert await store.find_bot_comment(OWNER, REPO, PR_NUMBER) is None

    pages = [args[3] for name, args in fake_github.calls if name == "list_issue_comments"]
    assert pages == [1, 2, 3]


@pytest.mark.asyncio
async def test_find_bot_comment_with_no_comments(fake_github):
    store = CommentStore(fake_github, BOT_LOGIN)

    assert await store.find_bot_comment(OWNER, REPO, PR_NUMBER) is None


@pytest.mark.asyncio
async def test_find_bot_comment_stops_at_page_ceiling(fake_github):
    """Pagination is bounded; an unfinished scan is an error, not a miss."""
    fake_github.comments = human_comments(10) + [make_comment(99, BOT_LOGIN)]
    store = CommentStore(fake_github, BOT_LOGIN, page_size=2, max_pages=3)

    with pytest.raises(CommentScanIncomplete) as exc_info:
        await store.find_bot_comment(OWNER, REPO, PR_NUMBER)

    assert exc_info.value.pages == 3

    pages = [args[3] for name, args in fake_github.calls if name == "list_issue_comments"]
    assert pages == [1, 2, 3]


@pytest.mark.asyncio
async def test_comments_by_other_bots_are_ignored(fake_github):
    fake_github.comments = [make_comment(5, "dependabot[bot]")]
    store = CommentStore(fake_github, BOT_LOGIN)

    assert await store.find_bot_comment(OWNER, REPO, PR_NUMBER) is None


@pytest.mark.asyncio
async def test_create_and_update(fake_github):
    store = CommentStore(fake_github, BOT_LOGIN)

    created = await store.create(OWNER, REPO, PR_NUMBER, "body one")
    updated = await store.update(OWNER, REPO, created.id, "body two")

    assert fake_github.created == [{"owner": OWNER, "repo": REPO, "number": PR_NUMBER, "body": "body one"}]
    assert fake_github.updated == [{"owner": OWNER, "repo": REPO, "comment_id": 1001, "body": "body two"}]
    assert updated.id == created.id
    assert updated.body == "body two"


@pytest.mark.asyncio
async def test_find_bot_comment_on_last_allowed_page(fake_github):
    fake_github.comments = human_comments(4) + [make_comment(99, BOT_LOGIN)]
    store = CommentStore(fake_github, BOT_LOGIN, page_size=2, max_pages=3)

    comment = await store.find_bot_comment(OWNER, REPO, PR_NUMBER)

    assert comment.id == 99


@pytest.mark.asyncio
async def test_find_bot_comment_exhausts_pages_within_ceiling(fake_github):
    fake_github.comments = human_comments(4)
    store = CommentStore(fake_github, BOT_LOGIN, page_size=2, max_pages=2)

    assert await store.find_bot_comment(OWNER, REPO, PR_NUMBER) is None
