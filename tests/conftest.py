"""
Shared test configuration and fixtures.
"""

import os

import pytest

# Settings are instantiated at import time
os.environ.setdefault("WEBHOOK_SECRET", "test_secret")
os.environ.setdefault("GITHUB_APP_ID", "12345")
os.environ.setdefault("GITHUB_BOT_LOGIN", "graphql-police[bot]")

from tests.fakes import MERGE_BASE_SHA, OPT_IN_PATH, FakeGitHubClient  # noqa: E402


@pytest.fixture
def fake_github():
    """In-memory GitHub client with the opt-in file present at the merge base."""
    client = FakeGitHubClient()
    client.add_file(OPT_IN_PATH, MERGE_BASE_SHA, "enabled: true\n")
    return client
