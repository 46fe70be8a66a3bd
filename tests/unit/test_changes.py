from __future__ import annotations

import pytest

from lhnotify.changes import commit_link, find_pull_request, resolve_change_reference
from lhnotify.context import RunContext
from lhnotify.models import ChangeReference

COMMIT = "https://github.com/octo/site/commit/headsha123"


def test_commit_link(run_context: RunContext) -> None:
    assert commit_link(run_context) == COMMIT


@pytest.mark.anyio
async def test_without_client_only_commit_link(run_context: RunContext) -> None:
    ref = await resolve_change_reference(None, run_context)

    assert ref == ChangeReference(commit_link=COMMIT)
    assert ref.is_pull_request is False


@pytest.mark.anyio
async def test_matching_pull_request(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls(
        pulls=[
            {"number": 7, "head": {"sha": "othersha"}, "html_url": "https://github.com/octo/site/pull/7"},
            {"number": 9, "head": {"sha": "headsha123"}, "html_url": "https://github.com/octo/site/pull/9"},
        ]
    )

    ref = await resolve_change_reference(client, run_context)

    assert ref.pull_request_link == "https://github.com/octo/site/pull/9"
    assert ref.commit_link == COMMIT


@pytest.mark.anyio
async def test_no_matching_pull_request(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls(pulls=[{"head": {"sha": "othersha"}, "html_url": "https://x/pull/1"}])

    ref = await resolve_change_reference(client, run_context)

    assert ref == ChangeReference(commit_link=COMMIT)


def test_first_matching_pull_request_wins() -> None:
    pulls = [
        {"head": {}, "html_url": "https://x/pull/0"},
        {"head": {"sha": "abc"}, "html_url": "https://x/pull/1"},
        {"head": {"sha": "abc"}, "html_url": "https://x/pull/2"},
    ]
    assert find_pull_request(pulls, "abc")["html_url"] == "https://x/pull/1"
    assert find_pull_request(pulls, "zzz") is None


@pytest.mark.anyio
async def test_listing_error_propagates(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls(fail_on={"list_pull_requests"})

    with pytest.raises(RuntimeError):
        await resolve_change_reference(client, run_context)
