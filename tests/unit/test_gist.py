from __future__ import annotations

import json
from pathlib import Path

import pytest

from lhnotify.context import RunContext
from lhnotify.gist import archive_all, build_gist_index, gist_name, read_raw_result
from lhnotify.models import ArchiveReference

HOME_NAME = "lhci-action-lhr-octo-site-example.com-.json"
BLOG_NAME = "lhci-action-lhr-octo-site-example.com-blog-.json"
FILES = ["lhr-1700000000001.json", "lhr-1700000000002.json"]


def test_gist_name_is_deterministic() -> None:
    assert gist_name("octo/site", "https://example.com/") == HOME_NAME
    assert gist_name("octo/site", "http://example.com/blog/") == BLOG_NAME
    assert gist_name("octo/site", "//example.com/blog/") == BLOG_NAME


def test_build_gist_index_maps_file_names_to_ids() -> None:
    gists = [
        {"id": "g1", "files": {HOME_NAME: {}, "notes.md": {}}},
        {"id": "g2", "files": {HOME_NAME: {}}},
        {"files": {BLOG_NAME: {}}},
    ]
    assert build_gist_index(gists) == {HOME_NAME: "g1", "notes.md": "g1"}


def test_read_raw_result_requires_requested_url(tmp_path: Path) -> None:
    (tmp_path / "lhr-1.json").write_text(json.dumps({"finalUrl": "https://a.test/"}), encoding="utf-8")

    with pytest.raises(ValueError):
        read_raw_result(tmp_path, "lhr-1.json", "octo/site")


@pytest.mark.anyio
async def test_archive_disabled_without_client(run_context: RunContext) -> None:
    assert await archive_all(None, run_context, FILES) == [ArchiveReference()]


@pytest.mark.anyio
async def test_archive_creates_new_gists(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls()

    refs = await archive_all(client, run_context, FILES)

    assert [r.url for r in refs] == ["https://example.com/", "https://example.com/blog/"]
    assert all(r.id.startswith("new") and r.version.endswith("-v1") for r in refs)
    assert client.call_names().count("create_gist") == 2
    assert client.call_names().count("list_gists") == 1


@pytest.mark.anyio
async def test_archive_updates_existing_gist(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls(gists=[{"id": "home", "files": {HOME_NAME: {}}}])

    refs = await archive_all(client, run_context, FILES)

    assert ("update_gist", "home", (HOME_NAME,)) in client.calls
    assert ("create_gist", (HOME_NAME,)) not in client.calls
    assert refs[0] == ArchiveReference(url="https://example.com/", id="home", version="home-v2")


@pytest.mark.anyio
async def test_second_run_updates_instead_of_creating(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls()

    first = await archive_all(client, run_context, FILES)
    client.calls.clear()
    second = await archive_all(client, run_context, FILES)

    assert "create_gist" not in client.call_names()
    assert client.call_names().count("update_gist") == 2
    assert [r.id for r in second] == [r.id for r in first]


@pytest.mark.anyio
async def test_same_url_results_share_one_gist(run_context: RunContext, dummy_github_cls) -> None:
    rerun = run_context.results_dir / "lhr-1700000000003.json"
    rerun.write_text(json.dumps({"requestedUrl": "https://example.com/"}), encoding="utf-8")
    client = dummy_github_cls()

    refs = await archive_all(client, run_context, FILES + [rerun.name])

    home_calls = [c for c in client.calls if c[0] in ("create_gist", "update_gist") and HOME_NAME in c[-1]]
    assert [c[0] for c in home_calls] == ["create_gist", "update_gist"]
    assert refs[0].id == refs[2].id


@pytest.mark.anyio
async def test_one_failed_file_does_not_stop_others(run_context: RunContext, dummy_github_cls) -> None:
    (run_context.results_dir / "lhr-1700000000001.json").write_text("{broken", encoding="utf-8")
    client = dummy_github_cls()

    refs = await archive_all(client, run_context, FILES)

    assert refs[0] == ArchiveReference()
    assert refs[1].url == "https://example.com/blog/"
    assert not refs[1].is_empty


@pytest.mark.anyio
async def test_upload_error_yields_empty_reference(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls(fail_on={"create_gist"})

    refs = await archive_all(client, run_context, FILES)

    assert refs == [ArchiveReference(), ArchiveReference()]


@pytest.mark.anyio
async def test_listing_error_yields_empty_references(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls(fail_on={"list_gists"})

    refs = await archive_all(client, run_context, FILES)

    assert refs == [ArchiveReference(), ArchiveReference()]
    assert client.call_names() == ["list_gists"]


@pytest.mark.anyio
async def test_no_files_skips_listing(run_context: RunContext, dummy_github_cls) -> None:
    client = dummy_github_cls()

    assert await archive_all(client, run_context, []) == []
    assert client.calls == []
