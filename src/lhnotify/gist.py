from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import GIST_NAME_PREFIX
from .context import RunContext
from .github import GitHubClient
from .logging import NotifyLogger
from .models import ArchiveReference
from .utils import read_json

_SCHEME_RE = re.compile(r"^(\w+:|)//")


@dataclass(frozen=True)
class RawResult:
    """One lhr-<N>.json file ready for upload."""

    filename: str
    url: str
    gist_name: str
    content: str


def gist_name(repo_full_name: str, url: str) -> str:
    """Stable gist file name for (repository, URL); re-runs target the same gist."""
    location = _SCHEME_RE.sub("", url)
    return f"{GIST_NAME_PREFIX}-{repo_full_name.replace('/', '-')}-{location.replace('/', '-')}.json"


def build_gist_index(gists: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """Map every gist file name to the id of the first gist that contains it."""
    index: Dict[str, str] = {}
    for gist in gists:
        gist_id = gist.get("id")
        if not gist_id:
            continue
        for filename in gist.get("files") or {}:
            index.setdefault(filename, str(gist_id))
    return index


def read_raw_result(results_dir: Path, filename: str, repo_full_name: str) -> RawResult:
    content, data = read_json(Path(results_dir) / filename)
    url = data.get("requestedUrl") if isinstance(data, dict) else None
    if not isinstance(url, str) or not url:
        raise ValueError(f"{filename} has no requestedUrl")
    return RawResult(
        filename=filename,
        url=url,
        gist_name=gist_name(repo_full_name, url),
        content=content,
    )


def upload_raw_result(
    client: GitHubClient,
    raw: RawResult,
    gist_id: Optional[str],
) -> ArchiveReference:
    """Update the existing gist in place when gist_id is known, otherwise create one."""
    files = {raw.gist_name: {"content": raw.content}}
    if gist_id:
        data = client.update_gist(gist_id, files)
    else:
        data = client.create_gist(files)

    history = data.get("history") or []
    version = history[0].get("version") if history else ""
    return ArchiveReference(url=raw.url, id=str(data.get("id") or ""), version=str(version or ""))


async def archive_all(
    client: Optional[GitHubClient],
    ctx: RunContext,
    files: Sequence[str],
    logger: Optional[NotifyLogger] = None,
) -> List[ArchiveReference]:
    """
    Archive raw Lighthouse results to gists, one gist per URL.

    Returns one reference per file in the order of ``files``. Without a client
    archiving is disabled and a single empty placeholder is returned. Per-file
    failures yield an empty reference and never abort the others.
    """
    if client is None:
        return [ArchiveReference()]
    if not files:
        return []

    try:
        index = build_gist_index(await asyncio.to_thread(client.list_gists))
    except Exception as exc:
        if logger:
            logger.warning("Gist listing failed, skipping archive", error=str(exc))
        return [ArchiveReference() for _ in files]

    async def prepare(filename: str) -> Optional[RawResult]:
        try:
            return await asyncio.to_thread(read_raw_result, ctx.results_dir, filename, ctx.repo_full_name)
        except Exception as exc:
            if logger:
                logger.warning("Could not read Lighthouse result", file=filename, error=str(exc))
            return None

    prepared = await asyncio.gather(*(prepare(filename) for filename in files))

    # Results for the same URL share a gist name; upload those in sequence so
    # later ones update the gist the first one created.
    batches: Dict[str, List[int]] = {}
    for position, raw in enumerate(prepared):
        if raw is not None:
            batches.setdefault(raw.gist_name, []).append(position)

    async def upload_batch(name: str, positions: List[int]) -> List[Tuple[int, ArchiveReference]]:
        gist_id = index.get(name)
        uploaded: List[Tuple[int, ArchiveReference]] = []
        for position in positions:
            raw = prepared[position]
            try:
                reference = await asyncio.to_thread(upload_raw_result, client, raw, gist_id)
            except Exception as exc:
                if logger:
                    logger.warning("Gist upload failed", file=raw.filename, url=raw.url, error=str(exc))
                continue
            if logger:
                logger.info(
                    "Archived Lighthouse result",
                    file=raw.filename,
                    url=raw.url,
                    gist_id=reference.id,
                    action="update" if gist_id else "create",
                )
            gist_id = gist_id or reference.id or None
            uploaded.append((position, reference))
        return uploaded

    references = [ArchiveReference() for _ in files]
    for uploaded in await asyncio.gather(*(upload_batch(n, p) for n, p in batches.items())):
        for position, reference in uploaded:
            references[position] = reference
    return references
