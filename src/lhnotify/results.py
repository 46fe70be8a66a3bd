from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Optional

from .constants import ASSERTION_RESULTS_FILE, RAW_RESULT_PATTERN
from .errors import MalformedResultsError
from .logging import NotifyLogger
from .models import AuditResult, GroupedResults
from .utils import read_json


def group_by_url(results: Iterable[AuditResult]) -> GroupedResults:
    """Partition results by inspected URL, keeping first-seen URL order."""
    grouped: GroupedResults = {}
    for result in results:
        grouped.setdefault(result.url, []).append(result)
    return grouped


def parse_assertion_results(raw: Any, logger: Optional[NotifyLogger] = None) -> List[AuditResult]:
    if not isinstance(raw, list):
        raise MalformedResultsError(
            f"Assertion results must be a JSON array, got {type(raw).__name__}"
        )
    results = [AuditResult.from_dict(item) for item in raw]
    if logger:
        for result in results:
            if not result.has_known_operator:
                logger.warning(
                    "Unknown assertion operator, reported as greater than",
                    operator=result.operator,
                    audit_id=result.audit_id,
                    url=result.url,
                )
    return results


def load_grouped_results(
    results_dir: Path,
    logger: Optional[NotifyLogger] = None,
) -> GroupedResults:
    """
    Load assertion-results.json and group it by URL.

    A missing file is a valid run with nothing to report and yields an empty
    mapping. Unparsable content raises MalformedResultsError.
    """
    path = Path(results_dir) / ASSERTION_RESULTS_FILE
    if not path.is_file():
        if logger:
            logger.info("No Lighthouse assertion results found", path=str(path))
        return {}

    try:
        _, raw = read_json(path)
    except ValueError as exc:  # JSONDecodeError or oversized file
        raise MalformedResultsError(f"Invalid assertion results in {path}: {exc}") from exc

    grouped = group_by_url(parse_assertion_results(raw, logger))
    if logger:
        logger.info(
            "Loaded assertion results",
            urls=len(grouped),
            results=sum(len(group) for group in grouped.values()),
        )
    return grouped


def list_raw_result_files(results_dir: Path) -> List[str]:
    """Names of lhr-<N>.json files in results_dir, sorted. Other entries are ignored."""
    directory = Path(results_dir)
    if not directory.is_dir():
        return []
    return sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and RAW_RESULT_PATTERN.fullmatch(entry.name)
    )
