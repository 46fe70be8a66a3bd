from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .constants import LIGHTHOUSE_VIEWER_URL, REPORT_TITLE
from .models import (
    ArchiveReference,
    AuditResult,
    ChangeReference,
    Color,
    Conclusion,
    GroupedResults,
    NotificationPayload,
    Section,
    SummaryField,
)

MAX_FIELDS_PER_SECTION = 2
ELLIPSIS_FIELD = SummaryField(title="…", value="")


def status_color(status: int) -> Color:
    return "good" if status == 0 else "danger"


def status_conclusion(status: int) -> Conclusion:
    return "success" if status == 0 else "failure"


def report_url(archive: Optional[ArchiveReference]) -> str:
    """Lighthouse viewer URL for an archived result, or "" if not archived."""
    if archive is None or archive.is_empty:
        return ""
    return f"{LIGHTHOUSE_VIEWER_URL}?gist={archive.id}/{archive.version}"


def find_archive(archives: Iterable[ArchiveReference], url: str) -> Optional[ArchiveReference]:
    for archive in archives:
        if not archive.is_empty and archive.url == url:
            return archive
    return None


def format_field(result: AuditResult) -> SummaryField:
    comparison = "less than" if result.is_upper_bound else "greater than"
    return SummaryField(
        title=f"{result.audit_id}.{result.audit_property}",
        value=f"{result.audit_title}\nExpected {result.expected} {comparison} actual {result.actual}",
    )


def format_section(
    url: str,
    results: Sequence[AuditResult],
    archives: Sequence[ArchiveReference],
    status: int,
) -> Section:
    fields = [format_field(result) for result in results[:MAX_FIELDS_PER_SECTION]]
    if fields:
        fields.append(ELLIPSIS_FIELD)

    link = report_url(find_archive(archives, url))
    return Section(
        # Headline count is len(results) + 1.
        headline=f"{len(results) + 1} result(s) for {url}",
        color=status_color(status),
        fields=fields,
        report_link=link or None,
    )


def format_sections(
    grouped: GroupedResults,
    archives: Sequence[ArchiveReference],
    status: int,
) -> List[Section]:
    """One section per URL, in first-seen order. Color follows the run status only."""
    return [format_section(url, results, archives, status) for url, results in grouped.items()]


def build_summary(
    grouped: GroupedResults,
    archives: Sequence[ArchiveReference],
    status: int,
    change_reference: ChangeReference,
) -> NotificationPayload:
    return NotificationPayload(
        status=status,
        title=REPORT_TITLE,
        change_reference=change_reference,
        sections=format_sections(grouped, archives, status),
    )
