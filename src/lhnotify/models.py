from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional

from .errors import MalformedResultsError

Operator = Literal["<=", ">="]
Conclusion = Literal["success", "failure"]
Color = Literal["good", "danger"]
LogLevel = Literal["info", "error"]

_OPERATOR_ALIASES: Dict[str, Operator] = {
    "<=": "<=",
    ">=": ">=",
    "=>": ">=",
}


def _display(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class AuditResult:
    """One Lighthouse CI assertion evaluated against one URL."""

    audit_id: str
    audit_property: str
    audit_title: str
    expected: str
    operator: str
    actual: str
    url: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "AuditResult":
        """Validate one record from assertion-results.json."""
        if not isinstance(raw, Mapping):
            raise MalformedResultsError(f"Assertion result must be an object, got {type(raw).__name__}")

        audit_id = raw.get("auditId")
        url = raw.get("url")
        for key, value in (("auditId", audit_id), ("url", url)):
            if not isinstance(value, str) or not value:
                raise MalformedResultsError(f"Assertion result is missing '{key}'")

        raw_operator = _display(raw.get("operator")).strip()
        # Unrecognized operators are kept verbatim and flagged by has_known_operator.
        operator = _OPERATOR_ALIASES.get(raw_operator, raw_operator)

        return cls(
            audit_id=audit_id,
            audit_property=_display(raw.get("auditProperty")),
            audit_title=_display(raw.get("auditTitle")),
            expected=_display(raw.get("expected")),
            operator=operator,
            actual=_display(raw.get("actual")),
            url=url,
        )

    @property
    def is_upper_bound(self) -> bool:
        return self.operator == "<="

    @property
    def has_known_operator(self) -> bool:
        return self.operator in _OPERATOR_ALIASES


GroupedResults = Dict[str, List[AuditResult]]


@dataclass(frozen=True)
class ArchiveReference:
    """Pointer to the gist holding the raw result for one URL. Empty when not archived."""

    url: str = ""
    id: str = ""
    version: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.id


@dataclass(frozen=True)
class ChangeReference:
    commit_link: str
    pull_request_link: str = ""

    @property
    def is_pull_request(self) -> bool:
        return bool(self.pull_request_link)


@dataclass(frozen=True)
class SummaryField:
    title: str
    value: str


@dataclass(frozen=True)
class Section:
    headline: str
    color: Color
    fields: List[SummaryField] = field(default_factory=list)
    report_link: Optional[str] = None


@dataclass(frozen=True)
class NotificationPayload:
    """Channel-agnostic report; adapters differ only in rendering."""

    status: int
    title: str
    change_reference: ChangeReference
    sections: List[Section] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == 0

    @property
    def conclusion(self) -> Conclusion:
        return "success" if self.passed else "failure"

    @property
    def color(self) -> Color:
        return "good" if self.passed else "danger"

    @property
    def headline(self) -> str:
        if self.change_reference.is_pull_request:
            return f"Pull Request {self.conclusion}"
        return f"Changes {self.conclusion}"
