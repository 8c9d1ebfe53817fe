"""Report model: severity levels, issues, summaries and reports.

Reports are rebuilt from an issue list, never mutated incrementally. Strict
mode is a pass over the finished issue list that escalates WARNING to ERROR.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


class ValidationLevel(str, Enum):
    """Severity of a validation issue."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class ValidationIssue(BaseModel):
    """A single validation problem or note."""

    model_config = ConfigDict(frozen=True)

    level: ValidationLevel
    path: str
    message: str
    line: int = 1

    def format(self) -> str:
        return f"[{self.level.value}] {self.path}: {self.message}"


class ValidationSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    errors: int = 0
    warnings: int = 0
    info: int = 0


class ValidationReport(BaseModel):
    """Complete validation result for one spec or change."""

    model_config = ConfigDict(frozen=True)

    valid: bool = True
    issues: list[ValidationIssue] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)

    @classmethod
    def from_issues(cls, issues: Optional[Iterable[ValidationIssue]] = None) -> "ValidationReport":
        collected = list(issues or [])
        errors = sum(1 for issue in collected if issue.level is ValidationLevel.ERROR)
        warnings = sum(1 for issue in collected if issue.level is ValidationLevel.WARNING)
        info = sum(1 for issue in collected if issue.level is ValidationLevel.INFO)
        return cls(
            valid=errors == 0,
            issues=collected,
            summary=ValidationSummary(errors=errors, warnings=warnings, info=info),
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def format_lines(self) -> list[str]:
        """One ``[LEVEL] path: message`` line per issue."""
        return [issue.format() for issue in self.issues]


def apply_strict_mode(issues: Iterable[ValidationIssue]) -> list[ValidationIssue]:
    """Return issues with every WARNING rewritten to ERROR. INFO is never escalated."""
    escalated: list[ValidationIssue] = []
    for issue in issues:
        if issue.level is ValidationLevel.WARNING:
            issue = issue.model_copy(update={"level": ValidationLevel.ERROR})
        escalated.append(issue)
    return escalated


def build_report(issues: Iterable[ValidationIssue], *, strict: bool) -> ValidationReport:
    """Apply strict mode (if requested) and aggregate into a report."""
    collected = list(issues)
    if strict:
        collected = apply_strict_mode(collected)
    return ValidationReport.from_issues(collected)


class BulkResult(BaseModel):
    """Outcome of validating one item during bulk validation."""

    name: str
    type: str
    valid: bool
    report: Optional[ValidationReport] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
