"""Structural rules for a standalone base spec file."""

from __future__ import annotations

import logging
from pathlib import Path

from spectr.constants import PURPOSE_MIN_LENGTH, PURPOSE_SECTION, REQUIREMENTS_SECTION
from spectr.models import ValidationIssue, ValidationLevel, ValidationReport, build_report
from spectr.parsers import (
    contains_shall_or_must,
    extract_requirements,
    find_malformed_scenario_line,
    has_malformed_scenarios,
    locate_sections,
    read_markdown,
)

logger = logging.getLogger(__name__)

MALFORMED_SCENARIO_MESSAGE = "Scenarios must use '#### Scenario:' format (4 hashtags followed by 'Scenario:')"


def collect_spec_issues(path: str, text: str) -> list[ValidationIssue]:
    """Evaluate every base-spec rule against ``text`` without strict-mode handling."""
    sections = locate_sections(text)
    issues: list[ValidationIssue] = []

    purpose = sections.get(PURPOSE_SECTION)
    if purpose is None:
        issues.append(
            ValidationIssue(
                level=ValidationLevel.ERROR,
                path=path,
                message=f"Missing required '## {PURPOSE_SECTION}' section",
            )
        )

    requirements = sections.get(REQUIREMENTS_SECTION)
    if requirements is None:
        issues.append(
            ValidationIssue(
                level=ValidationLevel.ERROR,
                path=path,
                message=f"Missing required '## {REQUIREMENTS_SECTION}' section",
            )
        )

    if purpose is not None and len(purpose.body) < PURPOSE_MIN_LENGTH:
        issues.append(
            ValidationIssue(
                level=ValidationLevel.WARNING,
                path=path,
                line=purpose.line,
                message=(
                    f"Purpose section is too short ({len(purpose.body)} characters, "
                    f"minimum {PURPOSE_MIN_LENGTH} recommended)"
                ),
            )
        )

    if requirements is None:
        return issues

    for req in extract_requirements(requirements.body, start_line=requirements.body_line):
        req_path = f"{path}: Requirement '{req.name}'"
        if not contains_shall_or_must(req.content):
            issues.append(
                ValidationIssue(
                    level=ValidationLevel.WARNING,
                    path=req_path,
                    line=req.line,
                    message="Requirement should contain SHALL or MUST to indicate normative requirement",
                )
            )
        if not req.scenarios:
            issues.append(
                ValidationIssue(
                    level=ValidationLevel.WARNING,
                    path=req_path,
                    line=req.line,
                    message="Requirement should have at least one scenario",
                )
            )
            if has_malformed_scenarios(req.content):
                issues.append(
                    ValidationIssue(
                        level=ValidationLevel.ERROR,
                        path=req_path,
                        line=find_malformed_scenario_line(req),
                        message=MALFORMED_SCENARIO_MESSAGE,
                    )
                )
    return issues


def validate_spec_file(path: str | Path, strict: bool = False) -> ValidationReport:
    """Validate a base spec file.

    Raises:
        SpecReadError: the file could not be read.
    """
    path_str = str(path)
    text = read_markdown(path)
    issues = collect_spec_issues(path_str, text)
    report = build_report(issues, strict=strict)
    logger.debug(
        "Validated spec %s: %d error(s), %d warning(s)",
        path_str,
        report.summary.errors,
        report.summary.warnings,
    )
    return report
