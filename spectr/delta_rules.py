"""Per-operation rules for delta spec files.

Delta requirements are held to a stricter bar than base specs: a missing
SHALL/MUST or a missing scenario is an ERROR here, not a WARNING.

Duplicate names are tracked at two scopes. Within one file a name may appear
once per section. Across all delta files of one change a name may be claimed
once per operation; the claims live in a ``DeltaTracker`` owned by the caller
for exactly one change validation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from spectr.constants import (
    DELTA_ADDED,
    DELTA_MODIFIED,
    DELTA_OPERATIONS,
    DELTA_REMOVED,
    DELTA_RENAMED,
    delta_section_name,
)
from spectr.delta_parser import section_rename_pairs, section_requirements
from spectr.models import ValidationIssue, ValidationLevel
from spectr.parsers import (
    Requirement,
    Section,
    contains_shall_or_must,
    find_malformed_scenario_line,
    has_malformed_scenarios,
    locate_sections,
    normalize_requirement_name,
    read_markdown,
)
from spectr.spec_rules import MALFORMED_SCENARIO_MESSAGE

logger = logging.getLogger(__name__)

RENAMED_FROM = "RENAMED FROM"
RENAMED_TO = "RENAMED TO"

MALFORMED_RENAME_MESSAGE = (
    "Malformed RENAMED requirement (expected format: '- FROM: ### Requirement: OldName' "
    "followed by '- TO: ### Requirement: NewName')"
)


@dataclass
class DeltaTracker:
    """Cross-file duplicate bookkeeping for the delta files of one change.

    Maps claim kind (ADDED, MODIFIED, REMOVED, RENAMED FROM, RENAMED TO) to
    normalized requirement name -> path of the first file that claimed it.
    """

    claims: dict[str, dict[str, str]] = field(
        default_factory=lambda: {
            DELTA_ADDED: {},
            DELTA_MODIFIED: {},
            DELTA_REMOVED: {},
            RENAMED_FROM: {},
            RENAMED_TO: {},
        }
    )

    def claim(self, kind: str, normalized: str, path: str) -> Optional[str]:
        """Record ``path`` as claiming ``normalized``.

        Returns the other file's path if a different file already claimed the
        name for this kind; the earlier claim is kept.
        """
        owners = self.claims[kind]
        existing = owners.get(normalized)
        if existing is None:
            owners[normalized] = path
            return None
        if existing == path:
            return None
        return existing


@dataclass
class DeltaFileResult:
    path: str
    issues: list[ValidationIssue]
    section_count: int


def _error(path: str, message: str, line: int) -> ValidationIssue:
    return ValidationIssue(level=ValidationLevel.ERROR, path=path, message=message, line=line)


def _empty_section_issue(operation: str, section: Section, path: str, *, what: str = "requirements") -> ValidationIssue:
    return _error(path, f"{delta_section_name(operation)} section is empty (no {what} found)", section.line)


def validate_requirement_section(
    operation: str,
    section: Section,
    path: str,
    tracker: DeltaTracker,
    seen: dict[str, Requirement],
) -> list[ValidationIssue]:
    """Rules for ADDED and MODIFIED sections.

    ``seen`` collects this file's normalized names for the operation so the
    caller can detect ADDED/MODIFIED overlap.
    """
    requirements = section_requirements(section)
    if not requirements:
        return [_empty_section_issue(operation, section, path)]

    issues: list[ValidationIssue] = []
    for req in requirements:
        normalized = normalize_requirement_name(req.name)
        req_path = f"{path}: {operation} Requirement '{req.name}'"

        if not contains_shall_or_must(req.content):
            issues.append(_error(req_path, f"{operation} requirement must contain SHALL or MUST", req.line))
        if not req.scenarios:
            issues.append(_error(req_path, f"{operation} requirement must have at least one scenario", req.line))

        if normalized in seen:
            issues.append(
                _error(req_path, f"Duplicate requirement name in {operation} section: '{req.name}'", req.line)
            )
        else:
            seen[normalized] = req

        other = tracker.claim(operation, normalized, path)
        if other is not None:
            issues.append(
                _error(
                    req_path,
                    f"Requirement '{req.name}' is {operation} in multiple files: {other} and {path}",
                    req.line,
                )
            )

        if not req.scenarios and has_malformed_scenarios(req.content):
            issues.append(_error(req_path, MALFORMED_SCENARIO_MESSAGE, find_malformed_scenario_line(req)))
    return issues


def validate_removed_section(section: Section, path: str, tracker: DeltaTracker) -> list[ValidationIssue]:
    """REMOVED entries carry a reason, not normative text; only names are checked."""
    requirements = section_requirements(section)
    if not requirements:
        return [_empty_section_issue(DELTA_REMOVED, section, path)]

    issues: list[ValidationIssue] = []
    seen: set[str] = set()
    for req in requirements:
        normalized = normalize_requirement_name(req.name)
        req_path = f"{path}: {DELTA_REMOVED} Requirement '{req.name}'"
        if normalized in seen:
            issues.append(
                _error(req_path, f"Duplicate requirement name in {DELTA_REMOVED} section: '{req.name}'", req.line)
            )
        seen.add(normalized)

        other = tracker.claim(DELTA_REMOVED, normalized, path)
        if other is not None:
            issues.append(
                _error(
                    req_path,
                    f"Requirement '{req.name}' is {DELTA_REMOVED} in multiple files: {other} and {path}",
                    req.line,
                )
            )
    return issues


def validate_renamed_section(section: Section, path: str, tracker: DeltaTracker) -> list[ValidationIssue]:
    pairs = section_rename_pairs(section)
    if not pairs:
        return [_empty_section_issue(DELTA_RENAMED, section, path, what="rename pairs")]

    issues: list[ValidationIssue] = []
    seen_from: set[str] = set()
    seen_to: set[str] = set()
    for pair in pairs:
        if not pair.is_complete:
            issues.append(_error(f"{path}: {delta_section_name(DELTA_RENAMED)}", MALFORMED_RENAME_MESSAGE, pair.line))
            continue

        from_norm = normalize_requirement_name(pair.from_name)
        to_norm = normalize_requirement_name(pair.to_name)
        pair_path = f"{path}: {DELTA_RENAMED} Requirement '{pair.from_name}' -> '{pair.to_name}'"

        if from_norm in seen_from:
            issues.append(
                _error(pair_path, f"Duplicate FROM requirement name in RENAMED section: '{pair.from_name}'", pair.line)
            )
        seen_from.add(from_norm)

        if to_norm in seen_to:
            issues.append(
                _error(pair_path, f"Duplicate TO requirement name in RENAMED section: '{pair.to_name}'", pair.line)
            )
        seen_to.add(to_norm)

        other = tracker.claim(RENAMED_FROM, from_norm, path)
        if other is not None:
            issues.append(
                _error(
                    pair_path,
                    f"Requirement '{pair.from_name}' is renamed (FROM) in multiple files: {other} and {path}",
                    pair.line,
                )
            )
        other = tracker.claim(RENAMED_TO, to_norm, path)
        if other is not None:
            issues.append(
                _error(
                    pair_path,
                    f"Requirement '{pair.to_name}' is renamed (TO) in multiple files: {other} and {path}",
                    pair.line,
                )
            )
    return issues


def collect_delta_issues(path: str, text: str, tracker: DeltaTracker) -> DeltaFileResult:
    """Apply every delta rule to one file's text, updating ``tracker``."""
    sections = locate_sections(text)
    issues: list[ValidationIssue] = []
    section_count = 0
    added_names: dict[str, Requirement] = {}
    modified_names: dict[str, Requirement] = {}

    for operation in DELTA_OPERATIONS:
        section = sections.get(delta_section_name(operation))
        if section is None:
            continue
        section_count += 1
        if operation == DELTA_ADDED:
            issues.extend(validate_requirement_section(operation, section, path, tracker, added_names))
        elif operation == DELTA_MODIFIED:
            issues.extend(validate_requirement_section(operation, section, path, tracker, modified_names))
        elif operation == DELTA_REMOVED:
            issues.extend(validate_removed_section(section, path, tracker))
        else:
            issues.extend(validate_renamed_section(section, path, tracker))

    for normalized, req in added_names.items():
        if normalized in modified_names:
            issues.append(
                _error(path, f"Requirement '{req.name}' appears in both ADDED and MODIFIED sections", req.line)
            )

    return DeltaFileResult(path=path, issues=issues, section_count=section_count)


def validate_delta_file(path: str | Path, tracker: DeltaTracker) -> DeltaFileResult:
    """Read one delta file and apply the delta rules.

    Raises:
        SpecReadError: the file could not be read.
    """
    path_str = str(path)
    result = collect_delta_issues(path_str, read_markdown(path), tracker)
    logger.debug("Delta file %s: %d section(s), %d issue(s)", path_str, result.section_count, len(result.issues))
    return result
