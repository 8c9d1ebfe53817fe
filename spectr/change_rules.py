"""Validate every delta spec file of one change.

Layout::

    <root>/specs/<capability>/spec.md                      base specs
    <root>/changes/<change-id>/specs/<capability>/spec.md  deltas

Each delta file is checked against the delta rules (sharing one
``DeltaTracker`` across the change) and then reconciled against the base spec
for the same capability.
"""

from __future__ import annotations

import logging
from pathlib import Path

from spectr.constants import SPEC_FILENAME, SPECS_DIR
from spectr.delta_parser import parse_delta_plan
from spectr.delta_rules import DeltaTracker, collect_delta_issues
from spectr.models import ValidationIssue, ValidationLevel, ValidationReport, build_report
from spectr.parsers import read_markdown
from spectr.reconcile import PreMergeError, validate_pre_merge

logger = logging.getLogger(__name__)

NO_DELTAS_MESSAGE = "Change must have at least one delta (ADDED, MODIFIED, REMOVED, or RENAMED requirement)"


class DeltaSpecsError(OSError):
    """Raised when a change's delta specs cannot be located."""


def find_delta_spec_files(specs_dir: Path) -> list[Path]:
    """Every ``spec.md`` under ``specs_dir``, sorted.

    Raises:
        DeltaSpecsError: the directory is missing, not a directory, or holds no spec.md.
    """
    if not specs_dir.exists():
        raise DeltaSpecsError(f"specs directory not found: {specs_dir}")
    if not specs_dir.is_dir():
        raise DeltaSpecsError(f"specs path is not a directory: {specs_dir}")

    spec_files = sorted(p for p in specs_dir.rglob(SPEC_FILENAME) if p.is_file())
    if not spec_files:
        raise DeltaSpecsError(f"no spec.md files found in specs directory: {specs_dir}")
    return spec_files


def base_spec_path_for(delta_path: Path, specs_dir: Path, spectr_root: Path) -> Path:
    """Map ``<change>/specs/<capability>/spec.md`` to ``<root>/specs/<capability>/spec.md``."""
    capability = delta_path.relative_to(specs_dir).parent
    if str(capability) in ("", "."):
        raise DeltaSpecsError(f"invalid delta spec path structure: {delta_path}")
    return spectr_root / SPECS_DIR / capability / SPEC_FILENAME


def validate_delta_against_base_spec(
    delta_path: Path, text: str, specs_dir: Path, spectr_root: Path
) -> list[ValidationIssue]:
    """Reconcile one delta file with its base spec; at most one ERROR is returned."""
    base_path = base_spec_path_for(delta_path, specs_dir, spectr_root)
    plan = parse_delta_plan(text)
    try:
        validate_pre_merge(base_path, plan, base_path.is_file())
    except PreMergeError as exc:
        return [
            ValidationIssue(
                level=ValidationLevel.ERROR,
                path=str(delta_path),
                line=exc.line,
                message=str(exc),
            )
        ]
    return []


def validate_change_delta_specs(
    change_dir: str | Path, spectr_root: str | Path, strict: bool = False
) -> ValidationReport:
    """Validate all delta spec files in a change directory.

    Raises:
        DeltaSpecsError: the specs directory or its spec files cannot be located.
        SpecReadError: a delta or base spec could not be read.
    """
    specs_dir = Path(change_dir) / SPECS_DIR
    root = Path(spectr_root)
    spec_files = find_delta_spec_files(specs_dir)

    tracker = DeltaTracker()
    issues: list[ValidationIssue] = []
    total_sections = 0

    for spec_path in spec_files:
        text = read_markdown(spec_path)
        result = collect_delta_issues(str(spec_path), text, tracker)
        issues.extend(result.issues)
        total_sections += result.section_count
        issues.extend(validate_delta_against_base_spec(spec_path, text, specs_dir, root))

    if total_sections == 0:
        issues.append(
            ValidationIssue(
                level=ValidationLevel.ERROR,
                path=str(specs_dir),
                line=1,
                message=NO_DELTAS_MESSAGE,
            )
        )

    report = build_report(issues, strict=strict)
    logger.debug(
        "Validated change %s: %d delta file(s), %d delta section(s), %d error(s)",
        change_dir,
        len(spec_files),
        total_sections,
        report.summary.errors,
    )
    return report
