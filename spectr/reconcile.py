"""Pre-merge reconciliation of a delta plan against its base spec.

Checks that each operation would be legal if the delta were merged, without
performing the merge. The first illegal operation raises ``PreMergeError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from spectr.delta_parser import DeltaPlan
from spectr.parsers import extract_requirements, normalize_requirement_name, read_markdown


class PreMergeError(ValueError):
    """Raised when a delta operation conflicts with the base spec."""

    def __init__(self, message: str, *, operation: Optional[str] = None, name: Optional[str] = None, line: int = 1):
        super().__init__(message)
        self.operation = operation
        self.name = name
        self.line = line


def base_requirement_names(base_spec_path: str | Path) -> set[str]:
    """Normalized names of every requirement in the base spec.

    Raises:
        SpecReadError: the base spec could not be read.
    """
    text = read_markdown(base_spec_path)
    return {normalize_requirement_name(req.name) for req in extract_requirements(text)}


def validate_pre_merge(base_spec_path: str | Path, plan: DeltaPlan, base_exists: bool) -> None:
    """Raise ``PreMergeError`` for the first operation the base spec cannot accept.

    Without a base spec only ADDED operations are legal. With one, MODIFIED,
    REMOVED and RENAMED FROM names must exist, ADDED names must not, and a
    RENAMED TO name must not exist unless it normalizes to its FROM name.
    """
    if not base_exists:
        if plan.modified or plan.removed or plan.renamed:
            lines = [req.line for req in (*plan.modified, *plan.removed)] + [pair.line for pair in plan.renamed]
            raise PreMergeError(
                "target spec does not exist; only ADDED requirements are allowed for new specs",
                line=min(lines),
            )
        return

    existing = base_requirement_names(base_spec_path)

    for req in plan.modified:
        if normalize_requirement_name(req.name) not in existing:
            raise PreMergeError(
                f'MODIFIED requirement "{req.name}" does not exist in base spec',
                operation="MODIFIED",
                name=req.name,
                line=req.line,
            )

    for req in plan.removed:
        if normalize_requirement_name(req.name) not in existing:
            raise PreMergeError(
                f'REMOVED requirement "{req.name}" does not exist in base spec',
                operation="REMOVED",
                name=req.name,
                line=req.line,
            )

    for pair in plan.renamed:
        from_norm = normalize_requirement_name(pair.from_name)
        if from_norm not in existing:
            raise PreMergeError(
                f'RENAMED FROM requirement "{pair.from_name}" does not exist in base spec',
                operation="RENAMED",
                name=pair.from_name,
                line=pair.line,
            )
        to_norm = normalize_requirement_name(pair.to_name)
        if to_norm in existing and to_norm != from_norm:
            raise PreMergeError(
                f'RENAMED TO requirement "{pair.to_name}" already exists in base spec',
                operation="RENAMED",
                name=pair.to_name,
                line=pair.line,
            )

    for req in plan.added:
        if normalize_requirement_name(req.name) in existing:
            raise PreMergeError(
                f'ADDED requirement "{req.name}" already exists in base spec',
                operation="ADDED",
                name=req.name,
                line=req.line,
            )
