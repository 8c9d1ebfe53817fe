"""Validator facade: the single entry point for surrounding tooling.

``Validator`` binds strict mode once and dispatches to the spec or change
rules. The item helpers resolve names given on the command line into paths
and run bulk validation one item at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from spectr.change_rules import validate_change_delta_specs
from spectr.constants import (
    CHANGES_DIR,
    ITEM_TYPE_CHANGE,
    ITEM_TYPE_SPEC,
    SPEC_FILENAME,
    SPECS_DIR,
    SPECTR_DIR,
)
from spectr.discovery import list_change_ids, list_spec_ids
from spectr.models import BulkResult, ValidationIssue, ValidationReport, build_report
from spectr.spec_rules import validate_spec_file

logger = logging.getLogger(__name__)


class ItemResolutionError(ValueError):
    """Raised when an item name cannot be resolved to a change or spec."""


class Validator:
    """Validate specs and changes with a fixed strict-mode setting."""

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def validate_spec(self, path: str | Path) -> ValidationReport:
        """Validate a base spec file. Raises ``SpecReadError`` if it cannot be read."""
        return validate_spec_file(path, self.strict)

    def validate_change(self, change_dir: str | Path) -> ValidationReport:
        """Validate every delta spec of a change.

        ``change_dir`` is ``<project>/<root>/changes/<change-id>``; the spec
        root is two levels up.
        """
        change_path = Path(change_dir)
        spectr_root = change_path.parent.parent
        return validate_change_delta_specs(change_path, spectr_root, self.strict)

    def create_report(self, issues: Iterable[ValidationIssue]) -> ValidationReport:
        return build_report(issues, strict=self.strict)


@dataclass(frozen=True)
class ValidationItem:
    name: str
    item_type: str
    path: Path


@dataclass(frozen=True)
class ItemTypeInfo:
    item_type: str
    is_change: bool
    is_spec: bool


def determine_item_type(
    project_root: Path, name: str, type_hint: Optional[str] = None, *, root_dir: str = SPECTR_DIR
) -> ItemTypeInfo:
    """Decide whether ``name`` is a change or a spec.

    Raises:
        ItemResolutionError: not found, or ambiguous without ``type_hint``.
    """
    is_change = name in list_change_ids(project_root, root_dir=root_dir)
    is_spec = name in list_spec_ids(project_root, root_dir=root_dir)

    if type_hint is not None:
        if type_hint == ITEM_TYPE_CHANGE and not is_change:
            raise ItemResolutionError(f"change '{name}' not found")
        if type_hint == ITEM_TYPE_SPEC and not is_spec:
            raise ItemResolutionError(f"spec '{name}' not found")
        return ItemTypeInfo(item_type=type_hint, is_change=is_change, is_spec=is_spec)

    if is_change and is_spec:
        raise ItemResolutionError(f"item '{name}' exists as both change and spec, use --type flag to disambiguate")
    if not is_change and not is_spec:
        raise ItemResolutionError(f"item '{name}' not found")
    item_type = ITEM_TYPE_CHANGE if is_change else ITEM_TYPE_SPEC
    return ItemTypeInfo(item_type=item_type, is_change=is_change, is_spec=is_spec)


def item_path(project_root: Path, name: str, item_type: str, *, root_dir: str = SPECTR_DIR) -> Path:
    if item_type == ITEM_TYPE_CHANGE:
        return project_root / root_dir / CHANGES_DIR / name
    return project_root / root_dir / SPECS_DIR / name / SPEC_FILENAME


def validate_item_by_type(
    validator: Validator, project_root: Path, name: str, item_type: str, *, root_dir: str = SPECTR_DIR
) -> ValidationReport:
    path = item_path(project_root, name, item_type, root_dir=root_dir)
    if item_type == ITEM_TYPE_CHANGE:
        return validator.validate_change(path)
    return validator.validate_spec(path)


def validate_single_item(validator: Validator, item: ValidationItem) -> BulkResult:
    """Validate one item, recording structural failures in the result instead of raising."""
    try:
        if item.item_type == ITEM_TYPE_CHANGE:
            report = validator.validate_change(item.path)
        else:
            report = validator.validate_spec(item.path)
    except OSError as exc:
        logger.info("Could not validate %s %s: %s", item.item_type, item.name, exc)
        return BulkResult(name=item.name, type=item.item_type, valid=False, error=str(exc))
    return BulkResult(name=item.name, type=item.item_type, valid=report.valid, report=report)


def create_validation_items(ids: Iterable[str], item_type: str, base_path: Path) -> list[ValidationItem]:
    items: list[ValidationItem] = []
    for item_id in ids:
        path = base_path / item_id / SPEC_FILENAME if item_type == ITEM_TYPE_SPEC else base_path / item_id
        items.append(ValidationItem(name=item_id, item_type=item_type, path=path))
    return items


def get_change_items(project_root: Path, *, root_dir: str = SPECTR_DIR) -> list[ValidationItem]:
    ids = list_change_ids(project_root, root_dir=root_dir)
    return create_validation_items(ids, ITEM_TYPE_CHANGE, project_root / root_dir / CHANGES_DIR)


def get_spec_items(project_root: Path, *, root_dir: str = SPECTR_DIR) -> list[ValidationItem]:
    ids = list_spec_ids(project_root, root_dir=root_dir)
    return create_validation_items(ids, ITEM_TYPE_SPEC, project_root / root_dir / SPECS_DIR)


def get_all_items(project_root: Path, *, root_dir: str = SPECTR_DIR) -> list[ValidationItem]:
    return get_change_items(project_root, root_dir=root_dir) + get_spec_items(project_root, root_dir=root_dir)
