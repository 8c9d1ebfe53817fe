"""Enumerate active changes and base specs under a project root."""

from __future__ import annotations

from pathlib import Path

from spectr.constants import (
    ARCHIVE_DIR,
    CHANGES_DIR,
    PROPOSAL_FILENAME,
    SPEC_FILENAME,
    SPECS_DIR,
    SPECTR_DIR,
)


def _list_ids(base: Path, marker: str, *, exclude: frozenset[str] = frozenset()) -> list[str]:
    if not base.is_dir():
        return []
    ids = [
        entry.name
        for entry in base.iterdir()
        if entry.is_dir()
        and not entry.name.startswith(".")
        and entry.name not in exclude
        and (entry / marker).is_file()
    ]
    return sorted(ids)


def list_change_ids(project_root: Path, *, root_dir: str = SPECTR_DIR) -> list[str]:
    """Active change IDs: directories under ``<root>/changes`` holding a proposal.md.

    Hidden entries and the archive directory are skipped. Returns ``[]`` when
    the changes directory does not exist.
    """
    return _list_ids(project_root / root_dir / CHANGES_DIR, PROPOSAL_FILENAME, exclude=frozenset({ARCHIVE_DIR}))


def list_spec_ids(project_root: Path, *, root_dir: str = SPECTR_DIR) -> list[str]:
    """Spec IDs: directories under ``<root>/specs`` holding a spec.md."""
    return _list_ids(project_root / root_dir / SPECS_DIR, SPEC_FILENAME)
