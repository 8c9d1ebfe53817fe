"""Tests for change and spec discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from spectr.discovery import list_change_ids, list_spec_ids


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x\n", encoding="utf-8")


@pytest.mark.unit
class TestListChangeIds:
    def test_lists_changes_with_proposals_sorted(self, tmp_path: Path) -> None:
        changes = tmp_path / "spectr" / "changes"
        _touch(changes / "zeta" / "proposal.md")
        _touch(changes / "alpha" / "proposal.md")
        _touch(changes / "draft" / "notes.md")
        _touch(changes / ".hidden" / "proposal.md")
        _touch(changes / "archive" / "proposal.md")
        _touch(changes / "README.md")
        assert list_change_ids(tmp_path) == ["alpha", "zeta"]

    def test_missing_directory_is_empty(self, tmp_path: Path) -> None:
        assert list_change_ids(tmp_path) == []

    def test_custom_root_dir(self, tmp_path: Path) -> None:
        _touch(tmp_path / "docs" / "changes" / "c1" / "proposal.md")
        assert list_change_ids(tmp_path, root_dir="docs") == ["c1"]
        assert list_change_ids(tmp_path) == []


@pytest.mark.unit
class TestListSpecIds:
    def test_lists_specs_with_spec_file(self, tmp_path: Path) -> None:
        specs = tmp_path / "spectr" / "specs"
        _touch(specs / "auth" / "spec.md")
        _touch(specs / "billing" / "spec.md")
        _touch(specs / "empty" / "design.md")
        assert list_spec_ids(tmp_path) == ["auth", "billing"]

    def test_missing_directory_is_empty(self, tmp_path: Path) -> None:
        assert list_spec_ids(tmp_path) == []
