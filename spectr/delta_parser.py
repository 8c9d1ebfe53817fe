"""Parse delta spec files into operation lists.

A delta file declares requirements under ``## ADDED Requirements``,
``## MODIFIED Requirements``, ``## REMOVED Requirements`` and
``## RENAMED Requirements``. RENAMED entries are line pairs::

    - FROM: ### Requirement: Old Name
    - TO: ### Requirement: New Name

The ``### Requirement: ...`` fragment may be wrapped in backticks.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from spectr.constants import (
    DELTA_ADDED,
    DELTA_MODIFIED,
    DELTA_REMOVED,
    DELTA_RENAMED,
    delta_section_name,
)
from spectr.parsers import Requirement, Section, extract_requirements, locate_sections, read_markdown, split_lines

_FROM_LINE = re.compile(r"^-\s*FROM:\s*`?\s*###\s*Requirement:\s*(.+?)`?\s*$")
_TO_LINE = re.compile(r"^-\s*TO:\s*`?\s*###\s*Requirement:\s*(.+?)`?\s*$")


@dataclass(frozen=True)
class RenamePair:
    """A FROM -> TO rename. One side is empty when the pair is malformed."""

    from_name: str
    to_name: str
    line: int = 1

    @property
    def is_complete(self) -> bool:
        return bool(self.from_name) and bool(self.to_name)


@dataclass
class DeltaPlan:
    """All delta operations declared by one delta file."""

    added: list[Requirement] = field(default_factory=list)
    modified: list[Requirement] = field(default_factory=list)
    removed: list[Requirement] = field(default_factory=list)
    renamed: list[RenamePair] = field(default_factory=list)

    @property
    def removed_names(self) -> list[str]:
        return [req.name for req in self.removed]

    def has_deltas(self) -> bool:
        return bool(self.added or self.modified or self.removed or self.renamed)

    def count_operations(self) -> int:
        return len(self.added) + len(self.modified) + len(self.removed) + len(self.renamed)


def parse_rename_pairs(body: str, *, start_line: int = 1) -> list[RenamePair]:
    """Pair FROM lines with the TO line that follows them.

    A TO pairs with the most recent unpaired FROM, across blank or unrelated
    lines. A second FROM before any TO supersedes the pending one. A TO with
    nothing pending, or a FROM still pending at the end, is kept as a
    malformed pair with the missing side empty.
    """
    pairs: list[RenamePair] = []
    pending_from: Optional[tuple[str, int]] = None

    for lineno, raw in enumerate(split_lines(body), start=start_line):
        line = raw.strip()
        if not line:
            continue

        match = _FROM_LINE.match(line)
        if match:
            pending_from = (match.group(1).strip(), lineno)
            continue

        match = _TO_LINE.match(line)
        if not match:
            continue
        to_name = match.group(1).strip()
        if pending_from is not None:
            from_name, from_line = pending_from
            pairs.append(RenamePair(from_name=from_name, to_name=to_name, line=from_line))
            pending_from = None
        else:
            pairs.append(RenamePair(from_name="", to_name=to_name, line=lineno))

    if pending_from is not None:
        from_name, from_line = pending_from
        pairs.append(RenamePair(from_name=from_name, to_name="", line=from_line))
    return pairs


def section_requirements(section: Section) -> list[Requirement]:
    """Requirements declared in a section body, with file-relative line numbers."""
    return extract_requirements(section.body, start_line=section.body_line)


def section_rename_pairs(section: Section) -> list[RenamePair]:
    return parse_rename_pairs(section.body, start_line=section.body_line)


def parse_delta_plan(text: str) -> DeltaPlan:
    """Build a DeltaPlan from delta markdown. Only complete rename pairs are kept."""
    sections = locate_sections(text)
    plan = DeltaPlan()

    added = sections.get(delta_section_name(DELTA_ADDED))
    if added is not None:
        plan.added = section_requirements(added)
    modified = sections.get(delta_section_name(DELTA_MODIFIED))
    if modified is not None:
        plan.modified = section_requirements(modified)
    removed = sections.get(delta_section_name(DELTA_REMOVED))
    if removed is not None:
        plan.removed = section_requirements(removed)
    renamed = sections.get(delta_section_name(DELTA_RENAMED))
    if renamed is not None:
        plan.renamed = [pair for pair in section_rename_pairs(renamed) if pair.is_complete]
    return plan


def parse_delta_spec(path: str | Path) -> DeltaPlan:
    """Read and parse a delta spec file."""
    return parse_delta_plan(read_markdown(path))
