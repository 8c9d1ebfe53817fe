"""Structural parser for spectr markdown.

Extracts ``##`` sections, ``### Requirement:`` blocks and their
``#### Scenario:`` sub-blocks. Each extractor is a line scanner driven by an
explicit ``ScanState``; line numbers (1-indexed) are recorded while scanning so
diagnostics never have to re-locate headings afterwards.

Absent structure yields empty results. The only failure mode is reading a
file (``read_markdown``), which raises ``SpecReadError``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from spectr.constants import MALFORMED_SCENARIO_MARKERS

_SECTION_HEADER = re.compile(r"^##\s+(.+)$")
_REQUIREMENT_HEADER = re.compile(r"^###\s+Requirement:\s*(.+)$")
_SCENARIO_HEADER = re.compile(r"^####\s+Scenario:\s*(.+)$")
_SHALL_OR_MUST = re.compile(r"\b(shall|must)\b", re.IGNORECASE)


class SpecReadError(OSError):
    """Raised when a spec or delta file cannot be read."""

    def __init__(self, path: str | Path, reason: object) -> None:
        super().__init__(f"failed to read {path}: {reason}")
        self.path = str(path)


class ScanState(Enum):
    OUTSIDE = "outside"
    IN_SECTION = "in_section"
    IN_REQUIREMENT = "in_requirement"
    IN_SCENARIO = "in_scenario"


@dataclass(frozen=True)
class Section:
    """A ``##`` section: heading text, trimmed body and where both start."""

    name: str
    body: str
    line: int
    body_line: int


@dataclass(frozen=True)
class Requirement:
    """A ``### Requirement:`` block.

    ``content`` excludes the heading line and is trimmed; ``content_line`` is
    the file line where that trimmed content begins.
    """

    name: str
    content: str
    scenarios: list[str] = field(default_factory=list)
    line: int = 1
    content_line: int = 1


def read_markdown(path: str | Path) -> str:
    """Read a markdown file as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecReadError(path, exc) from exc


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, dropping a trailing ``\\r`` per line."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def _trim_block(lines: list[str], first_line: int) -> tuple[str, int]:
    """Join and trim accumulated lines; return the body and its first line number."""
    raw = "\n".join(lines)
    body = raw.strip()
    if not body:
        return "", first_line
    leading = raw[: len(raw) - len(raw.lstrip())]
    return body, first_line + leading.count("\n")


def locate_sections(text: str) -> dict[str, Section]:
    """Return every ``##`` section keyed by heading text, in file order.

    A repeated heading replaces the earlier capture; bodies are never merged.
    """
    sections: dict[str, Section] = {}
    state = ScanState.OUTSIDE
    name = ""
    heading_line = 0
    body: list[str] = []

    def close() -> None:
        content, content_line = _trim_block(body, heading_line + 1)
        sections.pop(name, None)
        sections[name] = Section(name=name, body=content, line=heading_line, body_line=content_line)

    for lineno, line in enumerate(split_lines(text), start=1):
        match = _SECTION_HEADER.match(line)
        if match:
            if state is ScanState.IN_SECTION:
                close()
            state = ScanState.IN_SECTION
            name = match.group(1).strip()
            heading_line = lineno
            body = []
            continue
        if state is ScanState.IN_SECTION:
            body.append(line)

    if state is ScanState.IN_SECTION:
        close()
    return sections


def extract_sections(text: str) -> dict[str, str]:
    """Map ``##`` heading text to its trimmed body."""
    return {name: section.body for name, section in locate_sections(text).items()}


def _closes_requirement(line: str) -> bool:
    if line.startswith("###") and not line.startswith("####"):
        # A three-hash scenario is malformed markup of this requirement, not a new block.
        return not line.startswith("### Scenario:")
    return line.startswith("##") and not line.startswith("###")


def extract_requirements(text: str, *, start_line: int = 1) -> list[Requirement]:
    """Return all ``### Requirement:`` blocks in ``text``.

    ``start_line`` is the file line number of the first line of ``text``, so
    requirements parsed out of a section body keep file-relative positions.
    A requirement ends at the next ``###`` heading or the next ``##`` heading.
    ``####`` scenarios and misplaced ``### Scenario:`` lines stay inside.
    """
    requirements: list[Requirement] = []
    state = ScanState.OUTSIDE
    name = ""
    heading_line = 0
    content: list[str] = []

    def close() -> None:
        body, body_line = _trim_block(content, heading_line + 1)
        requirements.append(
            Requirement(
                name=name,
                content=body,
                scenarios=extract_scenarios(body),
                line=heading_line,
                content_line=body_line,
            )
        )

    for lineno, line in enumerate(split_lines(text), start=start_line):
        match = _REQUIREMENT_HEADER.match(line)
        if match:
            if state is ScanState.IN_REQUIREMENT:
                close()
            state = ScanState.IN_REQUIREMENT
            name = match.group(1).strip()
            heading_line = lineno
            content = []
            continue
        if state is not ScanState.IN_REQUIREMENT:
            continue
        if _closes_requirement(line):
            close()
            state = ScanState.OUTSIDE
            continue
        content.append(line)

    if state is ScanState.IN_REQUIREMENT:
        close()
    return requirements


def extract_scenarios(block: str) -> list[str]:
    """Return each ``#### Scenario:`` block, heading line included.

    A scenario ends at the next ``####`` or ``###`` heading; a new
    ``#### Scenario:`` heading opens the next scenario.
    """
    scenarios: list[str] = []
    state = ScanState.OUTSIDE
    current: list[str] = []

    for line in split_lines(block):
        if _SCENARIO_HEADER.match(line):
            if state is ScanState.IN_SCENARIO:
                scenarios.append("\n".join(current).strip())
            state = ScanState.IN_SCENARIO
            current = [line]
            continue
        if state is not ScanState.IN_SCENARIO:
            continue
        if line.startswith("###"):
            scenarios.append("\n".join(current).strip())
            state = ScanState.OUTSIDE
            current = []
            continue
        current.append(line)

    if state is ScanState.IN_SCENARIO:
        scenarios.append("\n".join(current).strip())
    return scenarios


def contains_shall_or_must(text: str) -> bool:
    """True when ``text`` contains the whole word SHALL or MUST, any case."""
    return _SHALL_OR_MUST.search(text) is not None


def normalize_requirement_name(name: str) -> str:
    """Canonical key for duplicate detection: trimmed, lowercased, single-spaced."""
    return " ".join(name.split()).lower()


def has_malformed_scenarios(content: str) -> bool:
    """Detect scenario-like markup that does not use ``#### Scenario:``.

    Only meaningful when no well-formed scenario was extracted, since a
    correct ``#### Scenario:`` heading also contains ``### Scenario:``.
    """
    if not content:
        return False
    return any(marker in content for marker in MALFORMED_SCENARIO_MARKERS)


def find_malformed_scenario_line(requirement: Requirement) -> int:
    """Line of the first malformed scenario marker, else the requirement heading."""
    for lineno, line in enumerate(split_lines(requirement.content), start=requirement.content_line):
        stripped = line.strip()
        if any(marker in stripped for marker in MALFORMED_SCENARIO_MARKERS):
            return lineno
    return requirement.line
