"""Tests for the structural markdown parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from spectr.parsers import (
    SpecReadError,
    contains_shall_or_must,
    extract_requirements,
    extract_scenarios,
    extract_sections,
    find_malformed_scenario_line,
    has_malformed_scenarios,
    locate_sections,
    normalize_requirement_name,
    read_markdown,
)

SPEC_TEXT = """# Auth

## Purpose
Describe authentication.

## Requirements

### Requirement: Login
The system SHALL log users in.

#### Scenario: ok
- WHEN valid credentials
- THEN a session exists

### Requirement: Logout
The system MUST end sessions.
"""


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestExtractSections:
    def test_maps_heading_to_trimmed_body(self) -> None:
        sections = extract_sections(SPEC_TEXT)
        assert list(sections) == ["Purpose", "Requirements"]
        assert sections["Purpose"] == "Describe authentication."
        assert sections["Requirements"].startswith("### Requirement: Login")

    def test_text_before_first_section_is_ignored(self) -> None:
        assert extract_sections("intro\n# Title\n") == {}

    def test_repeated_heading_keeps_latest_body(self) -> None:
        text = "## Notes\nfirst\n## Other\nx\n## Notes\nsecond\n"
        sections = extract_sections(text)
        assert sections["Notes"] == "second"
        assert sections["Other"] == "x"

    def test_three_hash_heading_is_not_a_section(self) -> None:
        sections = extract_sections("## A\n### B\nbody\n")
        assert list(sections) == ["A"]
        assert sections["A"] == "### B\nbody"

    def test_records_heading_and_body_lines(self) -> None:
        sections = locate_sections(SPEC_TEXT)
        assert sections["Purpose"].line == 3
        assert sections["Purpose"].body_line == 4
        assert sections["Requirements"].line == 6
        assert sections["Requirements"].body_line == 8

    def test_crlf_line_endings(self) -> None:
        sections = extract_sections("## Purpose\r\nHello\r\n")
        assert sections == {"Purpose": "Hello"}


# ---------------------------------------------------------------------------
# Requirements and scenarios
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestExtractRequirements:
    def test_extracts_names_content_and_scenarios(self) -> None:
        reqs = extract_requirements(SPEC_TEXT)
        assert [r.name for r in reqs] == ["Login", "Logout"]
        login = reqs[0]
        assert login.content.startswith("The system SHALL log users in.")
        assert login.scenarios == ["#### Scenario: ok\n- WHEN valid credentials\n- THEN a session exists"]
        assert reqs[1].scenarios == []

    def test_line_numbers_are_file_relative(self) -> None:
        requirements = locate_sections(SPEC_TEXT)["Requirements"]
        reqs = extract_requirements(requirements.body, start_line=requirements.body_line)
        assert reqs[0].line == 8
        assert reqs[0].content_line == 9
        assert reqs[1].line == 15

    def test_other_three_hash_heading_closes_requirement(self) -> None:
        text = "### Requirement: A\nThe system SHALL a.\n### Notes\nnot part of A\n"
        reqs = extract_requirements(text)
        assert len(reqs) == 1
        assert reqs[0].content == "The system SHALL a."

    def test_section_heading_closes_requirement(self) -> None:
        text = "### Requirement: A\nbody\n## Next\ntrailing\n"
        reqs = extract_requirements(text)
        assert reqs[0].content == "body"

    def test_three_hash_scenario_stays_inside_requirement(self) -> None:
        text = "### Requirement: A\nThe system SHALL a.\n### Scenario: X\n- WHEN y\n"
        reqs = extract_requirements(text)
        assert len(reqs) == 1
        assert "### Scenario: X" in reqs[0].content
        assert reqs[0].scenarios == []

    def test_name_is_trimmed(self) -> None:
        reqs = extract_requirements("###   Requirement:   Spaced Name   \nx\n")
        assert reqs[0].name == "Spaced Name"

    def test_no_requirements(self) -> None:
        assert extract_requirements("just prose\n") == []


@pytest.mark.unit
class TestExtractScenarios:
    def test_each_scenario_includes_its_heading(self) -> None:
        block = "#### Scenario: A\nx\n#### Scenario: B\ny"
        assert extract_scenarios(block) == ["#### Scenario: A\nx", "#### Scenario: B\ny"]

    def test_other_four_hash_heading_closes_scenario(self) -> None:
        block = "#### Scenario: A\nx\n#### Notes\nignored\n"
        assert extract_scenarios(block) == ["#### Scenario: A\nx"]

    def test_five_hash_heading_closes_scenario(self) -> None:
        block = "#### Scenario: A\nx\n##### Detail\ny\n"
        assert extract_scenarios(block) == ["#### Scenario: A\nx"]

    def test_text_before_first_scenario_is_skipped(self) -> None:
        assert extract_scenarios("prose\n#### Scenario: A\nbody") == ["#### Scenario: A\nbody"]

    def test_malformed_markers_produce_nothing(self) -> None:
        assert extract_scenarios("### Scenario: A\n**Scenario: B**\n##### Scenario: C\n") == []


# ---------------------------------------------------------------------------
# Text predicates
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestContainsShallOrMust:
    @pytest.mark.parametrize(
        "text",
        ["The system SHALL respond.", "Users must log in.", "It Shall work", "MUST."],
    )
    def test_matches_whole_words(self, text: str) -> None:
        assert contains_shall_or_must(text)

    @pytest.mark.parametrize("text", ["Field marshall", "mustard", "shallow water", ""])
    def test_ignores_substrings(self, text: str) -> None:
        assert not contains_shall_or_must(text)


@pytest.mark.unit
class TestNormalizeRequirementName:
    def test_trims_lowercases_and_collapses_whitespace(self) -> None:
        assert normalize_requirement_name("  User\t  Login\nFlow  ") == "user login flow"

    @pytest.mark.parametrize("name", ["Login", "  login  ", "A  B\tC", "", "ÄBC  déf"])
    def test_idempotent(self, name: str) -> None:
        once = normalize_requirement_name(name)
        assert normalize_requirement_name(once) == once


@pytest.mark.unit
class TestMalformedScenarios:
    @pytest.mark.parametrize(
        "content",
        [
            "### Scenario: three hashes",
            "##### Scenario: five hashes",
            "###### Scenario: six hashes",
            "**Scenario: bold**",
            "- **Scenario: bullet**",
        ],
    )
    def test_detects_markers(self, content: str) -> None:
        assert has_malformed_scenarios(f"The system SHALL work.\n\n{content}\n")

    def test_plain_prose_is_not_malformed(self) -> None:
        assert not has_malformed_scenarios("The scenario below is informal.")
        assert not has_malformed_scenarios("")

    def test_finds_marker_line(self) -> None:
        text = "## Requirements\n### Requirement: A\nThe system SHALL a.\n\n**Scenario: bold**\n"
        section = locate_sections(text)["Requirements"]
        req = extract_requirements(section.body, start_line=section.body_line)[0]
        assert req.line == 2
        assert find_malformed_scenario_line(req) == 5

    def test_defaults_to_requirement_line(self) -> None:
        req = extract_requirements("\n\n### Requirement: A\nThe system SHALL a.\n")[0]
        assert find_malformed_scenario_line(req) == 3


@pytest.mark.unit
class TestReadMarkdown:
    def test_reads_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "spec.md"
        path.write_text("## Purpose\nÜnïcode\n", encoding="utf-8")
        assert read_markdown(path) == "## Purpose\nÜnïcode\n"

    def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(SpecReadError) as excinfo:
            read_markdown(tmp_path / "missing.md")
        assert isinstance(excinfo.value, OSError)
        assert "missing.md" in str(excinfo.value)
