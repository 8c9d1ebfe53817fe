"""Constants used across spectr.

Heading names, delta operation names and on-disk layout conventions.
"""

MAIN_MODULE = "__main__"

# Project layout
SPECTR_DIR = "spectr"
CHANGES_DIR = "changes"
SPECS_DIR = "specs"
ARCHIVE_DIR = "archive"
SPEC_FILENAME = "spec.md"
PROPOSAL_FILENAME = "proposal.md"
CONFIG_FILENAME = "spectr.yml"

# Base spec sections
PURPOSE_SECTION = "Purpose"
REQUIREMENTS_SECTION = "Requirements"
PURPOSE_MIN_LENGTH = 50  # Characters; shorter purposes only warn

# Delta operations, in the order sections are validated
DELTA_ADDED = "ADDED"
DELTA_MODIFIED = "MODIFIED"
DELTA_REMOVED = "REMOVED"
DELTA_RENAMED = "RENAMED"
DELTA_OPERATIONS = (DELTA_ADDED, DELTA_MODIFIED, DELTA_REMOVED, DELTA_RENAMED)
DELTA_SECTION_SUFFIX = " Requirements"

# Scenario markup that looks intentional but does not use `#### Scenario:`
MALFORMED_SCENARIO_MARKERS = (
    "### Scenario:",
    "##### Scenario:",
    "###### Scenario:",
    "**Scenario:",
    "- **Scenario:",
)

# Item types understood by the facade
ITEM_TYPE_CHANGE = "change"
ITEM_TYPE_SPEC = "spec"

LOG_LEVEL_ENV = "SPECTR_LOG_LEVEL"


def delta_section_name(operation: str) -> str:
    """Return the `##` heading text for a delta operation (e.g. "ADDED Requirements")."""
    return f"{operation}{DELTA_SECTION_SUFFIX}"
