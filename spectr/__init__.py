"""spectr: validation engine for markdown specifications and change deltas."""

from __future__ import annotations

from spectr.models import ValidationIssue, ValidationLevel, ValidationReport
from spectr.validator import Validator

__all__ = [
    "ValidationIssue",
    "ValidationLevel",
    "ValidationReport",
    "Validator",
]
