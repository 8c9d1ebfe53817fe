"""Render validation reports as JSON or human-readable text."""

from __future__ import annotations

import json
import sys
from typing import Optional, Sequence, TextIO

from spectr.models import BulkResult, ValidationReport


def format_human_report(name: str, report: ValidationReport) -> list[str]:
    if report.valid:
        return [f"✓ {name} valid"]
    lines = [f"✗ {name} has {len(report.issues)} issue(s):"]
    lines.extend(f"  {line}" for line in report.format_lines())
    return lines


def format_bulk_human_results(results: Sequence[BulkResult]) -> list[str]:
    lines: list[str] = []
    passed = 0
    for result in results:
        if result.valid:
            lines.append(f"✓ {result.name} ({result.type})")
            passed += 1
            continue
        if result.error:
            lines.append(f"✗ {result.name} ({result.type}): {result.error}")
            continue
        issues = result.report.issues if result.report is not None else []
        lines.append(f"✗ {result.name} ({result.type}) has {len(issues)} issue(s):")
        lines.extend(f"  {issue.format()}" for issue in issues)
    lines.append("")
    lines.append(f"{passed} passed, {len(results) - passed} failed, {len(results)} total")
    return lines


def print_json_report(report: ValidationReport, *, out: Optional[TextIO] = None) -> None:
    print(report.to_json(), file=out or sys.stdout)


def print_human_report(name: str, report: ValidationReport, *, out: Optional[TextIO] = None) -> None:
    for line in format_human_report(name, report):
        print(line, file=out or sys.stdout)


def print_bulk_json_results(results: Sequence[BulkResult], *, out: Optional[TextIO] = None) -> None:
    print(json.dumps([result.to_dict() for result in results], indent=2, ensure_ascii=False), file=out or sys.stdout)


def print_bulk_human_results(results: Sequence[BulkResult], *, out: Optional[TextIO] = None) -> None:
    for line in format_bulk_human_results(results):
        print(line, file=out or sys.stdout)
