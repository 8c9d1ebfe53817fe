"""spectr-validate: validate spectr specs and change deltas from the terminal."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from spectr.config import load_config_for_project
from spectr.constants import ITEM_TYPE_CHANGE, ITEM_TYPE_SPEC, MAIN_MODULE
from spectr.formatters import (
    print_bulk_human_results,
    print_bulk_json_results,
    print_human_report,
    print_json_report,
)
from spectr.logging_config import setup_logging
from spectr.validator import (
    ItemResolutionError,
    ValidationItem,
    Validator,
    determine_item_type,
    get_all_items,
    get_change_items,
    get_spec_items,
    validate_item_by_type,
    validate_single_item,
)

USAGE_ERROR = (
    "usage: spectr-validate <item-name> [flags]\n"
    "       spectr-validate --all\n"
    "       spectr-validate --changes\n"
    "       spectr-validate --specs"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spectr-validate",
        description="Validate spectr specs and change deltas.",
    )
    parser.add_argument("item", nargs="?", default=None, help="Change or spec name to validate.")
    parser.add_argument("--type", choices=[ITEM_TYPE_CHANGE, ITEM_TYPE_SPEC], default=None, help="Item type.")
    parser.add_argument("--strict", action="store_true", help="Treat warnings as errors.")
    parser.add_argument("--json", action="store_true", help="Output as JSON.")
    bulk = parser.add_mutually_exclusive_group()
    bulk.add_argument("--all", action="store_true", help="Validate all changes and specs.")
    bulk.add_argument("--changes", action="store_true", help="Validate all active changes.")
    bulk.add_argument("--specs", action="store_true", help="Validate all specs.")
    parser.add_argument(
        "--project-root",
        default=os.getcwd(),
        help="Project root (default: cwd)",
    )
    parser.add_argument("--log-level", default=None, help="Override SPECTR_LOG_LEVEL.")
    return parser


def _bulk_items(args: argparse.Namespace, project_root: Path, root_dir: str) -> list[ValidationItem]:
    if args.all:
        return get_all_items(project_root, root_dir=root_dir)
    if args.changes:
        return get_change_items(project_root, root_dir=root_dir)
    return get_spec_items(project_root, root_dir=root_dir)


def _run_bulk(validator: Validator, items: list[ValidationItem], *, as_json: bool) -> int:
    if not items:
        print("[]" if as_json else "No items to validate")
        return 0

    results = [validate_single_item(validator, item) for item in items]
    if as_json:
        print_bulk_json_results(results)
    else:
        print_bulk_human_results(results)
    return 0 if all(result.valid for result in results) else 1


def run(argv: Optional[list[str]] = None) -> int:
    """Execute the command and return the process exit code."""
    args = build_parser().parse_args(argv)
    project_root = Path(args.project_root).expanduser().resolve()

    try:
        config = load_config_for_project(project_root)
    except ValidationError as exc:
        print(f"Error: invalid spectr.yml: {exc}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or config.log_level)
    strict = args.strict or config.validation.strict
    as_json = args.json or config.validation.json_output
    validator = Validator(strict=strict)

    if args.all or args.changes or args.specs:
        return _run_bulk(validator, _bulk_items(args, project_root, config.root_dir), as_json=as_json)

    if not args.item:
        print(USAGE_ERROR, file=sys.stderr)
        return 1

    try:
        info = determine_item_type(project_root, args.item, args.type, root_dir=config.root_dir)
        report = validate_item_by_type(validator, project_root, args.item, info.item_type, root_dir=config.root_dir)
    except ItemResolutionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: validation failed: {exc}", file=sys.stderr)
        return 1

    if as_json:
        print_json_report(report)
    else:
        print_human_report(args.item, report)
    return 0 if report.valid else 1


def main() -> None:
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == MAIN_MODULE:
    main()
