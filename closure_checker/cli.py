"""Command-line entrypoint for closure validation and comparison."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from closure_checker.application.use_cases import ValidateClosuresUseCase
from closure_checker.domain.aliases import LabelNormalizer
from closure_checker.domain.errors import ClosureValidationError
from closure_checker.domain.services import ClosureBuilder, diff_closures
from closure_checker.infrastructure.parsing.spreadsheet import LAYOUTS, load_raw_closures
from closure_checker.infrastructure.storage.alias_store import load_aliases
from closure_checker.presentation.diff_report import closures_to_rows, diff_to_rows


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate and compare till closure reports")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate every closure in a spreadsheet export")
    check.add_argument("file", type=Path, help="Path to a CSV or Excel file")
    check.add_argument("--sheet", type=str, help="Sheet name to read")
    check.add_argument("--layout", choices=LAYOUTS, default="auto", help="Sheet layout")
    check.add_argument("--default-employee", type=str, help="Employee name used when a closure has none")
    check.add_argument("--aliases", type=Path, help="JSON file with extra label aliases")

    diff = subparsers.add_parser("diff", help="Compare two closure submissions stored as JSON")
    diff.add_argument("before", type=Path, help="JSON file with the original submission")
    diff.add_argument("after", type=Path, help="JSON file with the edited submission")
    diff.add_argument("--default-employee", type=str, help="Employee name used when a closure has none")
    return parser.parse_args(argv)


def run_check(args: argparse.Namespace) -> int:
    normalizer = LabelNormalizer(load_aliases(args.aliases) if args.aliases else None)
    raw_closures = load_raw_closures(
        args.file,
        sheet_name=args.sheet,
        layout=args.layout,
        normalizer=normalizer,
    )
    use_case = ValidateClosuresUseCase(ClosureBuilder(normalizer=normalizer))
    report = use_case.execute(raw_closures, default_employee_name=args.default_employee)

    print("Closure Summary")
    print("===============")
    summary = report.summary
    print(f"Closures: {summary.total}")
    print(f"Valid: {summary.valid}")
    print(f"Invalid: {summary.invalid}")
    print(f"With cash variance: {summary.with_variance}")

    rows = closures_to_rows(report.iter_valid())
    if rows:
        print("\nReconciliation:")
        for row in rows:
            print(
                f"- {row['date']} {row['employee'] or '-'}: system total {row['system_total']}, "
                f"drawer expected {row['drawer_cash_expected']}, counted {row['counted_cash']}, "
                f"variance {row['cash_variance']}"
            )

    invalid = list(report.iter_invalid())
    if invalid:
        print("\nInvalid closures:")
        for outcome in invalid:
            print(f"- row {outcome.index + 1}: {' '.join(outcome.errors)}")
        return 1
    return 0


def _load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def run_diff(args: argparse.Namespace) -> int:
    # One clock reading for both submissions.
    now = datetime.now(timezone.utc)
    builder = ClosureBuilder(clock=lambda: now)
    try:
        before = builder.build(_load_json(args.before), default_employee_name=args.default_employee)
        after = builder.build(_load_json(args.after), default_employee_name=args.default_employee)
    except ClosureValidationError as exc:
        print(f"Invalid closure: {exc}")
        return 1

    rows = diff_to_rows(diff_closures(before, after))
    if not rows:
        print("No changes detected.")
        return 0
    print("Changes:")
    for row in rows:
        print(f"- {row['label']}: {row['before'] or '-'} -> {row['after'] or '-'}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "check":
        return run_check(args)
    return run_diff(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
