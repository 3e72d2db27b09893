"""slack-employee-matcher – CLI tool to map employees to Slack accounts."""

import argparse
import logging
from pathlib import Path

from slackmatch.mapping import apply_mappings, default_decisions, employee_record
from slackmatch.matching import match_employees
from slackmatch.reader import filter_eligible, read_employees, read_slack_users
from slackmatch.reporter import (
    print_summary,
    write_csv_report,
    write_employee_records,
    write_html_report,
)

DEFAULT_MIN_SCORE = 60


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Suggest Slack accounts for employees that are not linked yet.',
        prog='mapper.py',
    )
    parser.add_argument(
        '--employees', required=True, type=Path,
        help='Path to the employee CSV file',
    )
    parser.add_argument(
        '--slack-users', required=True, type=Path,
        help='Path to the Slack user export (JSON)',
    )
    parser.add_argument(
        '--output', required=True, type=Path,
        help='Path for the suggestion report (CSV)',
    )
    parser.add_argument(
        '--html', action='store_true',
        help='Also write an HTML report next to the CSV report',
    )
    parser.add_argument(
        '--summary', action='store_true',
        help='Print a summary to stdout',
    )
    parser.add_argument(
        '--apply', type=Path, metavar='FILE',
        help='Write an updated employee CSV with approved mappings',
    )
    parser.add_argument(
        '--min-score', type=int, default=DEFAULT_MIN_SCORE,
        help=f'Minimum score to approve a suggestion with --apply '
             f'(default: {DEFAULT_MIN_SCORE})',
    )
    return parser


def main() -> None:
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    parser = build_parser()
    args = parser.parse_args()

    if not 0 <= args.min_score <= 100:
        parser.error('--min-score must be between 0 and 100.')

    employees = read_employees(args.employees)
    slack_users = filter_eligible(read_slack_users(args.slack_users))

    suggestions = match_employees(employees, slack_users)

    write_csv_report(suggestions, args.output)
    if args.html:
        write_html_report(
            suggestions, args.output.with_suffix('.html'), args.employees.name,
        )
    if args.summary:
        print_summary(suggestions, args.employees.name)

    if args.apply:
        records = {e.id: employee_record(e) for e in employees}

        def update(employee_id: str, record: dict[str, str]) -> None:
            records[employee_id] = record

        decisions = default_decisions(suggestions, args.min_score)
        outcome = apply_mappings(suggestions, decisions, update)
        write_employee_records(list(records.values()), args.apply)
        if outcome.failed:
            logging.warning(
                "Completed with %d successes and %d failures",
                outcome.succeeded, outcome.failed,
            )


if __name__ == '__main__':
    main()
