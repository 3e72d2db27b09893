"""Report generation for match suggestions (CSV, HTML, summary)."""

import csv
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from slackmatch import ConfidenceTier, MatchSuggestion
from slackmatch.scoring import TIER_COLORS, TIER_LABELS

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / 'templates'

CSV_COLUMNS = [
    'Employee_ID',
    'Employee_Name',
    'Employee_EmailHint',
    'Slack_ID',
    'Slack_FullName',
    'Slack_DisplayName',
    'Slack_Email',
    'Confidence_Tier',
    'Confidence_Label',
    'Confidence_Score',
    'Similarity',
    'Alternatives',
]


def _suggestion_to_row(suggestion: MatchSuggestion) -> dict:
    """Convert a MatchSuggestion to a flat dict for CSV/HTML output."""
    emp = suggestion.employee
    user = suggestion.primary_candidate
    tier = suggestion.confidence_tier
    return {
        'Employee_ID': emp.id,
        'Employee_Name': emp.name,
        'Employee_EmailHint': emp.email_hint or '',
        'Slack_ID': user.external_id if user else '',
        'Slack_FullName': user.full_name if user else '',
        'Slack_DisplayName': user.display_name if user else '',
        'Slack_Email': user.email if user else '',
        'Confidence_Tier': tier.value,
        'Confidence_Label': TIER_LABELS[tier],
        'Confidence_Score': str(suggestion.confidence_score),
        'Similarity': '' if suggestion.similarity is None else str(suggestion.similarity),
        'Alternatives': ', '.join(u.external_id for u in suggestion.alternative_candidates),
        # Row colour for the HTML report
        '_color': TIER_COLORS[tier],
    }


def write_csv_report(suggestions: list[MatchSuggestion], output_path: Path) -> None:
    """Write match suggestions as a CSV report.

    Uses UTF-8 with BOM (utf-8-sig) and semicolon delimiter so the file
    opens cleanly in spreadsheet tools.

    Args:
        suggestions: List of match suggestions.
        output_path: Path for the output CSV file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.DictWriter(
            f, fieldnames=CSV_COLUMNS, delimiter=';', extrasaction='ignore',
        )
        writer.writeheader()
        for suggestion in suggestions:
            writer.writerow(_suggestion_to_row(suggestion))

    log.info("CSV report written: %s (%d rows)", output_path, len(suggestions))


def write_html_report(
    suggestions: list[MatchSuggestion],
    output_path: Path,
    title: str = '',
) -> None:
    """Write match suggestions as an HTML report using Jinja2.

    Args:
        suggestions: List of match suggestions.
        output_path: Path for the output HTML file.
        title: Report title, usually the employee file name.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template('report.html')

    rows = [_suggestion_to_row(s) for s in suggestions]
    stats = compute_stats(suggestions)

    html = template.render(
        title=title,
        rows=rows,
        stats=stats,
        columns=CSV_COLUMNS,
    )

    output_path.write_text(html, encoding='utf-8')
    log.info("HTML report written: %s", output_path)


def compute_stats(suggestions: list[MatchSuggestion]) -> dict:
    """Compute summary statistics from match suggestions."""
    by_tier = {tier: 0 for tier in ConfidenceTier}
    alternatives = 0
    for s in suggestions:
        by_tier[s.confidence_tier] += 1
        if s.alternative_candidates:
            alternatives += 1

    return {
        'total': len(suggestions),
        'exact_email': by_tier[ConfidenceTier.EXACT_EMAIL],
        'exact_name': by_tier[ConfidenceTier.EXACT_NAME],
        'display_name': by_tier[ConfidenceTier.DISPLAY_NAME],
        'fuzzy_name': by_tier[ConfidenceTier.FUZZY_NAME],
        'none': by_tier[ConfidenceTier.NONE],
        'with_alternatives': alternatives,
    }


def print_summary(suggestions: list[MatchSuggestion], title: str = '') -> None:
    """Print a summary of match suggestions to stdout.

    Args:
        suggestions: List of match suggestions.
        title: Name of the employee file.
    """
    stats = compute_stats(suggestions)

    print(f"\n=== Slack mapping report: {title} ===")
    print(f"Employees without Slack ID: {stats['total']:>5}")
    print(f"Exact email matches:        {stats['exact_email']:>5}")
    print(f"Exact name matches:         {stats['exact_name']:>5}")
    print(f"Display name matches:       {stats['display_name']:>5}")
    print(f"Similar names:              {stats['fuzzy_name']:>5}")
    print(f"No match found:             {stats['none']:>5}")
    print("---")
    print(f"With alternatives:          {stats['with_alternatives']:>5}")
    print()


def write_employee_records(records: list[dict[str, str]], output_path: Path) -> None:
    """Write employee records back in the HR bulk-upload CSV format.

    Column order follows the first appearance of each field; ``id``,
    ``name`` and ``slackId`` always come first.

    Args:
        records: Full employee records.
        output_path: Path for the output CSV file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    columns = ['id', 'name', 'slackId']
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)

    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=columns, restval='')
        writer.writeheader()
        writer.writerows(records)

    log.info("Employee file written: %s (%d rows)", output_path, len(records))
