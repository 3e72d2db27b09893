"""Tests for slackmatch.reporter module."""

import csv

import pytest

from slackmatch import ConfidenceTier, Employee, ExternalUser, MatchSuggestion
from slackmatch.reporter import (
    CSV_COLUMNS,
    compute_stats,
    print_summary,
    write_csv_report,
    write_employee_records,
    write_html_report,
)


@pytest.fixture
def suggestions():
    jane = Employee('E001', 'Jane Smith', email_hint='jane@co.com')
    bob = Employee('E002', 'Bob <Johnson>')
    nobody = Employee('E003', 'Nobody Known')
    u1 = ExternalUser('U001', 'Jane A. Smith', 'jane', 'jane@co.com')
    u2 = ExternalUser('U002', 'Bob Johnson', 'bob', 'bob@co.com')
    u3 = ExternalUser('U003', 'Bobby Johnson', 'bobby.johnson', '')
    return [
        MatchSuggestion(jane, u1, ConfidenceTier.EXACT_EMAIL, 95, similarity=77),
        MatchSuggestion(bob, u2, ConfidenceTier.FUZZY_NAME, 40, [u3], similarity=86),
        MatchSuggestion(nobody, None, ConfidenceTier.NONE, 0),
    ]


def _read_report(path) -> list[dict]:
    with open(path, encoding='utf-8-sig', newline='') as f:
        return list(csv.DictReader(f, delimiter=';'))


class TestCsvReport:
    """Tests for the CSV report."""

    def test_header_and_rows(self, tmp_path, suggestions):
        out = tmp_path / 'sub' / 'report.csv'
        write_csv_report(suggestions, out)
        rows = _read_report(out)
        assert list(rows[0].keys()) == CSV_COLUMNS
        assert len(rows) == 3

    def test_matched_row(self, tmp_path, suggestions):
        out = tmp_path / 'report.csv'
        write_csv_report(suggestions, out)
        row = _read_report(out)[1]
        assert row['Employee_ID'] == 'E002'
        assert row['Slack_ID'] == 'U002'
        assert row['Confidence_Tier'] == 'FUZZY_NAME'
        assert row['Confidence_Label'] == 'Similar name'
        assert row['Confidence_Score'] == '40'
        assert row['Similarity'] == '86'
        assert row['Alternatives'] == 'U003'

    def test_unmatched_row(self, tmp_path, suggestions):
        out = tmp_path / 'report.csv'
        write_csv_report(suggestions, out)
        row = _read_report(out)[2]
        assert row['Slack_ID'] == ''
        assert row['Similarity'] == ''
        assert row['Confidence_Label'] == 'No match'


class TestHtmlReport:
    """Tests for the HTML report."""

    def test_renders(self, tmp_path, suggestions):
        out = tmp_path / 'report.html'
        write_html_report(suggestions, out, 'employees.csv')
        html = out.read_text(encoding='utf-8')
        assert 'Slack mapping report: employees.csv' in html
        assert 'class="green"' in html
        assert 'class="gray"' in html

    def test_escapes_values(self, tmp_path, suggestions):
        out = tmp_path / 'report.html'
        write_html_report(suggestions, out)
        html = out.read_text(encoding='utf-8')
        assert 'Bob &lt;Johnson&gt;' in html
        assert 'Bob <Johnson>' not in html


class TestStats:
    """Tests for summary statistics."""

    def test_counts(self, suggestions):
        stats = compute_stats(suggestions)
        assert stats['total'] == 3
        assert stats['exact_email'] == 1
        assert stats['exact_name'] == 0
        assert stats['fuzzy_name'] == 1
        assert stats['none'] == 1
        assert stats['with_alternatives'] == 1

    def test_empty(self):
        stats = compute_stats([])
        assert stats['total'] == 0
        assert stats['none'] == 0

    def test_print_summary(self, capsys, suggestions):
        print_summary(suggestions, 'employees.csv')
        out = capsys.readouterr().out
        assert 'employees.csv' in out
        assert 'No match found:' in out


class TestWriteEmployeeRecords:
    """Tests for writing employee records back."""

    def test_columns_and_values(self, tmp_path):
        out = tmp_path / 'employees.csv'
        records = [
            {'name': 'Ann Lee', 'id': 'E1', 'region': 'PUNE', 'slackId': 'U1'},
            {'id': 'E2', 'name': 'Bo Ek', 'slackId': '', 'active': 'true'},
        ]
        write_employee_records(records, out)
        with open(out, encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            rows = list(reader)
        assert reader.fieldnames == ['id', 'name', 'slackId', 'region', 'active']
        assert rows[0]['region'] == 'PUNE'
        assert rows[1]['region'] == ''
