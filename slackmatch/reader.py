"""Readers for HR employee CSVs and Slack directory exports."""

import codecs
import csv
import io
import json
import logging
import re
from pathlib import Path

from slackmatch import Employee, ExternalUser

log = logging.getLogger(__name__)

# Matches any sequence of whitespace (including Unicode whitespace like U+2006)
_WHITESPACE_RE = re.compile(r'\s+')

EMPLOYEE_REQUIRED_COLUMNS = {'id', 'name'}


# Byte-order marks that select a non-default encoding
_UTF16_BOMS = {
    codecs.BOM_UTF16_LE: 'utf-16-le',
    codecs.BOM_UTF16_BE: 'utf-16-be',
}


def _encoding_for(head: bytes) -> str:
    return _UTF16_BOMS.get(head[:2], 'utf-8-sig')


def detect_encoding(path: Path) -> str:
    """Return the encoding implied by the file's byte-order mark.

    UTF-16 exports from Excel carry a BOM; everything else is read as
    UTF-8, with or without one.
    """
    with open(path, 'rb') as f:
        return _encoding_for(f.read(2))


def normalize_whitespace(value: str) -> str:
    """Collapse every whitespace run (Unicode included) to one space and trim."""
    return _WHITESPACE_RE.sub(' ', value).strip()


def _read_text(path: Path) -> str:
    """Decode a whole file, dropping any leading BOM."""
    raw = path.read_bytes()
    return raw.decode(_encoding_for(raw)).lstrip('\ufeff')


def read_employees(path: str | Path) -> list[Employee]:
    """Read employee records from an HR bulk-upload CSV file.

    The email hint comes from a dedicated ``email`` column when present,
    otherwise from ``googleId``. Columns besides ``id``, ``name``,
    ``slackId`` and the email hint are kept in ``attributes``.

    Args:
        path: Path to the CSV file.

    Returns:
        List of Employee objects.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty or required columns are missing.
    """
    path = Path(path)
    reader = csv.DictReader(io.StringIO(_read_text(path)), delimiter=',')

    if reader.fieldnames is None:
        raise ValueError(f"File {path} is empty or has no header row.")
    actual_cols = {normalize_whitespace(c) for c in reader.fieldnames}
    missing = EMPLOYEE_REQUIRED_COLUMNS - actual_cols
    if missing:
        raise ValueError(
            f"Missing columns in {path}: {', '.join(sorted(missing))}"
        )

    employees: list[Employee] = []
    for row_num, row in enumerate(reader, start=2):
        cleaned = {normalize_whitespace(k): normalize_whitespace(v or '')
                   for k, v in row.items() if k is not None}
        if not cleaned.get('id') or not cleaned.get('name'):
            log.warning("Row %d in %s skipped: id or name missing", row_num, path)
            continue

        email_hint = cleaned.get('email') or cleaned.get('googleId') or None
        employees.append(Employee(
            id=cleaned['id'],
            name=cleaned['name'],
            email_hint=email_hint,
            external_id=cleaned.get('slackId') or None,
            attributes={k: v for k, v in cleaned.items()
                        if k not in ('id', 'name', 'slackId')},
        ))

    log.info("%d employees read from %s", len(employees), path)
    return employees


def _as_text(value) -> str:
    return normalize_whitespace(value) if isinstance(value, str) else ''


def read_slack_users(path: str | Path) -> list[ExternalUser]:
    """Read Slack users from a directory export in JSON format.

    Accepts either ``{"users": [...]}`` (the admin API response) or a
    bare list of user objects. Only a JSON ``true`` marks a user active;
    ``isBot`` and ``deleted`` count as unset only when absent or ``false``,
    so a user with missing or mistyped flags never becomes eligible.

    Args:
        path: Path to the JSON file.

    Returns:
        List of ExternalUser objects, eligible or not.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or has an unknown shape.
    """
    path = Path(path)
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as exc:
        raise ValueError(f"File {path} is not valid JSON: {exc}") from exc

    if isinstance(data, dict):
        data = data.get('users')
    if not isinstance(data, list):
        raise ValueError(f"File {path} contains no list of users.")

    users: list[ExternalUser] = []
    for pos, entry in enumerate(data):
        if not isinstance(entry, dict) or not _as_text(entry.get('slackId')):
            log.warning("Entry %d in %s skipped: slackId missing", pos, path)
            continue
        users.append(ExternalUser(
            external_id=_as_text(entry['slackId']),
            full_name=_as_text(entry.get('name')),
            display_name=_as_text(entry.get('displayName')),
            email=_as_text(entry.get('email')),
            is_active=entry.get('isActive') is True,
            is_bot=entry.get('isBot', False) is not False,
            deleted=entry.get('deleted', False) is not False,
        ))

    log.info("%d Slack users read from %s", len(users), path)
    return users


def filter_eligible(users: list[ExternalUser]) -> list[ExternalUser]:
    """Keep only active, human, non-deleted Slack users."""
    eligible = [u for u in users if u.is_eligible]
    log.info("%d of %d Slack users eligible for matching", len(eligible), len(users))
    return eligible
