"""Shared test fixtures."""

from pathlib import Path

import pytest

from slackmatch.reader import read_employees, read_slack_users


DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


@pytest.fixture(scope='session')
def data_dir() -> Path:
    """Path to the data directory."""
    return DATA_DIR


@pytest.fixture(scope='session')
def sample_employees():
    """All employees from employees.csv."""
    return read_employees(DATA_DIR / 'employees.csv')


@pytest.fixture(scope='session')
def sample_slack_users():
    """All Slack users from slack_users.json, eligible or not."""
    return read_slack_users(DATA_DIR / 'slack_users.json')
