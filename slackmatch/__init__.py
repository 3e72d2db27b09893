"""Core module for slack-employee-matcher."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ConfidenceTier(Enum):
    """Trust bucket of a proposed match, ordered by decreasing trust."""

    EXACT_EMAIL = 'EXACT_EMAIL'
    EXACT_NAME = 'EXACT_NAME'
    DISPLAY_NAME = 'DISPLAY_NAME'
    FUZZY_NAME = 'FUZZY_NAME'
    NONE = 'NONE'


class InvalidRecordError(ValueError):
    """Raised when an input record lacks a required identifier or field."""


@dataclass
class Employee:
    """Represents an employee record from the HR system."""

    id: str
    name: str
    email_hint: Optional[str] = None
    external_id: Optional[str] = None     # linked Slack ID, if any
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class ExternalUser:
    """Represents a user account from the chat directory."""

    external_id: str
    full_name: str
    display_name: str = ''
    email: str = ''
    is_active: bool = True
    is_bot: bool = False
    deleted: bool = False

    @property
    def is_eligible(self) -> bool:
        return self.is_active and not self.is_bot and not self.deleted


@dataclass
class MatchSuggestion:
    """Proposed Slack account for one employee."""

    employee: Employee
    primary_candidate: Optional[ExternalUser]
    confidence_tier: ConfidenceTier
    confidence_score: int                 # 0 – 100
    alternative_candidates: list[ExternalUser] = field(default_factory=list)
    similarity: Optional[int] = None      # name similarity of the primary, 0 – 100
