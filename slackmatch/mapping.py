"""Operator decisions on match suggestions and their application."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from slackmatch import Employee, ExternalUser, MatchSuggestion

log = logging.getLogger(__name__)


class MappingAction(Enum):
    APPROVE = 'APPROVE'
    SKIP = 'SKIP'


@dataclass
class MappingDecision:
    """What the operator chose for one employee."""

    employee_id: str
    action: MappingAction
    selected_user: Optional[ExternalUser] = None


@dataclass
class MappingOutcome:
    """Success/failure bookkeeping of one apply run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)


def default_decisions(
    suggestions: list[MatchSuggestion],
    min_score: int = 0,
) -> list[MappingDecision]:
    """Approve every primary candidate scoring at least ``min_score``.

    Suggestions without a primary candidate, or below the score, are
    skipped.
    """
    decisions: list[MappingDecision] = []
    for s in suggestions:
        if s.primary_candidate is not None and s.confidence_score >= min_score:
            decisions.append(MappingDecision(
                s.employee.id, MappingAction.APPROVE, s.primary_candidate,
            ))
        else:
            decisions.append(MappingDecision(s.employee.id, MappingAction.SKIP))
    return decisions


def choose_alternative(suggestion: MatchSuggestion, index: int) -> MappingDecision:
    """Approve the alternative at ``index`` instead of the primary.

    Raises:
        IndexError: If the suggestion has no alternative at ``index``.
    """
    alternatives = suggestion.alternative_candidates
    if not 0 <= index < len(alternatives):
        raise IndexError(
            f"Employee {suggestion.employee.id!r} has no alternative #{index}"
        )
    return MappingDecision(
        suggestion.employee.id, MappingAction.APPROVE, alternatives[index],
    )


def employee_record(employee: Employee) -> dict[str, str]:
    """Rebuild the HR record of an employee as it was read."""
    record = {'id': employee.id, 'name': employee.name,
              'slackId': employee.external_id or ''}
    record.update(employee.attributes)
    return record


def build_update(employee: Employee, user: ExternalUser) -> dict[str, str]:
    """Build the full employee record with the Slack fields replaced.

    Every other field of the employee is carried over unchanged.
    """
    record = employee_record(employee)
    record['slackId'] = user.external_id
    record['slackDisplayName'] = user.display_name
    return record


def apply_mappings(
    suggestions: list[MatchSuggestion],
    decisions: list[MappingDecision],
    update: Callable[[str, dict[str, str]], None],
) -> MappingOutcome:
    """Persist approved decisions one by one.

    A failing update is logged and counted; the remaining decisions are
    still processed.

    Args:
        suggestions: Suggestions the decisions refer to.
        decisions: Operator decisions; skipped ones are ignored.
        update: Sink called as ``update(employee_id, record)``.

    Returns:
        MappingOutcome with success and failure counts.
    """
    employees = {s.employee.id: s.employee for s in suggestions}
    approved = [
        d for d in decisions
        if d.action is MappingAction.APPROVE and d.selected_user is not None
    ]
    outcome = MappingOutcome(total=len(approved))

    for decision in approved:
        employee = employees.get(decision.employee_id)
        if employee is None:
            message = 'no suggestion for this employee'
        else:
            try:
                update(employee.id, build_update(employee, decision.selected_user))
            except Exception as exc:
                message = str(exc) or exc.__class__.__name__
            else:
                outcome.succeeded += 1
                continue

        outcome.failed += 1
        outcome.failures.append((decision.employee_id, message))
        log.warning("Update of employee %s failed: %s", decision.employee_id, message)

    log.info(
        "Mappings applied: %d succeeded, %d failed",
        outcome.succeeded, outcome.failed,
    )
    return outcome
