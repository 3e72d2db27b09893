"""Multi-strategy matching engine for employee and Slack user records."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from slackmatch import (
    ConfidenceTier,
    Employee,
    ExternalUser,
    InvalidRecordError,
    MatchSuggestion,
)
from slackmatch.scoring import FUZZY_THRESHOLD, normalize_name, similarity, tier_score

log = logging.getLogger(__name__)


@dataclass
class CandidateMatch:
    """A Slack user accepted by one matching strategy."""

    user: ExternalUser
    tier: ConfidenceTier
    score: int
    similarity: int


def _check_text(value: object, what: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRecordError(f"{what} is missing or blank")


def validate_records(employees: list[Employee], candidates: list[ExternalUser]) -> None:
    """Check all input records before any matching starts.

    Raises:
        InvalidRecordError: If an employee lacks an id or name, a candidate
            lacks an external id, a name or email field is not a string,
            or an id occurs twice.
    """
    seen_employees: set[str] = set()
    for pos, emp in enumerate(employees):
        _check_text(emp.id, f"Employee #{pos} id")
        _check_text(emp.name, f"Employee {emp.id!r} name")
        if emp.email_hint is not None and not isinstance(emp.email_hint, str):
            raise InvalidRecordError(f"Employee {emp.id!r} email_hint must be a string")
        if emp.id in seen_employees:
            raise InvalidRecordError(f"Duplicate employee id {emp.id!r}")
        seen_employees.add(emp.id)

    seen_users: set[str] = set()
    for pos, user in enumerate(candidates):
        _check_text(user.external_id, f"Slack user #{pos} id")
        for attr in ('full_name', 'display_name', 'email'):
            if not isinstance(getattr(user, attr), str):
                raise InvalidRecordError(
                    f"Slack user {user.external_id!r} {attr} must be a string"
                )
        if user.external_id in seen_users:
            raise InvalidRecordError(f"Duplicate Slack user id {user.external_id!r}")
        seen_users.add(user.external_id)


def _match_email(employee: Employee, pool: list[ExternalUser]) -> Optional[ExternalUser]:
    """Stage 1: the email hint equals the Slack email (case-sensitive)."""
    hint = employee.email_hint
    if not hint or '@' not in hint:
        return None
    return next((u for u in pool if u.email == hint), None)


def _match_full_name(employee: Employee, pool: list[ExternalUser]) -> Optional[ExternalUser]:
    """Stage 2: the normalized name equals the normalized Slack full name."""
    name = normalize_name(employee.name)
    return next((u for u in pool if normalize_name(u.full_name) == name), None)


def _match_display_name(employee: Employee, pool: list[ExternalUser]) -> Optional[ExternalUser]:
    """Stage 3: every name token occurs in the Slack display name."""
    tokens = normalize_name(employee.name).split()
    if not tokens:
        return None
    for user in pool:
        display = normalize_name(user.display_name)
        if all(token in display for token in tokens):
            return user
    return None


def _match_fuzzy(employee: Employee, pool: list[ExternalUser]) -> Optional[ExternalUser]:
    """Stage 4: the most similar Slack full name above the threshold.

    Ties keep the earliest candidate.
    """
    best_user: Optional[ExternalUser] = None
    best_similarity = -1

    for user in pool:
        sim = similarity(employee.name, user.full_name)
        if sim >= FUZZY_THRESHOLD and sim > best_similarity:
            best_user = user
            best_similarity = sim

    return best_user


STRATEGIES: list[tuple[ConfidenceTier, Callable[[Employee, list[ExternalUser]], Optional[ExternalUser]]]] = [
    (ConfidenceTier.EXACT_EMAIL, _match_email),
    (ConfidenceTier.EXACT_NAME, _match_full_name),
    (ConfidenceTier.DISPLAY_NAME, _match_display_name),
    (ConfidenceTier.FUZZY_NAME, _match_fuzzy),
]


def rank_candidates(employee: Employee, pool: list[ExternalUser]) -> list[CandidateMatch]:
    """Run every strategy against a pool and rank the distinct hits.

    A user found by several strategies is kept once, at its
    highest-scoring tier.

    Args:
        employee: Employee to find a Slack account for.
        pool: Slack users still available to this employee.

    Returns:
        Candidate matches sorted by score, highest first.
    """
    matches: list[CandidateMatch] = []
    found: set[str] = set()

    for tier, strategy in STRATEGIES:
        user = strategy(employee, pool)
        if user is None or user.external_id in found:
            continue
        found.add(user.external_id)
        matches.append(CandidateMatch(
            user=user,
            tier=tier,
            score=tier_score(tier),
            similarity=similarity(employee.name, user.full_name),
        ))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def match_employees(
    employees: list[Employee],
    candidates: list[ExternalUser],
) -> list[MatchSuggestion]:
    """Suggest a Slack account for every employee without one.

    Employees are served first come, first served:
    1. Each employee, in input order, takes the best hit from the
       Slack users not yet claimed by an earlier employee
    2. Once all primaries are assigned, alternatives are ranked from
       the employee's own primary plus every unclaimed user
    3. Suggestions are sorted by score (stable)

    Employees that already carry a Slack ID are left out.

    Args:
        employees: Employee records.
        candidates: Eligible Slack users.

    Returns:
        One MatchSuggestion per unlinked employee.

    Raises:
        InvalidRecordError: If any input record is malformed.
    """
    validate_records(employees, candidates)

    pending = [e for e in employees if not e.external_id]
    skipped = len(employees) - len(pending)
    if skipped:
        log.debug("%d employees already linked, skipped", skipped)

    claimed: set[str] = set()
    primaries: list[tuple[Employee, Optional[CandidateMatch]]] = []

    for employee in pending:
        pool = [u for u in candidates if u.external_id not in claimed]
        ranked = rank_candidates(employee, pool)
        best = ranked[0] if ranked else None
        if best is not None:
            claimed.add(best.user.external_id)
        primaries.append((employee, best))

    suggestions: list[MatchSuggestion] = []
    for employee, best in primaries:
        if best is None:
            suggestions.append(MatchSuggestion(
                employee=employee,
                primary_candidate=None,
                confidence_tier=ConfidenceTier.NONE,
                confidence_score=tier_score(ConfidenceTier.NONE),
            ))
            continue

        own_id = best.user.external_id
        pool = [
            u for u in candidates
            if u.external_id == own_id or u.external_id not in claimed
        ]
        alternatives = [
            m.user for m in rank_candidates(employee, pool)
            if m.user.external_id != own_id
        ]
        suggestions.append(MatchSuggestion(
            employee=employee,
            primary_candidate=best.user,
            confidence_tier=best.tier,
            confidence_score=best.score,
            alternative_candidates=alternatives,
            similarity=best.similarity,
        ))

    suggestions.sort(key=lambda s: s.confidence_score, reverse=True)

    log.info(
        "Matching finished: %d employees processed, %d matched",
        len(suggestions), len(claimed),
    )
    return suggestions
