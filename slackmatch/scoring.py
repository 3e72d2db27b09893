"""Confidence tiers and name similarity for employee/Slack matches."""

from slackmatch import ConfidenceTier

# Minimum similarity (0–100) for a fuzzy name match
FUZZY_THRESHOLD = 70

TIER_SCORES: dict[ConfidenceTier, int] = {
    ConfidenceTier.EXACT_EMAIL: 95,
    ConfidenceTier.EXACT_NAME: 80,
    ConfidenceTier.DISPLAY_NAME: 60,
    ConfidenceTier.FUZZY_NAME: 40,
    ConfidenceTier.NONE: 0,
}

TIER_LABELS: dict[ConfidenceTier, str] = {
    ConfidenceTier.EXACT_EMAIL: 'Exact email match',
    ConfidenceTier.EXACT_NAME: 'Exact name match',
    ConfidenceTier.DISPLAY_NAME: 'Display name match',
    ConfidenceTier.FUZZY_NAME: 'Similar name',
    ConfidenceTier.NONE: 'No match',
}

TIER_COLORS: dict[ConfidenceTier, str] = {
    ConfidenceTier.EXACT_EMAIL: 'green',
    ConfidenceTier.EXACT_NAME: 'blue',
    ConfidenceTier.DISPLAY_NAME: 'yellow',
    ConfidenceTier.FUZZY_NAME: 'orange',
    ConfidenceTier.NONE: 'gray',
}


def normalize_name(value: str) -> str:
    """Case-fold and trim a name for comparison."""
    return value.casefold().strip()


def edit_distance(a: str, b: str) -> int:
    """Compute the Levenshtein distance between two strings.

    Uses the full dynamic-programming table with unit cost for
    insertion, deletion and substitution.

    Args:
        a: First string.
        b: Second string.

    Returns:
        Minimum number of single-character edits turning a into b.
    """
    rows = len(a) + 1
    cols = len(b) + 1
    table = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if a[i - 1] == b[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],  # substitution
                    table[i][j - 1],      # insertion
                    table[i - 1][j],      # deletion
                )

    return table[-1][-1]


def similarity(a: str, b: str) -> int:
    """Calculate the normalized similarity of two names.

    Both names are case-folded and trimmed first. The result is
    ``100 * (max_len - distance) / max_len`` rounded half up, so
    identical names (including two empty ones) score 100.

    Args:
        a: First name.
        b: Second name.

    Returns:
        Similarity between 0 and 100.
    """
    norm_a = normalize_name(a)
    norm_b = normalize_name(b)
    if norm_a == norm_b:
        return 100

    max_len = max(len(norm_a), len(norm_b))
    distance = edit_distance(norm_a, norm_b)
    # Integer half-up rounding of 100 * (max_len - distance) / max_len
    return (200 * (max_len - distance) + max_len) // (2 * max_len)


def tier_score(tier: ConfidenceTier) -> int:
    """Return the confidence score for a tier."""
    return TIER_SCORES[tier]
