"""
Free-text difficulty labels → the host's numeric difficulty levels.

Labels are matched case-insensitively by prefix against the synonym sets
below, tried in order; the first synonym the label starts with decides.
Anything else is read as a number the way the host reads one (leading
integer, 0 when there is none).
"""

import re

BEGINNER = 1
NORMAL = 2
HARD = 4
SUICIDAL = 5
HELL_ON_EARTH = 7

DIFFICULTY_SYNONYMS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (BEGINNER, ("easy", "beginer", "beginner", "begginer", "begginner")),
    (NORMAL, ("regular", "default", "normal")),
    (HARD, ("harder", "hard")),
    (SUICIDAL, ("suicidal",)),
    (HELL_ON_EARTH, ("expert", "hell on earth", "hoe")),
)

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def _parse_int(label: str) -> int:
    match = _LEADING_INT.match(label)
    return int(match.group(1)) if match else 0


def resolve_difficulty(label: str) -> int:
    lowered = str(label or "").strip().lower()
    for level, synonyms in DIFFICULTY_SYNONYMS:
        for synonym in synonyms:
            if lowered.startswith(synonym):
                return level
    # TODO: decide whether 0 should instead fall back to the host's current default
    return _parse_int(lowered)
