"""
Suggestions — "did you mean" for unknown labels

Uses rapidfuzz ratio scoring against the declared schema keys.
"""

from typing import Iterable, Optional

from rapidfuzz import fuzz, process


SUGGESTION_CUTOFF = 80


def closest(name: str, choices: Iterable[str], cutoff: int = SUGGESTION_CUTOFF) -> Optional[str]:
    """Best match for `name` scoring at least `cutoff`, or None."""
    options = sorted(set(choices))
    if not name or not options:
        return None
    match = process.extractOne(name, options, scorer=fuzz.ratio, score_cutoff=cutoff)
    if match is None:
        return None
    return match[0]


def did_you_mean(kind: str, name: str, choices: Iterable[str]) -> Optional[str]:
    """Warning text for an unknown label with a close schema key."""
    suggestion = closest(name, choices)
    if suggestion is None or suggestion == name:
        return None
    return f"Unknown {kind} '{name}': did you mean '{suggestion}'?"
