"""Typo suggestions for unresolved symbol names."""

import logging
from collections.abc import Sequence
from typing import Optional

from . import grammar

logger = logging.getLogger(__name__)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)
    if len(s2) == 0:
        return len(s1)
    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row
    return previous_row[-1]


def suggest_name(target: str, candidates: Sequence[str]) -> Optional[str]:
    """
    Find the known name closest to an unresolved one.

    The nearest candidate by edit distance wins if it is within
    ``suggestion_threshold(target)``; ties go to the earlier candidate.
    When nothing is close enough, the shortest candidate that extends the
    target (e.g. ``temp`` -> ``temperature``) is used instead.

    Args:
        target: The unresolved bare name
        candidates: Known bare names of the same namespace, in caller order

    Returns:
        The suggested bare name, or None
    """
    best_match = None
    best_distance = None
    for candidate in candidates:
        if candidate == target:
            continue
        distance = levenshtein_distance(target, candidate)
        # Strict comparison keeps the first candidate on ties
        if best_distance is None or distance < best_distance:
            best_distance = distance
            best_match = candidate

    if best_match is not None and best_distance <= grammar.suggestion_threshold(target):
        logger.debug(f"Suggesting '{best_match}' for '{target}' (distance {best_distance})")
        return best_match

    if len(target) < grammar.SUGGESTION_MIN_PREFIX_LENGTH:
        return None

    completion = None
    for candidate in candidates:
        if candidate != target and candidate.startswith(target):
            if completion is None or len(candidate) < len(completion):
                completion = candidate
    if completion is not None:
        logger.debug(f"Suggesting completion '{completion}' for '{target}'")
    return completion
