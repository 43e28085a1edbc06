from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from ..models.import_result import FieldStatus, SimilarityType

"""Field name similarity against previously seen field names.

Checks, in order of precedence:

1. case-insensitive equality -> exact (not reported as similar)
2. equality after stripping case, spaces, underscores and hyphens
   -> case-variation (score 0.95)
3. closest Levenshtein distance over the normalized forms, accepted when
   ``1 - distance / max_len >= 0.85`` -> levenshtein

The 0.85 floor keeps singular/plural pairs (Commander/Commanders) while
rejecting different words of similar length (Death Wave/Death Ray).
"""

__all__ = [
    "SIMILARITY_THRESHOLD",
    "MAX_EDIT_DISTANCE",
    "FieldSimilarityResult",
    "FieldClassification",
    "normalize_field_name",
    "are_case_variations",
    "levenshtein_distance",
    "check_field_similarity",
    "classify_fields",
]

SIMILARITY_THRESHOLD = 0.85
MAX_EDIT_DISTANCE = 3
CASE_VARIATION_SCORE = 0.95

_STRIP_RE = re.compile(r"[\s_-]")


@dataclass(frozen=True)
class FieldSimilarityResult:
    similar: bool
    suggestion: str | None = None
    type: SimilarityType | None = None
    score: float | None = None


@dataclass(frozen=True)
class FieldClassification:
    field_name: str
    status: FieldStatus
    is_internal: bool
    similar_to: str | None = None
    similarity_type: SimilarityType | None = None


def normalize_field_name(field_name: str) -> str:
    """`Coins Earned`, `coins_earned` and `coinsEarned` all become `coinsearned`."""
    return _STRIP_RE.sub("", field_name.lower()).strip()


def are_case_variations(first: str, second: str) -> bool:
    """Check whether two names differ only in case, spaces, underscores or hyphens.

    Args:
        first: Field name
        second: Field name to compare against

    Returns:
        True when both normalize to the same form
    """
    return normalize_field_name(first) == normalize_field_name(second)


def levenshtein_distance(first: str, second: str) -> int:
    """Edit distance (insertions, deletions, substitutions) between two strings.

    Args:
        first: Source string
        second: Target string

    Returns:
        Minimum number of single-character edits
    """
    return Levenshtein.distance(first, second)


def check_field_similarity(
    imported_field: str,
    existing_fields: Iterable[str],
    max_distance: int = MAX_EDIT_DISTANCE,
) -> FieldSimilarityResult:
    """Compare one imported field name against the known corpus.

    Args:
        imported_field: Header display name from the current import
        existing_fields: Header names seen in earlier imports
        max_distance: Largest edit distance considered for a fuzzy match

    Returns:
        FieldSimilarityResult; `similar` is False for exact matches and for
        names with no close candidate
    """
    existing = list(existing_fields)
    imported_lower = imported_field.lower()
    imported_normalized = normalize_field_name(imported_field)

    for candidate in existing:
        if candidate.lower() == imported_lower:
            return FieldSimilarityResult(
                similar=False, suggestion=candidate, type=SimilarityType.EXACT, score=1.0
            )

    for candidate in existing:
        if normalize_field_name(candidate) == imported_normalized:
            return FieldSimilarityResult(
                similar=True,
                suggestion=candidate,
                type=SimilarityType.CASE_VARIATION,
                score=CASE_VARIATION_SCORE,
            )

    if not imported_normalized or not existing:
        return FieldSimilarityResult(similar=False)

    choices = {candidate: normalize_field_name(candidate) for candidate in existing}
    best = process.extractOne(
        imported_normalized,
        choices,
        scorer=Levenshtein.distance,
        score_cutoff=max_distance,
    )
    if best is None:
        return FieldSimilarityResult(similar=False)

    normalized_match, distance, candidate = best
    if distance == 0:
        return FieldSimilarityResult(similar=False)
    score = 1 - distance / max(len(imported_normalized), len(normalized_match))
    if score < SIMILARITY_THRESHOLD:
        return FieldSimilarityResult(similar=False)
    return FieldSimilarityResult(
        similar=True, suggestion=candidate, type=SimilarityType.LEVENSHTEIN, score=score
    )


def classify_fields(
    imported_fields: Iterable[str],
    existing_fields: Iterable[str],
    max_distance: int = MAX_EDIT_DISTANCE,
) -> list[FieldClassification]:
    """Classify each imported header against the known corpus.

    Args:
        imported_fields: Header display names, in column order
        existing_fields: Header names seen in earlier imports
        max_distance: Largest edit distance considered for a fuzzy match

    Returns:
        One FieldClassification per imported header, in the same order.
        Headers starting with `_` are flagged as internal.
    """
    existing = list(existing_fields)
    classifications: list[FieldClassification] = []
    for field_name in imported_fields:
        is_internal = field_name.startswith("_")
        result = check_field_similarity(field_name, existing, max_distance)
        if result.type is SimilarityType.EXACT:
            classifications.append(
                FieldClassification(field_name, FieldStatus.EXACT_MATCH, is_internal)
            )
        elif result.similar and result.suggestion:
            classifications.append(
                FieldClassification(
                    field_name,
                    FieldStatus.SIMILAR_FIELD,
                    is_internal,
                    similar_to=result.suggestion,
                    similarity_type=result.type,
                )
            )
        else:
            classifications.append(FieldClassification(field_name, FieldStatus.NEW_FIELD, is_internal))
    return classifications
