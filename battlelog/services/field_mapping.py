from __future__ import annotations

from typing import Iterable, Mapping

from ..fields.normalizer import normalize_header
from ..fields.run_type import detect_run_type_from_fields, extract_numeric_stats
from ..fields.similarity import classify_fields
from ..fields.supported_fields import SUPPORTED_FIELDS
from ..models.field import Field
from ..models.import_result import FieldMapping, FieldMappingReport, FieldStatus, SimilarField

"""Field mapping report and cached record stats for the row parser."""

__all__ = [
    "create_field_mapping_report",
    "extract_key_stats",
]


def create_field_mapping_report(
    headers: list[str],
    known_fields: Iterable[str] = (),
    supported_fields: Iterable[str] = SUPPORTED_FIELDS,
) -> FieldMappingReport:
    """Classify every header once per parse.

    Similarity is computed on display names against the headers of earlier
    imports (`known_fields`). A header whose key is in the supported
    catalogue is recognized even if it was never imported before.

    Args:
        headers: Header display names, in column order
        known_fields: Header names seen in earlier imports
        supported_fields: Catalogue of recognized field keys

    Returns:
        FieldMappingReport with one FieldMapping per header plus the new,
        similar and unsupported header lists
    """
    supported = set(supported_fields)
    classifications = classify_fields(headers, list(known_fields))

    mapped: list[FieldMapping] = []
    for header, classification in zip(headers, classifications):
        key = normalize_header(header)
        is_supported = key in supported
        status = classification.status
        if is_supported and status is FieldStatus.NEW_FIELD:
            status = FieldStatus.EXACT_MATCH
        mapped.append(
            FieldMapping(
                csv_header=header,
                field_key=key,
                supported=is_supported,
                status=status,
                similar_to=classification.similar_to,
                similarity_type=classification.similarity_type,
                is_internal=classification.is_internal,
            )
        )

    return FieldMappingReport(
        mapped_fields=mapped,
        new_fields=[m.csv_header for m in mapped if m.status is FieldStatus.NEW_FIELD],
        similar_fields=[
            SimilarField(c.field_name, c.similar_to, c.similarity_type)
            for c in classifications
            if c.status is FieldStatus.SIMILAR_FIELD and c.similar_to and c.similarity_type
        ],
        unsupported_fields=[m.csv_header for m in mapped if not m.supported],
    )


def extract_key_stats(fields: Mapping[str, Field]) -> dict[str, object]:
    """Compute the cached stats stored on a Record.

    Args:
        fields: Parsed fields of one row, keyed by normalized key

    Returns:
        Keyword arguments for Record: tier, wave, coins_earned,
        cells_earned, real_time and run_type
    """
    stats = extract_numeric_stats(fields)
    return {
        "tier": stats.tier,
        "wave": stats.wave,
        "coins_earned": stats.coins_earned,
        "cells_earned": stats.cells_earned,
        "real_time": stats.real_time,
        "run_type": detect_run_type_from_fields(fields),
    }
