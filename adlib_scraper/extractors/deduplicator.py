"""Collapse extracted records to one per underlying ad."""

from typing import Iterable, List, Tuple

from ..core.models import AdRecord


def identity_key(record: AdRecord) -> Tuple[str, str]:
    """(text, advertiser) with missing values treated as empty strings."""
    return (record.text or "", record.source_name or "")


def dedupe_records(records: Iterable[AdRecord]) -> List[AdRecord]:
    """
    Keep the first record for each identity key.

    Stable: output preserves the relative order of first occurrences.
    """
    seen = set()
    unique = []

    for record in records:
        key = identity_key(record)
        if key not in seen:
            seen.add(key)
            unique.append(record)

    return unique
