"""Schema-agnostic extraction of ad records from captured JSON payloads.

The payload schema is undocumented and changes without notice, so the
extractor does not navigate known paths. It walks the whole JSON value
depth-first and treats any object that looks like an ad as a record.

Algorithm:
    1. Pop the next value from an explicit stack (pre-order)
    2. Object: if the record heuristic matches, emit a record and do NOT
       descend into its children; otherwise push every property value
    3. Array: push every element
    4. Scalars end the branch

A depth cap stops descent (fail closed) on pathologically nested input.
"""

from typing import Any, Dict, List, Optional, Sequence

from ..core.models import AdRecord


# Alias field names per logical field, checked in order; first string wins
TEXT_FIELDS = ('bodyText', 'body', 'message', 'text', 'ad_text')
SOURCE_FIELDS = ('advertiserName', 'pageName', 'publisher', 'advertiser')
START_DATE_FIELDS = ('startDate', 'start_date', 'creation_time')
URL_FIELDS = ('ad_url', 'url', 'link')

NESTED_CREATIVE_FIELD = 'creative'

DEFAULT_MAX_DEPTH = 512


def _first_string(obj: Dict[str, Any], names: Sequence[str]) -> Optional[str]:
    for name in names:
        value = obj.get(name)
        if isinstance(value, str):
            return value
    return None


def build_record(obj: Dict[str, Any]) -> Optional[AdRecord]:
    """
    Apply the record heuristic to a single JSON object.

    Args:
        obj: Parsed JSON object

    Returns:
        AdRecord if the object has non-empty text or advertiser, None otherwise
    """
    text = _first_string(obj, TEXT_FIELDS)
    source_name = _first_string(obj, SOURCE_FIELDS)
    start_date = _first_string(obj, START_DATE_FIELDS)
    url = _first_string(obj, URL_FIELDS)

    if not text:
        creative = obj.get(NESTED_CREATIVE_FIELD)
        if isinstance(creative, dict):
            text = _first_string(creative, TEXT_FIELDS)

    if not text and not source_name:
        return None

    return AdRecord(
        text=text,
        source_name=source_name,
        start_date=start_date,
        url=url
    )


class RecordExtractor:
    """
    Mine nested JSON of unknown shape for record-like objects.

    Order of the result equals pre-order traversal order of the matches.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self.truncated = False

    def extract(self, data: Any) -> List[AdRecord]:
        """
        Extract every record-like object from a JSON value.

        Args:
            data: Value returned by json.loads

        Returns:
            Records in pre-order traversal order
        """
        records: List[AdRecord] = []
        self.truncated = False
        stack = [(data, 0)]

        while stack:
            value, depth = stack.pop()

            if isinstance(value, dict):
                record = build_record(value)
                if record is not None:
                    records.append(record)
                    continue
                children = list(value.values())
            elif isinstance(value, list):
                children = value
            else:
                continue

            if depth >= self.max_depth:
                if not self.truncated:
                    print(f"    ⚠ Nesting deeper than {self.max_depth} levels, branch skipped")
                self.truncated = True
                continue

            # Reversed so the first child is popped first
            for child in reversed(children):
                if isinstance(child, (dict, list)):
                    stack.append((child, depth + 1))

        return records
