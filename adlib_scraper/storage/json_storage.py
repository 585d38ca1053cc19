"""JSON storage for extracted ad records."""

import json
from typing import Iterable

from ..core.models import AdRecord


class JSONStorage:
    """Save ad records as JSON."""

    @staticmethod
    def save(records: Iterable[AdRecord], filepath: str):
        """
        Save records to a JSON array file.

        Args:
            records: The records to write
            filepath: Path to save the file
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump([r.to_dict() for r in records], f, indent=2, ensure_ascii=False)

        print(f"  ✓ Saved results to {filepath}")
