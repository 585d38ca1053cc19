import csv
import io
from typing import Iterable, List

from ..core.models import AdRecord


CSV_HEADER = ["ad_text", "advertiser_name", "start_date", "ad_url"]


class CSVStorage:
    """Save ad records as CSV (RFC 4180 quoting via the csv module)."""

    @staticmethod
    def records_to_rows(records: Iterable[AdRecord]) -> List[List[str]]:
        """Convert records to CSV rows; missing fields become empty cells."""
        return [
            [
                record.text or "",
                record.source_name or "",
                record.start_date or "",
                record.url or "",
            ]
            for record in records
        ]

    @staticmethod
    def to_csv_string(records: Iterable[AdRecord]) -> str:
        """
        Convert records to a CSV string.
        Fields containing a comma, quote or newline are quoted.
        """
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(CSV_HEADER)
        writer.writerows(CSVStorage.records_to_rows(records))
        return output.getvalue()

    @staticmethod
    def save(records: Iterable[AdRecord], file_path: str) -> str:
        """Write records to ``file_path`` and return the path."""
        csv_str = CSVStorage.to_csv_string(records)
        with open(file_path, 'w', encoding='utf-8', newline='') as f:
            f.write(csv_str)
        print(f"  ✓ Saved results to {file_path}")
        return file_path
