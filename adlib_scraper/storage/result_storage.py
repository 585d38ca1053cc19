"""Persistence sinks used by the scraping session.

Raw payloads, final results, screenshots and DOM snapshots are written
under the configured output and screenshot directories.
"""

import os
from datetime import datetime, timezone
from typing import Iterable, List

from ..core.models import AdRecord
from .csv_storage import CSVStorage
from .json_storage import JSONStorage


def _timestamp() -> str:
    """UTC timestamp with millisecond precision, e.g. 20240131_101502_123."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y%m%d_%H%M%S_") + f"{now.microsecond // 1000:03d}"


class ResultStorage:
    """File-system sink for raw responses, parsed results and diagnostics."""

    RESULTS_JSON = "results.json"
    RESULTS_CSV = "results.csv"

    def __init__(self, output_dir: str, screenshot_dir: str):
        self.output_dir = output_dir
        self.screenshot_dir = screenshot_dir
        os.makedirs(self.output_dir, exist_ok=True)
        os.makedirs(self.screenshot_dir, exist_ok=True)

    def save_raw_payload(self, content: str, index: int) -> str:
        """Write one captured response body; returns its path."""
        path = os.path.join(self.output_dir, f"resp_{_timestamp()}_{index}.json")
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def save_results(self, records: Iterable[AdRecord]) -> List[str]:
        """Write results.json and results.csv; returns both paths."""
        records = list(records)
        json_path = os.path.join(self.output_dir, self.RESULTS_JSON)
        csv_path = os.path.join(self.output_dir, self.RESULTS_CSV)
        JSONStorage.save(records, json_path)
        CSVStorage.save(records, csv_path)
        return [json_path, csv_path]

    def save_screenshot(self, data: bytes, label: str = "screenshot") -> str:
        path = os.path.join(self.screenshot_dir, f"{label}_{_timestamp()}.png")
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def save_dom_snapshot(self, html: str, label: str = "dom") -> str:
        path = os.path.join(self.screenshot_dir, f"{label}_{_timestamp()}.html")
        with open(path, 'w', encoding='utf-8') as f:
            f.write(html)
        return path
