"""Data records produced and consumed by the scraping session."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional


@dataclass(frozen=True)
class AdRecord:
    """One ad reconstructed from a captured payload.

    Fields that were not found in the payload stay ``None``; only the
    deduplicator treats a missing value as an empty string.
    """
    text: Optional[str] = None
    source_name: Optional[str] = None
    start_date: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Serialize using the export column names."""
        return {
            'ad_text': self.text,
            'advertiser_name': self.source_name,
            'start_date': self.start_date,
            'ad_url': self.url,
        }


@dataclass(frozen=True)
class CapturedPayload:
    """Body of one response accepted by the classifier, in arrival order."""
    sequence_index: int
    raw_body: str
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    url: str = ''
    storage_handle: Optional[str] = None
