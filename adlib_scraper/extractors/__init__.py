# adlib_scraper/extractors/__init__.py
"""Record extraction from captured payloads."""

from .record_extractor import RecordExtractor, build_record
from .deduplicator import dedupe_records, identity_key

__all__ = ['RecordExtractor', 'build_record', 'dedupe_records', 'identity_key']
