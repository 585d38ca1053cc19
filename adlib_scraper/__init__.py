"""Ads library scraper: browser-driven search with network payload extraction."""

from .core.config import ScraperConfig
from .core.models import AdRecord, CapturedPayload
from .core.ads_library_scraper import AdsLibraryScraper, build_start_url

__version__ = "1.0.0"

__all__ = ['ScraperConfig', 'AdRecord', 'CapturedPayload', 'AdsLibraryScraper', 'build_start_url']
