"""Configuration management for the ads library scraper."""

import json
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "ADLIB_"
CLASSIFIER_MODES = ('graphql', 'content-type')

# Keys accepted in appsettings.json besides the field names themselves
SETTINGS_ALIASES = {
    'startUrl': 'start_url',
    'Country': 'country',
    'Category': 'category',
    'SearchKeyword': 'query',
    'scrollRounds': 'scroll_rounds',
    'outputDir': 'output_dir',
    'OutputFolder': 'output_dir',
    'screenshotDir': 'screenshot_dir',
}


@dataclass
class ScraperConfig:
    """Configuration for one scraping run."""

    # Target page
    start_url: str = "https://www.facebook.com/ads/library/"
    prefill_url_params: bool = False
    readiness_text: str = "Ad Library"

    # Search state
    country: str = "United States"
    country_trigger_label: str = "United States"
    country_code: str = ""
    category: str = ""
    category_trigger_label: str = "Ad category"
    query: str = ""

    # Browser
    headless: bool = False
    viewport_width: int = 1280
    viewport_height: int = 900
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120 Safari/537.36"
    )

    # Network capture
    classifier_mode: str = "graphql"
    max_payloads: int = 500

    # Pagination
    scroll_rounds: int = 8
    scroll_factor: float = 2.0

    # Timeouts and delays (ms)
    navigation_timeout: int = 45000
    readiness_timeout: int = 20000
    first_response_timeout: int = 30000
    scroll_response_timeout: int = 15000
    scroll_pause: int = 1200
    network_idle_timeout: int = 10000
    final_idle_timeout: int = 5000
    settle_delay: int = 800
    overlay_click_timeout: int = 1500
    typing_delay_min: int = 40
    typing_delay_max: int = 140

    # Storage settings
    output_dir: str = "responses"
    screenshot_dir: str = "screenshots"

    @property
    def typing_delay_range(self) -> Tuple[float, float]:
        """Inter-character typing delay range in seconds."""
        return self.typing_delay_min / 1000, self.typing_delay_max / 1000

    @classmethod
    def from_sources(
        cls,
        settings_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> "ScraperConfig":
        """
        Build a configuration from environment, settings file and overrides.

        Precedence (highest first): overrides, settings file, ADLIB_* environment
        variables, dataclass defaults.

        Args:
            settings_path: Optional appsettings.json path (missing file is ignored)
            overrides: Explicit values, typically parsed CLI flags (None values skipped)
        """
        values: Dict[str, Any] = {}
        values.update(_read_environment())
        if settings_path:
            values.update(_read_settings_file(settings_path))
        if overrides:
            values.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name: f for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            if key in known:
                kwargs[key] = _coerce(value, known[key].type)
        return cls(**kwargs)

    def validate(self) -> bool:
        """Validate configuration."""
        ok = True
        if self.classifier_mode not in CLASSIFIER_MODES:
            print(f"⚠ Warning: unknown classifier mode '{self.classifier_mode}' "
                  f"(expected one of {', '.join(CLASSIFIER_MODES)})")
            ok = False
        if self.scroll_rounds < 0:
            print("⚠ Warning: scroll_rounds must not be negative")
            ok = False
        if self.typing_delay_min > self.typing_delay_max:
            print("⚠ Warning: typing_delay_min exceeds typing_delay_max")
            ok = False
        if not self.start_url.startswith(("http://", "https://")):
            print(f"⚠ Warning: start_url is not an http(s) URL: {self.start_url}")
            ok = False
        return ok


def _read_environment() -> Dict[str, str]:
    values = {}
    for f in fields(ScraperConfig):
        raw = os.getenv(ENV_PREFIX + f.name.upper())
        if raw is not None:
            values[f.name] = raw
    return values


def _read_settings_file(path: str) -> Dict[str, Any]:
    """Read appsettings.json style keys; absent file yields no values."""
    if not os.path.exists(path):
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        return {}

    values = {}
    for key, value in raw.items():
        values[SETTINGS_ALIASES.get(key, key)] = value
    return values


def _coerce(value: Any, annotation: Any) -> Any:
    """Convert string values from env/settings into the field's type."""
    if not isinstance(value, str):
        return value
    if annotation in (bool, 'bool'):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    if annotation in (int, 'int'):
        return int(value)
    if annotation in (float, 'float'):
        return float(value)
    return value
