"""Main entry point for the ads library scraper."""

import argparse
import asyncio
import sys
from datetime import datetime, timezone

from .core.ads_library_scraper import AdsLibraryScraper
from .core.config import CLASSIFIER_MODES, ScraperConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Scrape ads from the ads library search UI via its network payloads',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  adlib-scraper --query "solar panels"                   # Default country, headful
  adlib-scraper --country Germany --query bikes --headless
  adlib-scraper --category "Issues, elections or politics" --scroll-rounds 20
  adlib-scraper --settings appsettings.json              # Keys from a settings file
        """
    )

    parser.add_argument('--settings', type=str, default='appsettings.json',
                        help='Optional JSON settings file (default: appsettings.json)')
    parser.add_argument('--url', dest='start_url', type=str, default=None,
                        help='Start URL of the ads library')
    parser.add_argument('--country', type=str, default=None,
                        help='Country option to select (default: United States)')
    parser.add_argument('--country-trigger-label', type=str, default=None,
                        help='Label the country dropdown currently displays')
    parser.add_argument('--country-code', type=str, default=None,
                        help='Country code for --prefill-params (e.g. US)')
    parser.add_argument('--category', type=str, default=None,
                        help='Ad category option (default: accept the preselected option)')
    parser.add_argument('--category-trigger-label', type=str, default=None,
                        help='Label the category dropdown currently displays')
    parser.add_argument('--query', type=str, default=None,
                        help='Search term to submit')
    parser.add_argument('--headless', action='store_true', default=None,
                        help='Run the browser headless (default: headful)')
    parser.add_argument('--scroll-rounds', type=int, default=None,
                        help='Number of pagination scrolls (default: 8)')
    parser.add_argument('--classifier', dest='classifier_mode', type=str, default=None,
                        choices=CLASSIFIER_MODES,
                        help='Response classifier variant (default: graphql)')
    parser.add_argument('--prefill-params', dest='prefill_url_params', action='store_true', default=None,
                        help='Also pass country/category/query as URL parameters')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Directory for raw responses and results (default: responses)')
    parser.add_argument('--screenshot-dir', type=str, default=None,
                        help='Directory for screenshots (default: screenshots)')
    return parser


def main(argv=None) -> int:
    """Main function to run the scraper; returns the process exit code."""
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != 'settings'}

    print(f"ℹ Ads library scraper starting at {datetime.now(timezone.utc).isoformat()}")

    try:
        config = ScraperConfig.from_sources(settings_path=args.settings, overrides=overrides)
    except (OSError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        print(f"⚠ Warning: could not read configuration: {e}")
        print("\n❌ Invalid configuration. Exiting.")
        return 2

    if not config.validate():
        print("\n❌ Invalid configuration. Exiting.")
        return 2

    print(f"ℹ Output: {config.output_dir} | Screenshots: {config.screenshot_dir}")
    print("ℹ Make sure Playwright browsers are installed: playwright install chromium")

    scraper = AdsLibraryScraper(config)
    try:
        records = asyncio.run(scraper.run())
    except Exception as e:
        print(f"\n❌ Unhandled failure: {e}")
        return 1

    print(f"\n✅ Done! Parsed items: {len(records)}")
    if scraper.skipped_payloads:
        print(f"   Skipped payloads: {len(scraper.skipped_payloads)}")
    print(f"   Capture: {scraper.capture.get_capture_summary()}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
