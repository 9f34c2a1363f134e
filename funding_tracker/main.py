"""
Main orchestration script for the Funding Tracker
Coordinates scraping, funding extraction, deduplicated storage and reporting.
"""

import argparse
import logging
import sys
from typing import Dict, List

from funding_tracker import config
from funding_tracker.database import FundingDatabase
from funding_tracker.funding_extractor import FundingDataExtractor
from funding_tracker.reporting import EXPORT_FORMATS, ReportExporter, format_amount
from funding_tracker.scrapers import scrape_all_sources

logger = logging.getLogger(__name__)


def setup_logging(level: str = None, log_file: str = None):
    """Configure root logging to stdout and, if set, a log file."""
    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = log_file if log_file is not None else config.LOG_FILE
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO),
        format=config.LOG_FORMAT,
        handlers=handlers
    )


class FundingPipeline:
    """
    Main controller class for the Funding Tracker.

    Orchestrates the complete workflow:
    1. Scrape articles from all sources
    2. Drop articles already seen in earlier runs
    3. Extract funding rounds
    4. Ingest into the database (dedup + co-investment graph)
    """

    def __init__(self, db: FundingDatabase = None, extractor: FundingDataExtractor = None, scrapers: List = None):
        logger.info("Initializing Funding Tracker")

        self.db = db or FundingDatabase()
        self.extractor = extractor or FundingDataExtractor()
        self.scrapers = scrapers

    def run(self, max_pages: int = config.MAX_PAGES) -> Dict:
        """
        Execute the complete ingestion workflow.

        Args:
            max_pages: Listing pages to visit per scraper

        Returns:
            Summary dictionary with articles_scraped, new_articles,
            funding_events_extracted and funding_events_processed
        """
        summary = {
            'articles_scraped': 0,
            'new_articles': 0,
            'funding_events_extracted': 0,
            'funding_events_processed': 0,
        }

        logger.info("=" * 60)
        logger.info("Starting Funding Tracker")
        logger.info("=" * 60)

        # Step 1: Scrape sources
        logger.info("Step 1: Scraping funding articles...")
        articles = scrape_all_sources(max_pages=max_pages, scrapers=self.scrapers)
        summary['articles_scraped'] = len(articles)

        if not articles:
            logger.warning("No articles scraped from any source")
            return summary

        # Step 2: Filter out already-processed articles
        logger.info("Step 2: Filtering for new articles...")
        new_articles = self._filter_new_articles(articles)
        summary['new_articles'] = len(new_articles)

        if not new_articles:
            logger.info("No new articles to process")
            return summary

        # Step 3: Extract funding data
        logger.info("Step 3: Extracting funding data...")
        extracted = self.extractor.extract_funding_data(new_articles)
        summary['funding_events_extracted'] = len(extracted)

        # Step 4: Ingest
        logger.info("Step 4: Storing funding rounds...")
        summary['funding_events_processed'] = self.db.ingest_funding_data(extracted)
        self.db.record_skipped_articles(new_articles)

        self._log_summary(summary)

        logger.info("=" * 60)
        logger.info("Funding Tracker completed successfully")
        logger.info("=" * 60)

        return summary

    def _filter_new_articles(self, articles: List[Dict]) -> List[Dict]:
        new_articles = []

        for article in articles:
            url = article.get('url')
            if not self.db.is_article_processed(url):
                new_articles.append(article)
            else:
                logger.debug(f"Skipping already processed article: {url}")

        return new_articles

    def _log_summary(self, summary: Dict):
        logger.info("")
        logger.info("SUMMARY:")
        logger.info(f"  Articles scraped: {summary['articles_scraped']}")
        logger.info(f"  New articles processed: {summary['new_articles']}")
        logger.info(f"  Funding events extracted: {summary['funding_events_extracted']}")
        logger.info(f"  Funding events stored: {summary['funding_events_processed']}")

        stats = self.db.get_stats()
        logger.info("")
        logger.info("DATABASE STATS:")
        for table, count in stats.items():
            logger.info(f"  {table}: {count}")
        logger.info("")

    def close(self):
        self.db.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='funding-tracker',
        description='Scrape funding announcements and track rounds, investors and co-investments.'
    )
    parser.add_argument('--db', dest='db_path', default=None, help='SQLite database path')
    parser.add_argument('--log-level', default=None, help='Logging level (default from LOG_LEVEL)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    run_parser = subparsers.add_parser('run', help='Scrape, extract and ingest funding rounds')
    run_parser.add_argument('--max-pages', type=int, default=config.MAX_PAGES)

    rounds_parser = subparsers.add_parser('rounds', help='List stored funding rounds')
    rounds_parser.add_argument('--limit', type=int, default=50)
    rounds_parser.add_argument('--offset', type=int, default=0)
    rounds_parser.add_argument('--company')
    rounds_parser.add_argument('--investor')
    rounds_parser.add_argument('--round-type')
    rounds_parser.add_argument('--min-amount', type=float)
    rounds_parser.add_argument('--max-amount', type=float)
    rounds_parser.add_argument('--start-date')
    rounds_parser.add_argument('--end-date')
    rounds_parser.add_argument('--source')

    networks_parser = subparsers.add_parser('networks', help='List strongest co-investment relationships')
    networks_parser.add_argument('--limit', type=int, default=20)

    subparsers.add_parser('stats', help='Show database statistics')

    export_parser = subparsers.add_parser('export', help='Export a funding report')
    export_parser.add_argument('--format', dest='export_format', choices=EXPORT_FORMATS, default='html')
    export_parser.add_argument('--limit', type=int, default=100)
    export_parser.add_argument('--output-dir', default=None)

    return parser


def _print_rounds(db: FundingDatabase, args):
    rounds = db.get_funding_rounds(
        limit=args.limit,
        offset=args.offset,
        company=args.company,
        investor=args.investor,
        round_type=args.round_type,
        min_amount=args.min_amount,
        max_amount=args.max_amount,
        start_date=args.start_date,
        end_date=args.end_date,
        source=args.source
    )
    for funding_round in rounds:
        investors = funding_round['lead_investors'] + funding_round['participating_investors']
        print(
            f"{funding_round['announced_date']}  {funding_round['company_name']:<30} "
            f"{funding_round['round_type']:<12} {format_amount(funding_round['amount_usd'], funding_round['currency']):>8}  "
            f"{', '.join(investors)}"
        )
    print(f"\n{len(rounds)} funding round(s)")


def _print_networks(db: FundingDatabase, args):
    for network in db.get_investor_networks(limit=args.limit):
        print(
            f"{network['relationship_strength']:.2f}  {network['investor_a']} + {network['investor_b']} "
            f"({network['co_investment_count']} rounds, {format_amount(network['total_amount'])})"
        )


def main(argv: List[str] = None) -> int:
    """Main entry point for the command line."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        with FundingDatabase(args.db_path) as db:
            if args.command == 'run':
                FundingPipeline(db=db).run(max_pages=args.max_pages)
            elif args.command == 'rounds':
                _print_rounds(db, args)
            elif args.command == 'networks':
                _print_networks(db, args)
            elif args.command == 'stats':
                for table, count in db.get_stats().items():
                    print(f"{table}: {count}")
            elif args.command == 'export':
                exporter = ReportExporter(db, output_dir=args.output_dir)
                print(exporter.export(args.export_format, limit=args.limit))
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
