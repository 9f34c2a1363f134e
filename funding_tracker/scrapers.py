"""
Scrapers for the Funding Tracker
Fetches funding articles from TechCrunch, VentureBeat and RSS feeds.
Handles network errors gracefully with retry logic and fixed rate limiting.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from urllib.parse import urljoin

import requests
import feedparser
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from dateutil import parser as date_parser

from funding_tracker import config

# Set up logging
logger = logging.getLogger(__name__)


def is_funding_related(title: str) -> bool:
    """Return True if the title mentions any funding keyword."""
    lower_title = title.lower()
    return any(keyword in lower_title for keyword in config.FUNDING_TITLE_KEYWORDS)


def build_article(source: str, url: str, title: str, content: str, published_date: str) -> Dict:
    """
    Build the article dictionary shared by every scraper.

    raw_text joins title and content as sentences so the extractor's
    sentence-anchored patterns see the title as its own sentence.
    """
    return {
        'source': source,
        'url': url,
        'title': title,
        'content': content,
        'published_date': published_date,
        'raw_text': f"{title}. {content}",
    }


class BaseScraper:
    """
    Shared HTTP plumbing for all scrapers.

    Owns a requests session with retry configuration and a browser
    User-Agent. Subclasses describe where listing pages live and which
    CSS selectors hold the title, body and publication date of an article.
    """

    source_name = ''
    base_url = ''
    link_selector = ''
    title_selector = 'h1'
    content_selector = ''
    date_selector = 'time'
    # Only follow listing links whose text looks like a funding story
    filter_titles = False

    def __init__(self, session: requests.Session = None):
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """
        Create requests session with retry configuration.

        Retry strategy:
        - 3 total attempts
        - Exponential backoff: 1s, 2s, 4s
        - Retry on connection errors, 429 and 5xx server errors
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=config.REQUEST_RETRIES,
            backoff_factor=config.REQUEST_BACKOFF,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'User-Agent': config.USER_AGENT
        })

        return session

    def fetch(self, url: str, timeout: int = config.REQUEST_TIMEOUT) -> Optional[str]:
        """
        Fetch a page and return its body.

        Args:
            url: Page URL
            timeout: Seconds to wait for the response

        Returns:
            Response text, or None if the request failed
        """
        try:
            logger.debug(f"Fetching {self.source_name}: {url}")

            response = self.session.get(url, timeout=timeout)
            response.raise_for_status()
            return response.text

        except requests.exceptions.Timeout:
            logger.error(f"Timeout fetching {self.source_name}: {url}")
            return None

        except requests.exceptions.ConnectionError:
            logger.error(f"Connection error fetching {self.source_name}: {url}")
            return None

        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error fetching {self.source_name}: {e}")
            return None

        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed for {self.source_name} ({url}): {e}")
            return None

    def listing_urls(self, max_pages: int) -> Iterable[str]:
        """Yield the listing page URLs to walk; each subclass knows its own site layout."""
        raise NotImplementedError

    def scrape_funding_articles(self, max_pages: int = config.MAX_PAGES) -> List[Dict]:
        """
        Walk the listing pages and scrape the linked articles.

        At most config.MAX_ARTICLES_PER_PAGE articles are scraped per page,
        waiting config.ARTICLE_DELAY seconds between articles and
        config.PAGE_DELAY seconds between pages.

        Args:
            max_pages: Number of listing pages to visit per listing

        Returns:
            List of scraped article dictionaries
        """
        articles = []

        for listing_url in self.listing_urls(max_pages):
            html = self.fetch(listing_url, timeout=config.REQUEST_TIMEOUT)
            if not html:
                logger.warning(f"Skipping {self.source_name} listing page: {listing_url}")
                continue

            try:
                links = self.extract_article_links(html)
            except Exception as e:
                logger.error(f"Error parsing {self.source_name} listing {listing_url}: {e}")
                continue

            for link in links[:config.MAX_ARTICLES_PER_PAGE]:
                article = self.scrape_article(link)
                if article:
                    articles.append(article)
                time.sleep(config.ARTICLE_DELAY)

            time.sleep(config.PAGE_DELAY)

        logger.info(f"Scraped {len(articles)} articles from {self.source_name}")
        return articles

    def extract_article_links(self, html: str) -> List[str]:
        """Collect absolute article URLs from a listing page."""
        soup = BeautifulSoup(html, 'html.parser')
        links = []

        for element in soup.select(self.link_selector):
            href = element.get('href')
            if not href:
                continue
            if self.filter_titles and not is_funding_related(element.get_text(' ', strip=True)):
                continue

            link = href if href.startswith('http') else urljoin(self.base_url, href)
            if link not in links:
                links.append(link)

        return links

    def scrape_article(self, url: str) -> Optional[Dict]:
        """
        Scrape a single article page.

        Args:
            url: Article URL

        Returns:
            Article dictionary, or None if the page failed or has no title/body
        """
        html = self.fetch(url, timeout=config.ARTICLE_TIMEOUT)
        if not html:
            return None

        try:
            return self.parse_article(html, url)
        except Exception as e:
            logger.error(f"Error parsing {self.source_name} article {url}: {e}")
            return None

    def parse_article(self, html: str, url: str) -> Optional[Dict]:
        soup = BeautifulSoup(html, 'html.parser')

        title_el = soup.select_one(self.title_selector)
        content_el = soup.select_one(self.content_selector)
        title = title_el.get_text(' ', strip=True) if title_el else ''
        content = content_el.get_text(' ', strip=True) if content_el else ''

        if not title or not content:
            logger.debug(f"Missing title or content, skipping: {url}")
            return None

        date_el = soup.select_one(self.date_selector)
        published_date = ''
        if date_el:
            published_date = date_el.get('datetime') or date_el.get_text(strip=True)

        return build_article(
            source=self.source_name,
            url=url,
            title=title,
            content=content,
            published_date=published_date or datetime.now(timezone.utc).isoformat()
        )


class TechCrunchScraper(BaseScraper):
    """Scrapes TechCrunch search results for funding-related terms."""

    source_name = 'techcrunch'
    base_url = config.TECHCRUNCH_BASE_URL
    link_selector = '.post-block__title__link'
    title_selector = '.article__title, .entry-title, h1'
    content_selector = '.article-content, .entry-content, .post-content'
    date_selector = 'time, .article__byline time, .entry-date'
    filter_titles = True

    def listing_urls(self, max_pages: int) -> Iterable[str]:
        for term in config.TECHCRUNCH_SEARCH_TERMS:
            for page in range(1, max_pages + 1):
                yield f"{self.base_url}/search/{term}/?page={page}"


class VentureBeatScraper(BaseScraper):
    """Scrapes the VentureBeat funding category (already topical, no title filter)."""

    source_name = 'venturebeat'
    base_url = config.VENTUREBEAT_BASE_URL
    link_selector = '.ArticleListing__title a, .post-title a, h2 a'
    title_selector = '.article-title, .entry-title, h1'
    content_selector = '.article-content, .entry-content, .the-content'
    date_selector = 'time, .article-date time, .entry-date'

    def listing_urls(self, max_pages: int) -> Iterable[str]:
        for page in range(1, max_pages + 1):
            yield f"{self.base_url}{config.VENTUREBEAT_FUNDING_PATH}page/{page}/"


class RSSFeedScraper(BaseScraper):
    """
    Pulls funding stories from RSS/Atom feeds.

    Feeds carry the title, link, summary and date in one request, so no
    article pages are fetched. feedparser never raises on malformed XML;
    it sets the 'bozo' flag instead.
    """

    source_name = 'rss'

    def __init__(self, feeds: Dict[str, str] = None, session: requests.Session = None):
        super().__init__(session=session)
        self.feeds = feeds if feeds is not None else config.RSS_FEEDS

    def scrape_funding_articles(self, max_pages: int = config.MAX_PAGES) -> List[Dict]:
        articles = []

        for feed_name, feed_url in self.feeds.items():
            xml_content = self.fetch(feed_url, timeout=config.REQUEST_TIMEOUT)
            if not xml_content:
                logger.warning(f"Skipping {feed_name} due to fetch error")
                continue

            articles.extend(self.parse_feed(xml_content, feed_name))
            time.sleep(config.PAGE_DELAY)

        logger.info(f"Collected {len(articles)} funding articles from RSS feeds")
        return articles

    def parse_feed(self, xml_content: str, feed_name: str) -> List[Dict]:
        """
        Parse RSS feed XML into article dictionaries.

        Args:
            xml_content: RSS feed XML string
            feed_name: Name of the feed (stored as the article source)

        Returns:
            Funding-related articles from the feed
        """
        feed = feedparser.parse(xml_content)

        if feed.bozo:
            logger.warning(
                f"RSS parsing issue for {feed_name}: {feed.get('bozo_exception', 'Unknown error')}"
            )

        articles = []
        for entry in feed.entries:
            title = entry.get('title', '').strip()
            link = entry.get('link', '').strip()
            if not title or not link:
                logger.debug(f"Skipping entry without title or link from {feed_name}")
                continue
            if not is_funding_related(title):
                continue

            summary = entry.get('summary') or entry.get('description') or ''
            if not summary and entry.get('content'):
                summary = entry.content[0].value
            content = BeautifulSoup(summary, 'html.parser').get_text(' ', strip=True)

            articles.append(build_article(
                source=feed_name,
                url=link,
                title=title,
                content=content,
                published_date=self._entry_date(entry)
            ))

        logger.info(f"Parsed {len(articles)} funding articles from {feed_name}")
        return articles

    def _entry_date(self, entry) -> str:
        # RSS dates come as RFC 822, Atom as ISO 8601
        for field in ('published', 'updated', 'created'):
            date_str = entry.get(field)
            if not date_str:
                continue
            try:
                return date_parser.parse(date_str).isoformat()
            except (ValueError, TypeError, OverflowError) as e:
                logger.debug(f"Could not parse date '{date_str}': {e}")

        return datetime.now(timezone.utc).isoformat()


def default_scrapers() -> List[BaseScraper]:
    scrapers = [TechCrunchScraper(), VentureBeatScraper()]
    if config.ENABLE_RSS_FEEDS:
        scrapers.append(RSSFeedScraper())
    return scrapers


def scrape_all_sources(max_pages: int = config.MAX_PAGES, scrapers: List[BaseScraper] = None) -> List[Dict]:
    """
    Run every scraper in turn and merge their articles.

    Args:
        max_pages: Listing pages per scraper
        scrapers: Scrapers to run (defaults to TechCrunch, VentureBeat and RSS)

    Returns:
        Articles from all sources, de-duplicated by URL
    """
    scrapers = scrapers if scrapers is not None else default_scrapers()
    all_articles = []
    seen_urls = set()

    for scraper in scrapers:
        try:
            articles = scraper.scrape_funding_articles(max_pages)
        except Exception as e:
            logger.error(f"Error in {scraper.source_name} scraper: {e}", exc_info=True)
            continue

        for article in articles:
            if article['url'] in seen_urls:
                continue
            seen_urls.add(article['url'])
            all_articles.append(article)

    logger.info(f"Total articles scraped: {len(all_articles)}")
    return all_articles
