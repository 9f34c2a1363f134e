"""
Configuration file for the Funding Tracker
Contains scraping sources, extraction regex patterns, and all configuration settings.
"""

import os
import re
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ====================
# SCRAPING SOURCES
# ====================
# News sources we scrape for funding announcements

TECHCRUNCH_BASE_URL = 'https://techcrunch.com'
TECHCRUNCH_SEARCH_TERMS = ['funding', 'raises', 'series-a', 'series-b', 'seed-round', 'venture-capital']

VENTUREBEAT_BASE_URL = 'https://venturebeat.com'
VENTUREBEAT_FUNDING_PATH = '/category/funding/'

# RSS feeds complement the HTML scrapers (cheaper, no listing pages)
RSS_FEEDS = {
    'TechCrunch': 'https://techcrunch.com/feed/',
    'VentureBeat': 'https://venturebeat.com/feed/',
    'Crunchbase News': 'https://news.crunchbase.com/feed/'
}
ENABLE_RSS_FEEDS = os.getenv('ENABLE_RSS_FEEDS', 'true').lower() == 'true'

# Titles must contain at least one of these to be scraped
FUNDING_TITLE_KEYWORDS = [
    'raises', 'funding', 'series a', 'series b', 'series c', 'seed',
    'venture capital', 'investment', 'round', 'million', 'billion',
    'investors', 'valuation', 'startup', 'closes'
]

# ====================
# HTTP REQUEST CONFIGURATION
# ====================

REQUEST_TIMEOUT = 10  # Seconds to wait for a listing page
ARTICLE_TIMEOUT = 15  # Seconds to wait for a single article
REQUEST_RETRIES = 3   # Number of retry attempts for failed requests
REQUEST_BACKOFF = 1   # Exponential backoff factor (1s, 2s, 4s)

# Fixed rate limiting
ARTICLE_DELAY = 1     # Seconds between article requests
PAGE_DELAY = 2        # Seconds between listing pages
MAX_PAGES = int(os.getenv('MAX_PAGES', '5'))
MAX_ARTICLES_PER_PAGE = 10

USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
)

# ====================
# REGEX PATTERNS
# ====================
# Ordered lists: the first pattern that matches wins

_VERBS = r'(?i:raises?|raised|secures?|secured|closes?|closed|announces?|announced|gets?|receives?|received)'
# Name tokens stop at "has" or a verb so "Acme Has Raised" yields "Acme"
_NAME_STOP = r'(?!(?:(?i:has)|' + _VERBS + r')\b)'
_NAME = r"([A-Z][A-Za-z0-9&.'-]*(?:\s+" + _NAME_STOP + r"[A-Z0-9][A-Za-z0-9&.'-]*){0,4})"
# Scale suffix after an amount: $10M, £5mn, €1.2bn, $500K
_UNIT = r'(?P<unit>million|billion|thousand|bn|mn|M|B|K)\b'

# 1. COMPANY NAME
COMPANY_PATTERNS = [
    # "startup Acme raises", "company Acme Labs raised"
    re.compile(r'\b(?i:startup|company)\s+' + _NAME + r'\s+(?i:raises?|raised)\b'),
    # "Acme raises $10M" at the start of a sentence
    re.compile(r'(?:^|[.!?]\s+)' + _NAME + r'\s+' + _VERBS + r'\b'),
    # "Acme has raised" anywhere in the text
    re.compile(r'\b' + _NAME + r'\s+(?:(?i:has)\s+)?' + _VERBS + r'\b'),
]

# 2. FUNDING AMOUNT
# Named groups: symbol (optional), amount, unit (optional)
AMOUNT_PATTERNS = [
    # $10M, £5 million, €1.2bn, $500K
    re.compile(r'(?P<symbol>[\$£€])\s?(?P<amount>\d+(?:\.\d+)?)\s*' + _UNIT, re.IGNORECASE),
    # 10 million dollars
    re.compile(r'(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>million)\s*dollars?', re.IGNORECASE),
    # 2 billion dollars
    re.compile(r'(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>billion)\s*dollars?', re.IGNORECASE),
    # $1,500,000
    re.compile(r'(?P<symbol>[\$£€])(?P<amount>\d+(?:,\d{3})*(?:\.\d+)?)'),
]

CURRENCY_SYMBOLS = {'$': 'USD', '£': 'GBP', '€': 'EUR'}
DEFAULT_CURRENCY = 'USD'

UNIT_MULTIPLIERS = {
    'million': 1_000_000,
    'm': 1_000_000,
    'billion': 1_000_000_000,
    'b': 1_000_000_000,
    'bn': 1_000_000_000,
    'mn': 1_000_000,
    'thousand': 1_000,
    'k': 1_000,
}

# 3. ROUND TYPE
ROUND_TYPE_PATTERNS = [
    re.compile(r'\b(series\s+[A-Z])\b(?:\s+(?:round|funding))?', re.IGNORECASE),
    re.compile(r'\b(pre-seed|seed)\s+(?:round|funding|financing)', re.IGNORECASE),
    re.compile(r'\b(bridge|convertible)\s+(?:round|funding)', re.IGNORECASE),
    re.compile(r'\b(ipo|acquisition|exit)\b', re.IGNORECASE),
]

# 4. INVESTORS
# Matches containing "led by" are lead investors, the rest participants
INVESTOR_PATTERNS = [
    re.compile(r'led\s+by\s+([^,.]+)', re.IGNORECASE),
    re.compile(r'(?:lead\s+)?investors?\s+(?:include|are)\s+([^.]+)', re.IGNORECASE),
    re.compile(r'participated\s+by\s+([^.]+)', re.IGNORECASE),
    re.compile(r'(?:with\s+participation\s+from|joined\s+by)\s+([^.]+)', re.IGNORECASE),
]

INVESTOR_SPLIT_PATTERN = re.compile(r',|\s+and\s+')

# 5. VALUATION
VALUATION_PATTERNS = [
    re.compile(r'valued?\s+at\s+\$(?P<amount>\d+(?:\.\d+)?)\s*' + _UNIT, re.IGNORECASE),
    re.compile(r'valuation\s+of\s+\$(?P<amount>\d+(?:\.\d+)?)\s*' + _UNIT, re.IGNORECASE),
]

# Legal suffixes stripped from company names
COMPANY_SUFFIX_PATTERN = re.compile(r'\b(?:Inc|LLC|Corp|Ltd|Co)\b\.?', re.IGNORECASE)

# ====================
# CONFIDENCE SCORING
# ====================

CONFIDENCE_COMPANY = 0.3
CONFIDENCE_AMOUNT = 0.3
CONFIDENCE_ROUND_TYPE = 0.2
CONFIDENCE_INVESTORS = 0.2
CONFIDENCE_THRESHOLD = 0.6  # Records must score strictly above this

# ====================
# DATABASE CONFIGURATION
# ====================

DATABASE_PATH = os.getenv('FUNDING_DB_PATH', os.path.join('data', 'funding_tracker.db'))

# Fuzzy duplicate detection
DUPLICATE_AMOUNT_TOLERANCE = 0.10   # +/- 10% of the amount
DUPLICATE_DATE_WINDOW_DAYS = 7      # +/- 7 days around the announcement

# Co-investment relationship strength (weights sum to 1.0)
NETWORK_COUNT_WEIGHT = 0.5
NETWORK_AMOUNT_WEIGHT = 0.3
NETWORK_RECENCY_WEIGHT = 0.2
NETWORK_COUNT_SATURATION = 10          # co-investments for a full count score
NETWORK_AMOUNT_SATURATION_LOG10 = 10   # $10B total for a full amount score
NETWORK_RECENCY_HORIZON_DAYS = 730     # recency score decays to 0 after 2 years

# ====================
# REPORTING
# ====================

REPORT_DIR = os.getenv('REPORT_DIR', 'reports')
TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')

# ====================
# LOGGING
# ====================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = os.getenv('LOG_FILE', 'funding_tracker.log')
