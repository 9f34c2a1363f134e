"""
Funding Database for the Funding Tracker
Handles all SQLite operations: schema creation, deduplicated ingestion of
funding rounds, entity normalization and the investor co-investment graph.
"""

import hashlib
import logging
import math
import os
import re
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from dateutil import parser as date_parser

from funding_tracker import config

# Set up logging
logger = logging.getLogger(__name__)

_LEGAL_SUFFIX = re.compile(r'\s+(inc|llc|corp|ltd|co|lp|llp)\.?\s*$', re.IGNORECASE)
_NON_ALNUM = re.compile(r'[^a-z0-9\s]')
_WHITESPACE = re.compile(r'\s+')


def normalize_name(name: str) -> str:
    """
    Normalize a company or investor name for matching.

    "Acme Robotics, Inc." and "acme robotics" both become "acme robotics".
    """
    name = name.lower().strip()
    name = _LEGAL_SUFFIX.sub('', name)
    name = _NON_ALNUM.sub('', name)
    name = _WHITESPACE.sub(' ', name)
    return name.strip()


def generate_content_hash(record: Dict) -> str:
    """SHA-256 over company, amount, round type and announcement date."""
    content = '|'.join([
        record['company_name'],
        str(record['funding_amount']),
        record['round_type'],
        _to_date(record.get('announced_date')).isoformat(),
    ])
    return hashlib.sha256(content.encode('utf-8')).hexdigest()


def calculate_network_strength(co_investment_count, total_amount, days_since_last) -> float:
    """
    Score a co-investment relationship between 0 and 1.

    Weighted sum of three parts, each capped at 1:
    - count: co-investments / NETWORK_COUNT_SATURATION
    - amount: log10(total amount) / NETWORK_AMOUNT_SATURATION_LOG10
    - recency: linear decay over NETWORK_RECENCY_HORIZON_DAYS since the last co-investment

    Registered as the SQL function network_strength(count, amount, days).
    """
    count_score = min((co_investment_count or 0) / config.NETWORK_COUNT_SATURATION, 1.0)

    amount_score = 0.0
    if total_amount and total_amount > 0:
        amount_score = min(math.log10(total_amount + 1) / config.NETWORK_AMOUNT_SATURATION_LOG10, 1.0)

    recency_score = 0.0
    if days_since_last is not None:
        recency_score = max(0.0, 1.0 - max(days_since_last, 0) / config.NETWORK_RECENCY_HORIZON_DAYS)

    strength = (
        config.NETWORK_COUNT_WEIGHT * count_score
        + config.NETWORK_AMOUNT_WEIGHT * amount_score
        + config.NETWORK_RECENCY_WEIGHT * recency_score
    )
    return round(min(strength, 1.0), 4)


def _to_date(value) -> date:
    """Coerce an ISO string (or date) to a date, falling back to today (UTC)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value:
        try:
            return date_parser.parse(value).date()
        except (ValueError, TypeError, OverflowError):
            logger.debug(f"Could not parse date '{value}', using today")
    return datetime.now(timezone.utc).date()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FundingDatabase:
    """
    Manages SQLite storage of funding rounds, companies and investors.

    Schema:
    1. companies / investors: unique by normalized name
    2. funding_rounds: one row per ingested round, linked to a company
    3. funding_round_investors: investor participation with a lead/participant role
    4. scraped_articles: every URL seen, with the content hash of ingested records
    5. investor_networks: derived co-investment graph (ordered investor pairs)

    The connection runs in autocommit mode; writes that must be atomic go
    through _transaction().
    """

    def __init__(self, db_path: str = None):
        """
        Initialize database connection and create schema if needed.

        Args:
            db_path: Path to SQLite database file. Defaults to config.DATABASE_PATH
        """
        self.db_path = db_path or config.DATABASE_PATH

        if self.db_path != ':memory:':
            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

        self.conn = None
        self._connect()
        self.initialize_database()

    def _connect(self):
        try:
            self.conn = sqlite3.connect(self.db_path, timeout=30, isolation_level=None)
            self.conn.row_factory = sqlite3.Row

            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA foreign_keys=ON")
            self.conn.create_function("network_strength", 3, calculate_network_strength)

            logger.info(f"Connected to database: {self.db_path}")

        except sqlite3.Error as e:
            logger.error(f"Database connection error: {e}")
            raise

    def initialize_database(self):
        """Create tables and indexes if they don't exist."""
        try:
            self.conn.executescript('''
                CREATE TABLE IF NOT EXISTS companies (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    normalized_name TEXT NOT NULL UNIQUE,
                    industry TEXT,
                    headquarters TEXT,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS investors (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    normalized_name TEXT NOT NULL UNIQUE,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS funding_rounds (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    company_id INTEGER NOT NULL,
                    round_type TEXT NOT NULL,
                    amount_usd REAL NOT NULL,
                    currency TEXT NOT NULL DEFAULT 'USD',
                    announced_date TEXT NOT NULL,
                    valuation_usd REAL,
                    source TEXT,
                    source_url TEXT,
                    article_title TEXT,
                    confidence_score REAL NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (company_id) REFERENCES companies(id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS funding_round_investors (
                    funding_round_id INTEGER NOT NULL,
                    investor_id INTEGER NOT NULL,
                    role TEXT NOT NULL CHECK (role IN ('lead', 'participant')),
                    PRIMARY KEY (funding_round_id, investor_id),
                    FOREIGN KEY (funding_round_id) REFERENCES funding_rounds(id) ON DELETE CASCADE,
                    FOREIGN KEY (investor_id) REFERENCES investors(id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS scraped_articles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    source TEXT,
                    url TEXT NOT NULL UNIQUE,
                    title TEXT,
                    content_hash TEXT,
                    published_date TEXT,
                    processed BOOLEAN NOT NULL DEFAULT 0,
                    scraped_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS investor_networks (
                    investor_a_id INTEGER NOT NULL,
                    investor_b_id INTEGER NOT NULL,
                    co_investment_count INTEGER NOT NULL DEFAULT 0,
                    total_co_investment_amount REAL NOT NULL DEFAULT 0,
                    first_co_investment TEXT,
                    last_co_investment TEXT,
                    relationship_strength REAL NOT NULL DEFAULT 0,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (investor_a_id, investor_b_id),
                    CHECK (investor_a_id < investor_b_id),
                    FOREIGN KEY (investor_a_id) REFERENCES investors(id) ON DELETE CASCADE,
                    FOREIGN KEY (investor_b_id) REFERENCES investors(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_rounds_company_date
                    ON funding_rounds(company_id, announced_date);
                CREATE INDEX IF NOT EXISTS idx_rounds_announced
                    ON funding_rounds(announced_date);
                CREATE INDEX IF NOT EXISTS idx_articles_hash
                    ON scraped_articles(content_hash);
                CREATE INDEX IF NOT EXISTS idx_round_investors_investor
                    ON funding_round_investors(investor_id);
            ''')
            logger.info("Database schema initialized successfully")

        except sqlite3.Error as e:
            logger.error(f"Schema creation error: {e}")
            raise

    @contextmanager
    def _transaction(self):
        self.conn.execute('BEGIN')
        try:
            yield self.conn
        except Exception:
            self.conn.execute('ROLLBACK')
            raise
        else:
            self.conn.execute('COMMIT')

    # ====================
    # INGESTION
    # ====================

    def ingest_funding_data(self, records: List[Dict]) -> int:
        """
        Store extracted funding records, skipping duplicates.

        All records are written in one transaction. Each record runs in its
        own savepoint so a failing record is rolled back on its own and the
        rest of the batch still lands. The co-investment graph is recomputed
        after the commit.

        Args:
            records: Extracted funding dictionaries (see funding_extractor)

        Returns:
            Number of funding rounds inserted
        """
        processed_count = 0

        with self._transaction() as conn:
            for record in records:
                company_name = record.get('company_name', '')

                conn.execute('SAVEPOINT ingest_record')
                try:
                    if self.is_duplicate(record):
                        conn.execute('RELEASE SAVEPOINT ingest_record')
                        logger.info(f"Skipping duplicate: {company_name} - {record.get('round_type')}")
                        continue

                    company_id = self.insert_or_get_company(company_name)
                    funding_round_id = self.insert_funding_round(company_id, record)
                    self.insert_investors(funding_round_id, record.get('lead_investors', []), 'lead')
                    self.insert_investors(funding_round_id, record.get('participating_investors', []), 'participant')
                    self.record_scraped_article(record, processed=True)

                except (sqlite3.Error, ValueError, KeyError, TypeError) as e:
                    conn.execute('ROLLBACK TO SAVEPOINT ingest_record')
                    conn.execute('RELEASE SAVEPOINT ingest_record')
                    logger.error(f"Error processing funding data for {company_name}: {e}")
                    continue

                conn.execute('RELEASE SAVEPOINT ingest_record')
                processed_count += 1
                logger.info(
                    f"Stored funding round: {company_name} - {record['round_type']} "
                    f"(ID: {funding_round_id})"
                )

        if processed_count:
            self.update_investor_networks()

        logger.info(f"Ingested {processed_count} of {len(records)} funding records")
        return processed_count

    def is_duplicate(self, record: Dict) -> bool:
        """
        Check whether a funding record is already stored.

        A record is a duplicate if any of these hold:
        1. Its content hash matches a scraped article
        2. Its URL was already scraped
        3. The same (normalized) company has a round within +/-10% of the
           amount announced within +/-7 days

        Args:
            record: Extracted funding dictionary

        Returns:
            True if the record should be skipped
        """
        cursor = self.conn.execute(
            'SELECT 1 FROM scraped_articles WHERE content_hash = ?',
            (generate_content_hash(record),)
        )
        if cursor.fetchone():
            return True

        if record.get('url'):
            cursor = self.conn.execute('SELECT 1 FROM scraped_articles WHERE url = ?', (record['url'],))
            if cursor.fetchone():
                return True

        amount = float(record['funding_amount'])
        announced = _to_date(record.get('announced_date'))
        window = timedelta(days=config.DUPLICATE_DATE_WINDOW_DAYS)

        cursor = self.conn.execute('''
            SELECT 1
            FROM funding_rounds fr
            JOIN companies c ON fr.company_id = c.id
            WHERE c.normalized_name = ?
              AND fr.amount_usd BETWEEN ? AND ?
              AND fr.announced_date BETWEEN ? AND ?
        ''', (
            normalize_name(record['company_name']),
            amount * (1 - config.DUPLICATE_AMOUNT_TOLERANCE),
            amount * (1 + config.DUPLICATE_AMOUNT_TOLERANCE),
            (announced - window).isoformat(),
            (announced + window).isoformat(),
        ))
        return cursor.fetchone() is not None

    def insert_or_get_company(self, company_name: str) -> int:
        return self._insert_or_get('companies', company_name)

    def insert_or_get_investor(self, investor_name: str) -> int:
        return self._insert_or_get('investors', investor_name)

    def _insert_or_get(self, table: str, name: str) -> int:
        normalized = normalize_name(name)
        if not normalized:
            raise ValueError(f"Name normalizes to an empty string: {name!r}")

        row = self.conn.execute(
            f'SELECT id FROM {table} WHERE normalized_name = ?', (normalized,)
        ).fetchone()
        if row:
            return row['id']

        cursor = self.conn.execute(
            f'INSERT INTO {table} (name, normalized_name, created_at) VALUES (?, ?, ?)',
            (name.strip(), normalized, _now())
        )
        logger.debug(f"Created {table[:-1]}: {name} (ID: {cursor.lastrowid})")
        return cursor.lastrowid

    def insert_funding_round(self, company_id: int, record: Dict) -> int:
        cursor = self.conn.execute('''
            INSERT INTO funding_rounds (
                company_id, round_type, amount_usd, currency, announced_date,
                valuation_usd, source, source_url, article_title, confidence_score, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            company_id,
            record['round_type'],
            record['funding_amount'],
            record.get('currency', config.DEFAULT_CURRENCY),
            # Date only
            _to_date(record.get('announced_date')).isoformat(),
            record.get('valuation'),
            record.get('source'),
            record.get('url'),
            record.get('title'),
            record.get('confidence', 0),
            _now(),
        ))
        return cursor.lastrowid

    def insert_investors(self, funding_round_id: int, investor_names: List[str], role: str):
        """
        Link investors to a funding round.

        An investor already linked to the round keeps its first role, so
        lead investors must be inserted before participants.
        """
        for investor_name in investor_names:
            if not investor_name or not investor_name.strip():
                continue

            investor_id = self.insert_or_get_investor(investor_name)
            self.conn.execute('''
                INSERT INTO funding_round_investors (funding_round_id, investor_id, role)
                VALUES (?, ?, ?)
                ON CONFLICT (funding_round_id, investor_id) DO NOTHING
            ''', (funding_round_id, investor_id, role))

    def record_scraped_article(self, record: Dict, processed: bool = False):
        """Remember an article URL; content hash is stored for ingested records only."""
        content_hash = generate_content_hash(record) if processed else None
        published = record.get('announced_date') or record.get('published_date')

        self.conn.execute('''
            INSERT INTO scraped_articles (source, url, title, content_hash, published_date, processed, scraped_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (url) DO NOTHING
        ''', (
            record.get('source'),
            record['url'],
            record.get('title'),
            content_hash,
            published,
            processed,
            _now(),
        ))

    def record_skipped_articles(self, articles: List[Dict]) -> int:
        """
        Remember scraped articles that produced no funding round.

        Keeps them from being fetched and extracted again on the next run.

        Returns:
            Number of newly recorded URLs
        """
        recorded = 0
        with self._transaction():
            for article in articles:
                if not article.get('url') or self.is_article_processed(article['url']):
                    continue
                self.record_scraped_article(article, processed=False)
                recorded += 1

        logger.debug(f"Recorded {recorded} non-funding articles")
        return recorded

    def is_article_processed(self, url: str) -> bool:
        try:
            cursor = self.conn.execute('SELECT 1 FROM scraped_articles WHERE url = ?', (url,))
            return cursor.fetchone() is not None

        except sqlite3.Error as e:
            logger.error(f"Error checking article: {e}")
            return False

    # ====================
    # CO-INVESTMENT GRAPH
    # ====================

    def update_investor_networks(self, as_of: Optional[date] = None):
        """
        Recompute the co-investment graph from funding_round_investors.

        Every pair of investors sharing a round gets one row (lower investor
        id first) with the number of shared rounds, their summed amount and
        the first/last shared announcement date. Relationship strength is
        then refreshed relative to as_of (default today, UTC).
        """
        as_of = as_of or datetime.now(timezone.utc).date()

        with self._transaction() as conn:
            conn.execute('''
                INSERT INTO investor_networks (
                    investor_a_id, investor_b_id, co_investment_count,
                    total_co_investment_amount, first_co_investment, last_co_investment, updated_at
                )
                SELECT
                    fri1.investor_id,
                    fri2.investor_id,
                    COUNT(*),
                    SUM(fr.amount_usd),
                    MIN(fr.announced_date),
                    MAX(fr.announced_date),
                    ?
                FROM funding_round_investors fri1
                JOIN funding_round_investors fri2 ON fri1.funding_round_id = fri2.funding_round_id
                JOIN funding_rounds fr ON fri1.funding_round_id = fr.id
                WHERE fri1.investor_id < fri2.investor_id
                GROUP BY fri1.investor_id, fri2.investor_id
                ON CONFLICT (investor_a_id, investor_b_id) DO UPDATE SET
                    co_investment_count = excluded.co_investment_count,
                    total_co_investment_amount = excluded.total_co_investment_amount,
                    first_co_investment = excluded.first_co_investment,
                    last_co_investment = excluded.last_co_investment,
                    updated_at = excluded.updated_at
            ''', (_now(),))

            conn.execute('''
                UPDATE investor_networks
                SET relationship_strength = network_strength(
                    co_investment_count,
                    total_co_investment_amount,
                    CAST(julianday(?) - julianday(last_co_investment) AS INTEGER)
                )
            ''', (as_of.isoformat(),))

        logger.info("Investor networks updated")

    # ====================
    # QUERIES
    # ====================

    def get_funding_rounds(
        self,
        limit: int = 50,
        offset: int = 0,
        company: str = None,
        investor: str = None,
        round_type: str = None,
        min_amount: float = None,
        max_amount: float = None,
        start_date: str = None,
        end_date: str = None,
        source: str = None
    ) -> List[Dict]:
        """
        Retrieve funding rounds, newest first, with their investors.

        Args:
            limit: Maximum number of rounds
            offset: Rows to skip (pagination)
            company: Substring of the company name
            investor: Substring of any participating investor's name
            round_type: Exact round type, e.g. "Series A"
            min_amount: Minimum amount (inclusive)
            max_amount: Maximum amount (inclusive)
            start_date: Earliest announced date, YYYY-MM-DD (inclusive)
            end_date: Latest announced date, YYYY-MM-DD (inclusive)
            source: Exact source, e.g. "techcrunch"

        Returns:
            List of funding round dictionaries
        """
        conditions = []
        params = []

        if company:
            conditions.append('c.normalized_name LIKE ?')
            params.append(f"%{normalize_name(company)}%")

        if investor:
            conditions.append('''EXISTS (
                SELECT 1 FROM funding_round_investors fri2
                JOIN investors i2 ON fri2.investor_id = i2.id
                WHERE fri2.funding_round_id = fr.id
                  AND i2.normalized_name LIKE ?
            )''')
            params.append(f"%{normalize_name(investor)}%")

        if round_type:
            conditions.append('fr.round_type = ?')
            params.append(round_type)

        if min_amount is not None:
            conditions.append('fr.amount_usd >= ?')
            params.append(min_amount)

        if max_amount is not None:
            conditions.append('fr.amount_usd <= ?')
            params.append(max_amount)

        if start_date:
            conditions.append('fr.announced_date >= ?')
            params.append(start_date)

        if end_date:
            conditions.append('fr.announced_date <= ?')
            params.append(end_date)

        if source:
            conditions.append('fr.source = ?')
            params.append(source)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ''

        try:
            rows = self.conn.execute(f'''
                SELECT
                    fr.id,
                    c.name AS company_name,
                    fr.round_type,
                    fr.amount_usd,
                    fr.currency,
                    fr.announced_date,
                    fr.valuation_usd,
                    fr.source,
                    fr.source_url,
                    fr.article_title,
                    fr.confidence_score,
                    c.industry,
                    c.headquarters
                FROM funding_rounds fr
                JOIN companies c ON fr.company_id = c.id
                {where}
                ORDER BY fr.announced_date DESC, fr.id DESC
                LIMIT ? OFFSET ?
            ''', params + [limit, offset]).fetchall()

            rounds = [dict(row) for row in rows]
            self._attach_investors(rounds)
            return rounds

        except sqlite3.Error as e:
            logger.error(f"Error retrieving funding rounds: {e}")
            return []

    def _attach_investors(self, rounds: List[Dict]):
        by_id = {}
        for funding_round in rounds:
            funding_round['lead_investors'] = []
            funding_round['participating_investors'] = []
            by_id[funding_round['id']] = funding_round

        if not by_id:
            return

        placeholders = ','.join('?' * len(by_id))
        rows = self.conn.execute(f'''
            SELECT fri.funding_round_id, fri.role, i.name
            FROM funding_round_investors fri
            JOIN investors i ON fri.investor_id = i.id
            WHERE fri.funding_round_id IN ({placeholders})
            ORDER BY i.name
        ''', list(by_id)).fetchall()

        for row in rows:
            key = 'lead_investors' if row['role'] == 'lead' else 'participating_investors'
            by_id[row['funding_round_id']][key].append(row['name'])

    def get_investor_networks(self, limit: int = 20) -> List[Dict]:
        """Strongest co-investment relationships first."""
        try:
            rows = self.conn.execute('''
                SELECT
                    ia.name AS investor_a,
                    ib.name AS investor_b,
                    n.co_investment_count,
                    n.total_co_investment_amount AS total_amount,
                    n.first_co_investment,
                    n.last_co_investment,
                    n.relationship_strength
                FROM investor_networks n
                JOIN investors ia ON n.investor_a_id = ia.id
                JOIN investors ib ON n.investor_b_id = ib.id
                ORDER BY n.relationship_strength DESC, n.co_investment_count DESC
                LIMIT ?
            ''', (limit,)).fetchall()
            return [dict(row) for row in rows]

        except sqlite3.Error as e:
            logger.error(f"Error retrieving investor networks: {e}")
            return []

    def get_funding_analytics(self, top_n: int = 5) -> Dict:
        """
        Aggregate stored rounds for reporting.

        Returns:
            Dictionary with 'summary', 'round_types', 'top_investors' and
            'timeline' (per YYYY-MM month)
        """
        try:
            totals = self.conn.execute('''
                SELECT
                    COUNT(*) AS total_rounds,
                    COALESCE(SUM(amount_usd), 0) AS total_funding,
                    COUNT(DISTINCT company_id) AS unique_companies
                FROM funding_rounds
            ''').fetchone()
            unique_investors = self.conn.execute(
                'SELECT COUNT(DISTINCT investor_id) FROM funding_round_investors'
            ).fetchone()[0]

            total_rounds = totals['total_rounds']
            summary = {
                'total_funding': totals['total_funding'],
                'total_rounds': total_rounds,
                'average_round_size': totals['total_funding'] / total_rounds if total_rounds else 0,
                'unique_companies': totals['unique_companies'],
                'unique_investors': unique_investors,
            }

            round_types = self.conn.execute('''
                SELECT round_type, COUNT(*) AS rounds, SUM(amount_usd) AS total_amount
                FROM funding_rounds
                GROUP BY round_type
                ORDER BY rounds DESC, round_type
            ''').fetchall()

            top_investors = self.conn.execute('''
                SELECT
                    i.name,
                    COUNT(DISTINCT fri.funding_round_id) AS investments,
                    SUM(fr.amount_usd) AS total_amount,
                    SUM(CASE WHEN fri.role = 'lead' THEN 1 ELSE 0 END) AS lead_count
                FROM funding_round_investors fri
                JOIN investors i ON fri.investor_id = i.id
                JOIN funding_rounds fr ON fri.funding_round_id = fr.id
                GROUP BY i.id
                ORDER BY investments DESC, total_amount DESC
                LIMIT ?
            ''', (top_n,)).fetchall()

            timeline = self.conn.execute('''
                SELECT substr(announced_date, 1, 7) AS month, COUNT(*) AS rounds, SUM(amount_usd) AS total_amount
                FROM funding_rounds
                GROUP BY month
                ORDER BY month
            ''').fetchall()

            return {
                'summary': summary,
                'round_types': [dict(row) for row in round_types],
                'top_investors': [dict(row) for row in top_investors],
                'timeline': [dict(row) for row in timeline],
            }

        except sqlite3.Error as e:
            logger.error(f"Error computing analytics: {e}")
            return {}

    def get_stats(self) -> Dict:
        """
        Get database statistics for logging/monitoring.

        Returns:
            Dictionary with row counts per table
        """
        try:
            stats = {}
            for table in ('companies', 'investors', 'funding_rounds', 'scraped_articles', 'investor_networks'):
                stats[table] = self.conn.execute(f'SELECT COUNT(*) FROM {table}').fetchone()[0]

            stats['processed_articles'] = self.conn.execute(
                'SELECT COUNT(*) FROM scraped_articles WHERE processed = 1'
            ).fetchone()[0]
            return stats

        except sqlite3.Error as e:
            logger.error(f"Error getting stats: {e}")
            return {}

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Database connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
