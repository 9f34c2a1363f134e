"""
Funding Data Extractor for the Funding Tracker
Extracts structured funding rounds from scraped article text using regex patterns.
Pulls company name, amount, round type, investors and valuation, and scores confidence.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from dateutil import parser as date_parser

from funding_tracker import config

# Set up logging
logger = logging.getLogger(__name__)


class FundingDataExtractor:
    """
    Turns scraped articles into funding round records.

    Every field is found by walking an ordered list of patterns from config;
    the first pattern that matches wins. Each field that is found adds to
    the record's confidence score:

    - company name: +0.3 (required)
    - funding amount: +0.3 (required)
    - round type: +0.2
    - at least one investor: +0.2

    Only records scoring above config.CONFIDENCE_THRESHOLD are kept, so a
    company and an amount alone are not enough.
    """

    def extract_funding_data(self, articles: List[Dict]) -> List[Dict]:
        """
        Extract funding records from a batch of scraped articles.

        Args:
            articles: Scraped article dictionaries (see scrapers module)

        Returns:
            List of extracted funding dictionaries above the confidence threshold
        """
        extracted_data = []

        for article in articles:
            try:
                extracted = self.process_article(article)
            except Exception as e:
                logger.error(f"Error processing article {article.get('url', '')}: {e}")
                continue

            if extracted and extracted['confidence'] > config.CONFIDENCE_THRESHOLD:
                extracted_data.append(extracted)
            elif extracted:
                logger.debug(
                    f"Below confidence threshold ({extracted['confidence']}): {extracted['title'][:50]}"
                )

        logger.info(f"Extracted {len(extracted_data)} funding records from {len(articles)} articles")
        return extracted_data

    def process_article(self, article: Dict) -> Optional[Dict]:
        """
        Extract a single funding record from an article.

        Args:
            article: Dictionary with 'raw_text', 'title', 'url', 'source', 'published_date'

        Returns:
            Extracted funding dictionary, or None if company or amount is missing
        """
        text = article.get('raw_text') or f"{article.get('title', '')} {article.get('content', '')}"
        confidence = 0.0

        company_name = self.extract_company_name(text)
        if not company_name:
            logger.debug(f"No company name found: {article.get('title', '')[:50]}")
            return None
        confidence += config.CONFIDENCE_COMPANY

        amount, currency = self.extract_funding_amount(text)
        if not amount:
            logger.debug(f"No funding amount found: {article.get('title', '')[:50]}")
            return None
        confidence += config.CONFIDENCE_AMOUNT

        round_type = self.extract_round_type(text)
        if round_type:
            confidence += config.CONFIDENCE_ROUND_TYPE

        lead_investors, participating_investors = self.extract_investors(text)
        if lead_investors or participating_investors:
            confidence += config.CONFIDENCE_INVESTORS

        result = {
            'company_name': self.clean_company_name(company_name),
            'funding_amount': amount,
            'currency': currency,
            'round_type': round_type or 'Unknown',
            'lead_investors': lead_investors,
            'participating_investors': participating_investors,
            'announced_date': self.parse_date(article.get('published_date')),
            'valuation': self.extract_valuation(text),
            # Avoid float drift (0.3 + 0.3 + 0.2 + 0.2)
            'confidence': round(confidence, 2),
            'source': article.get('source', ''),
            'url': article.get('url', ''),
            'title': article.get('title', ''),
        }

        logger.debug(
            f"Extracted: {result['company_name']} - {result['round_type']} "
            f"{result['currency']} {amount:,.0f} (confidence: {result['confidence']})"
        )
        return result

    def extract_company_name(self, text: str) -> Optional[str]:
        """Return the first plausible company name, or None."""
        for pattern in config.COMPANY_PATTERNS:
            match = pattern.search(text)
            if match:
                company_name = match.group(1).strip()
                if 2 < len(company_name) < 50:
                    return company_name

        return None

    def extract_funding_amount(self, text: str) -> Tuple[float, str]:
        """
        Extract the funding amount and its currency.

        Handles formats like:
        - $10M, £5m, €1.2B
        - $10 million, 10 million dollars
        - $1,500,000

        Args:
            text: Article text

        Returns:
            (amount, currency) tuple; amount is 0 when nothing matched
        """
        for pattern in config.AMOUNT_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue

            groups = match.groupdict()
            amount = float(groups['amount'].replace(',', ''))
            unit = (groups.get('unit') or '').lower()
            amount *= config.UNIT_MULTIPLIERS.get(unit, 1)

            currency = config.CURRENCY_SYMBOLS.get(groups.get('symbol') or '', config.DEFAULT_CURRENCY)
            return amount, currency

        return 0.0, config.DEFAULT_CURRENCY

    def extract_round_type(self, text: str) -> Optional[str]:
        for pattern in config.ROUND_TYPE_PATTERNS:
            match = pattern.search(text)
            if match:
                round_type = match.group(1) or match.group(0)
                return self.normalize_round_type(round_type.strip())

        return None

    def extract_investors(self, text: str) -> Tuple[List[str], List[str]]:
        """
        Extract lead and participating investors.

        Every match of every investor pattern is used. Matches containing
        "led by" feed the lead list, all others the participating list.

        Args:
            text: Article text

        Returns:
            (lead_investors, participating_investors), each de-duplicated
        """
        lead = []
        participating = []

        for pattern in config.INVESTOR_PATTERNS:
            for match in pattern.finditer(text):
                investor_text = match.group(1).strip()
                if not investor_text:
                    continue

                investors = self.parse_investor_list(investor_text)
                if 'led by' in match.group(0).lower():
                    lead.extend(investors)
                else:
                    participating.extend(investors)

        lead = _unique(lead)
        participating = [name for name in _unique(participating) if name not in lead]
        return lead, participating

    def extract_valuation(self, text: str) -> Optional[float]:
        for pattern in config.VALUATION_PATTERNS:
            match = pattern.search(text)
            if match:
                amount = float(match.group('amount'))
                return amount * config.UNIT_MULTIPLIERS.get(match.group('unit').lower(), 1)

        return None

    def parse_investor_list(self, investor_text: str) -> List[str]:
        """Split "A, B and C" into cleaned investor names."""
        investors = []
        for investor in config.INVESTOR_SPLIT_PATTERN.split(investor_text):
            investor = self.clean_investor_name(investor.strip())
            if 2 < len(investor) < 50:
                investors.append(investor)
        return investors

    def clean_company_name(self, name: str) -> str:
        """
        Clean extracted company name.

        Removes legal suffixes (Inc, LLC, Corp, Ltd, Co), trailing
        punctuation and extra spaces.

        Args:
            name: Raw extracted name

        Returns:
            Cleaned company name
        """
        name = config.COMPANY_SUFFIX_PATTERN.sub('', name)
        name = ' '.join(name.split())
        return name.rstrip('.,;:').strip()

    def clean_investor_name(self, name: str) -> str:
        name = name.strip()
        for prefix in ('and ', '& '):
            if name.lower().startswith(prefix):
                name = name[len(prefix):]
        for suffix in (' and', ' &'):
            if name.lower().endswith(suffix):
                name = name[:-len(suffix)]
        return name.strip()

    def normalize_round_type(self, round_type: str) -> str:
        """
        Map a raw round type onto its canonical label.

        Args:
            round_type: Raw matched text, e.g. "series b", "pre-seed", "IPO"

        Returns:
            Canonical label such as "Series B", "Pre-Seed" or "IPO"
        """
        normalized = round_type.lower()

        if normalized.startswith('series'):
            return f"Series {normalized.split()[-1].upper()}"

        # Pre-seed must be checked before seed
        if 'pre-seed' in normalized:
            return 'Pre-Seed'
        if 'seed' in normalized:
            return 'Seed'
        if 'bridge' in normalized:
            return 'Bridge'
        if 'convertible' in normalized:
            return 'Convertible'
        if 'ipo' in normalized:
            return 'IPO'
        if 'acquisition' in normalized:
            return 'Acquisition'
        if 'exit' in normalized:
            return 'Exit'

        return round_type

    def parse_date(self, date_string: Optional[str]) -> str:
        """
        Normalize a publication date to ISO format.

        Falls back to the current UTC time when the date is missing or
        cannot be parsed.
        """
        if date_string:
            try:
                return date_parser.parse(date_string).isoformat()
            except (ValueError, TypeError, OverflowError) as e:
                logger.debug(f"Could not parse date '{date_string}': {e}")

        return datetime.now(timezone.utc).isoformat()


def _unique(names: List[str]) -> List[str]:
    seen = set()
    unique = []
    for name in names:
        if name not in seen:
            seen.add(name)
            unique.append(name)
    return unique
