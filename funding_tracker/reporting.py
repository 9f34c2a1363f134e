"""
Report Exporter for the Funding Tracker
Renders stored funding rounds, investor networks and analytics as
HTML (Jinja2), plain text, CSV and JSON files.
"""

import csv
import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader

from funding_tracker import config
from funding_tracker.database import FundingDatabase

# Set up logging
logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('html', 'text', 'csv', 'json')

CSV_FIELDS = [
    'id', 'company_name', 'round_type', 'amount_usd', 'currency', 'announced_date',
    'valuation_usd', 'lead_investors', 'participating_investors', 'source',
    'source_url', 'confidence_score'
]


# Symbol per ISO code, the inverse of config.CURRENCY_SYMBOLS
CURRENCY_PREFIXES = {code: symbol for symbol, code in config.CURRENCY_SYMBOLS.items()}


def format_amount(amount, currency: str = None) -> str:
    """
    Format 25000000 as "$25.0M" and 1200000000 as "$1.2B".

    Amounts are stored in the currency they were announced in, so the
    prefix follows the currency code ("£5.0M" for GBP). Codes without a
    known symbol are written out ("CHF 5.0M").
    """
    if not amount:
        return '-'

    currency = currency or config.DEFAULT_CURRENCY
    prefix = CURRENCY_PREFIXES.get(currency, f"{currency} ")

    if amount >= 1_000_000_000:
        return f"{prefix}{amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"{prefix}{amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"{prefix}{amount / 1_000:.0f}K"
    return f"{prefix}{amount:,.0f}"


class ReportExporter:
    """
    Exports funding data from a FundingDatabase.

    Uses:
    - Jinja2 for the HTML report (templates ship inside the package)
    - csv for spreadsheet exports, one row per funding round
    - json for a full dump of rounds, networks and analytics
    """

    def __init__(self, db: FundingDatabase, output_dir: str = None, template_dir: str = None):
        self.db = db
        self.output_dir = output_dir or config.REPORT_DIR

        self.jinja_env = Environment(
            loader=FileSystemLoader(template_dir or config.TEMPLATE_DIR),
            autoescape=True
        )
        self.jinja_env.filters['amount'] = format_amount

    def collect(self, limit: int = 100) -> Dict:
        """Gather everything a report needs in one dictionary."""
        return {
            'funding_rounds': self.db.get_funding_rounds(limit=limit),
            'investor_networks': self.db.get_investor_networks(),
            'analytics': self.db.get_funding_analytics(),
            'generated_at': datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC'),
        }

    def render_html(self, data: Dict) -> str:
        template = self.jinja_env.get_template('funding_report.html')
        return template.render(**data)

    def render_text(self, data: Dict) -> str:
        """
        Render a plain text report.

        Args:
            data: Output of collect()

        Returns:
            Plain text string
        """
        summary = data['analytics'].get('summary', {})

        lines = [
            f"Funding Report - {data['generated_at']}",
            "=" * 60,
            "",
            f"Rounds: {summary.get('total_rounds', 0)}",
            f"Total funding: {format_amount(summary.get('total_funding'))}",
            f"Average round: {format_amount(summary.get('average_round_size'))}",
            f"Companies: {summary.get('unique_companies', 0)} | Investors: {summary.get('unique_investors', 0)}",
            "",
            "=" * 60,
            ""
        ]

        if data['funding_rounds']:
            for i, funding_round in enumerate(data['funding_rounds'], 1):
                lines.extend([
                    f"{i}. {funding_round['company_name']} - {funding_round['round_type']}",
                    f"   Amount: {format_amount(funding_round['amount_usd'], funding_round['currency'])}",
                    f"   Announced: {funding_round['announced_date']}",
                    f"   Lead: {', '.join(funding_round['lead_investors']) or '-'}",
                    f"   Participants: {', '.join(funding_round['participating_investors']) or '-'}",
                    f"   Source: {funding_round['source_url'] or funding_round['source']}",
                    ""
                ])
        else:
            lines.append("No funding rounds stored yet.")
            lines.append("")

        if data['investor_networks']:
            lines.extend(["Top co-investment relationships:", ""])
            for network in data['investor_networks']:
                lines.append(
                    f"   {network['investor_a']} + {network['investor_b']}: "
                    f"{network['co_investment_count']} rounds, strength {network['relationship_strength']:.2f}"
                )
            lines.append("")

        return "\n".join(lines)

    def write_csv(self, funding_rounds: List[Dict], filepath: str):
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction='ignore')
            writer.writeheader()
            for funding_round in funding_rounds:
                row = dict(funding_round)
                row['lead_investors'] = '; '.join(funding_round['lead_investors'])
                row['participating_investors'] = '; '.join(funding_round['participating_investors'])
                writer.writerow(row)

    def export(self, export_format: str, limit: int = 100) -> str:
        """
        Write a report file to the output directory.

        Args:
            export_format: One of 'html', 'text', 'csv', 'json'
            limit: Maximum number of funding rounds to include

        Returns:
            Path of the written file

        Raises:
            ValueError: If the format is not supported
        """
        if export_format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {export_format} (expected one of {', '.join(EXPORT_FORMATS)})")

        os.makedirs(self.output_dir, exist_ok=True)
        data = self.collect(limit=limit)

        timestamp = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
        extension = 'txt' if export_format == 'text' else export_format
        filepath = os.path.join(self.output_dir, f"funding_report_{timestamp}.{extension}")

        if export_format == 'csv':
            self.write_csv(data['funding_rounds'], filepath)
        else:
            if export_format == 'html':
                content = self.render_html(data)
            elif export_format == 'text':
                content = self.render_text(data)
            else:
                content = json.dumps(data, indent=2, default=str)

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write(content)

        logger.info(f"Exported {len(data['funding_rounds'])} funding rounds to {filepath}")
        return filepath
