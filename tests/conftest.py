"""Shared fixtures for the funding tracker tests."""

import pytest

from funding_tracker.database import FundingDatabase
from funding_tracker.funding_extractor import FundingDataExtractor
from funding_tracker.scrapers import build_article


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite database in a temporary directory."""
    database = FundingDatabase(str(tmp_path / "funding_test.db"))
    yield database
    database.close()


@pytest.fixture
def extractor() -> FundingDataExtractor:
    return FundingDataExtractor()


@pytest.fixture
def funding_article():
    """A well-formed funding announcement with every field present."""
    return build_article(
        source="techcrunch",
        url="https://techcrunch.com/2024/01/15/acme-robotics-series-b/",
        title="Acme Robotics raises $25M Series B",
        content=(
            "The round was led by Sequoia Capital, with participation from "
            "Accel and Index Ventures. The startup is now valued at $1.2 billion."
        ),
        published_date="2024-01-15T10:00:00Z",
    )


@pytest.fixture
def non_funding_article():
    return build_article(
        source="techcrunch",
        url="https://techcrunch.com/2024/01/15/apple-iphone/",
        title="Apple releases new iPhone features",
        content="Apple announced new features for the iPhone today, including improved camera capabilities.",
        published_date="2024-01-15T09:00:00Z",
    )


def make_record(**overrides):
    """Build an extracted funding record, overriding any field."""
    record = {
        "company_name": "Acme Robotics",
        "funding_amount": 25_000_000.0,
        "currency": "USD",
        "round_type": "Series B",
        "lead_investors": ["Sequoia Capital"],
        "participating_investors": ["Accel", "Index Ventures"],
        "announced_date": "2024-01-15T10:00:00+00:00",
        "valuation": 1_200_000_000.0,
        "confidence": 1.0,
        "source": "techcrunch",
        "url": "https://techcrunch.com/2024/01/15/acme-robotics-series-b/",
        "title": "Acme Robotics raises $25M Series B",
    }
    record.update(overrides)
    return record


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def populated_db(db):
    """Database holding two rounds that share Sequoia Capital and Accel."""
    db.ingest_funding_data([
        make_record(),
        make_record(
            company_name="Globex",
            funding_amount=10_000_000.0,
            round_type="Series A",
            lead_investors=["Accel"],
            participating_investors=["Sequoia Capital"],
            announced_date="2024-03-01T08:30:00+00:00",
            valuation=None,
            source="venturebeat",
            url="https://venturebeat.com/2024/03/01/globex-series-a/",
            title="Globex secures $10M Series A",
        ),
    ])
    return db
