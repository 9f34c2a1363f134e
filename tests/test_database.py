"""Unit tests for FundingDatabase ingestion, deduplication and queries."""

from datetime import date

import pytest

from funding_tracker.database import (
    FundingDatabase,
    calculate_network_strength,
    generate_content_hash,
    normalize_name,
)


class TestNormalizeName:

    @pytest.mark.parametrize("raw,expected", [
        ("Acme Robotics, Inc.", "acme robotics"),
        ("  Sequoia   Capital LLC ", "sequoia capital"),
        ("Andreessen Horowitz (a16z)", "andreessen horowitz a16z"),
        ("Globex", "globex"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_name(raw) == expected


class TestContentHash:

    def test_same_day_hashes_equal(self, record_factory):
        """Time of day should not change the hash."""
        morning = record_factory(announced_date="2024-01-15T08:00:00+00:00")
        evening = record_factory(announced_date="2024-01-15T20:00:00+00:00")
        assert generate_content_hash(morning) == generate_content_hash(evening)

    def test_amount_changes_hash(self, record_factory):
        assert generate_content_hash(record_factory()) != generate_content_hash(
            record_factory(funding_amount=30_000_000.0)
        )


class TestSchema:

    def test_initialization_is_idempotent(self, tmp_path):
        path = str(tmp_path / "nested" / "funding.db")
        FundingDatabase(path).close()

        with FundingDatabase(path) as db:
            assert db.get_stats()["funding_rounds"] == 0


class TestIngestion:

    def test_ingest_single_record(self, db, record_factory):
        assert db.ingest_funding_data([record_factory()]) == 1

        rounds = db.get_funding_rounds()
        assert len(rounds) == 1
        funding_round = rounds[0]
        assert funding_round["company_name"] == "Acme Robotics"
        assert funding_round["announced_date"] == "2024-01-15"
        assert funding_round["amount_usd"] == 25_000_000
        assert funding_round["valuation_usd"] == 1_200_000_000
        assert funding_round["lead_investors"] == ["Sequoia Capital"]
        assert funding_round["participating_investors"] == ["Accel", "Index Ventures"]
        assert db.is_article_processed(record_factory()["url"])

    def test_empty_batch(self, db):
        assert db.ingest_funding_data([]) == 0
        assert db.get_investor_networks() == []

    def test_duplicate_by_url(self, db, record_factory):
        db.ingest_funding_data([record_factory()])

        other = record_factory(company_name="Other Startup", funding_amount=1_000_000.0)
        assert db.ingest_funding_data([other]) == 0

    def test_duplicate_by_content_hash(self, db, record_factory):
        db.ingest_funding_data([record_factory()])

        syndicated = record_factory(url="https://venturebeat.com/2024/01/15/acme/")
        assert db.ingest_funding_data([syndicated]) == 0

    def test_fuzzy_duplicate(self, db, record_factory):
        """Same company, amount within 10% and date within 7 days."""
        db.ingest_funding_data([record_factory()])

        similar = record_factory(
            company_name="Acme Robotics Inc.",
            funding_amount=26_000_000.0,
            round_type="Unknown",
            announced_date="2024-01-19",
            url="https://example.com/acme-robotics-funding",
        )
        assert db.is_duplicate(similar)
        assert db.ingest_funding_data([similar]) == 0

    @pytest.mark.parametrize("overrides", [
        {"funding_amount": 40_000_000.0},
        {"announced_date": "2024-02-20"},
        {"company_name": "Acme Biotech"},
    ])
    def test_not_a_fuzzy_duplicate(self, db, record_factory, overrides):
        db.ingest_funding_data([record_factory()])

        record = record_factory(url="https://example.com/another-story", **overrides)
        assert db.ingest_funding_data([record]) == 1

    def test_duplicates_within_one_batch(self, db, record_factory):
        first = record_factory()
        repeat = record_factory(url="https://example.com/acme-again")

        assert db.ingest_funding_data([first, repeat]) == 1

    def test_company_reused_across_rounds(self, db, record_factory):
        db.ingest_funding_data([
            record_factory(),
            record_factory(
                company_name="Acme Robotics, Inc.",
                funding_amount=80_000_000.0,
                round_type="Series C",
                announced_date="2025-06-01",
                url="https://example.com/acme-series-c",
            ),
        ])

        stats = db.get_stats()
        assert stats["funding_rounds"] == 2
        assert stats["companies"] == 1

    def test_investor_keeps_first_role(self, db, record_factory):
        """An investor named as lead and participant is linked once, as lead."""
        db.ingest_funding_data([
            record_factory(lead_investors=["Sequoia Capital"], participating_investors=["sequoia capital", "Accel"])
        ])

        funding_round = db.get_funding_rounds()[0]
        assert funding_round["lead_investors"] == ["Sequoia Capital"]
        assert funding_round["participating_investors"] == ["Accel"]
        assert db.get_stats()["investors"] == 2

    def test_failing_record_is_rolled_back(self, db, record_factory):
        """A bad record is skipped without losing the rest of the batch."""
        bad = record_factory(company_name="!!!", url="https://example.com/bad", funding_amount=3_000_000.0)
        good = record_factory()

        assert db.ingest_funding_data([bad, good]) == 1

        stats = db.get_stats()
        assert stats["companies"] == 1
        assert stats["funding_rounds"] == 1
        assert not db.is_article_processed("https://example.com/bad")

    def test_record_skipped_articles(self, db, record_factory, non_funding_article):
        db.ingest_funding_data([record_factory()])

        recorded = db.record_skipped_articles([record_factory(), non_funding_article])

        assert recorded == 1
        assert db.is_article_processed(non_funding_article["url"])
        stats = db.get_stats()
        assert stats["scraped_articles"] == 2
        assert stats["processed_articles"] == 1


class TestInvestorNetworks:

    def test_pairs_are_built_from_shared_rounds(self, populated_db):
        networks = populated_db.get_investor_networks()

        # Sequoia+Accel, Sequoia+Index, Accel+Index
        assert len(networks) == 3
        strongest = networks[0]
        assert {strongest["investor_a"], strongest["investor_b"]} == {"Sequoia Capital", "Accel"}
        assert strongest["co_investment_count"] == 2
        assert strongest["total_amount"] == 35_000_000
        assert strongest["first_co_investment"] == "2024-01-15"
        assert strongest["last_co_investment"] == "2024-03-01"

    def test_strength_relative_to_as_of(self, populated_db):
        populated_db.update_investor_networks(as_of=date(2024, 3, 1))

        strongest = populated_db.get_investor_networks(limit=1)[0]
        assert strongest["relationship_strength"] == pytest.approx(
            calculate_network_strength(2, 35_000_000, 0)
        )

    def test_recompute_is_idempotent(self, populated_db):
        before = populated_db.get_investor_networks()
        populated_db.update_investor_networks()
        after = populated_db.get_investor_networks()

        assert [n["co_investment_count"] for n in after] == [n["co_investment_count"] for n in before]


class TestNetworkStrength:

    def test_saturates_at_one(self):
        assert calculate_network_strength(10, 10_000_000_000, 0) == pytest.approx(1.0)

    def test_empty_relationship(self):
        assert calculate_network_strength(0, 0, None) == 0.0

    def test_count_only(self):
        assert calculate_network_strength(5, 0, 730) == pytest.approx(0.25)

    def test_more_co_investments_is_stronger(self):
        assert calculate_network_strength(2, 1_000_000, 10) > calculate_network_strength(1, 1_000_000, 10)

    def test_older_is_weaker(self):
        assert calculate_network_strength(2, 1_000_000, 10) > calculate_network_strength(2, 1_000_000, 400)


class TestQueries:

    def test_newest_first_with_pagination(self, populated_db):
        first_page = populated_db.get_funding_rounds(limit=1)
        second_page = populated_db.get_funding_rounds(limit=1, offset=1)

        assert first_page[0]["company_name"] == "Globex"
        assert second_page[0]["company_name"] == "Acme Robotics"

    @pytest.mark.parametrize("filters,expected", [
        ({"company": "globex"}, ["Globex"]),
        ({"investor": "index"}, ["Acme Robotics"]),
        ({"investor": "Accel"}, ["Globex", "Acme Robotics"]),
        ({"round_type": "Series B"}, ["Acme Robotics"]),
        ({"min_amount": 20_000_000}, ["Acme Robotics"]),
        ({"max_amount": 20_000_000}, ["Globex"]),
        ({"start_date": "2024-02-01"}, ["Globex"]),
        ({"end_date": "2024-02-01"}, ["Acme Robotics"]),
        ({"source": "venturebeat"}, ["Globex"]),
    ])
    def test_filters(self, populated_db, filters, expected):
        rounds = populated_db.get_funding_rounds(**filters)
        assert [r["company_name"] for r in rounds] == expected

    def test_analytics(self, populated_db):
        analytics = populated_db.get_funding_analytics()

        summary = analytics["summary"]
        assert summary["total_rounds"] == 2
        assert summary["total_funding"] == 35_000_000
        assert summary["average_round_size"] == 17_500_000
        assert summary["unique_companies"] == 2
        assert summary["unique_investors"] == 3

        assert [row["month"] for row in analytics["timeline"]] == ["2024-01", "2024-03"]
        assert {row["round_type"] for row in analytics["round_types"]} == {"Series A", "Series B"}
        top_two = {row["name"] for row in analytics["top_investors"][:2]}
        assert top_two == {"Sequoia Capital", "Accel"}

    def test_analytics_on_empty_database(self, db):
        summary = db.get_funding_analytics()["summary"]
        assert summary["total_rounds"] == 0
        assert summary["average_round_size"] == 0
