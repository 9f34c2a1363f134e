"""Unit tests for FundingDataExtractor."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from funding_tracker.scrapers import build_article


class TestProcessArticle:
    """Tests for single-article extraction and confidence scoring."""

    def test_extracts_every_field(self, extractor, funding_article):
        """Should pull company, amount, round, investors and valuation."""
        result = extractor.process_article(funding_article)

        assert result["company_name"] == "Acme Robotics"
        assert result["funding_amount"] == 25_000_000
        assert result["currency"] == "USD"
        assert result["round_type"] == "Series B"
        assert result["lead_investors"] == ["Sequoia Capital"]
        assert result["participating_investors"] == ["Accel", "Index Ventures"]
        assert result["valuation"] == pytest.approx(1_200_000_000)
        assert result["announced_date"].startswith("2024-01-15T10:00:00")
        assert result["confidence"] == 1.0
        assert result["url"] == funding_article["url"]
        assert result["source"] == "techcrunch"

    def test_company_and_amount_only_scores_point_six(self, extractor):
        """Should score 0.6 when only the required fields are found."""
        article = build_article(
            "techcrunch", "https://example.com/globex", "Globex raises $5 million",
            "The company will use the money to hire engineers.", "2024-02-01",
        )

        result = extractor.process_article(article)

        assert result["company_name"] == "Globex"
        assert result["round_type"] == "Unknown"
        assert result["confidence"] == 0.6

    def test_missing_amount_returns_none(self, extractor):
        article = build_article(
            "techcrunch", "https://example.com/initech", "Initech announces new product",
            "The product ships next month.", "2024-02-01",
        )

        assert extractor.process_article(article) is None

    def test_missing_company_returns_none(self, extractor):
        article = build_article(
            "techcrunch", "https://example.com/roundup", "funding news roundup",
            "investors poured $3B into startups this week.", "2024-02-01",
        )

        assert extractor.process_article(article) is None

    def test_invalid_date_falls_back_to_now(self, extractor, funding_article):
        funding_article["published_date"] = "not a date"

        result = extractor.process_article(funding_article)

        parsed = datetime.fromisoformat(result["announced_date"])
        assert parsed.date() == datetime.now(timezone.utc).date()

    def test_title_case_headline_is_extracted(self, extractor):
        """Headlines in title case still yield a full record."""
        article = build_article(
            "venturebeat", "https://venturebeat.com/2024/02/01/acme-series-a/",
            "Acme Raises $20M Series A Led By Sequoia",
            "Acme, a robotics startup, said the round was led by Sequoia Capital.", "2024-02-01",
        )

        result = extractor.process_article(article)

        assert result["company_name"] == "Acme"
        assert result["funding_amount"] == 20_000_000
        assert result["round_type"] == "Series A"
        assert "Sequoia Capital" in result["lead_investors"]
        assert result["confidence"] == 1.0


class TestExtractFundingData:
    """Tests for batch extraction."""

    def test_keeps_only_records_above_threshold(self, extractor, funding_article, non_funding_article):
        """Should drop non-funding articles and records scoring exactly 0.6."""
        weak_article = build_article(
            "techcrunch", "https://example.com/globex", "Globex raises $5 million",
            "The company will use the money to hire engineers.", "2024-02-01",
        )

        results = extractor.extract_funding_data([funding_article, non_funding_article, weak_article])

        assert [r["company_name"] for r in results] == ["Acme Robotics"]

    def test_error_on_one_article_does_not_stop_batch(self, extractor, funding_article):
        good = extractor.process_article(funding_article)

        with patch.object(extractor, "process_article", side_effect=[RuntimeError("boom"), good]):
            results = extractor.extract_funding_data([{"url": "bad"}, funding_article])

        assert results == [good]


class TestCompanyName:

    def test_descriptor_pattern_wins(self, extractor):
        """Should prefer "startup X raises" over the sentence-start pattern."""
        text = "London fintech startup Payflow raises $10M. More details soon."
        assert extractor.extract_company_name(text) == "Payflow"

    def test_has_raised_anywhere(self, extractor):
        text = "In other news, Hooli has raised $40M from existing backers."
        assert extractor.extract_company_name(text) == "Hooli"

    def test_title_case_headline(self, extractor):
        assert extractor.extract_company_name("Acme Robotics Raises $20M Series A Led By Sequoia") == "Acme Robotics"

    def test_title_case_has_raised(self, extractor):
        assert extractor.extract_company_name("Startup news: Hooli Has Raised $40M") == "Hooli"

    @pytest.mark.parametrize("text", [
        "the startup raises $5M from angels",
        "Ab raises $5M",
        "Funding for robotics keeps growing",
    ])
    def test_no_company(self, extractor, text):
        assert extractor.extract_company_name(text) is None

    def test_clean_company_name_drops_legal_suffix(self, extractor):
        assert extractor.clean_company_name("Acme Inc.") == "Acme"
        assert extractor.clean_company_name("Widgets  Co") == "Widgets"
        assert extractor.clean_company_name("Coinbase") == "Coinbase"


class TestFundingAmount:

    @pytest.mark.parametrize("text,expected", [
        ("raised $25M in new funding", (25_000_000, "USD")),
        ("raised £5.5m in seed funding", (5_500_000, "GBP")),
        ("closed a €2B round", (2_000_000_000, "EUR")),
        ("raised 10 million dollars", (10_000_000, "USD")),
        ("a $1,500,000 seed round", (1_500_000, "USD")),
        ("Acme raises $1.5bn Series D", (1_500_000_000, "USD")),
        ("Globex secures €300mn in growth funding", (300_000_000, "EUR")),
        ("a $500K pre-seed round", (500_000, "USD")),
        ("raised $2 Billion from sovereign funds", (2_000_000_000, "USD")),
    ])
    def test_amount_formats(self, extractor, text, expected):
        amount, currency = extractor.extract_funding_amount(text)
        assert amount == pytest.approx(expected[0])
        assert currency == expected[1]

    def test_no_amount(self, extractor):
        assert extractor.extract_funding_amount("no money mentioned") == (0.0, "USD")

    @pytest.mark.parametrize("text,expected", [
        # "more" is not a million suffix, so only the bare number is read
        ("it needs $5 more to break even", 5),
        ("$3 Mobile raised nothing", 3),
        ("revenue grew 40 percent", 0.0),
    ])
    def test_unit_suffix_boundaries(self, extractor, text, expected):
        amount, _ = extractor.extract_funding_amount(text)
        assert amount == pytest.approx(expected)


class TestRoundType:

    @pytest.mark.parametrize("text,expected", [
        ("raised a pre-seed round", "Pre-Seed"),
        ("announced seed funding today", "Seed"),
        ("closed its Series C round", "Series C"),
        ("a $300M series e", "Series E"),
        ("raised a bridge round", "Bridge"),
        ("the company filed for an IPO", "IPO"),
    ])
    def test_round_types(self, extractor, text, expected):
        assert extractor.extract_round_type(text) == expected

    def test_no_round_type(self, extractor):
        assert extractor.extract_round_type("no round here") is None


class TestInvestors:

    def test_led_by_goes_to_lead(self, extractor):
        lead, participating = extractor.extract_investors(
            "The round was led by Sequoia Capital and Accel. Other investors include Greylock."
        )
        assert lead == ["Sequoia Capital", "Accel"]
        assert participating == ["Greylock"]

    def test_lead_investors_phrase_is_participating(self, extractor):
        """Only "led by" marks a lead; "lead investors include" does not."""
        lead, participating = extractor.extract_investors("Lead investors include Benchmark and Greylock.")
        assert lead == []
        assert participating == ["Benchmark", "Greylock"]

    def test_lead_not_repeated_as_participant(self, extractor):
        lead, participating = extractor.extract_investors(
            "The round was led by Accel. Investors include Accel and Benchmark."
        )
        assert lead == ["Accel"]
        assert participating == ["Benchmark"]

    def test_parse_investor_list_filters_short_names(self, extractor):
        assert extractor.parse_investor_list("AB, Accel, Index Ventures and GV Fund") == [
            "Accel", "Index Ventures", "GV Fund"
        ]


class TestValuation:

    def test_valued_at(self, extractor):
        assert extractor.extract_valuation("now valued at $500M") == pytest.approx(500_000_000)

    def test_valuation_of(self, extractor):
        assert extractor.extract_valuation("at a valuation of $2 billion") == pytest.approx(2_000_000_000)

    def test_no_valuation(self, extractor):
        assert extractor.extract_valuation("raised $5M") is None

    def test_valued_at_bn(self, extractor):
        assert extractor.extract_valuation("now valued at $4.5bn") == pytest.approx(4_500_000_000)
