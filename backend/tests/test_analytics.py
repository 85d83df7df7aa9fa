"""
대시보드 통계 테스트
"""
import pytest
from datetime import date, datetime, timedelta

from app.models import MatchingResult
from app.services.analytics_service import AnalyticsService, bucket_start, trend_buckets
from app.services.matching_service import MatchingService


class TestAnalyticsService:

    def test_empty_database(self, db_session):
        stats = AnalyticsService(db_session).get_dashboard_stats()

        assert stats.totals.customers == 0
        assert stats.totals.matchings == 0
        assert stats.top_programs == []
        assert stats.programs_by_source == []

    def test_totals_and_rankings(self, db_session, make_customer, make_program):
        now = datetime.utcnow()
        busy = make_customer(name="바쁜 고객")
        make_customer(name="조용한 고객", industry=None, location=None, keywords=["없음"])

        open_program = make_program(title="진행중", deadline=now + timedelta(days=10))
        closed_program = make_program(
            title="마감", data_source="K-Startup", deadline=now - timedelta(days=1)
        )
        make_program(title="상시", data_source="K-Startup", keywords=[])

        MatchingService(db_session).run_matching(busy.id)

        stats = AnalyticsService(db_session).get_dashboard_stats()

        assert stats.totals.customers == 2
        assert stats.totals.programs == 3
        assert stats.totals.active_programs == 2
        assert stats.totals.matchings == 3
        assert stats.recent.new_customers == 2
        assert stats.recent.new_matchings == 3
        assert stats.recent.new_programs == 3

        assert stats.top_programs[0].match_count == 1
        assert {p.id for p in stats.top_programs} >= {open_program.id, closed_program.id}

        # 마감된 공고 매칭은 제외
        assert len(stats.top_customers) == 1
        assert stats.top_customers[0].name == "바쁜 고객"
        assert stats.top_customers[0].active_match_count == 2

        by_source = {s.data_source: s.count for s in stats.programs_by_source}
        assert by_source == {"기업마당": 1, "K-Startup": 2}

    def test_recent_window(self, db_session, make_customer):
        old = make_customer()
        old.created_at = datetime.utcnow() - timedelta(days=30)
        db_session.commit()
        make_customer()

        stats = AnalyticsService(db_session).get_dashboard_stats()

        assert stats.totals.customers == 2
        assert stats.recent.new_customers == 1


# 2026-03-18 (수)
NOW = datetime(2026, 3, 18, 12, 0)


class TestTrendBuckets:

    def test_bucket_start(self):
        day = date(2026, 3, 18)

        assert bucket_start(day, "daily") == day
        assert bucket_start(day, "weekly") == date(2026, 3, 16)
        assert bucket_start(day, "monthly") == date(2026, 3, 1)

    def test_daily_buckets_include_both_ends(self):
        buckets = trend_buckets(NOW - timedelta(days=7), NOW, "daily")

        assert len(buckets) == 8
        assert buckets[0] == date(2026, 3, 11)
        assert buckets[-1] == date(2026, 3, 18)

    def test_weekly_buckets_start_on_monday(self):
        buckets = trend_buckets(NOW - timedelta(days=14), NOW, "weekly")

        assert buckets == [date(2026, 3, 2), date(2026, 3, 9), date(2026, 3, 16)]
        assert all(bucket.weekday() == 0 for bucket in buckets)


class TestTrends:

    @pytest.fixture
    def history(self, db_session, make_customer, make_program):
        make_customer(created_at=datetime(2026, 2, 20, 9, 0))
        make_customer(created_at=datetime(2026, 3, 10, 9, 0))
        customer = make_customer(created_at=datetime(2026, 3, 16, 9, 0))
        make_customer(created_at=datetime(2026, 3, 17, 23, 0))
        program = make_program(created_at=datetime(2026, 3, 18, 8, 0))
        db_session.add(MatchingResult(
            customer_id=customer.id,
            program_id=program.id,
            score=70,
            created_at=datetime(2026, 3, 18, 9, 0),
        ))
        db_session.commit()

    def test_weekly(self, db_session, history):
        trends = AnalyticsService(db_session).get_trends("weekly", 14, now=NOW)

        assert trends.period == "weekly"
        assert trends.start_date == NOW - timedelta(days=14)
        assert [(p.date, p.customers, p.matchings, p.programs) for p in trends.data] == [
            (date(2026, 3, 2), 0, 0, 0),
            (date(2026, 3, 9), 1, 0, 0),
            (date(2026, 3, 16), 2, 1, 1),
        ]

    def test_daily(self, db_session, history):
        trends = AnalyticsService(db_session).get_trends("daily", 7, now=NOW)
        by_date = {p.date: p for p in trends.data}

        assert len(trends.data) == 8
        assert date(2026, 3, 10) not in by_date
        assert by_date[date(2026, 3, 16)].customers == 1
        assert by_date[date(2026, 3, 17)].customers == 1
        assert by_date[date(2026, 3, 18)].matchings == 1

    def test_monthly(self, db_session, history):
        trends = AnalyticsService(db_session).get_trends("monthly", 60, now=NOW)

        assert [(p.date, p.customers) for p in trends.data] == [
            (date(2026, 1, 1), 0),
            (date(2026, 2, 1), 1),
            (date(2026, 3, 1), 3),
        ]


class TestAnalyticsEndpoint:

    @pytest.mark.asyncio
    async def test_get_dashboard_stats(self, client, make_customer, make_program):
        make_customer()
        make_program()

        response = await client.get("/api/v1/analytics")

        assert response.status_code == 200
        data = response.json()
        assert data["totals"]["customers"] == 1
        assert data["totals"]["programs"] == 1
        assert "recent" in data
        assert "top_programs" in data
        assert "top_customers" in data
        assert data["programs_by_source"] == [{"data_source": "기업마당", "count": 1}]

    @pytest.mark.asyncio
    async def test_get_trends(self, client, make_customer):
        make_customer()

        response = await client.get("/api/v1/analytics/trends", params={"period": "daily", "days": 7})

        assert response.status_code == 200
        data = response.json()
        assert data["period"] == "daily"
        assert len(data["data"]) == 8
        assert sum(point["customers"] for point in data["data"]) == 1

    @pytest.mark.asyncio
    async def test_get_trends_defaults(self, client):
        response = await client.get("/api/v1/analytics/trends")

        assert response.status_code == 200
        data = response.json()
        assert data["period"] == "weekly"
        assert date.fromisoformat(data["data"][0]["date"]).weekday() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [
        {"days": 6},
        {"days": 366},
        {"period": "yearly"},
    ])
    async def test_get_trends_invalid_params(self, client, params):
        response = await client.get("/api/v1/analytics/trends", params=params)
        assert response.status_code == 422
