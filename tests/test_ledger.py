"""
Ledger service tests against the SQLite session, without HTTP.
"""
import json
import pytest
from datetime import date, datetime
from decimal import Decimal

from storegoals.core.errors import GoalNotFoundError
from storegoals.models.goal import Goal, GoalType
from storegoals.services import ledger
from storegoals.services.weeks import WeekReference


class TestSalesAmounts:
    def test_amounts_in_range(self, db):
        ledger.record_sale(db, "ledger-1", Decimal("100.00"), datetime(2025, 9, 8, 10), owner_id="ana")
        ledger.record_sale(db, "ledger-1", Decimal("50.25"), datetime(2025, 9, 9, 10), owner_id="bia")
        ledger.record_sale(db, "ledger-1", Decimal("999"), datetime(2025, 9, 15, 10), owner_id="ana")

        amounts = ledger.sales_amounts(db, "ledger-1", None, date(2025, 9, 8), date(2025, 9, 14))
        assert sorted(float(a) for a in amounts) == [50.25, 100.0]

        amounts = ledger.sales_amounts(db, "ledger-1", "ana", date(2025, 9, 8), date(2025, 9, 30))
        assert len(amounts) == 2


class TestGoalLookup:
    def test_legacy_row_is_found(self, db):
        # Older rows use the YYYYWW form
        db.add(Goal(
            goal_type=GoalType.weekly_bonus,
            store_id="ledger-2",
            month_ref="202509",
            week_ref="202537",
            target_amount=Decimal("5000"),
            is_active=True,
        ))
        db.commit()
        goal = ledger.find_weekly_bonus_goal(db, "ledger-2", None, WeekReference(week=37, year=2025))
        assert goal is not None
        assert float(goal.target_amount) == 5000

    def test_store_wide_lookup_ignores_owner_goals(self, db):
        ledger.create_goal(db, "monthly", "ledger-3", Decimal("3000"), owner_id="ana", month_ref="202509")
        assert ledger.find_monthly_goal(db, "ledger-3", None, 2025, 9) is None
        assert ledger.find_monthly_goal(db, "ledger-3", "ana", 2025, 9) is not None

    def test_weekly_goal_drops_weights(self, db):
        goal = ledger.create_goal(
            db, GoalType.weekly_bonus, "ledger-4", Decimal("800"),
            week_ref="012025", daily_weights={"2025-01-01": 100},
        )
        assert goal.daily_weights is None
        assert goal.month_ref == "202412"

    def test_weekly_goal_from_week_and_year(self, db):
        goal = ledger.create_goal(db, GoalType.weekly_bonus, "ledger-4b", Decimal("800"), week=20, year=2025)
        assert goal.week_ref == "202025"
        assert goal.month_ref == "202505"

    def test_week_20_string_is_stored_as_sent(self, db):
        goal = ledger.create_goal(db, GoalType.weekly_bonus, "ledger-4c", Decimal("800"), week_ref="202025")
        assert goal.week_ref == "202025"
        assert goal.month_ref == "202505"
        found = ledger.find_weekly_bonus_goal(db, "ledger-4c", None, WeekReference(week=20, year=2025))
        assert found is not None
        assert found.id == goal.id

    def test_get_missing_goal(self, db):
        with pytest.raises(GoalNotFoundError):
            ledger.get_goal(db, 987654)


class TestLoadWeights:
    def test_round_trip(self):
        assert ledger.load_weights(json.dumps({"2025-09-01": 10})) == {"2025-09-01": 10.0}

    def test_unreadable_payload_is_uniform(self):
        assert ledger.load_weights("not json") == {}
        assert ledger.load_weights(None) == {}
        assert ledger.load_weights("[1, 2]") == {}

    def test_non_finite_weights_are_dropped(self):
        assert ledger.load_weights('{"2025-09-01": NaN, "2025-09-02": 10}') == {"2025-09-02": 10.0}
        assert ledger.load_weights('{"2025-09-01": Infinity}') == {}


class TestReports:
    def test_daily_targets_for(self, db):
        ledger.create_goal(
            db, "monthly", "ledger-5", Decimal("30000"), stretch_amount=Decimal("36000"), month_ref="202509",
        )
        target, stretch = ledger.daily_targets_for(db, "ledger-5", None, date(2025, 9, 10))
        assert target == pytest.approx(1000)
        assert stretch == pytest.approx(1200)

    def test_weekly_report_uses_mondays_month(self, db):
        # Week 2025-09-29 .. 2025-10-05 reads the September goal
        ledger.create_goal(db, "monthly", "ledger-6", Decimal("30000"), month_ref="202509")
        ledger.create_goal(db, "monthly", "ledger-6", Decimal("3100"), month_ref="202510")
        report = ledger.build_weekly_report(db, "ledger-6", None, date(2025, 10, 1))
        assert report.week_ref == "402025"
        assert report.required_weekly_target == pytest.approx(7000)

    def test_stored_nan_weights_fall_back_to_uniform(self, db):
        db.add(Goal(
            goal_type=GoalType.monthly,
            store_id="ledger-7",
            month_ref="202509",
            target_amount=Decimal("30000"),
            daily_weights='{"2025-09-08": NaN}',
            is_active=True,
        ))
        db.commit()
        report = ledger.build_weekly_report(db, "ledger-7", None, date(2025, 9, 10), week_ref="372025")
        assert report.required_weekly_target == pytest.approx(7000)
        assert report.status.value == "behind"

    def test_week_20_report_finds_bonus(self, db):
        ledger.create_goal(db, GoalType.weekly_bonus, "ledger-8", Decimal("9000"), week_ref="202025")
        report = ledger.build_weekly_report(db, "ledger-8", None, date(2025, 5, 14))
        assert report.week_ref == "202025"
        assert report.week_start == date(2025, 5, 12)
        assert report.bonus_weekly_target == pytest.approx(9000)
