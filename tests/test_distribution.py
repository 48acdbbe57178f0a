"""
Tests for weighted distribution of monthly amounts.
"""
import pytest
from datetime import date, timedelta

from storegoals.services.distribution import (
    build_daily_weights,
    daily_target,
    distribute,
    weights_total,
)


def _feb_2025_weights() -> dict[str, float]:
    # 27 days at 3.5% plus the 28th at 5.5% = 100
    weights = {}
    for i in range(27):
        weights[(date(2025, 2, 1) + timedelta(days=i)).isoformat()] = 3.5
    weights["2025-02-28"] = 5.5
    return weights


class TestConservation:
    @pytest.mark.parametrize("amount", [0, 100, 12345.67])
    def test_generated_weights_distribute_whole_amount(self, amount):
        weights = build_daily_weights(2025, 9)
        total = distribute(amount, weights, date(2025, 9, 1), date(2025, 9, 30))
        assert total == pytest.approx(amount, abs=1e-6)

    @pytest.mark.parametrize("amount", [0, 100, 12345.67])
    def test_hand_written_weights_distribute_whole_amount(self, amount):
        total = distribute(amount, _feb_2025_weights(), date(2025, 2, 1), date(2025, 2, 28))
        assert total == pytest.approx(amount, abs=1e-6)

    def test_uniform_month_distributes_whole_amount(self):
        total = distribute(3000, {}, date(2025, 9, 1), date(2025, 9, 30))
        assert total == pytest.approx(3000)


class TestDistribute:
    def test_uniform_fallback_for_one_week(self):
        assert distribute(3000, {}, date(2025, 9, 1), date(2025, 9, 7)) == pytest.approx(700)

    def test_none_weights_mean_uniform(self):
        assert distribute(3000, None, date(2025, 9, 1), date(2025, 9, 7)) == pytest.approx(700)

    def test_days_missing_from_map_contribute_nothing(self):
        weights = {"2025-08-31": 50, "2025-09-01": 10}
        assert distribute(3000, weights, date(2025, 9, 1), date(2025, 9, 7)) == pytest.approx(300)

    def test_inverted_range_is_zero(self):
        assert distribute(3000, {}, date(2025, 9, 7), date(2025, 9, 1)) == 0
        assert distribute(3000, {"2025-09-01": 100}, date(2025, 9, 7), date(2025, 9, 1)) == 0

    def test_uniform_range_crossing_month_uses_start_month_length(self):
        # January has 31 days: 3100 / 31 * 7
        assert distribute(3100, {}, date(2025, 1, 27), date(2025, 2, 2)) == pytest.approx(700)

    def test_weighted_range_spans_both_months_keys(self):
        weights = {"2025-01-31": 10, "2025-02-01": 20}
        assert distribute(1000, weights, date(2025, 1, 27), date(2025, 2, 2)) == pytest.approx(300)

    def test_zero_amount(self):
        assert distribute(0, _feb_2025_weights(), date(2025, 2, 1), date(2025, 2, 7)) == 0


class TestDailyTarget:
    def test_uniform_daily_target(self):
        assert daily_target(3000, {}, date(2025, 9, 10)) == pytest.approx(100)

    def test_weighted_daily_target(self):
        assert daily_target(10000, {"2025-09-10": 4.5}, date(2025, 9, 10)) == pytest.approx(450)

    def test_day_absent_from_weights(self):
        assert daily_target(10000, {"2025-09-10": 4.5}, date(2025, 9, 11)) == 0


class TestBuildDailyWeights:
    def test_covers_every_day_of_month(self):
        weights = build_daily_weights(2024, 2)
        assert len(weights) == 29
        assert "2024-02-29" in weights

    def test_saturday_counts_double_a_monday(self):
        weights = build_daily_weights(2025, 9)
        # 2025-09-01 is a Monday, 2025-09-06 the following Saturday
        assert weights["2025-09-06"] == pytest.approx(2 * weights["2025-09-01"])

    def test_sums_to_100(self):
        assert sum(build_daily_weights(2025, 10).values()) == pytest.approx(100)

    def test_custom_factors(self):
        weights = build_daily_weights(2025, 9, {0: 3.0})
        assert weights["2025-09-01"] == pytest.approx(3 * weights["2025-09-02"])
        assert sum(weights.values()) == pytest.approx(100)

    def test_all_zero_factors_fall_back_to_uniform(self):
        zeros = {d: 0.0 for d in range(7)}
        weights = build_daily_weights(2025, 9, zeros)
        assert len(weights) == 30
        for value in weights.values():
            assert value == pytest.approx(100 / 30)


class TestWeightsTotal:
    def test_ignores_other_months(self):
        weights = {"2025-08-31": 50, "2025-09-01": 10, "2025-09-02": 15}
        assert weights_total(weights, 2025, 9) == pytest.approx(25)

    def test_empty(self):
        assert weights_total({}, 2025, 9) == 0
        assert weights_total(None, 2025, 9) == 0
