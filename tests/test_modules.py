"""
Unit tests for the supporting modules.
"""

import math

import pytest
import pandas as pd


def ts(hour: int, date: str = '2025-10-23') -> str:
    return f"{date}T{hour:02d}:00:00+09:00"


class TestDataLoader:
    """Tests for data loader module."""

    @pytest.fixture
    def price_df(self):
        from jepx_signals.data_loader import load_price_series
        return load_price_series([{'ts': ts(h), 'price': 20.0 + h} for h in range(24)])

    def test_price_series_columns(self, price_df):
        assert list(price_df.columns) == ['TIMESTAMP', 'DATETIME', 'HOUR', 'PRICE']
        assert list(price_df['HOUR']) == list(range(24))
        assert price_df['TIMESTAMP'].iloc[0] == ts(0)

    def test_empty_price_series(self):
        from jepx_signals.data_loader import load_price_series

        df = load_price_series([])
        assert df.empty
        assert 'PRICE' in df.columns

    def test_demand_series_optional_forecast(self):
        from jepx_signals.data_loader import load_demand_series

        df = load_demand_series([
            {'ts': ts(0), 'demand_mw': 3000, 'forecast_mw': 3100},
            {'ts': ts(1), 'demand_mw': 2900},
        ])

        assert list(df['DEMAND_MW']) == [3000, 2900]
        assert df['FORECAST_MW'].iloc[0] == 3100
        assert pd.isna(df['FORECAST_MW'].iloc[1])

    def test_consumption_profile(self):
        from jepx_signals.data_loader import load_consumption_profile

        profile = load_consumption_profile([{'ts': ts(0), 'kwh': '12.5'}])

        assert profile[0].timestamp == ts(0)
        assert profile[0].consumption_kwh == 12.5

    def test_negative_consumption_rejected(self):
        from jepx_signals.data_loader import load_consumption_profile
        from jepx_signals.exceptions import ValidationError

        with pytest.raises(ValidationError, match="cannot be negative"):
            load_consumption_profile([{'ts': ts(0), 'kwh': -1}])

    @pytest.mark.parametrize("bad_ts", ['not-a-timestamp', ''])
    def test_invalid_timestamp_rejected(self, bad_ts):
        from jepx_signals.data_loader import load_consumption_profile
        from jepx_signals.exceptions import ValidationError

        with pytest.raises(ValidationError, match="Invalid timestamp"):
            load_consumption_profile([{'ts': bad_ts, 'kwh': 1.0}])

    def test_demand_to_profile(self):
        from jepx_signals.data_loader import demand_to_profile, load_demand_series

        demand = load_demand_series([{'ts': ts(0), 'demand_mw': 2.5}, {'ts': ts(1), 'demand_mw': None}])
        profile = demand_to_profile(demand)

        assert [p.consumption_kwh for p in profile] == [2500.0, 0.0]

    def test_price_statistics(self, price_df):
        from jepx_signals.data_loader import get_price_statistics

        stats = get_price_statistics(price_df)

        assert stats['count'] == 24
        assert stats['min_price'] == 20.0
        assert stats['max_price'] == 43.0
        assert stats['avg_price'] == pytest.approx(31.5)

    def test_validate_clean_series(self, price_df):
        from jepx_signals.data_loader import validate_series

        report = validate_series(price_df)

        assert report['valid']
        assert report['date_range'] == (ts(0), ts(23))

    def test_validate_detects_ordering_and_duplicates(self):
        from jepx_signals.data_loader import load_price_series, validate_series

        df = load_price_series([
            {'ts': ts(1), 'price': 30},
            {'ts': ts(0), 'price': -5},
            {'ts': ts(0), 'price': 30},
        ])
        report = validate_series(df)

        assert not report['valid']
        assert any('strictly increasing' in issue for issue in report['issues'])
        assert any('Duplicate' in issue for issue in report['issues'])
        assert any('Negative' in issue for issue in report['issues'])

    def test_require_valid_raises(self):
        from jepx_signals.data_loader import load_price_series, require_valid
        from jepx_signals.exceptions import ValidationError

        with pytest.raises(ValidationError, match="Series is empty"):
            require_valid(load_price_series([]), name='price')

    def test_load_price_file(self, tmp_path):
        import json
        from jepx_signals.data_loader import load_price_file

        path = tmp_path / 'spot-tokyo.json'
        path.write_text(json.dumps({
            'date': '2025-10-23',
            'area': 'tokyo',
            'price_yen_per_kwh': [{'ts': ts(h), 'price': 25.0} for h in range(24)],
        }))

        df = load_price_file(path)
        assert len(df) == 24


class TestCarbon:
    """Tests for carbon intensity estimation."""

    def test_weighted_emission_factors(self):
        from jepx_signals.carbon import carbon_intensity_by_hour

        intensity = carbon_intensity_by_hour([
            {'ts': ts(0), 'solar_mw': 200, 'lng_mw': 100, 'coal_mw': 100, 'other_mw': 0, 'total_mw': 400},
            {'ts': ts(1), 'lng_mw': 100, 'total_mw': 100},
        ])

        # (100*350 + 100*850) / 400
        assert intensity[0] == pytest.approx(300.0)
        assert intensity[1] == pytest.approx(350.0)

    def test_zero_total_hours_skipped(self):
        from jepx_signals.carbon import carbon_intensity_by_hour

        intensity = carbon_intensity_by_hour([{'ts': ts(5), 'coal_mw': 0, 'total_mw': 0}])

        assert intensity == {}

    def test_empty_input(self):
        from jepx_signals.carbon import carbon_intensity_by_hour

        assert carbon_intensity_by_hour([]) == {}


class TestRounding:
    """Tests for half-away-from-zero rounding."""

    @pytest.mark.parametrize("value,expected", [
        (12345.67, 12345.7),
        (302100.456, 302100.5),
        (123.456, 123.5),
        (123.44, 123.4),
        (123.45, 123.5),
        (-123.45, -123.5),
        (100.0, 100.0),
    ])
    def test_one_decimal(self, value, expected):
        from jepx_signals.rounding import round_half_away
        assert round_half_away(value) == expected

    def test_whole_units(self):
        from jepx_signals.rounding import round_whole

        assert round_whole(2.5) == 3
        assert round_whole(-2.5) == -3
        assert round_whole(2.4) == 2

    def test_infinity_passes_through(self):
        from jepx_signals.rounding import round_half_away

        assert math.isinf(round_half_away(math.inf))


class TestMetrics:
    """Tests for the trading metrics summary."""

    @pytest.fixture
    def opportunities(self):
        from jepx_signals.analytics.arbitrage import detect_arbitrage_opportunities
        from jepx_signals.data_loader import load_price_series

        prices = [30.0] * 24
        prices[3] = 10.0
        prices[14] = 45.0
        df = load_price_series([{'ts': ts(h), 'price': p} for h, p in enumerate(prices)])
        return detect_arbitrage_opportunities(df)

    @pytest.fixture
    def recommendations(self):
        from jepx_signals.analytics.load_shift import plan_load_shifts
        from jepx_signals.data_loader import load_demand_series, load_price_series

        prices = [20.0 if h < 6 else 40.0 if 12 <= h < 18 else 30.0 for h in range(24)]
        price_df = load_price_series([{'ts': ts(h), 'price': p} for h, p in enumerate(prices)])
        demand_df = load_demand_series([{'ts': ts(h), 'demand_mw': 1000.0} for h in range(24)])
        return plan_load_shifts(price_df, demand_df)[0]

    def test_summary_none_without_opportunities(self):
        from jepx_signals.metrics import summarize

        assert summarize([], []) is None

    def test_summary(self, opportunities, recommendations):
        from jepx_signals.metrics import summarize

        metrics = summarize(opportunities, recommendations)

        assert metrics.total_opportunities == 2
        assert metrics.estimated_daily_savings == pytest.approx(36 * 2000.0)
        assert metrics.estimated_monthly_savings == pytest.approx(36 * 2000.0 * 30)
        assert metrics.optimal_battery_size == 350
        assert metrics.average_arbitrage_spread == pytest.approx(25.0)
        assert set(metrics.to_dict()) == {
            'totalOpportunities', 'estimatedDailySavings', 'estimatedMonthlySavings',
            'carbonReductionPotential', 'optimalBatterySize', 'averageArbitrageSpread'
        }

    def test_best_opportunities_by_profit(self, opportunities):
        from jepx_signals.metrics import best_opportunities

        best = best_opportunities(opportunities)

        assert [o.hour for o in best] == [3, 14]

    def test_priority_load_shifts(self, recommendations):
        from jepx_signals.metrics import priority_load_shifts

        top = priority_load_shifts(recommendations)

        assert len(top) == 5
        assert all(r.feasibility > 70 for r in top)
        savings = [r.savings for r in top]
        assert savings == sorted(savings, reverse=True)


class TestModels:
    """Tests for value objects and configuration."""

    def test_area_parsing(self):
        from jepx_signals.models import Area, area_from_name

        assert area_from_name(' Tokyo ') is Area.TOKYO
        assert area_from_name('kansai') is Area.KANSAI

    def test_unknown_area(self):
        from jepx_signals.exceptions import ValidationError
        from jepx_signals.models import area_from_name

        with pytest.raises(ValidationError, match="Unknown area"):
            area_from_name('osaka')

    def test_value_objects_are_frozen(self):
        import dataclasses
        from jepx_signals.models import ConsumptionPoint

        point = ConsumptionPoint(timestamp=ts(0), consumption_kwh=1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            point.consumption_kwh = 2.0

    def test_settings_from_environment(self, monkeypatch):
        from jepx_signals.config import get_settings

        monkeypatch.setenv('JEPX_URL', 'https://example.test/jepx')
        monkeypatch.setenv('DEFAULT_CARBON_INTENSITY', 'not-a-number')
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        get_settings.cache_clear()
        try:
            settings = get_settings()
            assert settings.price_source_url == 'https://example.test/jepx'
            assert settings.default_carbon_intensity == 300.0
            assert settings.log_level == 'DEBUG'
        finally:
            get_settings.cache_clear()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
