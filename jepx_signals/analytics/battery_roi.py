"""
Battery ROI projection.

Projects daily, monthly and yearly arbitrage income for a battery that
charges and discharges across the average detected spread, and derives
payback period and annual return on the capital cost.
"""

import logging
import math
from typing import Sequence

from jepx_signals.analytics.arbitrage import average_spread
from jepx_signals.constants import DAYS_PER_MONTH, DAYS_PER_YEAR, KWH_PER_MWH
from jepx_signals.exceptions import DivisionUndefined, ValidationError
from jepx_signals.models import ArbitrageOpportunity, BatteryROI
from jepx_signals.rounding import round_half_away

logger = logging.getLogger(__name__)


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        raise DivisionUndefined(f"Cannot divide {numerator} by zero")
    return numerator / denominator


def _validate(capacity_mwh: float, cycles_per_day: float, efficiency: float, capital_cost: float):
    """Validate battery parameters."""
    if capacity_mwh <= 0:
        raise ValidationError("Capacity must be positive")
    if cycles_per_day < 0:
        raise ValidationError("Cycles per day cannot be negative")
    if not 0 < efficiency <= 1:
        raise ValidationError("Efficiency must be between 0 and 1")
    if capital_cost <= 0:
        raise ValidationError("Capital cost must be positive")


def project_battery_roi(
    capacity_mwh: float,
    cycles_per_day: float,
    efficiency: float,
    capital_cost: float,
    avg_spread: float,
    spread_source: str = 'explicit'
) -> BatteryROI:
    """
    Project battery arbitrage income and payback.

    Args:
        capacity_mwh: Usable storage capacity in MWh
        cycles_per_day: Full charge/discharge cycles per day
        efficiency: Round-trip efficiency (0.0 to 1.0]
        capital_cost: Installed cost in JPY
        avg_spread: Average captured spread in JPY/kWh
        spread_source: Where avg_spread came from, recorded on the result

    Returns:
        BatteryROI with values rounded to 0.1. payback_years is ``inf``
        when the battery earns nothing.

    Raises:
        ValidationError: If a battery parameter is out of range
    """
    _validate(capacity_mwh, cycles_per_day, efficiency, capital_cost)
    if avg_spread < 0:
        raise ValidationError("Spread cannot be negative")

    # capacity is in MWh, spread in JPY/kWh
    daily_profit = capacity_mwh * KWH_PER_MWH * cycles_per_day * avg_spread * efficiency
    monthly_profit = daily_profit * DAYS_PER_MONTH
    yearly_profit = daily_profit * DAYS_PER_YEAR

    try:
        payback_years = _divide(capital_cost, yearly_profit)
    except DivisionUndefined:
        logger.warning("Yearly profit is zero, payback period is undefined")
        payback_years = math.inf
    roi_pct = yearly_profit / capital_cost * 100

    return BatteryROI(
        capacity_mwh=capacity_mwh,
        cycles_per_day=cycles_per_day,
        efficiency=efficiency,
        capital_cost=capital_cost,
        daily_profit=round_half_away(daily_profit),
        monthly_profit=round_half_away(monthly_profit),
        yearly_profit=round_half_away(yearly_profit),
        payback_years=round_half_away(payback_years),
        roi_pct=round_half_away(roi_pct),
        average_spread=avg_spread,
        spread_source=spread_source,
    )


def project_from_opportunities(
    opportunities: Sequence[ArbitrageOpportunity],
    capacity_mwh: float,
    cycles_per_day: float,
    efficiency: float,
    capital_cost: float
) -> BatteryROI:
    """Project ROI using the mean spread of detected opportunities (or the default spread)."""
    spread, source = average_spread(opportunities)
    return project_battery_roi(capacity_mwh, cycles_per_day, efficiency, capital_cost, spread, source)
