"""
Trading metrics summary.

Read-only aggregations over one analysis run, used by dashboard
summary cards.
"""

from typing import List, Optional, Sequence

import numpy as np

from jepx_signals.constants import (
    BATTERY_SIZE_PER_SPREAD,
    DAYS_PER_MONTH,
    PRIORITY_FEASIBILITY,
    TOP_N,
)
from jepx_signals.models import (
    ArbitrageOpportunity,
    LoadShiftRecommendation,
    Signal,
    TradingMetrics,
)
from jepx_signals.rounding import round_whole


def optimal_battery_size(opportunities: Sequence[ArbitrageOpportunity]) -> int:
    """Battery size (MWh) proportional to the largest detected spread."""
    if not opportunities:
        return 0
    max_spread = max(o.spread for o in opportunities)
    return round_whole(max_spread * BATTERY_SIZE_PER_SPREAD)


def best_opportunities(
    opportunities: Sequence[ArbitrageOpportunity],
    n: int = TOP_N
) -> List[ArbitrageOpportunity]:
    """Top ``n`` actionable opportunities by expected profit."""
    actionable = [o for o in opportunities if o.signal is not Signal.HOLD]
    return sorted(actionable, key=lambda o: o.expected_profit, reverse=True)[:n]


def priority_load_shifts(
    recommendations: Sequence[LoadShiftRecommendation],
    min_feasibility: int = PRIORITY_FEASIBILITY,
    n: int = TOP_N
) -> List[LoadShiftRecommendation]:
    """Feasible shifts (feasibility above 70) with the largest savings, top ``n``."""
    feasible = [r for r in recommendations if r.feasibility > min_feasibility]
    return sorted(feasible, key=lambda r: r.savings, reverse=True)[:n]


def summarize(
    opportunities: Sequence[ArbitrageOpportunity],
    recommendations: Sequence[LoadShiftRecommendation]
) -> Optional[TradingMetrics]:
    """
    Build the dashboard summary.

    Returns:
        TradingMetrics, or None when no opportunities were detected
    """
    if not opportunities:
        return None

    daily_savings = float(sum(r.savings for r in recommendations))

    return TradingMetrics(
        total_opportunities=sum(1 for o in opportunities if o.signal is not Signal.HOLD),
        estimated_daily_savings=daily_savings,
        estimated_monthly_savings=daily_savings * DAYS_PER_MONTH,
        carbon_reduction_potential=float(sum(r.carbon_reduction for r in recommendations)),
        optimal_battery_size=optimal_battery_size(opportunities),
        average_arbitrage_spread=float(np.mean([o.spread for o in opportunities])),
    )
