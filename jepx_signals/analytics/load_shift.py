"""
Load Shift Planning.

Pairs the most expensive hours of the day with the cheapest ones and
proposes moving 10% of the expensive hour's load, scored for savings,
carbon impact and practical feasibility.

Algorithm: O(k^2) over the 6 high and 6 low price hours
"""

import logging
from typing import Dict, List, Optional, Tuple

import pandas as pd

from jepx_signals.config import get_settings
from jepx_signals.constants import (
    CARBON_SCALE,
    FEASIBILITY_DIVISOR,
    HIGH_PRIORITY_SAVINGS,
    HOURS_PER_DAY,
    MEDIUM_PRIORITY_SAVINGS,
    MEDIUM_SHIFT_MW,
    MIN_SHIFT_DISTANCE_HOURS,
    NIGHT_BONUS,
    NIGHT_END_HOUR,
    NIGHT_START_HOUR,
    SHIFT_CANDIDATE_HOURS,
    SHIFT_FRACTION,
    SMALL_SHIFT_MW,
    TIME_PENALTY_PER_HOUR,
)
from jepx_signals.exceptions import DataUnavailableError
from jepx_signals.models import LoadProfileEntry, LoadShiftRecommendation, Priority
from jepx_signals.rounding import round_whole

logger = logging.getLogger(__name__)


def recommendation_id(from_hour: int, to_hour: int) -> str:
    """Stable identifier for a shift pair; identical pairs always collide."""
    return f"shift-{from_hour}-to-{to_hour}"


def is_night_hour(hour: int) -> bool:
    return hour >= NIGHT_START_HOUR or hour <= NIGHT_END_HOUR


def calculate_feasibility(from_hour: int, to_hour: int, amount_mw: float) -> int:
    """
    Score how practical a load shift is (0-100).

    Factors:
    - Time distance: closer hours are easier (100 minus 5 per hour)
    - Shift amount: under 1000 MW scores 100, under 5000 MW 80, else 60
    - Night bonus: +20 if either end falls in 22:00-06:00
    """
    time_factor = max(0, 100 - abs(from_hour - to_hour) * TIME_PENALTY_PER_HOUR)

    if amount_mw < SMALL_SHIFT_MW:
        amount_factor = 100
    elif amount_mw < MEDIUM_SHIFT_MW:
        amount_factor = 80
    else:
        amount_factor = 60

    night_factor = NIGHT_BONUS if is_night_hour(from_hour) or is_night_hour(to_hour) else 0

    score = round_whole((time_factor + amount_factor + night_factor) / FEASIBILITY_DIVISOR)
    return max(0, min(100, score))


def classify_priority(savings: float) -> Priority:
    if savings > HIGH_PRIORITY_SAVINGS:
        return Priority.HIGH
    if savings > MEDIUM_PRIORITY_SAVINGS:
        return Priority.MEDIUM
    return Priority.LOW


def build_load_profile(
    price_df: pd.DataFrame,
    demand_df: pd.DataFrame,
    carbon_intensity: Optional[Dict[int, float]] = None,
    default_intensity: Optional[float] = None
) -> List[LoadProfileEntry]:
    """
    Join price and demand by hour of day.

    Hours missing from either series are skipped. When a series holds
    several points for the same hour the first one wins.
    """
    if default_intensity is None:
        default_intensity = get_settings().default_carbon_intensity
    carbon_intensity = carbon_intensity or {}

    prices = price_df.drop_duplicates(subset='HOUR', keep='first').set_index('HOUR')['PRICE']
    demand = demand_df.drop_duplicates(subset='HOUR', keep='first').set_index('HOUR')['DEMAND_MW']

    profile = []
    for hour in range(HOURS_PER_DAY):
        if hour not in prices.index or hour not in demand.index:
            continue
        price = prices.loc[hour]
        load = demand.loc[hour]
        if pd.isna(price) or pd.isna(load):
            continue
        profile.append(LoadProfileEntry(
            hour=hour,
            current_load=float(load),
            price=float(price),
            carbon_intensity=float(carbon_intensity.get(hour, default_intensity)),
        ))
    return profile


def _evaluate_shift(high: LoadProfileEntry, low: LoadProfileEntry) -> Optional[LoadShiftRecommendation]:
    shift_amount = high.current_load * SHIFT_FRACTION
    current_cost = high.current_load * high.price
    optimized_cost = (high.current_load - shift_amount) * high.price + shift_amount * low.price
    savings = current_cost - optimized_cost

    if savings <= 0:
        return None

    return LoadShiftRecommendation(
        id=recommendation_id(high.hour, low.hour),
        from_hour=high.hour,
        to_hour=low.hour,
        shift_amount=shift_amount,
        current_cost=current_cost,
        optimized_cost=optimized_cost,
        savings=savings,
        carbon_reduction=shift_amount * (high.carbon_intensity - low.carbon_intensity) * CARBON_SCALE,
        feasibility=calculate_feasibility(high.hour, low.hour, shift_amount),
        priority=classify_priority(savings),
        reason=(
            f"Shift {round_whole(shift_amount)}MW from {high.hour}:00 (¥{high.price:.2f}/kWh) "
            f"to {low.hour}:00 (¥{low.price:.2f}/kWh)"
        ),
    )


def plan_load_shifts(
    price_df: Optional[pd.DataFrame],
    demand_df: Optional[pd.DataFrame],
    carbon_intensity: Optional[Dict[int, float]] = None
) -> Tuple[List[LoadShiftRecommendation], List[LoadProfileEntry]]:
    """
    Propose load shifts from high-price to low-price hours.

    Args:
        price_df: Price frame (TIMESTAMP, HOUR, PRICE)
        demand_df: Demand frame (TIMESTAMP, HOUR, DEMAND_MW)
        carbon_intensity: Optional hour -> gCO2/kWh mapping

    Returns:
        Tuple of (recommendations in generation order, hourly load profile)

    Raises:
        DataUnavailableError: If either series is missing or empty
    """
    if price_df is None or len(price_df) == 0:
        raise DataUnavailableError("Missing price data")
    if demand_df is None or len(demand_df) == 0:
        raise DataUnavailableError("Missing demand data")

    profile = build_load_profile(price_df, demand_df, carbon_intensity)

    # Stable sort, ties keep hour order
    by_price = sorted(profile, key=lambda p: p.price, reverse=True)
    high_hours = by_price[:SHIFT_CANDIDATE_HOURS]
    low_hours = by_price[-SHIFT_CANDIDATE_HOURS:]

    recommendations = []
    for high in high_hours:
        for low in low_hours:
            if abs(high.hour - low.hour) < MIN_SHIFT_DISTANCE_HOURS:
                continue
            rec = _evaluate_shift(high, low)
            if rec is not None:
                recommendations.append(rec)

    logger.info(
        f"Generated {len(recommendations)} load shift recommendations "
        f"from {len(profile)} profile hours"
    )
    return recommendations, profile
