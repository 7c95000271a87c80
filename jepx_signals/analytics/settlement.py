"""
Settlement cost calculation.

Formula: cost = sum(kWh * JPY/kWh * (1 - pv_offset_pct))

Rounding: 0.1 JPY for costs, 0.1 kWh for consumption, half away from
zero. Per-hour rows are rounded when emitted; totals are summed from
the unrounded values and rounded once.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import pandas as pd

from jepx_signals.config import get_settings
from jepx_signals.constants import (
    BASE_PRICE_YEN_PER_KWH,
    DAY_MULTIPLIER,
    MOCK_SOURCE_NAME,
    NIGHT_MULTIPLIER,
    SHOULDER_MULTIPLIER,
)
from jepx_signals.exceptions import DataUnavailableError, ValidationError
from jepx_signals.models import Area, ConsumptionPoint, HourlyCost, SettlementResult
from jepx_signals.rounding import round_half_away

logger = logging.getLogger(__name__)


def time_of_day_multiplier(hour: int) -> float:
    """Night [0, 6) is cheap, day [9, 20) is expensive, the rest in between."""
    if 0 <= hour < 6:
        return NIGHT_MULTIPLIER
    if 9 <= hour < 20:
        return DAY_MULTIPLIER
    return SHOULDER_MULTIPLIER


def synthesize_price(area: Area, hour: int) -> float:
    """Reference price for an hour when no spot series is supplied."""
    return round_half_away(BASE_PRICE_YEN_PER_KWH[area.value] * time_of_day_multiplier(hour))


@dataclass(frozen=True)
class PriceReference:
    """
    Price source for a settlement run.

    Attributes:
        area: Price area
        date: Trading date (YYYY-MM-DD)
        prices: Optional spot price frame (HOUR, PRICE); when absent,
            prices are synthesized from the time-of-day table
    """
    area: Area
    date: str
    prices: Optional[pd.DataFrame] = field(default=None, compare=False, hash=False)

    @property
    def is_synthesized(self) -> bool:
        return self.prices is None

    def hourly_prices(self) -> Dict[int, float]:
        """
        First spot price per hour of day.

        Raises:
            ValidationError: If the supplied series holds a missing or
                non-numeric price
        """
        if self.prices is None:
            return {}
        invalid = self.prices.loc[self.prices['PRICE'].isna(), 'TIMESTAMP']
        if len(invalid):
            raise ValidationError(f"Invalid price in series at {', '.join(map(str, invalid))}")
        first = self.prices.drop_duplicates(subset='HOUR', keep='first')
        return {int(h): float(p) for h, p in zip(first['HOUR'], first['PRICE'])}

    def source(self) -> Dict[str, str]:
        settings = get_settings()
        name = MOCK_SOURCE_NAME if self.is_synthesized else settings.price_source_name
        return {'name': name, 'url': settings.price_source_url}


def settle(
    profile: Sequence[ConsumptionPoint],
    price_reference: PriceReference,
    pv_offset_pct: float
) -> SettlementResult:
    """
    Compute billable cost for a consumption profile.

    Args:
        profile: Hourly consumption points
        price_reference: Area/date plus an optional spot price series
        pv_offset_pct: Share of consumption covered by on-site solar (0.0-1.0).
            Values outside the range are applied as given.

    Returns:
        SettlementResult with per-hour breakdown and totals

    Raises:
        ValidationError: If the profile is empty or the supplied price
            series holds an invalid price
        DataUnavailableError: If a supplied price series has no price for
            a profile hour
    """
    if not profile:
        raise ValidationError("profile cannot be empty")
    if not 0 <= pv_offset_pct <= 1:
        logger.warning(f"pv_offset_pct {pv_offset_pct} is outside [0, 1], costs will be out of range")

    spot_prices = price_reference.hourly_prices()

    total_kwh = 0.0
    total_cost = 0.0
    breakdown = []

    for point in profile:
        hour = pd.Timestamp(point.timestamp).hour

        if price_reference.is_synthesized:
            price = synthesize_price(price_reference.area, hour)
        elif hour in spot_prices:
            price = spot_prices[hour]
        else:
            raise DataUnavailableError(f"No price found for timestamp {point.timestamp}")

        effective_kwh = point.consumption_kwh * (1 - pv_offset_pct)
        cost = effective_kwh * price

        # Totals accumulate unrounded values
        total_kwh += point.consumption_kwh
        total_cost += cost

        breakdown.append(HourlyCost(
            timestamp=point.timestamp,
            consumption_kwh=round_half_away(point.consumption_kwh),
            price=round_half_away(price),
            cost=round_half_away(cost),
        ))

    # String sort, valid for same-offset single-day profiles
    timestamps = sorted(p.timestamp for p in profile)

    result = SettlementResult(
        period_from=timestamps[0],
        period_to=timestamps[-1],
        total_kwh=round_half_away(total_kwh),
        total_cost=round_half_away(total_cost),
        hourly_breakdown=tuple(breakdown),
        pv_offset_pct=pv_offset_pct,
        area=price_reference.area.value,
        price_source=price_reference.source(),
    )
    logger.info(
        f"Settled {len(profile)} hours for {price_reference.area.value}: "
        f"{result.total_kwh} kWh, ¥{result.total_cost}"
    )
    return result
