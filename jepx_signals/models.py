"""
Value objects produced by the analytics engine.

Every result is a frozen dataclass built by a pure function. The
``to_dict`` methods emit the export shapes consumed by dashboards and
reports.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from jepx_signals.exceptions import ValidationError
from jepx_signals.rounding import round_whole


class Signal(str, Enum):
    BUY = 'buy'
    SELL = 'sell'
    HOLD = 'hold'


class Confidence(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


class Priority(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


class Area(str, Enum):
    TOKYO = 'tokyo'
    KANSAI = 'kansai'


@dataclass(frozen=True)
class ConsumptionPoint:
    """One hour of metered consumption."""
    timestamp: str
    consumption_kwh: float


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """
    A buy or sell signal for one hour of the price series.

    Attributes:
        timestamp: ISO8601 timestamp of the signal hour
        hour: Hour of day (0-23)
        signal: BUY or SELL (HOLD points are never emitted)
        current_price: Price at the signal hour (JPY/kWh)
        target_price: Best opposite price in the look-ahead window
        spread: |target_price - current_price|
        expected_profit: spread scaled to JPY per MWh
        confidence: Spread size relative to the daily average
        recommendation: One-line trading instruction
        reasoning: Ordered supporting statements
    """
    timestamp: str
    hour: int
    signal: Signal
    current_price: float
    target_price: float
    spread: float
    expected_profit: float
    confidence: Confidence
    recommendation: str
    reasoning: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'time': self.timestamp,
            'hour': self.hour,
            'type': self.signal.value,
            'currentPrice': self.current_price,
            'targetPrice': self.target_price,
            'spread': self.spread,
            'expectedProfit': round_whole(self.expected_profit),
            'confidence': self.confidence.value,
            'recommendation': self.recommendation,
            'reasoning': list(self.reasoning),
        }


@dataclass(frozen=True)
class LoadProfileEntry:
    """Price, load and carbon intensity for one hour."""
    hour: int
    current_load: float  # MW
    price: float  # JPY/kWh
    carbon_intensity: float  # gCO2/kWh

    def to_dict(self) -> dict:
        return {
            'hour': self.hour,
            'currentLoad': self.current_load,
            'price': self.price,
            'carbonIntensity': self.carbon_intensity,
        }


@dataclass(frozen=True)
class LoadShiftRecommendation:
    """A proposal to move part of a high-price hour's load to a cheaper hour."""
    id: str
    from_hour: int
    to_hour: int
    shift_amount: float  # MW
    current_cost: float  # JPY
    optimized_cost: float  # JPY
    savings: float  # JPY
    carbon_reduction: float  # kg CO2
    feasibility: int  # 0-100
    priority: Priority
    reason: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'fromHour': self.from_hour,
            'toHour': self.to_hour,
            'amountMW': round_whole(self.shift_amount),
            'currentCost': round_whole(self.current_cost),
            'optimizedCost': round_whole(self.optimized_cost),
            'savings': round_whole(self.savings),
            'carbonReduction': round_whole(self.carbon_reduction),
            'feasibility': self.feasibility,
            'priority': self.priority.value,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class BatteryROI:
    """Payback projection for a battery sized to trade the detected spread."""
    capacity_mwh: float
    cycles_per_day: float
    efficiency: float
    capital_cost: float
    daily_profit: float
    monthly_profit: float
    yearly_profit: float
    payback_years: float  # inf when the battery never earns
    roi_pct: float
    average_spread: float
    spread_source: str = 'explicit'

    def to_dict(self) -> dict:
        return {
            'batteryCapacityMWh': self.capacity_mwh,
            'cyclesPerDay': self.cycles_per_day,
            'efficiency': self.efficiency,
            'capitalCostJPY': self.capital_cost,
            'dailyProfitJPY': self.daily_profit,
            'monthlyProfitJPY': self.monthly_profit,
            'yearlyProfitJPY': self.yearly_profit,
            # null when the battery never pays back
            'paybackYears': None if math.isinf(self.payback_years) else self.payback_years,
            'roi': self.roi_pct,
        }


@dataclass(frozen=True)
class HourlyCost:
    timestamp: str
    consumption_kwh: float
    price: float
    cost: float

    def to_dict(self) -> dict:
        return {
            'ts': self.timestamp,
            'kwh': self.consumption_kwh,
            'price': self.price,
            'cost': self.cost,
        }


@dataclass(frozen=True)
class SettlementResult:
    """Billable cost of a consumption profile against a price reference."""
    period_from: str
    period_to: str
    total_kwh: float
    total_cost: float
    hourly_breakdown: Tuple[HourlyCost, ...]
    pv_offset_pct: float
    area: str
    price_source: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'period': {'from': self.period_from, 'to': self.period_to},
            'totals': {'kwh': self.total_kwh, 'cost_yen': self.total_cost},
            'by_hour': [h.to_dict() for h in self.hourly_breakdown],
            'assumptions': {'pv_offset_pct': self.pv_offset_pct, 'area': self.area},
            'source_prices': dict(self.price_source),
        }


@dataclass(frozen=True)
class TradingMetrics:
    """Dashboard summary across one analysis run."""
    total_opportunities: int
    estimated_daily_savings: float
    estimated_monthly_savings: float
    carbon_reduction_potential: float
    optimal_battery_size: int
    average_arbitrage_spread: float

    def to_dict(self) -> dict:
        return {
            'totalOpportunities': self.total_opportunities,
            'estimatedDailySavings': self.estimated_daily_savings,
            'estimatedMonthlySavings': self.estimated_monthly_savings,
            'carbonReductionPotential': self.carbon_reduction_potential,
            'optimalBatterySize': self.optimal_battery_size,
            'averageArbitrageSpread': self.average_arbitrage_spread,
        }


def export_all(items: List) -> List[dict]:
    """Export a list of value objects, preserving order."""
    return [item.to_dict() for item in items]


def area_from_name(name: Optional[str]) -> Area:
    """Parse an area name, raising ValidationError for unknown areas."""
    try:
        return Area((name or '').strip().lower())
    except ValueError:
        valid = ', '.join(a.value for a in Area)
        raise ValidationError(f"Unknown area {name!r} (expected one of: {valid})") from None
