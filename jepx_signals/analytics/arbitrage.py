"""
Arbitrage Opportunity Detection.

Flags hours whose price deviates from the daily average by more than 15%
and pairs each one with the best opposite price in the following 12 hours.

Algorithm: O(n * k) where k is the look-ahead window
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from jepx_signals.constants import (
    BUY_THRESHOLD_RATIO,
    DEFAULT_SPREAD_YEN_PER_KWH,
    HIGH_CONFIDENCE_RATIO,
    LOOKAHEAD_HOURS,
    MEDIUM_CONFIDENCE_RATIO,
    PROFIT_SCALE,
    SELL_THRESHOLD_RATIO,
)
from jepx_signals.exceptions import ValidationError
from jepx_signals.models import ArbitrageOpportunity, Confidence, Signal
from jepx_signals.rounding import round_whole

logger = logging.getLogger(__name__)


def classify_signal(price: float, avg_price: float) -> Signal:
    """Classify a price against the daily average."""
    if price < avg_price * BUY_THRESHOLD_RATIO:
        return Signal.BUY
    if price > avg_price * SELL_THRESHOLD_RATIO:
        return Signal.SELL
    return Signal.HOLD


def classify_confidence(spread: float, avg_price: float) -> Confidence:
    """Grade a spread by its size relative to the daily average."""
    if spread > avg_price * HIGH_CONFIDENCE_RATIO:
        return Confidence.HIGH
    if spread > avg_price * MEDIUM_CONFIDENCE_RATIO:
        return Confidence.MEDIUM
    return Confidence.LOW


def find_target(
    prices: np.ndarray,
    i: int,
    signal: Signal,
    window_size: int = LOOKAHEAD_HOURS
) -> int:
    """
    Find the index of the best exit price after position ``i``.

    Args:
        prices: Array of prices
        i: Index of the signal hour
        signal: BUY looks for the highest later price, SELL for the lowest
        window_size: Number of following points to search

    Returns:
        Index of the target point, or ``i`` itself when nothing follows
    """
    window = prices[i + 1:i + 1 + window_size]
    if len(window) == 0:
        return i
    # argmax/argmin return the first occurrence on ties
    offset = int(np.argmax(window)) if signal is Signal.BUY else int(np.argmin(window))
    return i + 1 + offset


def deviation_pct(current_price: float, avg_price: float) -> int:
    """Absolute deviation from the average in whole percent."""
    if avg_price == 0:
        return 0
    return round_whole(abs(current_price / avg_price - 1) * 100)


def generate_recommendation(signal: Signal, spread: float, hour: int) -> str:
    """One-line trading instruction for a signal hour."""
    if signal is Signal.BUY:
        return (
            f"Buy at {hour}:00. Price {spread:.2f} JPY/kWh below later peak. "
            "Sell when prices recover."
        )
    return (
        f"Sell at {hour}:00. Price {spread:.2f} JPY/kWh above later trough. "
        "Buy back when prices drop."
    )


def generate_reasoning(
    signal: Signal,
    current_price: float,
    avg_price: float,
    spread: float
) -> Tuple[str, ...]:
    """Ordered supporting statements for a signal."""
    pct = deviation_pct(current_price, avg_price)
    strong = spread > avg_price * HIGH_CONFIDENCE_RATIO

    if signal is Signal.BUY:
        reasons = [
            f"Current price (¥{current_price:.2f}/kWh) is {pct}% below daily average",
            "Expected price recovery creates arbitrage opportunity",
        ]
        if strong:
            reasons.append("Large price deviation indicates strong opportunity")
    else:
        reasons = [
            f"Current price (¥{current_price:.2f}/kWh) is {pct}% above daily average",
            "Expected price normalization creates selling opportunity",
        ]
        if strong:
            reasons.append("Price spike provides favorable selling conditions")

    return tuple(reasons)


def detect_arbitrage_opportunities(
    df: pd.DataFrame,
    window_size: int = LOOKAHEAD_HOURS
) -> List[ArbitrageOpportunity]:
    """
    Detect buy/sell opportunities in one area's daily price series.

    Args:
        df: DataFrame with TIMESTAMP, HOUR and PRICE columns
        window_size: Look-ahead window in points

    Returns:
        Actionable opportunities in input order (hold hours dropped)

    Raises:
        ValidationError: If the series is empty
    """
    if df is None or len(df) == 0:
        raise ValidationError("price series cannot be empty")

    prices = df['PRICE'].to_numpy(dtype=float)
    timestamps = df['TIMESTAMP'].to_numpy()
    hours = df['HOUR'].to_numpy()
    avg_price = float(np.mean(prices))

    opportunities = []

    for i in range(len(prices)):
        current = float(prices[i])
        signal = classify_signal(current, avg_price)
        if signal is Signal.HOLD:
            continue

        target_idx = find_target(prices, i, signal, window_size)
        target = float(prices[target_idx])
        spread = abs(target - current)
        hour = int(hours[i])

        opportunities.append(ArbitrageOpportunity(
            timestamp=str(timestamps[i]),
            hour=hour,
            signal=signal,
            current_price=current,
            target_price=target,
            spread=spread,
            expected_profit=spread * PROFIT_SCALE,
            confidence=classify_confidence(spread, avg_price),
            recommendation=generate_recommendation(signal, spread, hour),
            reasoning=generate_reasoning(signal, current, avg_price, spread),
        ))

    logger.info(
        f"Detected {len(opportunities)} opportunities in {len(prices)} hours "
        f"(avg ¥{avg_price:.2f}/kWh)"
    )
    return opportunities


def average_spread(
    opportunities: Sequence[ArbitrageOpportunity],
    default: float = DEFAULT_SPREAD_YEN_PER_KWH
) -> Tuple[float, str]:
    """
    Mean spread across detected opportunities.

    Returns:
        Tuple of (spread, source) where source is 'opportunities', or
        'default' when the list is empty and the fallback spread is used
    """
    if not opportunities:
        logger.warning(f"No opportunities detected, using default spread {default} JPY/kWh")
        return default, 'default'
    return float(np.mean([o.spread for o in opportunities])), 'opportunities'
