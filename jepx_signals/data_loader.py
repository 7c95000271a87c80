"""
Data loader module for JEPX price, demand and consumption series.

Converts the record shapes handed over by the acquisition layer into
pandas DataFrames (or value objects) the analytics modules operate on.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from jepx_signals.constants import KWH_PER_MWH
from jepx_signals.exceptions import ValidationError
from jepx_signals.models import ConsumptionPoint

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ['TIMESTAMP', 'DATETIME', 'HOUR', 'PRICE']
DEMAND_COLUMNS = ['TIMESTAMP', 'DATETIME', 'HOUR', 'DEMAND_MW', 'FORECAST_MW']


def _parse_timestamps(df: pd.DataFrame) -> pd.DataFrame:
    """Add DATETIME and HOUR columns from the raw ISO8601 TIMESTAMP strings."""
    # Each timestamp keeps its own offset; HOUR is the local wall-clock hour
    df['DATETIME'] = [pd.Timestamp(ts) for ts in df['TIMESTAMP']]
    df['HOUR'] = [ts.hour for ts in df['DATETIME']]
    return df


def load_price_series(records: Iterable[Dict]) -> pd.DataFrame:
    """
    Build a price frame from ``{ts, price}`` records.

    Args:
        records: Hourly price entries in time order

    Returns:
        DataFrame with columns: TIMESTAMP, DATETIME, HOUR, PRICE
    """
    rows = [{'TIMESTAMP': str(r['ts']), 'PRICE': r['price']} for r in records]
    if not rows:
        return pd.DataFrame(columns=PRICE_COLUMNS)

    df = pd.DataFrame(rows)
    df['PRICE'] = pd.to_numeric(df['PRICE'], errors='coerce')
    df = _parse_timestamps(df)
    return df[PRICE_COLUMNS]


def load_demand_series(records: Iterable[Dict]) -> pd.DataFrame:
    """
    Build a demand frame from ``{ts, demand_mw, forecast_mw?}`` records.

    Returns:
        DataFrame with columns: TIMESTAMP, DATETIME, HOUR, DEMAND_MW, FORECAST_MW
    """
    rows = [
        {
            'TIMESTAMP': str(r['ts']),
            'DEMAND_MW': r['demand_mw'],
            'FORECAST_MW': r.get('forecast_mw'),
        }
        for r in records
    ]
    if not rows:
        return pd.DataFrame(columns=DEMAND_COLUMNS)

    df = pd.DataFrame(rows)
    df['DEMAND_MW'] = pd.to_numeric(df['DEMAND_MW'], errors='coerce')
    df['FORECAST_MW'] = pd.to_numeric(df['FORECAST_MW'], errors='coerce')
    df = _parse_timestamps(df)
    return df[DEMAND_COLUMNS]


def load_consumption_profile(records: Iterable[Dict]) -> List[ConsumptionPoint]:
    """
    Build a consumption profile from ``{ts, kwh}`` records.

    Raises:
        ValidationError: If a record has an unparseable timestamp or a
            negative or non-numeric kwh value
    """
    profile = []
    for record in records:
        try:
            parsed = pd.Timestamp(str(record['ts']))
        except ValueError:
            parsed = pd.NaT
        if parsed is pd.NaT:
            raise ValidationError(f"Invalid timestamp in consumption profile: {record['ts']!r}")
        try:
            kwh = float(record['kwh'])
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid kwh value for {record.get('ts')}: {record['kwh']!r}") from None
        if kwh < 0:
            raise ValidationError(f"Consumption cannot be negative ({record.get('ts')}: {kwh})")
        profile.append(ConsumptionPoint(timestamp=str(record['ts']), consumption_kwh=kwh))
    return profile


def read_json(filepath: Union[str, Path]):
    """Read a JSON artifact written by the acquisition layer."""
    with open(filepath, encoding='utf-8') as f:
        return json.load(f)


def load_price_file(filepath: Union[str, Path]) -> pd.DataFrame:
    """
    Load a JEPX spot price artifact.

    Accepts either the full response (``{"price_yen_per_kwh": [...]}``) or a
    bare list of ``{ts, price}`` records.
    """
    data = read_json(filepath)
    if isinstance(data, dict):
        data = data.get('price_yen_per_kwh', [])
    df = load_price_series(data)
    logger.info(f"Loaded {len(df)} price points from {filepath}")
    return df


def load_demand_file(filepath: Union[str, Path]) -> pd.DataFrame:
    """Load a demand artifact (``{"series": [...]}`` or a bare record list)."""
    data = read_json(filepath)
    if isinstance(data, dict):
        data = data.get('series', [])
    df = load_demand_series(data)
    logger.info(f"Loaded {len(df)} demand points from {filepath}")
    return df


def demand_to_profile(demand_df: pd.DataFrame) -> List[ConsumptionPoint]:
    """
    Convert an hourly demand series (MW) into a consumption profile (kWh).

    One hour at X MW is X MWh, i.e. X * 1000 kWh. Missing demand counts as 0.
    """
    demand = demand_df['DEMAND_MW'].fillna(0)
    return [
        ConsumptionPoint(timestamp=ts, consumption_kwh=float(mw) * KWH_PER_MWH)
        for ts, mw in zip(demand_df['TIMESTAMP'], demand)
    ]


def get_price_statistics(df: pd.DataFrame) -> dict:
    """
    Calculate summary statistics for price data.

    Args:
        df: DataFrame with PRICE column

    Returns:
        Dictionary of statistics (empty series yields count 0 and None values)
    """
    prices = df['PRICE']

    if len(prices) == 0:
        return {'count': 0, 'min_price': None, 'max_price': None, 'avg_price': None}

    return {
        'count': len(prices),
        'min_price': float(prices.min()),
        'max_price': float(prices.max()),
        'avg_price': float(prices.mean()),
    }


def validate_series(df: pd.DataFrame, value_column: str = 'PRICE') -> dict:
    """
    Validate series quality and return a report.

    Args:
        df: Price or demand frame
        value_column: Numeric column to check (PRICE or DEMAND_MW)

    Returns:
        Dictionary with validation results
    """
    issues = []

    # Check for required columns
    required_cols = ['TIMESTAMP', 'DATETIME', 'HOUR', value_column]
    missing_cols = [col for col in required_cols if col not in df.columns]
    if missing_cols:
        issues.append(f"Missing columns: {missing_cols}")
        return {'valid': False, 'issues': issues, 'row_count': len(df)}

    if df.empty:
        issues.append("Series is empty")

    # Check for missing or negative values
    null_count = int(df[value_column].isna().sum())
    if null_count > 0:
        issues.append(f"Missing {value_column} values: {null_count}")

    negative_count = int((df[value_column] < 0).sum())
    if negative_count > 0:
        issues.append(f"Negative {value_column} values: {negative_count}")

    # Check ordering and duplicate timestamps
    dupes = int(df.duplicated(subset=['TIMESTAMP']).sum())
    if dupes > 0:
        issues.append(f"Duplicate timestamps: {dupes}")

    if len(df) > 1:
        times = list(df['DATETIME'])
        if any(later <= earlier for earlier, later in zip(times, times[1:])):
            issues.append("Timestamps are not strictly increasing")

    return {
        'valid': len(issues) == 0,
        'issues': issues,
        'row_count': len(df),
        'date_range': (
            df['TIMESTAMP'].iloc[0] if len(df) else None,
            df['TIMESTAMP'].iloc[-1] if len(df) else None,
        ),
    }


def require_valid(df: pd.DataFrame, value_column: str = 'PRICE', name: Optional[str] = None) -> pd.DataFrame:
    """Raise ValidationError unless ``validate_series`` reports the frame valid."""
    report = validate_series(df, value_column)
    if not report['valid']:
        label = name or value_column.lower()
        raise ValidationError(f"Invalid {label} series: {'; '.join(report['issues'])}")
    return df
