"""
Carbon intensity estimation from a generation-mix series.

Simplified emission factors (gCO2/kWh): LNG 350, coal 850, other 500.
Solar, wind, hydro and nuclear count as zero-emission.
"""

from typing import Dict, Iterable

import pandas as pd

from jepx_signals.constants import EMISSION_FACTORS


def carbon_intensity_by_hour(generation_records: Iterable[Dict]) -> Dict[int, float]:
    """
    Estimate hourly grid carbon intensity.

    Args:
        generation_records: ``{ts, solar_mw, wind_mw, ..., lng_mw, coal_mw,
            other_mw, total_mw}`` entries

    Returns:
        Mapping of hour (0-23) to gCO2/kWh. Hours with zero total generation
        are left out so callers fall back to their default.
    """
    df = pd.DataFrame(list(generation_records))
    if df.empty:
        return {}

    for column in ['total_mw', *EMISSION_FACTORS]:
        if column not in df.columns:
            df[column] = 0.0
        df[column] = pd.to_numeric(df[column], errors='coerce').fillna(0.0)

    df['hour'] = [pd.Timestamp(ts).hour for ts in df['ts']]
    df = df[df['total_mw'] > 0]

    emissions = sum(df[column] * factor for column, factor in EMISSION_FACTORS.items())
    df = df.assign(intensity=emissions / df['total_mw'])

    # Keep the first reading for each hour, matching hourly lookups elsewhere
    first = df.drop_duplicates(subset='hour', keep='first')
    return {int(h): float(v) for h, v in zip(first['hour'], first['intensity'])}
