"""
Constants for the JEPX trading signals engine.

Centralizes magic numbers and configuration values.
"""

# Time
HOURS_PER_DAY = 24

# Arbitrage detection
BUY_THRESHOLD_RATIO = 0.85  # buy below 85% of the daily average
SELL_THRESHOLD_RATIO = 1.15  # sell above 115% of the daily average
LOOKAHEAD_HOURS = 12
PROFIT_SCALE = 1000  # JPY/kWh spread -> JPY per MWh traded
HIGH_CONFIDENCE_RATIO = 0.20
MEDIUM_CONFIDENCE_RATIO = 0.10
DEFAULT_SPREAD_YEN_PER_KWH = 5.0

# Load shifting
SHIFT_CANDIDATE_HOURS = 6
SHIFT_FRACTION = 0.10  # shift 10% of the high-price load
MIN_SHIFT_DISTANCE_HOURS = 2
CARBON_SCALE = 0.001  # MW * gCO2/kWh -> kg CO2
DEFAULT_CARBON_INTENSITY = 300.0  # gCO2/kWh

# Feasibility scoring
TIME_PENALTY_PER_HOUR = 5
SMALL_SHIFT_MW = 1000
MEDIUM_SHIFT_MW = 5000
NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 6
NIGHT_BONUS = 20
FEASIBILITY_DIVISOR = 2.2
PRIORITY_FEASIBILITY = 70
TOP_N = 5

# Savings priority thresholds (JPY)
HIGH_PRIORITY_SAVINGS = 100_000
MEDIUM_PRIORITY_SAVINGS = 50_000

# Battery projection
KWH_PER_MWH = 1000
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365
BATTERY_SIZE_PER_SPREAD = 10  # MWh per JPY/kWh of peak spread

# Settlement
ROUNDING_DECIMALS = 1
BASE_PRICE_YEN_PER_KWH = {'tokyo': 30.0, 'kansai': 28.0}
NIGHT_MULTIPLIER = 0.7  # [0, 6)
DAY_MULTIPLIER = 1.3  # [9, 20)
SHOULDER_MULTIPLIER = 0.9
MOCK_SOURCE_NAME = 'JEPX (Mock)'

# Generation mix emission factors (gCO2/kWh)
EMISSION_FACTORS = {'lng_mw': 350.0, 'coal_mw': 850.0, 'other_mw': 500.0}
