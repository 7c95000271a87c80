from jepx_signals.analytics.arbitrage import average_spread, detect_arbitrage_opportunities
from jepx_signals.analytics.battery_roi import project_battery_roi, project_from_opportunities
from jepx_signals.analytics.load_shift import plan_load_shifts
from jepx_signals.analytics.settlement import PriceReference, settle

__all__ = [
    'average_spread',
    'detect_arbitrage_opportunities',
    'plan_load_shifts',
    'project_battery_roi',
    'project_from_opportunities',
    'PriceReference',
    'settle',
]
