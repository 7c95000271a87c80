"""
JEPX trading signals: arbitrage detection, load-shift planning, battery
ROI projection and settlement cost calculation over hourly price and
demand series.
"""

__version__ = '1.0.0'
