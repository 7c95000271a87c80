"""
JEPX Trading Signals - Main Entry Point

Runs arbitrage detection, load-shift planning, battery ROI projection and
settlement over the JSON artifacts produced by the data acquisition jobs.
"""

import json
import logging
import sys
from pathlib import Path

from jepx_signals.analytics import (
    PriceReference,
    detect_arbitrage_opportunities,
    plan_load_shifts,
    project_from_opportunities,
    settle,
)
from jepx_signals.carbon import carbon_intensity_by_hour
from jepx_signals.config import get_settings
from jepx_signals.data_loader import (
    demand_to_profile,
    get_price_statistics,
    load_consumption_profile,
    load_demand_file,
    load_price_file,
    read_json,
    require_valid,
    validate_series,
)
from jepx_signals.exceptions import JepxSignalsError
from jepx_signals.metrics import best_opportunities, priority_load_shifts, summarize
from jepx_signals.models import area_from_name, export_all

logger = logging.getLogger(__name__)


def print_header(text: str):
    """Print formatted header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def print_section(text: str):
    """Print section divider."""
    print(f"\n--- {text} ---")


def run_analysis(
    prices_path: str,
    area: str = "tokyo",
    date: str = "",
    demand_path: str = None,
    generation_path: str = None,
    profile_path: str = None,
    pv_offset_pct: float = 0.15,
    capacity_mwh: float = 10.0,
    cycles_per_day: float = 1.0,
    efficiency: float = 0.90,
    capital_cost: float = 100_000_000,
    output_path: str = None
) -> dict:
    area_enum = area_from_name(area)

    print_header("JEPX TRADING SIGNALS")
    print(f"\n  Area: {area_enum.value}")
    print(f"  Date: {date or 'n/a'}")

    print_section("Loading Data")
    prices = require_valid(load_price_file(prices_path), 'PRICE', name='price')
    validation = validate_series(prices, 'PRICE')
    print(f"  Price points: {validation['row_count']}")
    print(f"  Range: {validation['date_range'][0]} to {validation['date_range'][1]}")

    demand = None
    if demand_path:
        demand = require_valid(load_demand_file(demand_path), 'DEMAND_MW', name='demand')
        print(f"  Demand points: {len(demand)}")

    carbon = carbon_intensity_by_hour(_series(read_json(generation_path))) if generation_path else None

    stats = get_price_statistics(prices)
    if stats['count']:
        print_section("Price Statistics")
        print(f"  Mean: ¥{stats['avg_price']:.2f}/kWh")
        print(f"  Min:  ¥{stats['min_price']:.2f}/kWh")
        print(f"  Max:  ¥{stats['max_price']:.2f}/kWh")

    print_section("Arbitrage Opportunities")
    opportunities = detect_arbitrage_opportunities(prices)
    for opp in best_opportunities(opportunities):
        print(f"  {opp.hour:>2}:00 {opp.signal.value:<4} spread ¥{opp.spread:.2f} ({opp.confidence.value})")

    recommendations, load_profile = [], []
    if demand is not None:
        print_section("Load Shift Recommendations")
        recommendations, load_profile = plan_load_shifts(prices, demand, carbon)
        for rec in priority_load_shifts(recommendations):
            print(f"  {rec.reason} saves ¥{rec.savings:,.0f} (feasibility {rec.feasibility})")

    print_section("Battery ROI")
    roi = project_from_opportunities(opportunities, capacity_mwh, cycles_per_day, efficiency, capital_cost)
    print(f"  Spread used: ¥{roi.average_spread:.2f}/kWh ({roi.spread_source})")
    print(f"  Yearly profit: ¥{roi.yearly_profit:,.1f}")
    print(f"  Payback: {roi.payback_years} years, ROI {roi.roi_pct}%")

    settlement = None
    if profile_path or demand is not None:
        print_section("Settlement")
        if profile_path:
            profile = load_consumption_profile(_series(read_json(profile_path), 'profile'))
        else:
            profile = demand_to_profile(demand)
        reference = PriceReference(area=area_enum, date=date, prices=prices)
        settlement = settle(profile, reference, pv_offset_pct)
        print(f"  Period: {settlement.period_from} to {settlement.period_to}")
        print(f"  Total kWh: {settlement.total_kwh:,.1f}")
        print(f"  Total cost: ¥{settlement.total_cost:,.1f}")

    metrics = summarize(opportunities, recommendations)

    report = {
        'area': area_enum.value,
        'date': date,
        'priceStats': stats,
        'opportunities': export_all(opportunities),
        'loadShiftRecommendations': export_all(recommendations),
        'loadProfile': export_all(load_profile),
        'batteryROI': roi.to_dict(),
        'settlement': settlement.to_dict() if settlement else None,
        'metrics': metrics.to_dict() if metrics else None,
    }

    if output_path:
        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        print(f"\n  Exported report to {output}")

    print_header("ANALYSIS COMPLETE")
    return report


def _series(data, key: str = 'series'):
    """Accept either a wrapped response object or a bare record list."""
    if isinstance(data, dict):
        return data.get(key, [])
    return data


def main():
    """Main entry point with command line support."""
    import argparse

    parser = argparse.ArgumentParser(
        description="JEPX Trading Signals - arbitrage, load shift, battery ROI and settlement"
    )
    parser.add_argument(
        "--prices", "-p",
        required=True,
        help="Path to JEPX spot price JSON"
    )
    parser.add_argument(
        "--area", "-a",
        default="tokyo",
        help="Price area (tokyo or kansai)"
    )
    parser.add_argument(
        "--date",
        default="",
        help="Trading date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--demand", "-d",
        default=None,
        help="Path to demand JSON (enables load shift planning)"
    )
    parser.add_argument(
        "--generation", "-g",
        default=None,
        help="Path to generation mix JSON (hourly carbon intensity)"
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Path to consumption profile JSON for settlement"
    )
    parser.add_argument(
        "--pv",
        type=float, default=0.15,
        help="PV offset share of consumption (0.0-1.0)"
    )
    parser.add_argument(
        "--capacity", "-c",
        type=float, default=10.0,
        help="Battery capacity in MWh"
    )
    parser.add_argument(
        "--cycles",
        type=float, default=1.0,
        help="Battery cycles per day"
    )
    parser.add_argument(
        "--efficiency", "-e",
        type=float, default=0.90,
        help="Round-trip efficiency (0.0-1.0)"
    )
    parser.add_argument(
        "--capital-cost",
        type=float, default=100_000_000,
        help="Battery capital cost in JPY"
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the export JSON report to this path"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        run_analysis(
            prices_path=args.prices,
            area=args.area,
            date=args.date,
            demand_path=args.demand,
            generation_path=args.generation,
            profile_path=args.profile,
            pv_offset_pct=args.pv,
            capacity_mwh=args.capacity,
            cycles_per_day=args.cycles,
            efficiency=args.efficiency,
            capital_cost=args.capital_cost,
            output_path=args.output
        )
    except (JepxSignalsError, FileNotFoundError, json.JSONDecodeError, KeyError) as e:
        logger.error(f"Analysis failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
