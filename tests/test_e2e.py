"""
End-to-End Smoke Test.

Tests the full pipeline: JSON artifacts -> main.py -> JSON report.
This ensures the entire system works together correctly.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest


# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATE = '2025-10-23'


def ts(hour: int) -> str:
    return f"{DATE}T{hour:02d}:00:00+09:00"


class TestE2EPipeline:
    """End-to-end tests for the full analysis pipeline."""

    @pytest.fixture
    def artifacts(self, tmp_path):
        """Write price, demand and generation artifacts like the fetch jobs do."""
        prices = [18.0 if h < 6 else 42.0 if 12 <= h < 18 else 30.0 for h in range(24)]
        price_path = tmp_path / f"spot-tokyo-{DATE}.json"
        price_path.write_text(json.dumps({
            'date': DATE,
            'area': 'tokyo',
            'timescale': 'hourly',
            'price_yen_per_kwh': [{'ts': ts(h), 'price': p} for h, p in enumerate(prices)],
            'source': {'name': 'JEPX', 'url': 'https://www.jepx.jp/'},
        }))

        demand_path = tmp_path / f"demand-{DATE}.json"
        demand_path.write_text(json.dumps({
            'series': [{'ts': ts(h), 'demand_mw': 3000 + 50 * h, 'forecast_mw': 3000} for h in range(24)],
        }))

        generation_path = tmp_path / f"generation-{DATE}.json"
        generation_path.write_text(json.dumps({
            'series': [
                {'ts': ts(h), 'solar_mw': 100 * (h % 12), 'lng_mw': 1500, 'coal_mw': 800,
                 'other_mw': 200, 'total_mw': 2500 + 100 * (h % 12)}
                for h in range(24)
            ],
        }))

        return {
            'prices': price_path,
            'demand': demand_path,
            'generation': generation_path,
            'output': tmp_path / 'out' / 'report.json',
        }

    def _run(self, *args):
        return subprocess.run(
            [sys.executable, str(PROJECT_ROOT / "main.py"), *args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            env={**os.environ, "PYTHONIOENCODING": "utf-8"},
            timeout=120,
            cwd=str(PROJECT_ROOT)
        )

    def test_main_analysis_runs(self, artifacts):
        """Test that main.py runs without errors and writes the report."""
        result = self._run(
            "--prices", str(artifacts['prices']),
            "--demand", str(artifacts['demand']),
            "--generation", str(artifacts['generation']),
            "--area", "tokyo", "--date", DATE,
            "--output", str(artifacts['output']),
        )

        assert result.returncode == 0, f"main.py failed:\nSTDOUT: {result.stdout}\nSTDERR: {result.stderr}"
        assert "ANALYSIS COMPLETE" in result.stdout

        with open(artifacts['output'], encoding='utf-8') as f:
            report = json.load(f)

        for key in ['opportunities', 'loadShiftRecommendations', 'batteryROI', 'settlement', 'metrics']:
            assert key in report, f"Missing key: {key}"

        assert report['opportunities'], "Expected arbitrage opportunities"
        assert report['settlement']['totals']['kwh'] > 0
        assert report['settlement']['source_prices']['name'] == 'JEPX'
        for rec in report['loadShiftRecommendations']:
            assert abs(rec['fromHour'] - rec['toHour']) >= 2

    def test_unknown_area_exits_non_zero(self, artifacts):
        result = self._run("--prices", str(artifacts['prices']), "--area", "hokkaido")

        assert result.returncode == 1
        assert "Unknown area" in result.stderr

    def test_missing_file_exits_non_zero(self, tmp_path):
        result = self._run("--prices", str(tmp_path / "missing.json"))

        assert result.returncode == 1

    def test_malformed_json_exits_non_zero(self, tmp_path):
        price_path = tmp_path / "broken.json"
        price_path.write_text('{"price_yen_per_kwh": [')

        result = self._run("--prices", str(price_path))

        assert result.returncode == 1
        assert "Analysis failed" in result.stderr
        assert "Traceback" not in result.stderr

    def test_record_without_price_exits_non_zero(self, tmp_path):
        price_path = tmp_path / "no-price.json"
        price_path.write_text(json.dumps([{'ts': ts(0)}]))

        result = self._run("--prices", str(price_path))

        assert result.returncode == 1
        assert "Analysis failed" in result.stderr
        assert "Traceback" not in result.stderr


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
