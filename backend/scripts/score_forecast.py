#!/usr/bin/env python3
"""Score sunrises and sunsets from a saved Open-Meteo forecast response.

The response must have been fetched with ``timeformat=unixtime`` and include
the hourly cloud cover / relative humidity / visibility variables and the
daily ``sunrise``/``sunset`` arrays.

Usage:
    python scripts/score_forecast.py forecast.json
    python scripts/score_forecast.py forecast.json --now 1700000000 --json
"""

import argparse
import json
import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.forecast import DailySunTable, WeatherBundle
from services.forecast_quality_service import ForecastQualityService
from utils.config_loader import load_scoring_algorithm

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _format_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, UTC).strftime("%a %d %b %H:%M UTC")


def main():
    parser = argparse.ArgumentParser(description="Score sunrise/sunset quality")
    parser.add_argument("forecast", help="Path to an Open-Meteo JSON response")
    parser.add_argument(
        "--now", type=int, default=None, help="Reference UNIX time (default: now)"
    )
    parser.add_argument(
        "--margin-minutes",
        type=int,
        default=30,
        help="Keep scoring an event this long after it starts",
    )
    parser.add_argument("--days", type=int, default=7, help="Upcoming days to score")
    parser.add_argument(
        "--threshold", type=float, default=0.7, help="Notify threshold (0-1)"
    )
    parser.add_argument("--config", help="Scoring config JSON file")
    parser.add_argument("--json", action="store_true", help="Print JSON output")
    args = parser.parse_args()

    with open(args.forecast) as f:
        payload = json.load(f)

    bundle = WeatherBundle.from_open_meteo(payload)
    daily = DailySunTable.from_open_meteo(payload)
    logger.info(
        f"Loaded {len(bundle)} hourly samples ({', '.join(bundle.variables)}) "
        f"and {len(daily.time)} days"
    )

    service = ForecastQualityService(load_scoring_algorithm(args.config))
    now = args.now if args.now is not None else int(time.time())
    result = service.forecast(
        bundle, daily, now=now, margin_seconds=args.margin_minutes * 60, days=args.days
    )

    if args.json:
        output = result.model_dump(mode="json")
        output["should_notify"] = result.should_notify(args.threshold)
        print(json.dumps(output, indent=2))
        return

    current = result.current
    print(
        f"Next {current.event.type} ({_format_time(current.event.timestamp)}): "
        f"{current.quality:.2f}"
    )
    for line in result.assessment.explanation:
        print(f"  {line}")
    for item in result.assessment.breakdown:
        print(f"  {item.key:<12} score={item.score:.2f} share={item.share:.2f}")
    if result.should_notify(args.threshold):
        print(f"  Meets notify threshold of {args.threshold:.2f}")

    if result.upcoming:
        print("\nUpcoming:")
        for forecast in result.upcoming:
            print(
                f"  {forecast.event.type:<8} {_format_time(forecast.event.timestamp)}  "
                f"{forecast.quality:.2f}"
            )


if __name__ == "__main__":
    main()
