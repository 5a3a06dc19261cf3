"""
Generate a meal schedule from JSON files and print it.

Usage
-----

    # full schedule JSON (4 weeks by default)
    python -m scripts.generate_schedule profile.json meals.json

    # reproducible run, per-week fulfilment table only
    python -m scripts.generate_schedule profile.json meals.json --weeks 2 --seed 7 --summary

`profile.json` holds one user profile object, `meals.json` a list of meals.
"""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any

from config import settings
from core.meal_scheduler import InvalidInput, MealScheduler
from core.schedule_report import fulfilment_summary


def _load_json(path: Path) -> Any:
    return json.loads(path.read_text())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("profile", type=Path, help="JSON file with the user profile")
    parser.add_argument("catalog", type=Path, help="JSON file with a list of meals")
    parser.add_argument("--weeks", type=int, default=settings.default_horizon_weeks)
    parser.add_argument("--seed", type=int, help="seed for reproducible picks")
    parser.add_argument(
        "--summary",
        action="store_true",
        help="print the per-week fulfilment table instead of the schedule",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)

    profile = _load_json(args.profile)
    catalog = _load_json(args.catalog)
    if not isinstance(catalog, list):
        parser.error("catalog file must contain a list of meal dictionaries")

    rng = random.Random(args.seed) if args.seed is not None else None
    scheduler = MealScheduler(rng=rng, top_k=settings.top_candidates)
    try:
        schedule = scheduler.generate(profile, catalog, args.weeks)
    except InvalidInput as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 1

    if args.summary:
        print(fulfilment_summary(schedule).to_string(index=False))
    else:
        print(schedule.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
