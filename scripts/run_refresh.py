#!/usr/bin/env python3
"""
Run one tennis data refresh from the command line.

Examples:
    python scripts/run_refresh.py
    python scripts/run_refresh.py --empty-result-policy snapshot --metrics-json logs/refresh.json
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from courtside.config import settings
from courtside.logging_setup import configure_logging
from courtside.services import RefreshPipeline


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch ATP data and refresh the dashboard tables.")
    parser.add_argument(
        "--empty-result-policy",
        choices=["empty", "snapshot"],
        default=None,
        help="What to write when a source yields nothing. Default: settings value.",
    )
    parser.add_argument(
        "--fabricate-matches",
        action="store_true",
        help="Generate synthetic fixtures from the ranked players.",
    )
    parser.add_argument(
        "--estimate-matches-today",
        action="store_true",
        help="Fill statistics.matches_today with a random estimate.",
    )
    parser.add_argument(
        "--metrics-json",
        default=None,
        help="Write the run summary JSON to this path.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run.",
    )
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    configure_logging(level=args.log_level)

    overrides: dict[str, Any] = {}
    if args.empty_result_policy:
        overrides["empty_result_policy"] = args.empty_result_policy
    if args.fabricate_matches:
        overrides["fabricate_matches"] = True
    if args.estimate_matches_today:
        overrides["estimate_matches_today"] = True
    config = settings.model_copy(update=overrides) if overrides else settings

    summary = await RefreshPipeline(config=config).run()
    payload = summary.to_dict()

    if args.metrics_json:
        _write_json(Path(args.metrics_json), payload)
    else:
        print(json.dumps(payload, indent=2))

    failed = [t["table"] for t in payload["tables"] if not t["ok"]]
    print(f"Refresh {summary.run_id} finished: {summary.message}", file=sys.stderr)
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
