"""CLI for running single-car elevator scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from cabin import ElevatorError, SleepPacer
from cabin.scenario import build_elevator, run_scenario


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write the event log and final state as JSON",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Honour the configured floor travel and door dwell pauses",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = json.loads(args.config.read_text())
    config.setdefault("name", args.config.stem)
    try:
        elevator = build_elevator(config, pacer=SleepPacer() if args.realtime else None)
        result = run_scenario(elevator, config)
    except ElevatorError as exc:
        parser.exit(2, f"error: {exc}\n")

    save_results(args.output, result.to_dict())

    print(f"Scenario: {result.name}")
    if result.description:
        print(result.description)
    print(f"Policy: {elevator.policy_name}")
    for event in result.events:
        print(f"  [{event.kind.value}] {event.message}")
    print(f"Journeys completed: {result.journeys_completed}")
    print(f"Final state: {elevator.summary()}")
    if args.output:
        print(f"Saved results to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
