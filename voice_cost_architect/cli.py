#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Voice Cost Architect – CLI

Flow:
- Loads the stacks to compare from a YAML/JSON stack file, or uses the four
  preset stacks (Pipecat/LiveKit x Cloud/Self-host).
- Prices every visible stack at the requested monthly volume with the static
  rate snapshot (no network access).
- Optionally adds the cost curve over chart ticks and the App Service vs AKS
  self-hosting recommendation.
- Renders a Markdown comparison report (or JSON) to the terminal or a file.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from .charge_models.capacity import recommend_self_hosting
from .config import (
    CURRENCY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CHART_MINUTES,
    DEFAULT_MONTHLY_MINUTES,
    DEFAULT_OUTPUT_FORMAT,
)
from .pricing.engine import compare_stacks, compute, generate_chart_data
from .pricing.rates import DEFAULT_RATE_TABLE
from .reporting.format import render_recommendation, render_report
from .reporting.tables import render_series_table
from .stacks import StackIdGenerator, default_stacks, load_stack_file

console = Console()


# --------------------------------------------------------------------
# Argument parsing
# --------------------------------------------------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="voice-cost",
        description=(
            "Voice Cost Architect – monthly cost comparison for voice-agent stacks\n\n"
            "Prices each stack (platform, hosting, pipeline, provider models, call and\n"
            "recording modes) from a versioned rate snapshot and picks the cheapest\n"
            "plan or tier wherever a provider offers several."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--stacks",
        type=str,
        default=None,
        help="YAML/JSON stack file. Without it the four preset stacks are priced.",
    )
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help=f"Monthly session minutes (falls back to the stack file, then {DEFAULT_MONTHLY_MINUTES}).",
    )
    parser.add_argument(
        "--series",
        action="store_true",
        help="Also price every stack over the chart ticks up to --max-minutes.",
    )
    parser.add_argument(
        "--max-minutes",
        type=int,
        default=DEFAULT_MAX_CHART_MINUTES,
        help="Upper end of the cost curve (used with --series).",
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Include every line item with its formula and source in the report.",
    )
    parser.add_argument(
        "--recommend-hosting",
        action="store_true",
        help="Recommend App Service vs AKS for self-hosting at this volume.",
    )
    parser.add_argument(
        "--output-format",
        choices=["markdown", "json"],
        default=DEFAULT_OUTPUT_FORMAT,
        help="Report format.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the report to this file instead of the terminal.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser.parse_args(argv)


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    sys.exit(2)


def _build_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    logger = logging.getLogger("voice_cost_architect")
    logger.debug("CLI arguments: %s", args)

    ids = StackIdGenerator()
    file_minutes: Optional[int] = None
    try:
        if args.stacks:
            stack_file = load_stack_file(args.stacks, ids=ids)
            stacks = stack_file.stacks
            file_minutes = stack_file.monthly_minutes
            logger.info("Loaded %d stacks from %s", len(stacks), stack_file.source_file)
        else:
            stacks = default_stacks(ids)
    except (OSError, ValueError, yaml.YAMLError) as ex:
        _fail(f"Invalid stack file: {ex}")
        return

    minutes = args.minutes if args.minutes is not None else file_minutes
    if minutes is None:
        minutes = DEFAULT_MONTHLY_MINUTES
    if minutes < 0:
        _fail(f"--minutes cannot be negative, got {minutes}")
        return
    if args.max_minutes < 0:
        _fail(f"--max-minutes cannot be negative, got {args.max_minutes}")
        return

    visible = [s for s in stacks if s.visible]
    if not visible:
        _fail("No visible stacks to compare.")
        return

    summaries = compare_stacks(stacks, minutes)
    breakdowns = {s.id: compute(s, minutes) for s in visible}
    for b in breakdowns.values():
        for w in b.warnings:
            logger.warning("%s: %s", b.stack_id, w)

    series = {s.label: generate_chart_data(s, args.max_minutes) for s in visible} if args.series else {}
    recommendation = recommend_self_hosting(minutes) if args.recommend_hosting else None

    if args.output_format == "json":
        payload: Dict[str, Any] = {
            "monthly_minutes": minutes,
            "currency": CURRENCY,
            "rates_version": DEFAULT_RATE_TABLE.version,
            "summary": [asdict(s) for s in summaries],
            "stacks": [breakdowns[s.id].to_dict() for s in visible],
        }
        if args.series:
            payload["series"] = {label: [asdict(p) for p in points] for label, points in series.items()}
        if recommendation is not None:
            payload["self_hosting"] = {
                "profile": recommendation.profile.id,
                "monthly_cost": recommendation.monthly_cost,
                "reason": recommendation.reason,
                "alternative_when": recommendation.alternative_when,
            }
        report = _build_json(payload)
    else:
        sections = [
            "# Voice agent cost comparison",
            "",
            render_report(breakdowns, summaries, minutes, include_details=args.details),
        ]
        if args.series:
            sections += ["", f"## Cost curve (up to {args.max_minutes:,} min/mo)", "", render_series_table(series)]
        if args.recommend_hosting:
            sections += ["", "## Self-hosting recommendation", "", render_recommendation(recommendation, minutes)]
        report = "\n".join(sections)

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(report, encoding="utf-8")
        console.print(f"[green]Saved report to {escape(str(out_path))}[/green]")
        logger.info("Report written to %s", out_path)
        return

    if args.output_format == "json":
        console.print_json(report)
    else:
        console.rule("[bold green]Cost Report[/bold green]")
        console.print(Markdown(report))


if __name__ == "__main__":
    main()
