"""Top-level cost aggregation.

``compute`` prices one stack at one monthly volume. It never raises for a
stack it cannot price: structural problems produce an unsupported breakdown
with a reason, and missing rates are priced at zero with a warning. Only a
caller bug (negative volume) raises.

``generate_series`` and ``compare_stacks`` are thin loops over ``compute``;
every point is computed independently.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..charge_models.registry import DEFAULT_REGISTRY, ChargeModelRegistry
from ..charge_models.types import CostBreakdown, CostLedger, CostPoint
from ..config import DEFAULT_MAX_CHART_MINUTES
from ..stacks.compatibility import check_support
from ..stacks.model import StackConfig
from .rates import DEFAULT_RATE_TABLE, RateTable

_LOGGER = logging.getLogger(__name__)

BASE_CHART_TICKS = (0, 500, 1_000, 2_000, 5_000, 10_000, 20_000, 50_000, 75_000, 100_000)
EXTRA_CHART_TICKS = (
    150_000,
    200_000,
    300_000,
    500_000,
    750_000,
    1_000_000,
    1_500_000,
    2_000_000,
    3_000_000,
    5_000_000,
    10_000_000,
)


@dataclass(frozen=True)
class Delta:
    absolute: float
    percent: float


@dataclass(frozen=True)
class StackSummary:
    stack_id: str
    label: str
    total: float
    per_minute: float
    delta_vs_cheapest: Optional[Delta]
    supported: bool = True
    unsupported_reason: Optional[str] = None


def _unsupported(stack: StackConfig, minutes: int, reason: str, rates: RateTable) -> CostBreakdown:
    _LOGGER.debug("Stack %s unsupported: %s", stack.id, reason)
    return CostBreakdown(
        stack_id=stack.id,
        monthly_minutes=minutes,
        supported=False,
        unsupported_reason=reason,
        rates_version=rates.version,
    )


def compute(
    stack: StackConfig,
    monthly_minutes: int,
    *,
    rates: RateTable = DEFAULT_RATE_TABLE,
    registry: ChargeModelRegistry = DEFAULT_REGISTRY,
) -> CostBreakdown:
    """Itemized monthly cost of ``stack`` at ``monthly_minutes`` session minutes."""
    if monthly_minutes < 0:
        raise ValueError(f"monthly_minutes cannot be negative, got {monthly_minutes}")

    support = check_support(stack)
    if not support.ok:
        return _unsupported(stack, monthly_minutes, support.reason or "Unsupported stack", rates)

    model = registry.get(stack.platform, stack.hosting)
    if model is None:
        return _unsupported(
            stack, monthly_minutes, f"No charge model for {stack.platform} ({stack.hosting})", rates
        )

    ledger = CostLedger()
    totals = model.price(stack, monthly_minutes, rates, ledger)

    notes: List[str] = []
    restriction = rates.restrictions.get(f"{stack.platform}:{stack.hosting}")
    if restriction:
        notes.append(restriction)

    breakdown = CostBreakdown(
        stack_id=stack.id,
        monthly_minutes=monthly_minutes,
        platform=totals.platform,
        transport=totals.transport,
        noise_cancellation=totals.noise_cancellation,
        stt=totals.stt,
        llm=totals.llm,
        tts=totals.tts,
        recording=totals.recording,
        total=totals.total,
        details=ledger.details,
        best_plans=ledger.best_plans,
        warnings=ledger.warnings,
        notes=notes,
        rates_version=rates.version,
    )
    _LOGGER.debug("Stack %s at %d min: total %.2f", stack.id, monthly_minutes, breakdown.total)
    return breakdown


def chart_ticks(max_minutes: int = DEFAULT_MAX_CHART_MINUTES) -> List[int]:
    """Volumes to plot up to ``max_minutes``; denser at the low end."""
    ticks = list(BASE_CHART_TICKS)
    if max_minutes <= BASE_CHART_TICKS[-1]:
        return ticks
    ceiling = max_minutes * 1.2
    extra = [t for t in EXTRA_CHART_TICKS if t <= ceiling]
    if not extra or extra[-1] < max_minutes:
        extra.append(math.ceil(max_minutes / 50_000) * 50_000)
    return ticks + extra


def generate_series(
    stack: StackConfig, volumes: Iterable[int], *, rates: RateTable = DEFAULT_RATE_TABLE
) -> List[CostPoint]:
    points: List[CostPoint] = []
    for volume in sorted(volumes):
        b = compute(stack, volume, rates=rates)
        points.append(CostPoint(volume=volume, total=b.total, supported=b.supported))
    return points


def generate_chart_data(
    stack: StackConfig, max_minutes: int = DEFAULT_MAX_CHART_MINUTES, *, rates: RateTable = DEFAULT_RATE_TABLE
) -> List[CostPoint]:
    return generate_series(stack, chart_ticks(max_minutes), rates=rates)


def compare_stacks(
    stacks: Sequence[StackConfig], monthly_minutes: int, *, rates: RateTable = DEFAULT_RATE_TABLE
) -> List[StackSummary]:
    """Price every visible stack and rank them, cheapest first, unsupported last."""
    visible = [s for s in stacks if s.visible]
    results = [(s, compute(s, monthly_minutes, rates=rates)) for s in visible]

    supported = sorted((r for r in results if r[1].supported), key=lambda r: r[1].total)
    unsupported = [r for r in results if not r[1].supported]
    cheapest = supported[0][1].total if supported else None

    summaries: List[StackSummary] = []
    for stack, b in supported:
        delta = None
        if cheapest is not None:
            diff = b.total - cheapest
            delta = Delta(absolute=diff, percent=(diff / cheapest * 100.0) if cheapest > 0 else 0.0)
        summaries.append(
            StackSummary(
                stack_id=stack.id,
                label=stack.label,
                total=b.total,
                per_minute=b.per_minute,
                delta_vs_cheapest=delta,
            )
        )
    for stack, b in unsupported:
        summaries.append(
            StackSummary(
                stack_id=stack.id,
                label=stack.label,
                total=0.0,
                per_minute=0.0,
                delta_vs_cheapest=None,
                supported=False,
                unsupported_reason=b.unsupported_reason,
            )
        )
    return summaries


__all__ = [
    "BASE_CHART_TICKS",
    "Delta",
    "StackSummary",
    "compute",
    "chart_ticks",
    "generate_series",
    "generate_chart_data",
    "compare_stacks",
]
