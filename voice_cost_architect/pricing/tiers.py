# voice_cost_architect/pricing/tiers.py
"""Generic plan/tier selection.

Three shapes of provider pricing are handled here, independent of which
provider or category uses them:

- subscription tiers (fixed fee + allotment + optional overage)
- commitment plans (per-unit rate with a monthly minimum spend)
- graduated volume ladders (each band priced at its own rate)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .rates import CommitmentPlan, SubscriptionTier, VolumeBand

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierResult:
    tier: SubscriptionTier
    cost: float
    overage: float


@dataclass(frozen=True)
class CommitmentResult:
    plan: CommitmentPlan
    cost: float
    usage_cost: float
    monthly_minimum: float

    @property
    def hits_minimum(self) -> bool:
        return self.monthly_minimum > 0 and self.usage_cost < self.monthly_minimum


def tier_cost(tier: SubscriptionTier, units: float) -> Optional[TierResult]:
    """Cost of serving ``units`` on one tier, or None if the tier cannot serve them."""
    if units <= tier.included_units:
        return TierResult(tier=tier, cost=float(tier.monthly_fee), overage=0.0)
    if tier.overage_rate > 0:
        over = units - tier.included_units
        return TierResult(tier=tier, cost=tier.monthly_fee + over * tier.overage_rate, overage=over)
    return None


def optimize_tier(tiers: Sequence[SubscriptionTier], units: float) -> Optional[TierResult]:
    """Pick the tier with the lowest total monthly cost for ``units``.

    Tiers whose allotment is too small and that allow no overage are skipped.
    Ties go to the earliest tier in ``tiers``. Zero or negative usage costs
    nothing and reports the first tier. Returns None when no tier can serve
    the usage; the caller decides the fallback.
    """
    if not tiers:
        return None
    if units <= 0:
        return TierResult(tier=tiers[0], cost=0.0, overage=0.0)

    best: Optional[TierResult] = None
    for tier in tiers:
        candidate = tier_cost(tier, units)
        if candidate is None:
            continue
        if best is None or candidate.cost < best.cost:
            best = candidate

    if best is None:
        _LOGGER.debug("No tier among %s can serve %.0f units", [t.name for t in tiers], units)
    else:
        _LOGGER.debug("Tier %s selected for %.0f units at %.4f", best.tier.name, units, best.cost)
    return best


def select_commitment_plan(
    plans: Sequence[CommitmentPlan], model: str, units: float
) -> Optional[CommitmentResult]:
    """Cheapest of max(usage cost, monthly minimum) across plans pricing ``model``."""
    best: Optional[CommitmentResult] = None
    for plan in plans:
        rate = plan.rates.get(model)
        if rate is None:
            continue
        usage_cost = units * rate
        cost = max(plan.monthly_minimum, usage_cost)
        if best is None or cost < best.cost:
            best = CommitmentResult(
                plan=plan,
                cost=cost,
                usage_cost=usage_cost,
                monthly_minimum=plan.monthly_minimum,
            )
    return best


def graduated_bands(bands: Sequence[VolumeBand], units: float) -> List[Tuple[VolumeBand, float]]:
    """Split ``units`` across a volume ladder as (band, units inside band) pairs."""
    out: List[Tuple[VolumeBand, float]] = []
    remaining = max(0.0, units)
    prev_up_to = 0.0
    for band in bands:
        used = min(remaining, band.up_to - prev_up_to)
        if used <= 0:
            break
        out.append((band, used))
        remaining -= used
        prev_up_to = band.up_to
    return out


def graduated_cost(bands: Sequence[VolumeBand], units: float, call_mode: str) -> float:
    """Integrate a volume-discount ladder: each band bills the units inside it."""
    return sum(used * band.rate_for(call_mode) for band, used in graduated_bands(bands, units))


__all__ = [
    "TierResult",
    "CommitmentResult",
    "tier_cost",
    "optimize_tier",
    "select_commitment_plan",
    "graduated_bands",
    "graduated_cost",
]
