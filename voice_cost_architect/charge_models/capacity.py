"""Capacity sizing for hosted and self-hosted agents.

Three questions are answered here:

- How many warm (reserved) Pipecat Cloud agents keep cold starts away?
- How many AKS nodes does a self-hosted LiveKit/Pipecat deployment need?
- Which reserved-capacity profile (App Service vs AKS) is cheapest for a
  given volume, once the headroom multiplier is applied?

All sizing is derived from average concurrency over a 30-day month
(43,200 minutes) and the peak-to-average ratio of the usage assumptions.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import MINUTES_PER_MONTH, SELF_HOSTED_HEADROOM
from ..pricing.rates import (
    DEFAULT_RATE_TABLE,
    ClusterRates,
    RateTable,
    ReservedCapacityProfile,
    SubscriptionTier,
    UsageAssumptions,
)
from ..pricing.tiers import optimize_tier, tier_cost
from ..pricing.units import fmt_num, fmt_rate
from .types import PLATFORM, CostLedger

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterSizing:
    concurrent: int
    peak: int
    nodes: int
    cost: float


@dataclass(frozen=True)
class ProfileChoice:
    profile: ReservedCapacityProfile
    cost: float
    required_minutes: float
    overage_minutes: float


@dataclass(frozen=True)
class HostingRecommendation:
    profile: ReservedCapacityProfile
    monthly_cost: float
    reason: str
    alternative_when: str


def optimal_reserved_instances(minutes: float, assumptions: UsageAssumptions, idle_creation_delay_sec: float) -> int:
    """MAX(baseline concurrent sessions, peak sessions started during one cold start)."""
    if minutes <= 0:
        return 0
    avg_concurrent = minutes / MINUTES_PER_MONTH
    peak_concurrent = avg_concurrent * assumptions.peak_to_avg_ratio
    sessions_per_sec = peak_concurrent / (assumptions.avg_session_minutes * 60)
    return math.ceil(max(avg_concurrent, sessions_per_sec * idle_creation_delay_sec))


def aks_node_count(minutes: float, cluster: ClusterRates, assumptions: UsageAssumptions) -> ClusterSizing:
    concurrent = math.ceil(minutes / MINUTES_PER_MONTH) if minutes > 0 else 0
    peak = max(1, math.ceil(concurrent * assumptions.peak_to_avg_ratio))
    nodes = max(1, math.ceil(peak / cluster.concurrent_agents_per_node))
    return ClusterSizing(
        concurrent=concurrent,
        peak=peak,
        nodes=nodes,
        cost=cluster.control_plane + nodes * cluster.node_monthly,
    )


def price_pipecat_hosting(minutes: float, rates: RateTable, ledger: CostLedger) -> float:
    hosting = rates.pipecat
    reserved = optimal_reserved_instances(minutes, rates.assumptions, hosting.idle_creation_delay_sec)
    active = ledger.add(
        PLATFORM,
        "Pipecat Cloud agent-1x (active)",
        f"{fmt_num(minutes)} min × ${fmt_rate(hosting.active_per_min)}/min",
        minutes * hosting.active_per_min,
        rates.source("pipecat"),
    )
    warm = ledger.add(
        PLATFORM,
        "Pipecat Cloud agent-1x (reserved)",
        f"{reserved} reserved × ${fmt_rate(hosting.reserved_per_min)}/min × {fmt_num(MINUTES_PER_MONTH)} min (24/7)",
        reserved * hosting.reserved_per_min * MINUTES_PER_MONTH,
        rates.source("pipecat"),
    )
    ledger.choose(PLATFORM, f"Pipecat Cloud agent-1x ({reserved} reserved)")
    return active + warm


def price_cluster(minutes: float, rates: RateTable, ledger: CostLedger) -> float:
    cluster = rates.cluster
    sizing = aks_node_count(minutes, cluster, rates.assumptions)
    _LOGGER.debug("Cluster sized at %d nodes for %.0f min", sizing.nodes, minutes)
    ledger.add(
        PLATFORM,
        f"{cluster.name} control plane",
        f"Standard tier ${fmt_num(cluster.control_plane)}/mo",
        cluster.control_plane,
        rates.source("azure_aks"),
    )
    ledger.add(
        PLATFORM,
        f"{cluster.name} {cluster.node_sku} nodes",
        f"{sizing.concurrent} avg concurrent × {rates.assumptions.peak_to_avg_ratio:g} peak = {sizing.peak} agents"
        f" / {cluster.concurrent_agents_per_node} per node = {sizing.nodes} × ${fmt_num(cluster.node_monthly)}/mo",
        sizing.nodes * cluster.node_monthly,
        rates.source("azure_aks"),
    )
    ledger.choose(PLATFORM, f"{cluster.name} ({sizing.nodes}× {cluster.node_sku})")
    return sizing.cost


def choose_self_hosted_profile(
    minutes: float,
    profiles: Sequence[ReservedCapacityProfile],
    headroom: float = SELF_HOSTED_HEADROOM,
) -> Optional[ProfileChoice]:
    """Cheapest reserved-capacity profile for ``minutes`` scaled by ``headroom``.

    Each profile is a tier: base cost covers its included minutes, the rest
    is billed as overage. With no usage the first profile's base cost wins.
    """
    if not profiles:
        return None
    tiers = [
        SubscriptionTier(p.id, p.base_cost, p.included_minutes_at_headroom, p.overage_per_minute) for p in profiles
    ]
    required = max(0.0, minutes) * headroom
    result = optimize_tier(tiers, required) if required > 0 else tier_cost(tiers[0], 0.0)
    if result is None:
        return None
    profile = next(p for p in profiles if p.id == result.tier.name)
    return ProfileChoice(profile=profile, cost=result.cost, required_minutes=required, overage_minutes=result.overage)


def recommend_self_hosting(minutes: float, rates: RateTable = DEFAULT_RATE_TABLE) -> Optional[HostingRecommendation]:
    choice = choose_self_hosted_profile(minutes, rates.self_hosted_profiles)
    if choice is None:
        return None
    if choice.profile.ops_complexity == "low":
        reason = (
            f"{choice.profile.label} is cheaper at this usage with lower maintenance overhead "
            "and enough realtime headroom."
        )
        alternative = "Choose AKS when sustained minutes or concurrency rise and infra efficiency becomes the dominant concern."
    else:
        reason = (
            f"{choice.profile.label} wins on long-run cost efficiency at this throughput "
            "and offers stronger control for high-scale realtime traffic."
        )
        alternative = "Choose App Service when you need faster ops velocity and lower platform-management complexity."
    return HostingRecommendation(
        profile=choice.profile, monthly_cost=choice.cost, reason=reason, alternative_when=alternative
    )


__all__ = [
    "ClusterSizing",
    "ProfileChoice",
    "HostingRecommendation",
    "optimal_reserved_instances",
    "aks_node_count",
    "price_pipecat_hosting",
    "price_cluster",
    "choose_self_hosted_profile",
    "recommend_self_hosting",
]
