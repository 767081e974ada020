from __future__ import annotations

from ..pricing.rates import RateTable
from ..pricing.units import fmt_num, fmt_rate, overage
from .types import NOISE_CANCELLATION, CostLedger


def price_noise_cancellation(platform: str, hosting: str, minutes: float, rates: RateTable, ledger: CostLedger) -> float:
    """Krisp noise cancellation, billed differently by every platform variant."""
    noise = rates.noise
    if (platform, hosting) == ("livekit", "cloud"):
        return ledger.add(
            NOISE_CANCELLATION, "Krisp (LiveKit Cloud)", "Included with LiveKit Cloud agents", 0.0, rates.source("livekit")
        )
    if (platform, hosting) == ("pipecat", "cloud"):
        billable = overage(minutes, noise.krisp_viva_free_minutes)
        return ledger.add(
            NOISE_CANCELLATION,
            "Krisp VIVA (Pipecat Cloud)",
            f"max(0, {fmt_num(minutes)} - {fmt_num(noise.krisp_viva_free_minutes)} free) min"
            f" × ${fmt_rate(noise.krisp_viva_per_min)}/min",
            billable * noise.krisp_viva_per_min,
            rates.source("pipecat"),
        )
    if (platform, hosting) == ("pipecat", "self-hosted"):
        return ledger.add(
            NOISE_CANCELLATION,
            "Krisp (Daily add-on)",
            f"{fmt_num(minutes)} min × ${fmt_rate(noise.daily_krisp_addon_per_min)}/min",
            minutes * noise.daily_krisp_addon_per_min,
            rates.source("daily_addons"),
        )
    return ledger.add(
        NOISE_CANCELLATION,
        "Krisp SDK (self-hosted)",
        "Enterprise SDK license, not priced",
        0.0,
        rates.source("livekit"),
    )
