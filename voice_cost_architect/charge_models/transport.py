from __future__ import annotations

from ..pricing.rates import RateTable
from ..pricing.tiers import graduated_bands
from ..pricing.units import fmt_rate, fmt_units
from .types import TRANSPORT, CostLedger


def price_pipecat_cloud_transport(rates: RateTable, ledger: CostLedger) -> float:
    return ledger.add(
        TRANSPORT,
        "Daily WebRTC Voice (1:1 free)",
        "1:1 voice sessions over Daily WebRTC are included with Pipecat Cloud",
        0.0,
        rates.source("pipecat"),
    )


def price_daily_webrtc(minutes: float, call_mode: str, rates: RateTable, ledger: CostLedger) -> float:
    """Standalone Daily WebRTC with graduated volume discounts."""
    parts = []
    cost = 0.0
    for band, used in graduated_bands(rates.daily_bands, minutes):
        rate = band.rate_for(call_mode)
        cost += used * rate
        parts.append(f"{fmt_units(used)} × ${fmt_rate(rate)}" if rate > 0 else f"{fmt_units(used)} free")
    mode = "audio" if call_mode == "audio-only" else "audio+video"
    formula = " + ".join(parts) if parts else "0 min"
    return ledger.add(
        TRANSPORT, f"Daily WebRTC ({mode})", f"{formula} participant min (volume bands)", cost, rates.source("daily_webrtc")
    )


def price_livekit_server(rates: RateTable, ledger: CostLedger) -> float:
    return ledger.add(
        TRANSPORT,
        "LiveKit Server (self-hosted)",
        f"SFU runs on the {rates.cluster.name} cluster; included in compute",
        0.0,
        rates.source("livekit"),
    )
