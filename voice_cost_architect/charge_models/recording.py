from __future__ import annotations

from ..pricing.rates import RateTable
from ..pricing.units import fmt_num, fmt_rate, storage_gb
from .types import RECORDING, CostLedger

_MODE_LABELS = {"audio-only": "audio", "audio-video": "audio+video"}


def recording_mb_per_minute(recording_mode: str, rates: RateTable) -> float:
    rec = rates.recording
    return rec.audio_mb_per_minute if recording_mode == "audio-only" else rec.video_mb_per_minute


def price_recording_storage(minutes: float, recording_mode: str, rates: RateTable, ledger: CostLedger) -> float:
    """Azure Blob storage for one month of recordings."""
    mb = recording_mb_per_minute(recording_mode, rates)
    gb = storage_gb(minutes, mb)
    rate = rates.recording.storage_per_gb_month
    return ledger.add(
        RECORDING,
        "Azure Blob Storage (Hot LRS)",
        f"{fmt_num(minutes)} min × {mb:g} MB/min = {gb:.1f} GB × ${fmt_rate(rate)}/GB-mo",
        gb * rate,
        rates.source("azure_blob"),
    )


def price_daily_recording(minutes: float, recording_mode: str, rates: RateTable, ledger: CostLedger) -> float:
    if recording_mode == "none":
        return 0.0
    rec = rates.recording
    rate = rec.processing_audio_only if recording_mode == "audio-only" else rec.processing_audio_video
    processing = ledger.add(
        RECORDING,
        f"Daily Recording ({_MODE_LABELS[recording_mode]})",
        f"{fmt_num(minutes)} min × ${fmt_rate(rate)}/min processing",
        minutes * rate,
        rates.source("daily_addons"),
    )
    return processing + price_recording_storage(minutes, recording_mode, rates, ledger)


def price_self_hosted_egress(minutes: float, recording_mode: str, rates: RateTable, ledger: CostLedger) -> float:
    if recording_mode == "none":
        return 0.0
    ledger.add(
        RECORDING,
        "LiveKit Egress (self-hosted)",
        f"Egress workers run on the {rates.cluster.name} cluster",
        0.0,
        rates.source("livekit"),
    )
    return price_recording_storage(minutes, recording_mode, rates, ledger)
