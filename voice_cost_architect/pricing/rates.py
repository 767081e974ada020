"""Versioned snapshot of voice-stack provider pricing.

Every figure here is a static constant (USD, pre-tax) verified against the
provider pages listed in ``SOURCE_URLS`` on the ``last_verified_at`` date.
The engine never fetches prices; updating a rate means editing this module.

All tables are frozen dataclasses holding tuples and read-only mappings, so a
``RateTable`` can be shared across threads and calls without copying.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, is_dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple


class RateTableError(ValueError):
    """Raised when a rate table violates its invariants (e.g. negative rate)."""


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


# ---------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class SubscriptionTier:
    """Fixed monthly fee with an included allotment.

    ``overage_rate == 0`` means the tier cannot be exceeded: usage above the
    allotment makes the tier infeasible.
    """

    name: str
    monthly_fee: float
    included_units: float
    overage_rate: float = 0.0


@dataclass(frozen=True)
class CommitmentPlan:
    """Per-unit plan with an optional annual minimum spend."""

    name: str
    min_annual_commitment: float
    rates: Mapping[str, float]

    @property
    def monthly_minimum(self) -> float:
        return self.min_annual_commitment / 12.0


@dataclass(frozen=True)
class PlatformPlan:
    """Whole-account cloud plan with several independently metered allotments."""

    name: str
    monthly_fee: float
    # Agent session minutes
    included_agent_minutes: float
    agent_minute_rate: float
    # WebRTC participant minutes (1:1 voice = agent minutes)
    included_webrtc_minutes: float
    webrtc_overage_rate: float
    # Agent observability (session recordings)
    included_observability_minutes: float
    observability_overage_rate: float
    # Recording & export transcode minutes
    included_transcode_minutes: float
    transcode_audio_rate: float
    transcode_video_rate: float
    # Downstream data transfer
    included_data_transfer_gb: float
    data_transfer_overage_per_gb: float
    # Inference
    included_inference_credits: float
    inference_discount: bool = False


@dataclass(frozen=True)
class ReservedCapacityProfile:
    """Self-hosting option billed as a base fee covering minutes at headroom."""

    id: str
    label: str
    base_cost: float
    included_minutes_at_headroom: float
    overage_per_minute: float
    ops_complexity: str
    notes: str = ""


@dataclass(frozen=True)
class VolumeBand:
    """One band of a graduated volume-discount ladder (upper bound inclusive)."""

    up_to: float
    audio_only: float
    audio_video: float

    def rate_for(self, call_mode: str) -> float:
        return self.audio_only if call_mode == "audio-only" else self.audio_video


@dataclass(frozen=True)
class TokenRate:
    """LLM price per million tokens."""

    input: float
    output: float
    cached_input: Optional[float] = None


@dataclass(frozen=True)
class InferenceRate:
    """Platform-resold inference rate with an optional discounted column."""

    standard: float
    discounted: float

    def pick(self, discounted: bool) -> float:
        return self.discounted if discounted else self.standard


@dataclass(frozen=True)
class SpeechToSpeechRate:
    """Unified speech-to-speech model priced from audio-token throughput."""

    input_tokens_per_sec: float
    output_tokens_per_sec: float
    input_per_million: float
    output_per_million: float
    session_overhead: float = 1.0
    margin: float = 1.0


@dataclass(frozen=True)
class SharedCreditPool:
    """One vendor credit balance consumed by both STT seconds and TTS characters."""

    name: str
    tiers: Tuple[SubscriptionTier, ...]
    stt_models: frozenset
    tts_models: frozenset
    stt_credits_per_second: float = 1.0
    tts_credits_per_char: float = 1.0


@dataclass(frozen=True)
class UsageAssumptions:
    stt_duty_ratio: float = 0.66  # user speaks ~66% of session time
    tts_duty_ratio: float = 0.24  # agent speaks ~24% (~10% silence)
    avg_chars_per_minute_tts: float = 900  # ~150 words/min x ~6 chars/word
    avg_input_tokens_per_minute: float = 800
    avg_output_tokens_per_minute: float = 400
    cache_hit_rate: float = 0.3
    avg_downstream_mb_per_minute: float = 0.24  # Opus voice ~32kbps
    avg_session_minutes: float = 10
    peak_to_avg_ratio: float = 2


@dataclass(frozen=True)
class ManagedAgentHosting:
    """Pipecat Cloud agent-1x profile."""

    active_per_min: float
    reserved_per_min: float
    idle_creation_delay_sec: float


@dataclass(frozen=True)
class NoiseCancellationRates:
    krisp_viva_free_minutes: float
    krisp_viva_per_min: float
    daily_krisp_addon_per_min: float


@dataclass(frozen=True)
class RecordingRates:
    processing_audio_only: float
    processing_audio_video: float
    storage_per_gb_month: float
    audio_mb_per_minute: float
    video_mb_per_minute: float


@dataclass(frozen=True)
class ClusterRates:
    name: str
    node_sku: str
    control_plane: float
    node_monthly: float
    concurrent_agents_per_node: int


@dataclass(frozen=True)
class RateTable:
    version: str
    last_verified_at: str
    assumptions: UsageAssumptions
    source_urls: Mapping[str, str]
    livekit_plans: Tuple[PlatformPlan, ...]
    livekit_stt: Mapping[str, InferenceRate]
    livekit_tts: Mapping[str, InferenceRate]
    livekit_llm: Mapping[str, TokenRate]
    livekit_s2s: Mapping[str, SpeechToSpeechRate]
    direct_stt: Mapping[str, float]
    direct_tts: Mapping[str, float]
    direct_llm: Mapping[str, TokenRate]
    direct_s2s: Mapping[str, SpeechToSpeechRate]
    shared_credit_pools: Tuple[SharedCreditPool, ...]
    tts_tiers: Mapping[str, Tuple[SubscriptionTier, ...]]
    stt_commitment_plans: Tuple[CommitmentPlan, ...]
    daily_bands: Tuple[VolumeBand, ...]
    pipecat: ManagedAgentHosting
    noise: NoiseCancellationRates
    recording: RecordingRates
    cluster: ClusterRates
    self_hosted_profiles: Tuple[ReservedCapacityProfile, ...]
    restrictions: Mapping[str, str] = field(default_factory=dict)
    notes: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def source(self, key: str) -> Optional[str]:
        return self.source_urls.get(key)

    def pool_for(self, model: str) -> Optional[SharedCreditPool]:
        for pool in self.shared_credit_pools:
            if model in pool.stt_models or model in pool.tts_models:
                return pool
        return None

    def validate(self) -> "RateTable":
        """Raise RateTableError if any numeric rate is negative or NaN."""
        for path, value in _iter_numbers(self, "rates"):
            if math.isnan(value) or value < 0:
                raise RateTableError(f"{path} must be a non-negative number, got {value!r}")
        if not self.livekit_plans:
            raise RateTableError("rates.livekit_plans must contain at least one plan")
        if not self.self_hosted_profiles:
            raise RateTableError("rates.self_hosted_profiles must contain at least one profile")
        return self


def _iter_numbers(obj: Any, path: str) -> Iterator[Tuple[str, float]]:
    if isinstance(obj, bool) or isinstance(obj, str) or obj is None:
        return
    if isinstance(obj, (int, float)):
        yield path, float(obj)
        return
    if is_dataclass(obj):
        for f in fields(obj):
            yield from _iter_numbers(getattr(obj, f.name), f"{path}.{f.name}")
        return
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            yield from _iter_numbers(v, f"{path}[{k!r}]")
        return
    if isinstance(obj, (tuple, list)):
        for i, v in enumerate(obj):
            yield from _iter_numbers(v, f"{path}[{i}]")


# ---------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------
RATES_VERSION = "2026-02-21"

SOURCE_URLS = _frozen(
    {
        "livekit": "https://livekit.io/pricing",
        "livekit_inference": "https://livekit.io/pricing/inference",
        "pipecat": "https://www.daily.co/pricing/pipecat-cloud/",
        "daily_webrtc": "https://www.daily.co/pricing/webrtc-infrastructure/",
        "daily_addons": "https://www.daily.co/pricing/video-sdk/",
        "azure_aks": "https://azure.microsoft.com/en-us/pricing/details/kubernetes-service/",
        "azure_app_service": "https://azure.microsoft.com/en-us/pricing/details/app-service/",
        "azure_blob": "https://azure.microsoft.com/en-us/pricing/details/storage/blobs/",
        "openai": "https://openai.com/api/pricing/",
        "google": "https://ai.google.dev/pricing",
        "assemblyai": "https://www.assemblyai.com/pricing",
        "cartesia": "https://cartesia.ai/pricing",
        "deepgram": "https://deepgram.com/pricing",
        "elevenlabs": "https://elevenlabs.io/pricing",
        "soniox": "https://soniox.com/pricing",
    }
)

# Build plan excluded (dev-only); Enterprise excluded (custom pricing).
LIVEKIT_PLANS = (
    PlatformPlan(
        name="Ship",
        monthly_fee=50,
        included_agent_minutes=5_000,
        agent_minute_rate=0.01,
        included_webrtc_minutes=150_000,
        webrtc_overage_rate=0.0005,
        included_observability_minutes=5_000,
        observability_overage_rate=0.005,
        included_transcode_minutes=600,
        transcode_audio_rate=0.005,
        transcode_video_rate=0.02,
        included_data_transfer_gb=250,
        data_transfer_overage_per_gb=0.12,
        included_inference_credits=5,
        inference_discount=False,
    ),
    PlatformPlan(
        name="Scale",
        monthly_fee=500,
        included_agent_minutes=50_000,
        agent_minute_rate=0.01,
        included_webrtc_minutes=1_500_000,
        webrtc_overage_rate=0.0004,
        included_observability_minutes=50_000,
        observability_overage_rate=0.005,
        included_transcode_minutes=8_000,
        transcode_audio_rate=0.004,
        transcode_video_rate=0.015,
        included_data_transfer_gb=3_000,
        data_transfer_overage_per_gb=0.10,
        included_inference_credits=50,
        inference_discount=True,
    ),
)

# STT per minute of audio; standard = Build/Ship, discounted = Scale.
LIVEKIT_STT = _frozen(
    {
        "assemblyai-universal-streaming": InferenceRate(0.0025, 0.0025),
        "assemblyai-universal-streaming-multilingual": InferenceRate(0.0025, 0.0025),
        "cartesia-ink-whisper": InferenceRate(0.0030, 0.0023),
        "deepgram-nova-3": InferenceRate(0.0077, 0.0065),
        "deepgram-nova-3-multilingual": InferenceRate(0.0092, 0.0078),
        "soniox-realtime": InferenceRate(0.0020, 0.0020),  # BYOP, direct pricing
    }
)

# TTS per million characters.
LIVEKIT_TTS = _frozen(
    {
        "cartesia-sonic-3": InferenceRate(50, 37.50),
        "elevenlabs-turbo-v2.5": InferenceRate(150, 60),
    }
)

# LLM per million tokens.
LIVEKIT_LLM = _frozen(
    {
        "gpt-5.2": TokenRate(input=1.75, output=14.00, cached_input=0.175),
        "gemini-3-pro": TokenRate(input=4.00, output=18.00, cached_input=0.40),
        "gemini-3-flash": TokenRate(input=0.50, output=3.00, cached_input=0.05),
    }
)

# OpenAI gpt-realtime (GA): audio in 10 tok/s @ $32/1M, out 20 tok/s @ $64/1M.
#   Whole conversation is re-sent each turn but cached audio input is cheap: ~1.15x.
# Gemini 2.5 Flash native audio (Live API): ~25 tok/s both ways (community
#   estimate), $3/1M in, $12/1M out, ~1.3x session overhead.
DIRECT_S2S = _frozen(
    {
        "openai-realtime": SpeechToSpeechRate(
            input_tokens_per_sec=10,
            output_tokens_per_sec=20,
            input_per_million=32.0,
            output_per_million=64.0,
            session_overhead=1.15,
        ),
        "gemini-live": SpeechToSpeechRate(
            input_tokens_per_sec=25,
            output_tokens_per_sec=25,
            input_per_million=3.0,
            output_per_million=12.0,
            session_overhead=1.3,
        ),
    }
)

# LiveKit resells the same models with ~10% inference margin.
LIVEKIT_S2S = _frozen(
    {
        model: SpeechToSpeechRate(
            input_tokens_per_sec=rate.input_tokens_per_sec,
            output_tokens_per_sec=rate.output_tokens_per_sec,
            input_per_million=rate.input_per_million,
            output_per_million=rate.output_per_million,
            session_overhead=rate.session_overhead,
            margin=1.10,
        )
        for model, rate in DIRECT_S2S.items()
    }
)

# Flat list rates for direct (BYOP / self-hosted) pricing. Providers with
# tiers or commitment plans below are priced through those; their flat rate
# is the fallback when no tier can cover the usage.
DIRECT_STT = _frozen(
    {
        "assemblyai-universal-streaming": 0.0025,  # $0.15/hr
        "assemblyai-universal-streaming-multilingual": 0.0025,
        "cartesia-ink-whisper": 0.0022,  # Scale plan ~$0.13/hr
        "soniox-realtime": 0.0020,  # ~$0.12/hr streaming
    }
)

DIRECT_TTS = _frozen(
    {
        "cartesia-sonic-3": 30,  # Scale plan ($239/mo for 8M credits)
        "elevenlabs-turbo-v2.5": 60,  # Business plan, Flash/Turbo
    }
)

DIRECT_LLM = _frozen(
    {
        "gpt-5.2": TokenRate(input=1.75, output=14.00),
        "gemini-3-pro": TokenRate(input=4.00, output=18.00),
        "gemini-3-flash": TokenRate(input=0.50, output=3.00),
    }
)

# Cartesia: Sonic TTS 1 credit/char, Ink Whisper STT 1 credit/sec (yearly billing).
CARTESIA_TIERS = (
    SubscriptionTier("Free", 0, 20_000, 0),
    SubscriptionTier("Pro", 4, 100_000, 0),
    SubscriptionTier("Startup", 39, 1_250_000, 0),
    SubscriptionTier("Scale", 239, 8_000_000, 0.00002988),
)

# ElevenLabs Flash/Turbo at 0.5 credits/char, allotments expressed in characters.
ELEVENLABS_TURBO_TIERS = (
    SubscriptionTier("Free", 0, 20_000, 0),
    SubscriptionTier("Starter", 5, 60_000, 0),
    SubscriptionTier("Creator", 22, 200_000, 0.00015),
    SubscriptionTier("Pro", 99, 1_000_000, 0.00012),
    SubscriptionTier("Scale", 330, 4_000_000, 0.00009),
    SubscriptionTier("Business", 1_320, 22_000_000, 0.00006),
)

# Growth: $4K/year minimum (~$333.33/mo) for ~15-20% lower per-minute rates.
DEEPGRAM_STT_PLANS = (
    CommitmentPlan(
        name="Pay As You Go",
        min_annual_commitment=0,
        rates=_frozen({"deepgram-nova-3": 0.0077, "deepgram-nova-3-multilingual": 0.0092}),
    ),
    CommitmentPlan(
        name="Growth",
        min_annual_commitment=4_000,
        rates=_frozen({"deepgram-nova-3": 0.0065, "deepgram-nova-3-multilingual": 0.0078}),
    ),
)

# Daily WebRTC volume discounts (standalone transport for self-hosted Pipecat).
DAILY_BANDS = (
    VolumeBand(10_000, 0, 0),  # free
    VolumeBand(100_000, 0.00099, 0.0040),
    VolumeBand(500_000, 0.00092, 0.0037),
    VolumeBand(1_000_000, 0.00085, 0.0034),
    VolumeBand(10_000_000, 0.00074, 0.0030),
    VolumeBand(25_000_000, 0.00064, 0.0026),
    VolumeBand(50_000_000, 0.00054, 0.0022),
    VolumeBand(math.inf, 0.00036, 0.0015),
)

SELF_HOSTED_PROFILES = (
    ReservedCapacityProfile(
        id="app-service",
        label="Azure App Service",
        base_cost=180,
        included_minutes_at_headroom=12_000,
        overage_per_minute=0.0092,
        ops_complexity="low",
        notes="Simpler operations, good fit for lower to medium throughput.",
    ),
    ReservedCapacityProfile(
        id="aks",
        label="Azure AKS",
        base_cost=420,
        included_minutes_at_headroom=45_000,
        overage_per_minute=0.0062,
        ops_complexity="high",
        notes="Higher operational complexity, stronger scaling efficiency.",
    ),
)

RESTRICTIONS = _frozen(
    {
        "livekit:cloud": "LiveKit Ship: max 2 agent deployments, 20 concurrent sessions. "
        "Scale adds region pinning, HIPAA compliance and inference discounts.",
        "pipecat:cloud": "Pipecat Cloud: unlimited concurrency, BYOP for all inference providers.",
        "pipecat:self-hosted": "Pipecat self-hosted requires your own orchestration, observability and patch cadence.",
        "livekit:self-hosted": "LiveKit self-hosted needs production WebRTC tuning and cluster-level networking expertise.",
    }
)

NOTES = _frozen(
    {
        "livekit": (
            "Ship: $50/mo, 5K agent min, 150K WebRTC min, 5K observability min, 600 transcode min, $5 inference credits",
            "Scale: $500/mo, 50K agent min, 1.5M WebRTC min, 50K observability min, 8K transcode min, $50 inference credits",
            "S2S rates carry ~10% inference margin over direct provider pricing",
        ),
        "pipecat": (
            "Agent-1x: $0.01/min active, $0.0005/min reserved (24/7)",
            "Optimal reserved = MAX(baseline sessions, CPS x idle creation delay), delay ~30s",
            "Daily WebRTC 1:1 voice free on Pipecat Cloud",
        ),
        "azure": (
            "AKS Standard: $73/mo control plane + D2s_v3 nodes at ~$70/mo each",
            "One pod per bot (~6 concurrent bots per D2s_v3 node)",
        ),
        "deepgram": (
            "Optimizer picks PAYG below ~43K STT min/mo, Growth above",
            "Speaker diarization add-on not included",
        ),
    }
)

DEFAULT_RATE_TABLE = RateTable(
    version=RATES_VERSION,
    last_verified_at=RATES_VERSION,
    assumptions=UsageAssumptions(),
    source_urls=SOURCE_URLS,
    livekit_plans=LIVEKIT_PLANS,
    livekit_stt=LIVEKIT_STT,
    livekit_tts=LIVEKIT_TTS,
    livekit_llm=LIVEKIT_LLM,
    livekit_s2s=LIVEKIT_S2S,
    direct_stt=DIRECT_STT,
    direct_tts=DIRECT_TTS,
    direct_llm=DIRECT_LLM,
    direct_s2s=DIRECT_S2S,
    shared_credit_pools=(
        SharedCreditPool(
            name="Cartesia",
            tiers=CARTESIA_TIERS,
            stt_models=frozenset({"cartesia-ink-whisper"}),
            tts_models=frozenset({"cartesia-sonic-3"}),
        ),
    ),
    tts_tiers=_frozen({"elevenlabs-turbo-v2.5": ELEVENLABS_TURBO_TIERS}),
    stt_commitment_plans=DEEPGRAM_STT_PLANS,
    daily_bands=DAILY_BANDS,
    pipecat=ManagedAgentHosting(active_per_min=0.01, reserved_per_min=0.0005, idle_creation_delay_sec=30),
    noise=NoiseCancellationRates(
        krisp_viva_free_minutes=10_000,
        krisp_viva_per_min=0.0015,
        daily_krisp_addon_per_min=0.0002,
    ),
    recording=RecordingRates(
        processing_audio_only=0.005,
        processing_audio_video=0.01349,
        storage_per_gb_month=0.018,  # Hot tier, LRS, US East
        audio_mb_per_minute=0.5,  # ~64kbps Opus/AAC
        video_mb_per_minute=5,  # ~720p compressed
    ),
    cluster=ClusterRates(
        name="Azure AKS",
        node_sku="D2s_v3",
        control_plane=73,
        node_monthly=70,
        concurrent_agents_per_node=6,
    ),
    self_hosted_profiles=SELF_HOSTED_PROFILES,
    restrictions=RESTRICTIONS,
    notes=NOTES,
).validate()


# Model id prefix -> source key, for linking detail lines to provider pages.
_MODEL_PROVIDERS = {
    "assemblyai": "assemblyai",
    "cartesia": "cartesia",
    "deepgram": "deepgram",
    "elevenlabs": "elevenlabs",
    "soniox": "soniox",
    "gpt": "openai",
    "openai": "openai",
    "gemini": "google",
}


def provider_key(model: str) -> Optional[str]:
    prefix = (model or "").split("-", 1)[0].lower()
    return _MODEL_PROVIDERS.get(prefix)


__all__ = [
    "RateTableError",
    "SubscriptionTier",
    "CommitmentPlan",
    "PlatformPlan",
    "ReservedCapacityProfile",
    "VolumeBand",
    "TokenRate",
    "InferenceRate",
    "SpeechToSpeechRate",
    "SharedCreditPool",
    "UsageAssumptions",
    "ManagedAgentHosting",
    "NoiseCancellationRates",
    "RecordingRates",
    "ClusterRates",
    "RateTable",
    "RATES_VERSION",
    "DEFAULT_RATE_TABLE",
    "provider_key",
]
