"""LiveKit Cloud: whole-account plan selection.

A LiveKit Cloud plan bundles several independently metered allotments (agent
minutes, WebRTC minutes, observability, transcode, data transfer, inference
credits) and its inference prices depend on the plan. The cheapest plan is
therefore chosen on the full monthly cost, not on the platform fee alone.

Every plan is evaluated once into a ``PlanEvaluation``; evaluation has no side
effects. Only the winner's line items are written to the ledger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..pricing.rates import PlatformPlan, RateTable
from ..pricing.units import (
    PER_MILLION,
    downstream_gb,
    fmt_num,
    fmt_pct,
    fmt_rate,
    llm_cost,
    llm_tokens,
    overage,
    s2s_cost_per_minute,
    storage_gb,
    stt_minutes,
    tts_chars,
)
from ..stacks.model import StackConfig
from .base import BaseChargeModel
from .inference import llm_formula, price_speech_to_speech
from .noise import price_noise_cancellation
from .recording import price_recording_storage, recording_mb_per_minute
from .types import LLM, PLATFORM, RECORDING, S2S_MODEL, STT, TRANSPORT, TTS, CategoryTotals, CostLedger

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class InferenceQuote:
    stt: float = 0.0
    llm: float = 0.0
    tts: float = 0.0

    @property
    def raw(self) -> float:
        return self.stt + self.llm + self.tts


@dataclass(frozen=True)
class PlanEvaluation:
    plan: PlatformPlan
    agent_overage_minutes: float
    agent_overage: float
    webrtc_overage_minutes: float
    webrtc: float
    observability_overage_minutes: float
    observability: float
    data_transfer_gb: float
    data_transfer: float
    transcode_overage_minutes: float
    transcode: float
    storage: float
    inference: InferenceQuote
    credit: float

    @property
    def base(self) -> float:
        return self.plan.monthly_fee + self.agent_overage

    @property
    def total(self) -> float:
        return (
            self.base
            + self.observability
            + self.webrtc
            + self.data_transfer
            + self.transcode
            + self.storage
            + self.inference.raw
            - self.credit
        )


def quote_inference(stack: StackConfig, minutes: float, plan: PlatformPlan, rates: RateTable) -> InferenceQuote:
    """Inference cost at the plan's rates. Missing rates quote as zero."""
    a = rates.assumptions
    discounted = plan.inference_discount
    if stack.is_speech_to_speech:
        s2s = rates.livekit_s2s.get(stack.speech_to_speech_model)
        return InferenceQuote(llm=minutes * s2s_cost_per_minute(s2s, a) if s2s else 0.0)

    stt_rate = rates.livekit_stt.get(stack.stt_model)
    tts_rate = rates.livekit_tts.get(stack.tts_model)
    llm_rate = rates.livekit_llm.get(stack.llm_model)
    return InferenceQuote(
        stt=stt_minutes(minutes, a) * stt_rate.pick(discounted) if stt_rate else 0.0,
        llm=llm_cost(llm_tokens(minutes, a, use_cache=llm_rate.cached_input is not None), llm_rate) if llm_rate else 0.0,
        tts=tts_chars(minutes, a) / PER_MILLION * tts_rate.pick(discounted) if tts_rate else 0.0,
    )


def evaluate_plan(plan: PlatformPlan, stack: StackConfig, minutes: float, rates: RateTable) -> PlanEvaluation:
    agent_over = overage(minutes, plan.included_agent_minutes)
    webrtc_over = overage(minutes, plan.included_webrtc_minutes)
    # Every session is recorded for observability.
    obs_over = overage(minutes, plan.included_observability_minutes)
    gb = downstream_gb(minutes, rates.assumptions)

    transcode_over = 0.0
    transcode = 0.0
    storage = 0.0
    if stack.recording_mode != "none":
        rate = plan.transcode_audio_rate if stack.recording_mode == "audio-only" else plan.transcode_video_rate
        transcode_over = overage(minutes, plan.included_transcode_minutes)
        transcode = transcode_over * rate
        storage = storage_gb(minutes, recording_mb_per_minute(stack.recording_mode, rates)) * rates.recording.storage_per_gb_month

    inference = quote_inference(stack, minutes, plan, rates)
    return PlanEvaluation(
        plan=plan,
        agent_overage_minutes=agent_over,
        agent_overage=agent_over * plan.agent_minute_rate,
        webrtc_overage_minutes=webrtc_over,
        webrtc=webrtc_over * plan.webrtc_overage_rate,
        observability_overage_minutes=obs_over,
        observability=obs_over * plan.observability_overage_rate,
        data_transfer_gb=gb,
        data_transfer=overage(gb, plan.included_data_transfer_gb) * plan.data_transfer_overage_per_gb,
        transcode_overage_minutes=transcode_over,
        transcode=transcode,
        storage=storage,
        inference=inference,
        credit=min(plan.included_inference_credits, inference.raw),
    )


def choose_plan(evaluations: Sequence[PlanEvaluation]) -> Optional[PlanEvaluation]:
    """Lowest total wins; on a tie the earlier plan is kept."""
    best: Optional[PlanEvaluation] = None
    for ev in evaluations:
        if best is None or ev.total < best.total:
            best = ev
    return best


def _included(minutes: float, included: float, over: float, rate: float, unit: str = "min") -> str:
    if over > 0:
        return f"({fmt_num(minutes)} - {fmt_num(included)} included) × ${fmt_rate(rate)}/{unit}"
    return f"{fmt_num(minutes)} {unit} within {fmt_num(included)} included"


def _emit_inference(
    stack: StackConfig, minutes: float, ev: PlanEvaluation, rates: RateTable, ledger: CostLedger
) -> Dict[str, float]:
    """Write the inference lines at the plan's rates; return raw amounts per detail category."""
    a = rates.assumptions
    src = rates.source("livekit_inference")
    plan = ev.plan
    tag = f" ({plan.name})" if plan.inference_discount else ""

    if stack.is_speech_to_speech:
        amount = price_speech_to_speech(
            stack.speech_to_speech_model, minutes, rates.livekit_s2s, rates, ledger, where="LiveKit Inference", source_url=src
        )
        return {S2S_MODEL: amount}

    raw: Dict[str, float] = {}
    stt_rate = rates.livekit_stt.get(stack.stt_model)
    if stt_rate is None:
        raw[STT] = ledger.missing_rate(STT, stack.stt_model, "LiveKit Inference STT rates")
    else:
        rate = stt_rate.pick(plan.inference_discount)
        raw[STT] = ledger.add(
            STT,
            stack.stt_model,
            f"{fmt_num(minutes)} min × {fmt_pct(a.stt_duty_ratio)} duty × ${fmt_rate(rate)}/min{tag}",
            ev.inference.stt,
            src,
        )

    llm_rate = rates.livekit_llm.get(stack.llm_model)
    if llm_rate is None:
        raw[LLM] = ledger.missing_rate(LLM, stack.llm_model, "LiveKit Inference LLM rates")
    else:
        tokens = llm_tokens(minutes, a, use_cache=llm_rate.cached_input is not None)
        raw[LLM] = ledger.add(LLM, stack.llm_model, llm_formula(tokens, llm_rate), ev.inference.llm, src)

    tts_rate = rates.livekit_tts.get(stack.tts_model)
    if tts_rate is None:
        raw[TTS] = ledger.missing_rate(TTS, stack.tts_model, "LiveKit Inference TTS rates")
    else:
        rate = tts_rate.pick(plan.inference_discount)
        raw[TTS] = ledger.add(
            TTS,
            stack.tts_model,
            f"{fmt_num(minutes)} min × {fmt_pct(a.tts_duty_ratio)} duty × {fmt_num(a.avg_chars_per_minute_tts)} chars/min"
            f" ÷ 1M × ${fmt_rate(rate)}/M chars{tag}",
            ev.inference.tts,
            src,
        )
    return raw


def apply_inference_credits(
    raw: Dict[str, float], credit: float, plan_name: str, rates: RateTable, ledger: CostLedger
) -> Dict[str, float]:
    """Spread the bundled credit over inference categories in proportion to their cost.

    Each category gets a negative "Inference credits" line, so its detail
    lines still add up to its (reduced) subtotal.
    """
    total = sum(raw.values())
    if credit <= 0 or total <= 0:
        return dict(raw)
    net: Dict[str, float] = {}
    for category, amount in raw.items():
        share = credit * amount / total
        if share > 0:
            ledger.add(
                category,
                "Inference credits",
                f"-${share:.2f} of ${credit:.2f} {plan_name} credits ({fmt_pct(amount / total)} of inference)",
                -share,
                rates.source("livekit"),
            )
        net[category] = amount - share
    return net


def price_livekit_cloud(
    stack: StackConfig, minutes: float, rates: RateTable, ledger: CostLedger, totals: CategoryTotals
) -> PlanEvaluation:
    evaluations: List[PlanEvaluation] = [evaluate_plan(p, stack, minutes, rates) for p in rates.livekit_plans]
    ev = choose_plan(evaluations)
    assert ev is not None  # RateTable.validate() guarantees at least one plan
    plan = ev.plan
    _LOGGER.debug(
        "LiveKit plan totals at %.0f min: %s -> %s",
        minutes,
        {e.plan.name: round(e.total, 2) for e in evaluations},
        plan.name,
    )
    src = rates.source("livekit")
    ledger.choose(PLATFORM, f"LiveKit {plan.name}")

    overage_text = (
        f"{fmt_num(ev.agent_overage_minutes)} overage min × ${fmt_rate(plan.agent_minute_rate)}/min"
        if ev.agent_overage_minutes > 0
        else "no overage"
    )
    totals.platform = ledger.add(
        PLATFORM, f"LiveKit {plan.name} plan", f"${fmt_num(plan.monthly_fee)}/mo base + {overage_text}", ev.base, src
    )
    if ev.observability > 0:
        totals.platform += ledger.add(
            PLATFORM,
            "Observability overage",
            _included(minutes, plan.included_observability_minutes, ev.observability_overage_minutes, plan.observability_overage_rate),
            ev.observability,
            src,
        )

    totals.transport = ledger.add(
        TRANSPORT,
        "WebRTC participant minutes",
        _included(minutes, plan.included_webrtc_minutes, ev.webrtc_overage_minutes, plan.webrtc_overage_rate),
        ev.webrtc,
        src,
    )
    if ev.data_transfer > 0:
        totals.transport += ledger.add(
            TRANSPORT,
            "Downstream data transfer",
            f"({ev.data_transfer_gb:.1f} GB - {fmt_num(plan.included_data_transfer_gb)} GB included)"
            f" × ${fmt_rate(plan.data_transfer_overage_per_gb)}/GB",
            ev.data_transfer,
            src,
        )

    if stack.recording_mode != "none":
        rate = plan.transcode_audio_rate if stack.recording_mode == "audio-only" else plan.transcode_video_rate
        totals.recording = ledger.add(
            RECORDING,
            f"Transcode ({stack.recording_mode})",
            _included(minutes, plan.included_transcode_minutes, ev.transcode_overage_minutes, rate),
            ev.transcode,
            src,
        )
        totals.recording += price_recording_storage(minutes, stack.recording_mode, rates, ledger)

    raw = _emit_inference(stack, minutes, ev, rates, ledger)
    net = apply_inference_credits(raw, ev.credit, plan.name, rates, ledger)
    totals.stt = net.get(STT, 0.0)
    totals.tts = net.get(TTS, 0.0)
    totals.llm = net.get(LLM, 0.0) + net.get(S2S_MODEL, 0.0)
    return ev


class LiveKitCloudChargeModel(BaseChargeModel):
    """LiveKit Cloud with LiveKit Inference; plan picked on full monthly cost."""

    variant = ("livekit", "cloud")
    label = "LiveKit Cloud"

    def price(self, stack: StackConfig, minutes: float, rates: RateTable, ledger: CostLedger) -> CategoryTotals:
        totals = CategoryTotals()
        price_livekit_cloud(stack, minutes, rates, ledger, totals)
        totals.noise_cancellation = price_noise_cancellation(stack.platform, stack.hosting, minutes, rates, ledger)
        return totals


__all__ = [
    "InferenceQuote",
    "PlanEvaluation",
    "quote_inference",
    "evaluate_plan",
    "choose_plan",
    "apply_inference_credits",
    "price_livekit_cloud",
    "LiveKitCloudChargeModel",
]
