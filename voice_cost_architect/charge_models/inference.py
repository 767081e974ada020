"""Direct (bring-your-own-provider) inference pricing.

STT and TTS models are priced through the first scheme that applies to them:

1. a shared credit pool (one balance consumed by both STT and TTS)
2. subscription tiers
3. commitment plans
4. the provider's flat list rate

A model that none of these price is recorded as a missing rate. LLMs are
priced per million tokens; speech-to-speech models from audio-token
throughput.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Tuple

from ..pricing.rates import RateTable, SharedCreditPool, SpeechToSpeechRate, TokenRate, provider_key
from ..pricing.tiers import TierResult, optimize_tier, select_commitment_plan
from ..pricing.units import (
    PER_MILLION,
    LlmTokens,
    fmt_num,
    fmt_pct,
    fmt_rate,
    fmt_units,
    llm_cost,
    llm_tokens,
    s2s_cost_per_minute,
    s2s_tokens_per_minute,
    stt_minutes,
    stt_seconds,
    tts_chars,
)
from .types import LLM, S2S_MODEL, STT, TTS, CostLedger

_LOGGER = logging.getLogger(__name__)

_VENDOR_NAMES = {
    "assemblyai": "AssemblyAI",
    "cartesia": "Cartesia",
    "deepgram": "Deepgram",
    "elevenlabs": "ElevenLabs",
    "soniox": "Soniox",
    "openai": "OpenAI",
    "google": "Google",
}


def vendor_name(model: str) -> str:
    return _VENDOR_NAMES.get(provider_key(model) or "", model)


def model_source(rates: RateTable, model: str) -> Optional[str]:
    key = provider_key(model)
    return rates.source(key) if key else None


def llm_formula(tokens: LlmTokens, rate: TokenRate, suffix: str = "") -> str:
    parts = [f"Input: {fmt_units(tokens.fresh_input)} tok × ${fmt_rate(rate.input)}/M"]
    if tokens.cached_input > 0 and rate.cached_input is not None:
        parts.append(f"Cached: {fmt_units(tokens.cached_input)} tok × ${fmt_rate(rate.cached_input)}/M")
    parts.append(f"Output: {fmt_units(tokens.output)} tok × ${fmt_rate(rate.output)}/M")
    text = " + ".join(parts)
    return f"{text} ({suffix})" if suffix else text


def tier_formula(units: float, unit_name: str, result: TierResult) -> str:
    tier = result.tier
    text = f"{fmt_units(units)} {unit_name} on {tier.name} (${fmt_num(tier.monthly_fee)}/mo, {fmt_units(tier.included_units)} incl)"
    if result.overage > 0:
        text += f" + {fmt_units(result.overage)} over × ${fmt_rate(tier.overage_rate)}"
    return text


# ---------------------------------------------------------------------
# LLM
# ---------------------------------------------------------------------
def price_direct_llm(model: str, minutes: float, rates: RateTable, ledger: CostLedger) -> float:
    rate = rates.direct_llm.get(model)
    if rate is None:
        return ledger.missing_rate(LLM, model, "direct LLM rates")
    tokens = llm_tokens(minutes, rates.assumptions, use_cache=rate.cached_input is not None)
    cost = llm_cost(tokens, rate)
    return ledger.add(LLM, model, llm_formula(tokens, rate, "direct"), cost, model_source(rates, model))


# ---------------------------------------------------------------------
# STT / TTS
# ---------------------------------------------------------------------
def _pool_member(rates: RateTable, model: str, kind: str) -> Optional[SharedCreditPool]:
    for pool in rates.shared_credit_pools:
        members = pool.stt_models if kind == "stt" else pool.tts_models
        if model in members:
            return pool
    return None


def price_direct_speech(
    stt_model: str, tts_model: str, minutes: float, rates: RateTable, ledger: CostLedger
) -> Tuple[float, float]:
    """Return (stt, tts). Models drawing on the same credit pool are optimized together."""
    stt_pool = _pool_member(rates, stt_model, "stt")
    tts_pool = _pool_member(rates, tts_model, "tts")
    if stt_pool is not None and stt_pool == tts_pool:
        return price_shared_pool(stt_pool, stt_model, tts_model, minutes, rates, ledger)

    if stt_pool is not None:
        stt, _ = price_shared_pool(stt_pool, stt_model, None, minutes, rates, ledger)
    else:
        stt = price_direct_stt(stt_model, minutes, rates, ledger)
    if tts_pool is not None:
        _, tts = price_shared_pool(tts_pool, None, tts_model, minutes, rates, ledger)
    else:
        tts = price_direct_tts(tts_model, minutes, rates, ledger)
    return stt, tts


def price_shared_pool(
    pool: SharedCreditPool,
    stt_model: Optional[str],
    tts_model: Optional[str],
    minutes: float,
    rates: RateTable,
    ledger: CostLedger,
) -> Tuple[float, float]:
    """One tier selection over the pooled credits, split back by credit share.

    The STT part is ``cost x stt_share`` and the TTS part is the remainder, so
    the two always add up to the pooled tier cost.
    """
    a = rates.assumptions
    stt_credits = stt_seconds(minutes, a) * pool.stt_credits_per_second if stt_model else 0.0
    tts_credits = tts_chars(minutes, a) * pool.tts_credits_per_char if tts_model else 0.0
    credits = stt_credits + tts_credits

    result = optimize_tier(pool.tiers, credits)
    if result is None:
        ledger.warn(f"{pool.name}: {fmt_units(credits)} credits exceed every plan; priced at list rates")
        stt = _flat_stt(stt_model, minutes, rates, ledger, note="plans exhausted") if stt_model else 0.0
        tts = _flat_tts(tts_model, minutes, rates, ledger, note="plans exhausted") if tts_model else 0.0
        return stt, tts

    share = stt_credits / credits if credits > 0 else 0.0
    stt_cost = result.cost * share if stt_model else 0.0
    tts_cost = result.cost - stt_cost if tts_model else 0.0

    plan = f"{pool.name} {result.tier.name}"
    pooled = tier_formula(credits, "credits", result)
    if stt_model:
        ledger.choose(STT, plan)
        ledger.add(
            STT,
            f"{stt_model} ({plan})",
            f"{fmt_units(stt_credits)} STT credits of {pooled}; {fmt_pct(share)} share",
            stt_cost,
            model_source(rates, stt_model),
        )
    if tts_model:
        ledger.choose(TTS, plan)
        ledger.add(
            TTS,
            f"{tts_model} ({plan})",
            f"{fmt_units(tts_credits)} TTS credits of {pooled}; {fmt_pct(1.0 - share)} share",
            tts_cost,
            model_source(rates, tts_model),
        )
    return stt_cost, tts_cost


def price_direct_stt(model: str, minutes: float, rates: RateTable, ledger: CostLedger) -> float:
    units = stt_minutes(minutes, rates.assumptions)
    commitment = select_commitment_plan(rates.stt_commitment_plans, model, units)
    if commitment is not None:
        plan = f"{vendor_name(model)} {commitment.plan.name}"
        formula = f"{fmt_units(units)} STT min × ${fmt_rate(commitment.plan.rates[model])}/min"
        if commitment.hits_minimum:
            formula += f" (below ${fmt_num(round(commitment.monthly_minimum, 2))}/mo minimum, billed at minimum)"
        ledger.choose(STT, plan)
        return ledger.add(STT, f"{model} ({plan})", formula, commitment.cost, model_source(rates, model))
    return _flat_stt(model, minutes, rates, ledger)


def price_direct_tts(model: str, minutes: float, rates: RateTable, ledger: CostLedger) -> float:
    chars = tts_chars(minutes, rates.assumptions)
    tiers = rates.tts_tiers.get(model)
    if tiers:
        result = optimize_tier(tiers, chars)
        if result is not None:
            plan = f"{vendor_name(model)} {result.tier.name}"
            ledger.choose(TTS, plan)
            return ledger.add(
                TTS, f"{model} ({plan})", tier_formula(chars, "chars", result), result.cost, model_source(rates, model)
            )
        ledger.warn(f"{model}: {fmt_units(chars)} chars exceed every {vendor_name(model)} plan; priced at list rate")
        return _flat_tts(model, minutes, rates, ledger, note="plans exhausted")
    return _flat_tts(model, minutes, rates, ledger)


def _flat_stt(model: str, minutes: float, rates: RateTable, ledger: CostLedger, note: str = "list rate") -> float:
    rate = rates.direct_stt.get(model)
    if rate is None:
        return ledger.missing_rate(STT, model, "direct STT rates")
    a = rates.assumptions
    formula = f"{fmt_num(minutes)} min × {fmt_pct(a.stt_duty_ratio)} duty × ${fmt_rate(rate)}/min ({note})"
    return ledger.add(STT, model, formula, stt_minutes(minutes, a) * rate, model_source(rates, model))


def _flat_tts(model: str, minutes: float, rates: RateTable, ledger: CostLedger, note: str = "list rate") -> float:
    rate = rates.direct_tts.get(model)
    if rate is None:
        return ledger.missing_rate(TTS, model, "direct TTS rates")
    chars = tts_chars(minutes, rates.assumptions)
    formula = f"{fmt_units(chars)} chars × ${fmt_rate(rate)}/M chars ({note})"
    return ledger.add(TTS, model, formula, chars / PER_MILLION * rate, model_source(rates, model))


# ---------------------------------------------------------------------
# Speech-to-speech
# ---------------------------------------------------------------------
def price_speech_to_speech(
    model: str,
    minutes: float,
    table: Mapping[str, SpeechToSpeechRate],
    rates: RateTable,
    ledger: CostLedger,
    *,
    where: str,
    source_url: Optional[str] = None,
) -> float:
    """S2S replaces STT, LLM and TTS; its amount rolls into the ``llm`` subtotal."""
    rate = table.get(model)
    if rate is None:
        return ledger.missing_rate(S2S_MODEL, model, f"{where} speech-to-speech rates")

    a = rates.assumptions
    per_min = s2s_cost_per_minute(rate, a)
    tokens_in, tokens_out = s2s_tokens_per_minute(rate, a)
    formula = (
        f"{fmt_num(minutes)} min × ({fmt_num(tokens_in)} in-tok/min × ${fmt_rate(rate.input_per_million)}/M"
        f" + {fmt_num(tokens_out)} out-tok/min × ${fmt_rate(rate.output_per_million)}/M)"
        f" × {rate.session_overhead:g}x session overhead"
    )
    if rate.margin != 1.0:
        formula += f" × {rate.margin:g}x margin"
    formula += f" = ${per_min:.4f}/min"
    _LOGGER.debug("S2S %s (%s) priced at %.5f/min", model, where, per_min)
    return ledger.add(
        S2S_MODEL, f"{model} ({where})", formula, minutes * per_min, source_url or model_source(rates, model)
    )


__all__ = [
    "vendor_name",
    "model_source",
    "llm_formula",
    "tier_formula",
    "price_direct_llm",
    "price_direct_speech",
    "price_shared_pool",
    "price_direct_stt",
    "price_direct_tts",
    "price_speech_to_speech",
]
