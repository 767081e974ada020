"""Conversion of session minutes into billed units.

A voice session is not billed uniformly: STT only runs while the user speaks,
TTS only while the agent speaks, and the LLM sees a token stream whose size
depends on the conversation. These helpers apply the duty-cycle assumptions
of a ``UsageAssumptions`` to a monthly-minutes volume.
"""

from __future__ import annotations

from dataclasses import dataclass

from .rates import SpeechToSpeechRate, TokenRate, UsageAssumptions

PER_MILLION = 1_000_000.0
MB_PER_GB = 1024.0


@dataclass(frozen=True)
class LlmTokens:
    fresh_input: float
    cached_input: float
    output: float

    @property
    def total_input(self) -> float:
        return self.fresh_input + self.cached_input


def stt_minutes(minutes: float, assumptions: UsageAssumptions) -> float:
    return minutes * assumptions.stt_duty_ratio


def stt_seconds(minutes: float, assumptions: UsageAssumptions) -> float:
    return stt_minutes(minutes, assumptions) * 60.0


def tts_chars(minutes: float, assumptions: UsageAssumptions) -> float:
    return minutes * assumptions.tts_duty_ratio * assumptions.avg_chars_per_minute_tts


def llm_tokens(minutes: float, assumptions: UsageAssumptions, *, use_cache: bool = True) -> LlmTokens:
    total_input = minutes * assumptions.avg_input_tokens_per_minute
    cached = total_input * assumptions.cache_hit_rate if use_cache else 0.0
    return LlmTokens(
        fresh_input=total_input - cached,
        cached_input=cached,
        output=minutes * assumptions.avg_output_tokens_per_minute,
    )


def llm_cost(tokens: LlmTokens, rate: TokenRate) -> float:
    cached_rate = rate.cached_input if rate.cached_input is not None else rate.input
    return (
        tokens.fresh_input / PER_MILLION * rate.input
        + tokens.cached_input / PER_MILLION * cached_rate
        + tokens.output / PER_MILLION * rate.output
    )


def s2s_tokens_per_minute(rate: SpeechToSpeechRate, assumptions: UsageAssumptions) -> tuple[float, float]:
    """Audio tokens per session minute, after the user/agent duty split."""
    tokens_in = assumptions.stt_duty_ratio * rate.input_tokens_per_sec * 60.0
    tokens_out = assumptions.tts_duty_ratio * rate.output_tokens_per_sec * 60.0
    return tokens_in, tokens_out


def s2s_cost_per_minute(rate: SpeechToSpeechRate, assumptions: UsageAssumptions) -> float:
    tokens_in, tokens_out = s2s_tokens_per_minute(rate, assumptions)
    marginal = tokens_in / PER_MILLION * rate.input_per_million + tokens_out / PER_MILLION * rate.output_per_million
    return marginal * rate.session_overhead * rate.margin


def storage_gb(minutes: float, mb_per_minute: float) -> float:
    return minutes * mb_per_minute / MB_PER_GB


def downstream_gb(minutes: float, assumptions: UsageAssumptions) -> float:
    return storage_gb(minutes, assumptions.avg_downstream_mb_per_minute)


def overage(used: float, included: float) -> float:
    return max(0.0, used - included)


# ---- formatting helpers shared by formula strings ----
def fmt_units(n: float) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.2f}M"
    if n >= 1_000:
        return f"{n / 1_000:.0f}K"
    return f"{n:.0f}"


def fmt_num(n: float) -> str:
    if float(n).is_integer():
        return f"{n:,.0f}"
    return f"{n:,.2f}"


def fmt_rate(r: float) -> str:
    text = f"{r:.8f}".rstrip("0").rstrip(".")
    return text or "0"


def fmt_pct(ratio: float) -> str:
    return f"{ratio * 100:.0f}%"
