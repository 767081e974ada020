from dataclasses import replace

import pytest

from voice_cost_architect.charge_models.inference import price_direct_speech, price_speech_to_speech
from voice_cost_architect.charge_models.types import STT, TTS, CostLedger
from voice_cost_architect.pricing.engine import compute
from voice_cost_architect.pricing.rates import (
    CARTESIA_TIERS,
    DEFAULT_RATE_TABLE,
    SharedCreditPool,
    SubscriptionTier,
)
from voice_cost_architect.stacks.model import StackConfig


def _stack(**kw):
    base = dict(id="s1", label="S1", platform="pipecat", hosting="cloud", recording_mode="none")
    base.update(kw)
    return StackConfig(**base)


def _lines(b, category):
    return [d for d in b.details if d.category == category]


def test_shared_pool_split_sums_to_tier_cost():
    ledger = CostLedger()
    stt, tts = price_direct_speech("cartesia-ink-whisper", "cartesia-sonic-3", 1_000, DEFAULT_RATE_TABLE, ledger)

    # 39,600 STT seconds + 216,000 TTS chars -> Startup ($39)
    assert stt + tts == pytest.approx(39.0)
    assert stt == pytest.approx(39.0 * 39_600 / 255_600)
    assert ledger.best_plans == {STT: "Cartesia Startup", TTS: "Cartesia Startup"}
    assert len(ledger.details) == 2


def test_shared_pool_is_cheaper_than_separate_optimization():
    b = compute(_stack(stt_model="cartesia-ink-whisper", tts_model="cartesia-sonic-3"), 1_000)
    assert b.stt + b.tts == pytest.approx(39.0)


def test_pool_member_paired_with_other_vendor_is_priced_alone():
    b = compute(_stack(stt_model="deepgram-nova-3", tts_model="cartesia-sonic-3"), 10_000)
    # 2.16M chars alone need Scale
    assert b.tts == pytest.approx(239.0)
    assert b.best_plans["TTS"] == "Cartesia Scale"
    assert b.stt == pytest.approx(6_600 * 0.0077)
    assert b.best_plans["STT"] == "Deepgram Pay As You Go"


def test_elevenlabs_tier_selection():
    b = compute(_stack(tts_model="elevenlabs-turbo-v2.5"), 1_000)
    assert b.best_plans["TTS"] == "ElevenLabs Creator"
    assert b.tts == pytest.approx(24.4)


def test_deepgram_growth_at_high_volume():
    b = compute(_stack(), 200_000)
    assert b.best_plans["STT"] == "Deepgram Growth"
    assert b.stt == pytest.approx(132_000 * 0.0065)


def test_flat_rate_stt():
    b = compute(_stack(stt_model="soniox-realtime"), 1_000)
    assert b.stt == pytest.approx(660 * 0.002)
    assert "STT" not in b.best_plans


def test_direct_llm_has_no_cache_discount():
    b = compute(_stack(), 1_000)
    assert b.llm == pytest.approx(0.8 * 1.75 + 0.4 * 14.0)


def test_missing_stt_rate_is_zero_line_with_warning():
    b = compute(_stack(stt_model="whisper-x"), 1_000)
    assert b.supported
    assert b.stt == 0.0
    [line] = _lines(b, "STT")
    assert line.amount == 0.0
    assert "rate missing" in line.formula
    assert any("whisper-x" in w for w in b.warnings)


def test_tts_tier_exhaustion_falls_back_to_list_rate():
    rates = replace(DEFAULT_RATE_TABLE, tts_tiers={"elevenlabs-turbo-v2.5": (SubscriptionTier("Tiny", 1, 10),)})
    b = compute(_stack(tts_model="elevenlabs-turbo-v2.5"), 1_000, rates=rates)
    assert b.tts == pytest.approx(0.216 * 60)
    assert any("exceed" in w for w in b.warnings)


def test_shared_pool_exhaustion_falls_back_to_list_rates():
    pool = SharedCreditPool(
        name="Cartesia",
        tiers=CARTESIA_TIERS[:1],
        stt_models=frozenset({"cartesia-ink-whisper"}),
        tts_models=frozenset({"cartesia-sonic-3"}),
    )
    rates = replace(DEFAULT_RATE_TABLE, shared_credit_pools=(pool,))
    b = compute(_stack(stt_model="cartesia-ink-whisper", tts_model="cartesia-sonic-3"), 1_000, rates=rates)
    assert b.stt == pytest.approx(660 * 0.0022)
    assert b.tts == pytest.approx(0.216 * 30)
    assert any("Cartesia" in w for w in b.warnings)


def test_speech_to_speech_openai_per_minute():
    ledger = CostLedger()
    amount = price_speech_to_speech(
        "openai-realtime", 1_000, DEFAULT_RATE_TABLE.direct_s2s, DEFAULT_RATE_TABLE, ledger, where="direct"
    )
    # (396 in-tok x $32/M + 288 out-tok x $64/M) x 1.15
    assert amount == pytest.approx(1_000 * 0.0357696)
    assert ledger.details[0].category == "S2S Model"


def test_speech_to_speech_bypasses_cascaded_models():
    b = compute(_stack(pipeline="speech-to-speech", speech_to_speech_model="gemini-live"), 1_000)
    assert b.stt == 0.0
    assert b.tts == 0.0
    assert b.llm == pytest.approx(1_000 * 0.009477)
    assert not _lines(b, "STT") and not _lines(b, "LLM") and not _lines(b, "TTS")


def test_unknown_speech_to_speech_model_is_missing_rate():
    b = compute(_stack(pipeline="speech-to-speech", speech_to_speech_model="nova-sonic"), 1_000)
    assert b.llm == 0.0
    assert b.warnings
