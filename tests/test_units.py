import pytest

from voice_cost_architect.pricing.rates import TokenRate, UsageAssumptions
from voice_cost_architect.pricing.units import (
    downstream_gb,
    fmt_num,
    fmt_rate,
    fmt_units,
    llm_cost,
    llm_tokens,
    overage,
    storage_gb,
    stt_minutes,
    stt_seconds,
    tts_chars,
)

A = UsageAssumptions()


def test_stt_only_bills_user_speech():
    assert stt_minutes(1_000, A) == pytest.approx(660)
    assert stt_seconds(1_000, A) == pytest.approx(39_600)


def test_tts_chars_follow_agent_duty_cycle():
    # 1,000 min x 24% agent speech x 900 chars/min
    assert tts_chars(1_000, A) == pytest.approx(216_000)


def test_llm_tokens_split_cached_input():
    t = llm_tokens(1_000, A)
    assert t.cached_input == pytest.approx(240_000)
    assert t.fresh_input == pytest.approx(560_000)
    assert t.total_input == pytest.approx(800_000)
    assert t.output == pytest.approx(400_000)


def test_llm_tokens_without_cache():
    t = llm_tokens(1_000, A, use_cache=False)
    assert t.cached_input == 0.0
    assert t.fresh_input == pytest.approx(800_000)


def test_llm_cost_falls_back_to_input_rate_for_cache():
    t = llm_tokens(1_000, A)
    no_cache_rate = TokenRate(input=1.0, output=2.0)
    assert llm_cost(t, no_cache_rate) == pytest.approx(0.8 + 0.8)
    cached_rate = TokenRate(input=1.0, output=2.0, cached_input=0.5)
    assert llm_cost(t, cached_rate) == pytest.approx(0.56 + 0.12 + 0.8)


def test_storage_and_transfer_in_gb():
    assert storage_gb(1_024, 1.0) == pytest.approx(1.0)
    assert downstream_gb(4_000, A) == pytest.approx(0.9375)


def test_overage_never_negative():
    assert overage(5, 10) == 0.0
    assert overage(15, 10) == 5.0


def test_fmt_rate_has_no_scientific_notation():
    assert fmt_rate(0.0000025) == "0.0000025"
    assert fmt_rate(0.01) == "0.01"
    assert fmt_rate(0) == "0"
    assert "e" not in fmt_rate(1e-7)


def test_fmt_units_and_numbers():
    assert fmt_units(950) == "950"
    assert fmt_units(216_000) == "216K"
    assert fmt_units(2_500_000) == "2.50M"
    assert fmt_num(12_000) == "12,000"
    assert fmt_num(1234.5) == "1,234.50"
