import pytest

from voice_cost_architect.charge_models.livekit_cloud import apply_inference_credits, choose_plan, evaluate_plan
from voice_cost_architect.charge_models.types import CostLedger
from voice_cost_architect.pricing.engine import compute
from voice_cost_architect.pricing.rates import DEFAULT_RATE_TABLE
from voice_cost_architect.stacks.model import StackConfig


def _livekit(**kw):
    base = dict(id="lk", label="LiveKit Cloud", platform="livekit", hosting="cloud")
    base.update(kw)
    return StackConfig(**base)


def _evaluations(stack, minutes):
    return {p.name: evaluate_plan(p, stack, minutes, DEFAULT_RATE_TABLE) for p in DEFAULT_RATE_TABLE.livekit_plans}


def test_ship_wins_at_low_volume():
    evs = _evaluations(_livekit(), 4_000)
    assert evs["Ship"].total == pytest.approx(203.3675625)
    assert evs["Scale"].total == pytest.approx(526.3995625)

    b = compute(_livekit(), 4_000)
    assert b.best_plans["Platform"] == "LiveKit Ship"
    assert b.total == pytest.approx(203.3675625)
    assert b.platform == pytest.approx(50.0)
    assert b.recording == pytest.approx(68.0 + 0.3515625)
    assert b.stt + b.llm + b.tts == pytest.approx(90.016 - 5.0)


def test_scale_wins_at_high_volume():
    evs = _evaluations(_livekit(), 70_000)
    assert evs["Ship"].total == pytest.approx(3989.43234375)
    assert evs["Scale"].total == pytest.approx(3016.99234375)

    b = compute(_livekit(), 70_000)
    assert b.best_plans["Platform"] == "LiveKit Scale"
    assert b.total == pytest.approx(evs["Scale"].total)
    # fee + agent overage + observability overage; credits are not taken from platform
    assert b.platform == pytest.approx(500 + 200 + 100)


def test_total_matches_winning_evaluation():
    stack = _livekit(recording_mode="audio-only", call_mode="audio-only")
    for minutes in (0, 1_000, 25_000, 60_000, 400_000):
        best = choose_plan(list(_evaluations(stack, minutes).values()))
        b = compute(stack, minutes)
        assert b.total == pytest.approx(best.total)
        assert b.best_plans["Platform"] == f"LiveKit {best.plan.name}"


def test_zero_volume_is_ship_fee():
    b = compute(_livekit(), 0)
    assert b.total == pytest.approx(50.0)
    assert b.best_plans["Platform"] == "LiveKit Ship"


def test_scale_uses_discounted_inference_rates():
    b = compute(_livekit(), 70_000)
    stt_line = next(d for d in b.details if d.category == "STT" and d.label == "deepgram-nova-3")
    assert stt_line.amount == pytest.approx(46_200 * 0.0065)
    assert "(Scale)" in stt_line.formula


def test_credits_apportioned_per_category():
    b = compute(_livekit(), 4_000)
    credits = [d for d in b.details if d.label == "Inference credits"]
    assert {d.category for d in credits} == {"STT", "LLM", "TTS"}
    assert sum(d.amount for d in credits) == pytest.approx(-5.0)
    for category, subtotal in (("STT", b.stt), ("LLM", b.llm), ("TTS", b.tts)):
        assert sum(d.amount for d in b.details if d.category == category) == pytest.approx(subtotal)


def test_apply_inference_credits_proportional():
    ledger = CostLedger()
    net = apply_inference_credits({"STT": 30.0, "LLM": 50.0, "TTS": 20.0}, 10.0, "Ship", DEFAULT_RATE_TABLE, ledger)
    assert net == pytest.approx({"STT": 27.0, "LLM": 45.0, "TTS": 18.0})
    assert [d.amount for d in ledger.details] == pytest.approx([-3.0, -5.0, -2.0])


def test_credits_capped_at_inference_cost():
    ledger = CostLedger()
    net = apply_inference_credits({"STT": 1.0, "LLM": 3.0}, 4.0, "Scale", DEFAULT_RATE_TABLE, ledger)
    assert net == pytest.approx({"STT": 0.0, "LLM": 0.0})


def test_evaluation_has_no_side_effects():
    stack = _livekit(stt_model="unknown-stt")
    evs = _evaluations(stack, 1_000)
    assert evs["Ship"].inference.stt == 0.0
    b = compute(stack, 1_000)
    assert any("unknown-stt" in w for w in b.warnings)
    assert sum(1 for w in b.warnings if "unknown-stt" in w) == 1


def test_speech_to_speech_on_livekit_inference():
    b = compute(_livekit(pipeline="speech-to-speech"), 4_000)
    s2s = [d for d in b.details if d.category == "S2S Model"]
    assert s2s[0].amount == pytest.approx(4_000 * 0.0357696 * 1.10)
    assert b.stt == 0.0 and b.tts == 0.0
    assert b.llm == pytest.approx(s2s[0].amount - 5.0)


def test_data_transfer_overage_line_only_when_exceeded():
    small = compute(_livekit(), 10_000)
    assert not any(d.label == "Downstream data transfer" for d in small.details)
    big = compute(_livekit(), 20_000_000)
    line = next(d for d in big.details if d.label == "Downstream data transfer")
    assert line.amount > 0
