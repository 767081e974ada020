import pytest

from voice_cost_architect.charge_models.registry import DEFAULT_REGISTRY, ChargeModelRegistry
from voice_cost_architect.charge_models.types import CATEGORY_FIELDS, SUBTOTAL_FIELDS
from voice_cost_architect.pricing.engine import (
    BASE_CHART_TICKS,
    chart_ticks,
    compare_stacks,
    compute,
    generate_chart_data,
    generate_series,
)
from voice_cost_architect.stacks import default_stacks
from voice_cost_architect.stacks.model import HOSTINGS, PLATFORMS, StackConfig

VOLUMES = [0, 500, 4_000, 10_000, 50_000, 70_000, 250_000, 1_000_000]


def _all_variants():
    for stack in default_stacks():
        for pipeline in ("stt-llm-tts", "speech-to-speech"):
            for recording in ("none", "audio-only", "audio-video"):
                yield stack.with_changes(pipeline=pipeline, recording_mode=recording)


def test_registry_covers_every_platform_and_hosting():
    assert DEFAULT_REGISTRY.missing_variants() == []
    assert len(DEFAULT_REGISTRY.models) == len(PLATFORMS) * len(HOSTINGS)


def test_missing_variant_is_unsupported_not_zero():
    b = compute(default_stacks()[0], 1_000, registry=ChargeModelRegistry())
    assert not b.supported
    assert "No charge model" in b.unsupported_reason


@pytest.mark.parametrize(
    "label,expected",
    [
        ("Pipecat Cloud", 0.0),
        ("LiveKit Cloud", 50.0),
        ("Pipecat Self-Host", 143.0),
        ("LiveKit Self-Host", 143.0),
    ],
)
def test_zero_volume_is_fixed_cost_only(presets, label, expected):
    b = compute(presets[label], 0)
    assert b.total == pytest.approx(expected)
    assert b.per_minute == 0.0


def test_preset_totals_at_ten_thousand_minutes(presets):
    assert compute(presets["Pipecat Cloud"], 10_000).total == pytest.approx(617.19890625)
    assert compute(presets["Pipecat Self-Host"], 10_000).total == pytest.approx(640.59890625)
    assert compute(presets["LiveKit Self-Host"], 10_000).total == pytest.approx(503.69890625)
    assert compute(presets["LiveKit Cloud"], 10_000).total == pytest.approx(533.91890625)


def test_category_subtotals_match_detail_lines():
    for stack in _all_variants():
        for minutes in VOLUMES:
            b = compute(stack, minutes)
            assert b.supported, stack
            sums = {name: 0.0 for name in CATEGORY_FIELDS}
            for d in b.details:
                sums[SUBTOTAL_FIELDS[d.category]] += d.amount
            for name in CATEGORY_FIELDS:
                assert sums[name] == pytest.approx(getattr(b, name), abs=1e-9), (stack.variant, minutes, name)
            assert b.total == pytest.approx(sum(b.by_category().values()))


def test_totals_never_decrease_with_volume():
    for stack in _all_variants():
        totals = [p.total for p in generate_series(stack, VOLUMES)]
        assert totals == sorted(totals), stack.variant


def test_compute_does_not_mutate_stack():
    stack = default_stacks()[1]
    before = stack.to_dict()
    compute(stack, 12_345)
    assert stack.to_dict() == before


def test_negative_minutes_raise():
    with pytest.raises(ValueError):
        compute(default_stacks()[0], -1)


def test_video_recording_on_audio_call_is_unsupported():
    stack = default_stacks()[0].with_changes(call_mode="audio-only", recording_mode="audio-video")
    b = compute(stack, 1_000)
    assert not b.supported
    assert b.total == 0.0
    assert b.details == []
    assert "audio+video call" in b.unsupported_reason


def test_unknown_platform_is_unsupported():
    stack = StackConfig(id="x", label="X", platform="vapi")
    b = compute(stack, 1_000)
    assert not b.supported
    assert "platform" in b.unsupported_reason


def test_restriction_notes_attached(presets):
    b = compute(presets["LiveKit Cloud"], 1_000)
    assert any("LiveKit Ship" in n for n in b.notes)
    assert b.rates_version


def test_detail_lines_carry_sources(presets):
    b = compute(presets["Pipecat Self-Host"], 10_000)
    assert all(d.source_url for d in b.details)


def test_generate_series_sorted_and_independent(presets):
    stack = presets["Pipecat Cloud"]
    points = generate_series(stack, [5_000, 0, 1_000])
    assert [p.volume for p in points] == [0, 1_000, 5_000]
    assert points[2].total == pytest.approx(compute(stack, 5_000).total)


def test_chart_ticks_default():
    assert chart_ticks() == list(BASE_CHART_TICKS)
    assert chart_ticks(50_000) == list(BASE_CHART_TICKS)


def test_chart_ticks_extend_beyond_hundred_thousand():
    assert chart_ticks(250_000)[-3:] == [150_000, 200_000, 300_000]
    assert chart_ticks(120_000)[-1] == 150_000
    assert chart_ticks(160_000)[-2:] == [150_000, 200_000]


def test_generate_chart_data_uses_ticks(presets):
    points = generate_chart_data(presets["LiveKit Cloud"])
    assert [p.volume for p in points] == list(BASE_CHART_TICKS)


def test_compare_stacks_ranks_cheapest_first(presets):
    summaries = compare_stacks(list(presets.values()), 10_000)
    assert [s.label for s in summaries] == ["LiveKit Self-Host", "LiveKit Cloud", "Pipecat Cloud", "Pipecat Self-Host"]
    assert summaries[0].delta_vs_cheapest.absolute == 0.0
    assert all(s.delta_vs_cheapest.absolute > 0 for s in summaries[1:])
    assert summaries[1].delta_vs_cheapest.percent == pytest.approx((533.91890625 / 503.69890625 - 1) * 100)


def test_compare_stacks_skips_hidden_and_puts_unsupported_last(presets):
    stacks = list(presets.values())
    stacks[0] = stacks[0].with_changes(visible=False)
    stacks[1] = stacks[1].with_changes(call_mode="audio-only")
    summaries = compare_stacks(stacks, 10_000)
    assert len(summaries) == 3
    assert not summaries[-1].supported
    assert summaries[-1].delta_vs_cheapest is None


def test_non_string_model_is_unsupported_not_raised():
    stack = default_stacks()[0].with_changes(stt_model=["a", "b"])
    b = compute(stack, 1_000)
    assert not b.supported
    assert b.total == 0.0
    assert "stt_model must be a string" in b.unsupported_reason
