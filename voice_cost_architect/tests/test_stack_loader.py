import json
from textwrap import dedent

import pytest

from voice_cost_architect.stacks import (
    StackIdGenerator,
    check_support,
    load_stack_file,
    parse_stack_document,
    validate_stack,
)
from voice_cost_architect.stacks.model import StackConfig, new_stack


def test_load_yaml_stack_file(tmp_path):
    path = tmp_path / "stacks.yaml"
    path.write_text(
        dedent(
            """
            monthly_minutes: 20000
            stacks:
              - label: LiveKit Cloud
                platform: livekit
                hosting: cloud
                sttModel: cartesia-ink-whisper
                recordingMode: none
              - platform: pipecat
                hosting: self_hosted
                pipeline: s2s
                speech_to_speech_model: gemini-live
                call_mode: audio
                recording_mode: audio
            """
        ),
        encoding="utf-8",
    )
    parsed = load_stack_file(path)

    assert parsed.monthly_minutes == 20_000
    assert parsed.source_file == "stacks.yaml"
    first, second = parsed.stacks
    assert first.id == "stack-1"
    assert first.stt_model == "cartesia-ink-whisper"
    assert first.recording_mode == "none"
    assert second.label == "Stack 2"
    assert second.hosting == "self-hosted"
    assert second.pipeline == "speech-to-speech"
    assert second.call_mode == "audio-only"
    assert second.recording_mode == "audio-only"


def test_load_json_stack_file(tmp_path):
    path = tmp_path / "stacks.json"
    path.write_text(json.dumps({"stacks": [{"id": "mine", "label": "Mine", "visible": "no"}]}), encoding="utf-8")
    parsed = load_stack_file(path)
    assert parsed.monthly_minutes is None
    assert parsed.stacks[0].id == "mine"
    assert parsed.stacks[0].visible is False


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="Unknown key 'provider'"):
        parse_stack_document({"stacks": [{"provider": "x"}]})


def test_missing_stacks_rejected():
    with pytest.raises(ValueError, match="Missing stacks"):
        parse_stack_document({"monthly_minutes": 10})


def test_too_many_stacks_rejected():
    with pytest.raises(ValueError, match="At most 8"):
        parse_stack_document({"stacks": [{} for _ in range(9)]})


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate stack id"):
        parse_stack_document({"stacks": [{"id": "a"}, {"id": "a"}]})


def test_negative_minutes_rejected():
    with pytest.raises(ValueError, match="negative"):
        parse_stack_document({"stacks": [{}], "monthlyMinutes": -5})


def test_unsupported_file_type(tmp_path):
    path = tmp_path / "stacks.toml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported stack file type"):
        load_stack_file(path)


def test_id_generator_is_explicit():
    a = StackIdGenerator()
    b = StackIdGenerator(prefix="cmp")
    assert [a.next_id(), a.next_id()] == ["stack-1", "stack-2"]
    assert b.next_id() == "cmp-1"
    s = new_stack(2, a, platform="livekit")
    assert s.id == "stack-3"
    assert s.label == "Stack 3"


def test_validation_separates_structural_and_model_issues():
    stack = StackConfig(id="x", label="X", hosting="edge", llm_model="llama-9")
    issues = validate_stack(stack)
    by_field = {i.field: i for i in issues}
    assert by_field["hosting"].blocking
    assert not by_field["llm_model"].blocking


def test_inactive_models_are_not_validated():
    stack = StackConfig(id="x", label="X", pipeline="speech-to-speech", stt_model="nope")
    assert validate_stack(stack) == []


def test_check_support_reports_block_rule():
    ok = check_support(StackConfig(id="x", label="X"))
    assert ok.ok and ok.reason is None
    blocked = check_support(StackConfig(id="x", label="X", call_mode="audio-only"))
    assert not blocked.ok


@pytest.mark.parametrize("value", [["a", "b"], {"x": 1}, 3])
def test_non_string_model_rejected(value):
    with pytest.raises(ValueError, match=r"stt_model must be a string in stacks\.stacks\[0\]"):
        parse_stack_document({"stacks": [{"stt_model": value}]})


def test_non_string_enum_rejected_in_yaml(tmp_path):
    path = tmp_path / "stacks.yaml"
    path.write_text("stacks:\n  - llmModel: {x: 1}\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"llm_model must be a string in stackfile\(stacks.yaml\)"):
        load_stack_file(path)


@pytest.mark.parametrize("minutes", [2.9, True, "lots"])
def test_monthly_minutes_must_be_integral(minutes):
    with pytest.raises(ValueError, match="monthly_minutes must be an integer"):
        parse_stack_document({"stacks": [{}], "monthly_minutes": minutes})


def test_monthly_minutes_accepts_whole_float():
    assert parse_stack_document({"stacks": [{}], "monthly_minutes": 2000.0}).monthly_minutes == 2000


def test_validation_flags_non_string_fields():
    stack = StackConfig(id="x", label="X", stt_model=["a", "b"], platform={"p": 1})
    by_field = {i.field: i for i in validate_stack(stack)}
    assert by_field["stt_model"].issue == "invalid"
    assert by_field["stt_model"].blocking
    assert by_field["platform"].message == "platform must be a string"
