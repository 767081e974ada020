from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .model import (
    CALL_MODES,
    HOSTINGS,
    LLM_MODELS,
    PIPELINES,
    PLATFORMS,
    RECORDING_MODES,
    S2S_MODELS,
    STT_MODELS,
    TTS_MODELS,
    StackConfig,
)

# Accepted spellings -> canonical value.
_VALUE_ALIASES: Dict[str, Dict[str, str]] = {
    "hosting": {"selfhosted": "self-hosted", "self_hosted": "self-hosted", "self": "self-hosted"},
    "pipeline": {
        "cascaded": "stt-llm-tts",
        "stt_llm_tts": "stt-llm-tts",
        "s2s": "speech-to-speech",
        "speech_to_speech": "speech-to-speech",
        "realtime": "speech-to-speech",
    },
    "call_mode": {"audio": "audio-only", "audio_only": "audio-only", "video": "audio-video", "audio_video": "audio-video"},
    "recording_mode": {
        "off": "none",
        "audio": "audio-only",
        "audio_only": "audio-only",
        "video": "audio-video",
        "audio_video": "audio-video",
    },
}

# Fields that decide which calculators run; an unknown value cannot be priced.
_STRUCTURAL = {
    "platform": PLATFORMS,
    "hosting": HOSTINGS,
    "pipeline": PIPELINES,
    "call_mode": CALL_MODES,
    "recording_mode": RECORDING_MODES,
}

# Model ids only select rate-table rows; unknown ones price as missing rates.
_MODELS = {
    "stt_model": STT_MODELS,
    "llm_model": LLM_MODELS,
    "tts_model": TTS_MODELS,
    "speech_to_speech_model": S2S_MODELS,
}


@dataclass(frozen=True)
class StackIssue:
    field: str
    issue: str  # "unknown" | "invalid"
    message: str
    blocking: bool = True


def normalize_value(field: str, value: Any) -> Any:
    # YAML reads a bare `off` as False.
    if field == "recording_mode" and value is False:
        return "none"
    if not isinstance(value, str):
        return value
    v = value.strip().lower()
    return _VALUE_ALIASES.get(field, {}).get(v, v)


def validate_stack(stack: StackConfig) -> List[StackIssue]:
    """Check enumerated fields. Structural and non-string values block pricing, unknown models do not."""
    issues: List[StackIssue] = []
    active = ("speech_to_speech_model",) if stack.is_speech_to_speech else ("stt_model", "llm_model", "tts_model")
    malformed = {f for f in (*_STRUCTURAL, *active) if not isinstance(getattr(stack, f), str)}
    for field in sorted(malformed):
        issues.append(StackIssue(field=field, issue="invalid", message=f"{field} must be a string"))

    for field, allowed in _STRUCTURAL.items():
        value = getattr(stack, field)
        if field not in malformed and value not in allowed:
            issues.append(
                StackIssue(
                    field=field,
                    issue="unknown",
                    message=f"Unknown {field} '{value}' (expected one of: {', '.join(allowed)})",
                )
            )

    for field in active:
        value = getattr(stack, field)
        if field not in malformed and value not in _MODELS[field]:
            issues.append(
                StackIssue(
                    field=field,
                    issue="unknown",
                    message=f"Unknown {field} '{value}'; it will be priced as a missing rate",
                    blocking=False,
                )
            )

    if not isinstance(stack.visible, bool):
        issues.append(StackIssue(field="visible", issue="invalid", message="visible must be a boolean"))
    return issues


__all__ = ["StackIssue", "normalize_value", "validate_stack"]
