from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Literal

Platform = Literal["livekit", "pipecat"]
Hosting = Literal["cloud", "self-hosted"]
Pipeline = Literal["stt-llm-tts", "speech-to-speech"]
CallMode = Literal["audio-only", "audio-video"]
RecordingMode = Literal["none", "audio-only", "audio-video"]

PLATFORMS = ("livekit", "pipecat")
HOSTINGS = ("cloud", "self-hosted")
PIPELINES = ("stt-llm-tts", "speech-to-speech")
CALL_MODES = ("audio-only", "audio-video")
RECORDING_MODES = ("none", "audio-only", "audio-video")

STT_MODELS = (
    "assemblyai-universal-streaming",
    "assemblyai-universal-streaming-multilingual",
    "cartesia-ink-whisper",
    "deepgram-nova-3",
    "deepgram-nova-3-multilingual",
    "soniox-realtime",
)
LLM_MODELS = ("gpt-5.2", "gemini-3-pro", "gemini-3-flash")
TTS_MODELS = ("cartesia-sonic-3", "elevenlabs-turbo-v2.5")
S2S_MODELS = ("openai-realtime", "gemini-live")

# camelCase keys (as saved by the web calculator) -> field names.
FIELD_ALIASES = {
    "sttModel": "stt_model",
    "llmModel": "llm_model",
    "ttsModel": "tts_model",
    "speechToSpeechModel": "speech_to_speech_model",
    "callMode": "call_mode",
    "recordingMode": "recording_mode",
}


@dataclass(frozen=True)
class StackConfig:
    """One candidate voice-agent deployment.

    Both the cascaded models and the speech-to-speech model are stored; only
    the set selected by ``pipeline`` is priced.
    """

    id: str
    label: str
    platform: str = "pipecat"
    hosting: str = "cloud"
    pipeline: str = "stt-llm-tts"
    stt_model: str = "deepgram-nova-3"
    llm_model: str = "gpt-5.2"
    tts_model: str = "cartesia-sonic-3"
    speech_to_speech_model: str = "openai-realtime"
    call_mode: str = "audio-video"
    recording_mode: str = "audio-video"
    visible: bool = True

    @property
    def is_speech_to_speech(self) -> bool:
        return self.pipeline == "speech-to-speech"

    @property
    def variant(self) -> tuple[str, str]:
        return (self.platform, self.hosting)

    def with_changes(self, **changes: Any) -> "StackConfig":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class StackIdGenerator:
    """Mints ``stack-N`` ids. Pass one explicitly wherever ids are needed."""

    def __init__(self, prefix: str = "stack", start: int = 0):
        self.prefix = prefix
        self._counter = start

    def next_id(self) -> str:
        self._counter += 1
        return f"{self.prefix}-{self._counter}"


def new_stack(index: int, ids: StackIdGenerator, **overrides: Any) -> StackConfig:
    """A fresh Pipecat Cloud stack labelled ``Stack <index + 1>``."""
    fields: Dict[str, Any] = {"id": ids.next_id(), "label": f"Stack {index + 1}"}
    fields.update(overrides)
    return StackConfig(**fields)


__all__ = [
    "Platform",
    "Hosting",
    "Pipeline",
    "CallMode",
    "RecordingMode",
    "PLATFORMS",
    "HOSTINGS",
    "PIPELINES",
    "CALL_MODES",
    "RECORDING_MODES",
    "STT_MODELS",
    "LLM_MODELS",
    "TTS_MODELS",
    "S2S_MODELS",
    "FIELD_ALIASES",
    "StackConfig",
    "StackIdGenerator",
    "new_stack",
]
