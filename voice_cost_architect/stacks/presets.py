"""Preset stacks compared when the user does not supply any.

One stack per platform x hosting variant, all on the same cascaded model
selection so the comparison isolates platform and hosting cost.
"""

from __future__ import annotations

from typing import List, Optional

from .model import StackConfig, StackIdGenerator

_PRESETS = (
    ("Pipecat Cloud", "pipecat", "cloud"),
    ("LiveKit Cloud", "livekit", "cloud"),
    ("Pipecat Self-Host", "pipecat", "self-hosted"),
    ("LiveKit Self-Host", "livekit", "self-hosted"),
)


def default_stacks(ids: Optional[StackIdGenerator] = None) -> List[StackConfig]:
    ids = ids or StackIdGenerator()
    return [
        StackConfig(
            id=ids.next_id(),
            label=label,
            platform=platform,
            hosting=hosting,
            pipeline="stt-llm-tts",
            stt_model="deepgram-nova-3",
            llm_model="gpt-5.2",
            tts_model="cartesia-sonic-3",
            speech_to_speech_model="openai-realtime",
            call_mode="audio-video",
            recording_mode="audio-video",
            visible=True,
        )
        for label, platform, hosting in _PRESETS
    ]


__all__ = ["default_stacks"]
