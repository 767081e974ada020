"""Structural compatibility checks run before any pricing math.

An unsupported stack is not an error: ``check_support`` returns a reason that
the engine turns into an unsupported breakdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from .model import StackConfig
from .validation import validate_stack


@dataclass(frozen=True)
class BlockRule:
    name: str
    test: Callable[[StackConfig], bool]
    reason: str


@dataclass(frozen=True)
class SupportCheck:
    ok: bool
    reason: Optional[str] = None


BLOCK_RULES: List[BlockRule] = [
    BlockRule(
        name="video-recording-on-audio-call",
        test=lambda s: s.call_mode == "audio-only" and s.recording_mode == "audio-video",
        reason="Audio+video recording requires an audio+video call; this stack only carries audio.",
    ),
]


def get_block_reason(stack: StackConfig) -> Optional[str]:
    for rule in BLOCK_RULES:
        if rule.test(stack):
            return rule.reason
    return None


def check_support(stack: StackConfig) -> SupportCheck:
    blocking = [i for i in validate_stack(stack) if i.blocking]
    if blocking:
        return SupportCheck(ok=False, reason="; ".join(i.message for i in blocking))
    reason = get_block_reason(stack)
    if reason:
        return SupportCheck(ok=False, reason=reason)
    return SupportCheck(ok=True)


__all__ = ["BlockRule", "SupportCheck", "BLOCK_RULES", "get_block_reason", "check_support"]
