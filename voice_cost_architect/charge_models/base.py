from __future__ import annotations

from typing import Protocol, Tuple

from ..pricing.rates import RateTable
from ..stacks.model import StackConfig
from .inference import price_direct_llm, price_direct_speech, price_speech_to_speech
from .types import CategoryTotals, CostLedger


class ChargeModel(Protocol):
    """Pricing policy for one (platform, hosting) variant."""

    variant: Tuple[str, str]
    label: str

    def price(self, stack: StackConfig, minutes: float, rates: RateTable, ledger: CostLedger) -> CategoryTotals: ...


class BaseChargeModel:
    """Shared helpers for variants that bring their own inference providers."""

    variant: Tuple[str, str] = ("", "")
    label: str = ""

    def price_direct_inference(
        self, stack: StackConfig, minutes: float, rates: RateTable, ledger: CostLedger, totals: CategoryTotals
    ) -> None:
        """Price STT/LLM/TTS (or the S2S model) at the providers' own list prices."""
        if stack.is_speech_to_speech:
            totals.llm = price_speech_to_speech(
                stack.speech_to_speech_model, minutes, rates.direct_s2s, rates, ledger, where="direct"
            )
            return
        totals.stt, totals.tts = price_direct_speech(stack.stt_model, stack.tts_model, minutes, rates, ledger)
        totals.llm = price_direct_llm(stack.llm_model, minutes, rates, ledger)
