from __future__ import annotations

from ..pricing.rates import RateTable
from ..stacks.model import StackConfig
from .base import BaseChargeModel
from .capacity import price_cluster, price_pipecat_hosting
from .noise import price_noise_cancellation
from .recording import price_daily_recording
from .transport import price_daily_webrtc, price_pipecat_cloud_transport
from .types import CategoryTotals, CostLedger


class PipecatCloudChargeModel(BaseChargeModel):
    """Pipecat Cloud agent-1x hosting with bring-your-own inference providers."""

    variant = ("pipecat", "cloud")
    label = "Pipecat Cloud"

    def price(self, stack: StackConfig, minutes: float, rates: RateTable, ledger: CostLedger) -> CategoryTotals:
        totals = CategoryTotals()
        totals.platform = price_pipecat_hosting(minutes, rates, ledger)
        totals.transport = price_pipecat_cloud_transport(rates, ledger)
        totals.noise_cancellation = price_noise_cancellation(stack.platform, stack.hosting, minutes, rates, ledger)
        self.price_direct_inference(stack, minutes, rates, ledger, totals)
        totals.recording = price_daily_recording(minutes, stack.recording_mode, rates, ledger)
        return totals


class PipecatSelfHostedChargeModel(BaseChargeModel):
    """Pipecat on AKS; Daily WebRTC bought standalone at volume-band prices."""

    variant = ("pipecat", "self-hosted")
    label = "Pipecat Self-Host"

    def price(self, stack: StackConfig, minutes: float, rates: RateTable, ledger: CostLedger) -> CategoryTotals:
        totals = CategoryTotals()
        totals.platform = price_cluster(minutes, rates, ledger)
        totals.transport = price_daily_webrtc(minutes, stack.call_mode, rates, ledger)
        totals.noise_cancellation = price_noise_cancellation(stack.platform, stack.hosting, minutes, rates, ledger)
        self.price_direct_inference(stack, minutes, rates, ledger, totals)
        totals.recording = price_daily_recording(minutes, stack.recording_mode, rates, ledger)
        return totals
