from __future__ import annotations

from ..pricing.rates import RateTable
from ..stacks.model import StackConfig
from .base import BaseChargeModel
from .capacity import price_cluster
from .noise import price_noise_cancellation
from .recording import price_self_hosted_egress
from .transport import price_livekit_server
from .types import CategoryTotals, CostLedger


class LiveKitSelfHostedChargeModel(BaseChargeModel):
    """LiveKit server, agents and egress on AKS; inference bought directly."""

    variant = ("livekit", "self-hosted")
    label = "LiveKit Self-Host"

    def price(self, stack: StackConfig, minutes: float, rates: RateTable, ledger: CostLedger) -> CategoryTotals:
        totals = CategoryTotals()
        totals.platform = price_cluster(minutes, rates, ledger)
        totals.transport = price_livekit_server(rates, ledger)
        totals.noise_cancellation = price_noise_cancellation(stack.platform, stack.hosting, minutes, rates, ledger)
        self.price_direct_inference(stack, minutes, rates, ledger, totals)
        totals.recording = price_self_hosted_egress(minutes, stack.recording_mode, rates, ledger)
        return totals
