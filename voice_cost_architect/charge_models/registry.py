from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..stacks.model import HOSTINGS, PLATFORMS
from .base import ChargeModel
from .livekit import LiveKitSelfHostedChargeModel
from .livekit_cloud import LiveKitCloudChargeModel
from .pipecat import PipecatCloudChargeModel, PipecatSelfHostedChargeModel

Variant = Tuple[str, str]


@dataclass
class ChargeModelRegistry:
    """Lookup table for charge models by (platform, hosting) variant."""

    models: Dict[Variant, ChargeModel] = field(default_factory=dict)

    def register(self, model: ChargeModel) -> None:
        self.models[model.variant] = model

    def get(self, platform: str, hosting: str) -> Optional[ChargeModel]:
        return self.models.get((platform, hosting))

    def missing_variants(self) -> List[Variant]:
        return [(p, h) for p in PLATFORMS for h in HOSTINGS if (p, h) not in self.models]


def build_default_registry() -> ChargeModelRegistry:
    reg = ChargeModelRegistry()
    reg.register(PipecatCloudChargeModel())
    reg.register(PipecatSelfHostedChargeModel())
    reg.register(LiveKitCloudChargeModel())
    reg.register(LiveKitSelfHostedChargeModel())
    return reg


DEFAULT_REGISTRY = build_default_registry()
