from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

_LOGGER = logging.getLogger(__name__)

# Detail-line categories.
PLATFORM = "Platform"
TRANSPORT = "Transport"
NOISE_CANCELLATION = "Noise Cancellation"
STT = "STT"
LLM = "LLM"
TTS = "TTS"
RECORDING = "Recording"
S2S_MODEL = "S2S Model"

# Detail category -> breakdown subtotal it rolls into.
SUBTOTAL_FIELDS: Dict[str, str] = {
    PLATFORM: "platform",
    TRANSPORT: "transport",
    NOISE_CANCELLATION: "noise_cancellation",
    STT: "stt",
    LLM: "llm",
    TTS: "tts",
    RECORDING: "recording",
    S2S_MODEL: "llm",
}

CATEGORY_FIELDS = ("platform", "transport", "noise_cancellation", "stt", "llm", "tts", "recording")


@dataclass(frozen=True)
class CostDetail:
    category: str
    label: str
    formula: str
    amount: float
    source_url: Optional[str] = None


@dataclass
class CategoryTotals:
    platform: float = 0.0
    transport: float = 0.0
    noise_cancellation: float = 0.0
    stt: float = 0.0
    llm: float = 0.0
    tts: float = 0.0
    recording: float = 0.0

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in CATEGORY_FIELDS)


@dataclass
class CostLedger:
    """Per-call accumulator for detail lines, warnings and chosen plans.

    A new ledger is created for every ``compute`` call and never shared.
    """

    details: List[CostDetail] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    best_plans: Dict[str, str] = field(default_factory=dict)

    def add(
        self,
        category: str,
        label: str,
        formula: str,
        amount: float,
        source_url: Optional[str] = None,
    ) -> float:
        self.details.append(
            CostDetail(category=category, label=label, formula=formula, amount=amount, source_url=source_url)
        )
        return amount

    def warn(self, message: str) -> None:
        _LOGGER.debug("Pricing warning: %s", message)
        self.warnings.append(message)

    def choose(self, category: str, plan_name: str) -> None:
        self.best_plans[category] = plan_name

    def missing_rate(self, category: str, model: str, table: str) -> float:
        """Record a rate-table miss as an explicit zero line plus a warning."""
        _LOGGER.warning("No %s rate for '%s' in %s; priced at 0", category, model, table)
        self.warn(f"No {category} rate for '{model}' in {table}; priced at $0.00")
        return self.add(category, model, f"rate missing from {table}", 0.0)


@dataclass
class CostBreakdown:
    stack_id: str
    monthly_minutes: int
    supported: bool = True
    unsupported_reason: Optional[str] = None
    platform: float = 0.0
    transport: float = 0.0
    noise_cancellation: float = 0.0
    stt: float = 0.0
    llm: float = 0.0
    tts: float = 0.0
    recording: float = 0.0
    total: float = 0.0
    details: List[CostDetail] = field(default_factory=list)
    best_plans: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    rates_version: str = ""

    @property
    def per_minute(self) -> float:
        return self.total / self.monthly_minutes if self.monthly_minutes > 0 else 0.0

    def by_category(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in CATEGORY_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["per_minute"] = self.per_minute
        return out


@dataclass(frozen=True)
class CostPoint:
    volume: int
    total: float
    supported: bool = True


__all__ = [
    "PLATFORM",
    "TRANSPORT",
    "NOISE_CANCELLATION",
    "STT",
    "LLM",
    "TTS",
    "RECORDING",
    "S2S_MODEL",
    "SUBTOTAL_FIELDS",
    "CATEGORY_FIELDS",
    "CostDetail",
    "CategoryTotals",
    "CostLedger",
    "CostBreakdown",
    "CostPoint",
]
