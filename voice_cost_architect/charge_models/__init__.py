from .base import BaseChargeModel, ChargeModel
from .capacity import (
    aks_node_count,
    choose_self_hosted_profile,
    optimal_reserved_instances,
    recommend_self_hosting,
)
from .livekit_cloud import PlanEvaluation, evaluate_plan
from .registry import DEFAULT_REGISTRY, ChargeModelRegistry, build_default_registry
from .types import CategoryTotals, CostBreakdown, CostDetail, CostLedger, CostPoint

__all__ = [
    "BaseChargeModel",
    "ChargeModel",
    "ChargeModelRegistry",
    "build_default_registry",
    "DEFAULT_REGISTRY",
    "aks_node_count",
    "choose_self_hosted_profile",
    "optimal_reserved_instances",
    "recommend_self_hosting",
    "PlanEvaluation",
    "evaluate_plan",
    "CategoryTotals",
    "CostBreakdown",
    "CostDetail",
    "CostLedger",
    "CostPoint",
]
