import pytest

from voice_cost_architect.charge_models.capacity import (
    aks_node_count,
    choose_self_hosted_profile,
    optimal_reserved_instances,
    recommend_self_hosting,
)
from voice_cost_architect.pricing.engine import compute
from voice_cost_architect.pricing.rates import DEFAULT_RATE_TABLE, SELF_HOSTED_PROFILES

A = DEFAULT_RATE_TABLE.assumptions
CLUSTER = DEFAULT_RATE_TABLE.cluster


@pytest.mark.parametrize(
    "minutes,expected",
    [(0, 0), (-5, 0), (1, 1), (10_000, 1), (43_200, 1), (43_201, 2), (1_000_000, 24)],
)
def test_optimal_reserved_instances(minutes, expected):
    assert optimal_reserved_instances(minutes, A, 30) == expected


def test_reserved_instances_burst_dominates_with_long_cold_start():
    # 1M min: peak 46.3 concurrent / 600s sessions x 900s delay = 69.4 > 23.1 baseline
    assert optimal_reserved_instances(1_000_000, A, 900) == 70


@pytest.mark.parametrize(
    "minutes,nodes,cost",
    [(0, 1, 143), (10_000, 1, 143), (130_000, 2, 213), (1_000_000, 8, 633)],
)
def test_aks_node_count(minutes, nodes, cost):
    sizing = aks_node_count(minutes, CLUSTER, A)
    assert sizing.nodes == nodes
    assert sizing.cost == cost


def test_pipecat_cloud_billing_active_plus_reserved(presets):
    b = compute(presets["Pipecat Cloud"], 10_000)
    assert b.platform == pytest.approx(100 + 21.6)
    assert b.best_plans["Platform"] == "Pipecat Cloud agent-1x (1 reserved)"


def test_self_hosted_profile_app_service_at_low_volume():
    choice = choose_self_hosted_profile(10_000, SELF_HOSTED_PROFILES)
    assert choice.profile.id == "app-service"
    assert choice.cost == 180
    assert choice.required_minutes == pytest.approx(11_500)


def test_self_hosted_profile_aks_at_high_volume():
    choice = choose_self_hosted_profile(100_000, SELF_HOSTED_PROFILES)
    assert choice.profile.id == "aks"
    assert choice.cost == pytest.approx(420 + 70_000 * 0.0062)


def test_self_hosted_profile_zero_volume_is_first_base_cost():
    choice = choose_self_hosted_profile(0, SELF_HOSTED_PROFILES)
    assert choice.profile.id == "app-service"
    assert choice.cost == 180


def test_self_hosted_profile_no_profiles():
    assert choose_self_hosted_profile(1_000, ()) is None


def test_recommend_self_hosting_texts():
    low = recommend_self_hosting(10_000)
    assert low.profile.id == "app-service"
    assert "AKS" in low.alternative_when

    high = recommend_self_hosting(100_000)
    assert high.profile.id == "aks"
    assert "Azure AKS" in high.reason
    assert "App Service" in high.alternative_when
