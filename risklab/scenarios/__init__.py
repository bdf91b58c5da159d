"""Synthetic market scenarios."""

from risklab.scenarios.generator import (
    SCENARIO_DETAILS,
    PricePoint,
    ScenarioType,
    generate_scenario,
    scenario_to_frame,
    seeded_noise,
)

__all__ = [
    "PricePoint",
    "ScenarioType",
    "SCENARIO_DETAILS",
    "generate_scenario",
    "scenario_to_frame",
    "seeded_noise",
]
