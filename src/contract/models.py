"""Artifact models exposed by the contract surface."""

from scoring.weights import AggregateModuleScore, ModuleScore, Weights
from stats.loc import LocData
from stats.module_stats import ModuleStats
from topography.models import ModuleFeature, ModuleTopography

__all__ = [
    "AggregateModuleScore",
    "LocData",
    "ModuleFeature",
    "ModuleScore",
    "ModuleStats",
    "ModuleTopography",
    "Weights",
]
