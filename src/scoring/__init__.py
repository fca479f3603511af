"""Module scoring."""

from scoring.aggregate import UnknownProjectAccessorError, aggregate_module_stats
from scoring.weights import AggregateModuleScore, ModuleScore, Weights, percent_of, weighted

__all__ = [
    "AggregateModuleScore",
    "ModuleScore",
    "UnknownProjectAccessorError",
    "Weights",
    "aggregate_module_stats",
    "percent_of",
    "weighted",
]
