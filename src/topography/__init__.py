"""Module topography: declared features, usage checks and build file fixes."""

from topography.config import FeatureConfigError, ModuleFeaturesConfig, load_features
from topography.defaults import DEFAULT_FEATURES, load_default_features
from topography.detect import compute_topography
from topography.models import FeatureOverride, ModuleFeature, ModuleTopography
from topography.report import TopographyValidationError, ValidationReport, enforce
from topography.rewrite import remove_empty_braces, rewrite_build_file
from topography.validate import find_features_to_remove

__all__ = [
    "DEFAULT_FEATURES",
    "FeatureConfigError",
    "FeatureOverride",
    "ModuleFeature",
    "ModuleFeaturesConfig",
    "ModuleTopography",
    "TopographyValidationError",
    "ValidationReport",
    "compute_topography",
    "enforce",
    "find_features_to_remove",
    "load_default_features",
    "load_features",
    "remove_empty_braces",
    "rewrite_build_file",
]
