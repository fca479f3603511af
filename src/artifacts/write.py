from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.utils import _get_output_dir_name, _write_json
from contract.artifacts import (
    FEATURES_TO_REMOVE_JSON,
    LOC_JSON,
    MODIFIED_BUILD_FILE,
    MODULE_SCORES_JSON,
    MODULE_STATS_JSON,
    TOPOGRAPHY_JSON,
    module_artifacts_dir,
)
from graph.dag import CyclePolicy
from logs import get_logger
from rules.config import load_config, resolve_output_dir
from scan.files import find_modules
from scoring.aggregate import aggregate_module_stats
from stats.module_stats import collect_module_stats
from topography.config import load_features
from topography.report import ValidationReport, enforce
from topography.rewrite import rewrite_build_file
from topography.validate import find_features_to_remove
from utils import convert_project_path_to_accessor

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from rules.config import ModScoreConfig
    from scan.files import ModuleLocation
    from scoring.weights import AggregateModuleScore
    from stats.module_stats import CollectedModule
    from topography.models import ModuleFeature
    from topography.rewrite import RewriteResult

LOGGER = get_logger("artifacts")


@dataclass(frozen=True)
class ModuleResult:
    """Per-module outcome of the collection stage."""

    collected: CollectedModule
    features_to_remove: tuple[ModuleFeature, ...]
    rewrite: RewriteResult


def _process_module(
    module: ModuleLocation,
    config: ModScoreConfig,
    features: Mapping[str, ModuleFeature],
) -> ModuleResult:
    LOGGER.debug("Collecting %s", module.path)
    collected = collect_module_stats(module, config, features)
    features_to_remove = find_features_to_remove(
        collected.topography, features, module.project_dir
    )
    rewrite = rewrite_build_file(collected.build_text, features_to_remove)
    return ModuleResult(
        collected=collected,
        features_to_remove=tuple(features_to_remove),
        rewrite=rewrite,
    )


def collect_modules(
    modules: Sequence[ModuleLocation],
    config: ModScoreConfig,
    features: Mapping[str, ModuleFeature],
) -> list[ModuleResult]:
    """Collect every module in parallel. Results keep the order of ``modules``."""
    worker_count = config.max_workers or os.cpu_count() or 1
    if worker_count <= 1 or len(modules) <= 1:
        return [_process_module(module, config, features) for module in modules]

    with ThreadPoolExecutor(max_workers=worker_count) as executor:
        futures = [
            executor.submit(_process_module, module, config, features)
            for module in modules
        ]
        # Waiting on every future in submission order is the barrier before
        # the global stage; the first failure propagates.
        return [future.result() for future in futures]


def _write_module_artifacts(
    result: ModuleResult,
    out_dir: Path,
    *,
    auto_fix: bool,
) -> ValidationReport:
    collected = result.collected
    module = collected.module
    module_dir = module_artifacts_dir(out_dir, module.path)

    _write_json(module_dir / LOC_JSON, collected.loc)
    _write_json(module_dir / TOPOGRAPHY_JSON, collected.topography)
    _write_json(module_dir / MODULE_STATS_JSON, collected.stats)
    features_file = module_dir / FEATURES_TO_REMOVE_JSON
    _write_json(features_file, list(result.features_to_remove))

    modified_build_file = module_dir / MODIFIED_BUILD_FILE
    if result.rewrite.changed and auto_fix:
        LOGGER.info("%s: rewriting %s", module.path, module.build_file)
        module.build_file.write_text(result.rewrite.text, encoding="utf-8")
        modified_build_file.unlink(missing_ok=True)
    elif result.rewrite.changed:
        modified_build_file.write_text(result.rewrite.text, encoding="utf-8")
    else:
        modified_build_file.unlink(missing_ok=True)

    return ValidationReport(
        module_path=module.path,
        features_to_remove=result.features_to_remove,
        rewrite=result.rewrite,
        auto_fix=auto_fix,
        features_to_remove_file=features_file,
    )


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: ModScoreConfig | None = None,
    auto_fix: bool | None = None,
    fail_on_unused: bool | None = None,
    features_config: Path | None = None,
) -> dict[str, object]:
    """Generate module stats, topography and score artifacts for a project.

    Args:
        root: Root directory of the project to analyze
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration (default: loaded from modscore.toml)
        auto_fix: Rewrite build files in place (default: from config)
        fail_on_unused: Raise when unused features remain (default: from config)
        features_config: Optional JSON feature catalog (default: from config)

    Returns:
        Dictionary with counts and list of generated artifact paths.

    Raises:
        ConfigError: If the configuration is invalid.
        FeatureConfigError: If the feature catalog is invalid.
        UnknownProjectAccessorError: If a module depends on an unknown module.
        DependencyCycleError: If the module graph has a prohibited cycle.
        TopographyValidationError: If unused features remain and the run
            should fail. Artifacts are written before this is raised.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    if auto_fix is None:
        auto_fix = config.topography.auto_fix
    if fail_on_unused is None:
        fail_on_unused = config.topography.fail_on_unused
    if features_config is None and config.topography.features_config:
        features_config = Path(root) / config.topography.features_config

    features = load_features(features_config)

    discovered = find_modules(
        root,
        build_file_name=config.build_file_name,
        output_dir=_get_output_dir_name(out_dir, root),
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    )
    accessors_to_paths = {
        convert_project_path_to_accessor(module.path): module.path
        for module in discovered
    }
    modules = [module for module in discovered if not config.is_ignored(module.path)]
    LOGGER.info("Found %d modules (%d ignored)", len(modules), len(discovered) - len(modules))

    results = collect_modules(modules, config, features)

    aggregate: AggregateModuleScore = aggregate_module_stats(
        [result.collected.stats for result in results],
        accessors_to_paths,
        include_generated=config.include_generated,
        policy=CyclePolicy(
            always_allowed_marker=config.graph.always_allowed_marker,
            test_fixtures_marker=config.graph.test_fixtures_marker,
        ),
    )

    out_dir.mkdir(parents=True, exist_ok=True)
    reports = [
        _write_module_artifacts(result, out_dir, auto_fix=auto_fix) for result in results
    ]
    _write_json(out_dir / MODULE_SCORES_JSON, aggregate)

    unused_feature_count = sum(len(report.features_to_remove) for report in reports)
    summary: dict[str, object] = {
        "module_count": len(results),
        "ignored_module_count": len(discovered) - len(modules),
        "unused_feature_count": unused_feature_count,
        "top_module": aggregate.scores[0].module_name if aggregate.scores else None,
        "artifacts": [str(out_dir / MODULE_SCORES_JSON)]
        + [
            str(module_artifacts_dir(out_dir, result.collected.module.path))
            for result in results
        ],
    }

    enforce(reports, fail_on_unused=fail_on_unused)
    return summary


__all__ = ["ModuleResult", "collect_modules", "generate_all_artifacts"]
