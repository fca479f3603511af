"""Command-line interface for modscore."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from artifacts.write import generate_all_artifacts
from contract.validation import validate_artifacts
from graph.dag import DependencyCycleError
from logs import configure_logging
from rules.config import ConfigError, load_config, resolve_output_dir
from scoring.aggregate import UnknownProjectAccessorError
from topography.config import FeatureConfigError
from topography.report import TopographyValidationError
from verify.verify import verify_determinism

# Problems with the analyzed project rather than with modscore itself.
_ANALYSIS_ERRORS = (
    ConfigError,
    FeatureConfigError,
    DependencyCycleError,
    UnknownProjectAccessorError,
    TopographyValidationError,
)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging, including per-line LoC traces",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="modscore")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Collect module stats, check features and score modules"
    )
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated artifacts (default: config output dir)",
    )
    fix_group = generate_parser.add_mutually_exclusive_group()
    fix_group.add_argument(
        "--auto-fix",
        action="store_true",
        help="Rewrite build files in place to remove unused features",
    )
    fix_group.add_argument(
        "--report-only",
        action="store_true",
        help="Report unused features without failing or rewriting anything",
    )
    generate_parser.add_argument(
        "--features-config",
        default=None,
        help="JSON feature catalog (default: config features_config or built-ins)",
    )
    generate_parser.add_argument(
        "--no-generated",
        action="store_true",
        help="Do not count generated sources",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of artifacts"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    return parser


def _resolve_path(value: str | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser().resolve()


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return resolve_output_dir(root, config.output_dir)
    return Path(artifacts_dir).expanduser().resolve()


def _handle_generate(root: Path, args: argparse.Namespace) -> int:
    config = load_config(root)
    if args.no_generated:
        config = config.model_copy(update={"include_generated": False})

    auto_fix: bool | None = True if args.auto_fix else None
    fail_on_unused: bool | None = None
    if args.report_only:
        auto_fix = False
        fail_on_unused = False

    summary = generate_all_artifacts(
        root=root,
        out_dir=_resolve_path(args.out_dir),
        config=config,
        auto_fix=auto_fix,
        fail_on_unused=fail_on_unused,
        features_config=_resolve_path(args.features_config),
    )
    sys.stdout.write(
        f"{summary['module_count']} modules scored, "
        f"{summary['unused_feature_count']} unused features\n"
    )
    return 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_artifacts(resolved_artifacts_dir)
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(root=root, artifacts_dir=resolved_artifacts_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, log_file=_resolve_path(args.log_file))
    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root, args)

        if args.command == "validate":
            return _handle_validate(root, args.artifacts_dir)

        if args.command == "verify":
            return _handle_verify(root, args.artifacts_dir)
    except _ANALYSIS_ERRORS as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
