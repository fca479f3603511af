"""Line counting and per-module stats."""

from stats.language_stats import EMPTY, LanguageStats, merge, merge_all, merge_with
from stats.loc import LocData, classify_lines, count_loc, process_dir, process_file
from stats.module_stats import ModuleStats, collect_module_stats, parse_project_deps

__all__ = [
    "EMPTY",
    "LanguageStats",
    "LocData",
    "ModuleStats",
    "classify_lines",
    "collect_module_stats",
    "count_loc",
    "merge",
    "merge_all",
    "merge_with",
    "parse_project_deps",
    "process_dir",
    "process_file",
]
