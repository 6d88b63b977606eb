"""
run_analysis.py
----------------
Entrypoint: load/merge configs, load samples, compute per-window metrics in
parallel, print the run summary and one window's metrics.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time

from imu_stats.data.loaders import load_samples
from imu_stats.data.windowing import compute_window_spec
from imu_stats.errors import ImuStatsError
from imu_stats.stats.parallel import map_windows_from_cfg
from imu_stats.utils.helpers import cfg_get, cfg_set, deep_update, load_yaml
from imu_stats.utils.report import format_summary, format_window_metrics, summarize_run, summary_dict

logger = logging.getLogger(__name__)


def _apply_cli(cfg, args):
    if args.input:
        cfg = cfg_set(cfg, ["paths", "input_path"], args.input)
    if args.backend:
        cfg = cfg_set(cfg, ["parallel", "backend"], args.backend)
    if args.n_jobs is not None:
        cfg = cfg_set(cfg, ["parallel", "n_jobs"], args.n_jobs)
    if args.window is not None:
        cfg = cfg_set(cfg, ["report", "window_index"], args.window)
    return cfg


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    ap = argparse.ArgumentParser(description="Per-window IMU statistics")
    ap.add_argument("--config", default="configs/base.yaml", help="Base config YAML")
    ap.add_argument("--override-config", default=None, help="Optional YAML merged over the base config")
    ap.add_argument("--input", default=None, help="CSV or parquet recording (overrides paths.input_path)")
    ap.add_argument("--backend", choices=["sequential", "threads", "processes"], default=None)
    ap.add_argument("--n-jobs", type=int, default=None)
    ap.add_argument("--window", type=int, default=None, help="Window ordinal to print")
    ap.add_argument("--json", action="store_true", help="Also print the run summary as JSON")
    args = ap.parse_args(argv)

    cfg = load_yaml(args.config)
    if args.override_config:
        cfg = deep_update(cfg, load_yaml(args.override_config))
    cfg = _apply_cli(cfg, args)

    input_path = cfg_get(cfg, ["paths", "input_path"])
    if not input_path:
        logger.error("paths.input_path not set in config and no --input given")
        return 1

    try:
        spec = compute_window_spec(cfg)
        samples = load_samples(input_path, cfg)
        logger.info("samples=%d window_length=%d stride=%d", len(samples), spec.window_length, spec.stride)

        t0 = time.perf_counter()
        table = map_windows_from_cfg(samples, spec, cfg)
        elapsed = time.perf_counter() - t0
    except (ImuStatsError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    backend = cfg_get(cfg, ["parallel", "backend"], "threads")
    summary = summarize_run(input_path, len(samples), spec, table, backend, elapsed)
    print(format_summary(summary))

    idx = int(cfg_get(cfg, ["report", "window_index"], 0))
    if 0 <= idx < len(table):
        print()
        print(format_window_metrics(table[idx], index=idx))
    else:
        logger.warning("report.window_index=%d outside [0, %d); skipping window report", idx, len(table))

    if args.json:
        print(json.dumps(summary_dict(summary), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
