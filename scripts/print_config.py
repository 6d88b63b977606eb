"""
print_config.py
----------------
Loads YAML configs, merges overrides (if any), resolves the window spec, and prints the final config.
No side effects besides stdout.
"""

from __future__ import annotations

import argparse
import sys

import yaml

from imu_stats.data.windowing import compute_window_spec
from imu_stats.utils.helpers import cfg_set, deep_update, load_yaml


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Print the merged run config")
    ap.add_argument("--config", default="configs/base.yaml")
    ap.add_argument("--override-config", action="append", default=[], help="YAML merged over the base, in order")
    args = ap.parse_args(argv)

    cfg = load_yaml(args.config)
    for path in args.override_config:
        cfg = deep_update(cfg, load_yaml(path))

    spec = compute_window_spec(cfg)
    cfg = cfg_set(cfg, ["data", "windowing", "window_length"], spec.window_length)
    cfg = cfg_set(cfg, ["data", "windowing", "stride"], spec.stride)

    yaml.safe_dump(cfg, sys.stdout, sort_keys=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
