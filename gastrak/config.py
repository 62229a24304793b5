"""
Command-line configuration for the web view.

Example:
  python -m gastrak --latitude 37.7749 --longitude -122.4194 --data data/current.csv
"""
from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import Optional, Sequence

from common.types import Config


def finite_float(s: str) -> float:
    """argparse type: a float that is neither nan nor +-inf (the page embeds it as a JS number)."""
    try:
        v = float(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid float value: {s!r}")
    if not math.isfinite(v):
        raise argparse.ArgumentTypeError(f"must be a finite number: {s!r}")
    return v


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gastrak-server",
        description="Serve a map page for a coordinate pair and the current data file.",
    )
    ap.add_argument("--latitude", type=finite_float, required=True, help="Map center latitude (degrees)")
    ap.add_argument("--longitude", type=finite_float, required=True, help="Map center longitude (degrees)")
    ap.add_argument("--data", type=Path, required=True, help="Path to the data file shown on the page")
    ap.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    ap.add_argument("--port", type=int, default=8000, help="Port to listen on")
    ap.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING/ERROR (default: $LOG_LEVEL or INFO)")
    return ap


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse `argv` (default sys.argv[1:]). Prints usage and exits with status 2 on bad input."""
    return build_parser().parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    return Config(
        latitude=args.latitude,
        longitude=args.longitude,
        data_path=args.data,
        host=args.host,
        port=args.port,
    )
