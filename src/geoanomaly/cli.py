"""
geoanomaly CLI entrypoint.

Quick local runs over coordinate files. All detection logic lives in
`geoanomaly.detector.anomaly.AnomalyDetector`; this module only parses flags,
loads the file, and prints results.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from geoanomaly.catalog.loader import load_coordinates
from geoanomaly.config.overrides import apply_settings_overrides
from geoanomaly.config.settings import Settings, get_settings
from geoanomaly.core.errors import InvalidInputError
from geoanomaly.core.geo import normalize_unit
from geoanomaly.core.logging import configure_logging
from geoanomaly.detector.anomaly import AnomalyDetector


def _settings_from_args(args: argparse.Namespace) -> Settings:
    """Fold CLI flags into a settings override payload."""
    detector: dict[str, Any] = {}
    if args.threshold is not None:
        detector["threshold"] = float(args.threshold)
    if args.unit is not None:
        unit = normalize_unit(args.unit)
        if unit is None:
            raise InvalidInputError(f"Unknown --unit '{args.unit}', expected kilometers or miles")
        detector["unit"] = unit
    if args.std_convention is not None:
        detector["std_convention"] = args.std_convention
    if args.strict_bounds:
        detector["coordinate_bounds"] = "strict"

    overrides: dict[str, Any] = {}
    if detector:
        overrides["detector"] = detector
    if args.delimiter is not None:
        overrides["loader"] = {"csv_delimiter": args.delimiter}
    return apply_settings_overrides(get_settings(), overrides)


def _build_detector(args: argparse.Namespace) -> tuple[AnomalyDetector, list[Any]]:
    settings = _settings_from_args(args)
    coords = load_coordinates(args.path, file_format=args.format, settings=settings.loader)
    return AnomalyDetector(settings=settings), coords


def _cmd_detect(args: argparse.Namespace) -> int:
    """Handle the `detect` subcommand."""
    detector, coords = _build_detector(args)
    report = detector.build_report(coords)

    if args.json:
        print(report.model_dump_json(indent=2))
        return 0

    unit = report.config.unit
    print(f"Scanned {report.count} coordinates (threshold={report.config.threshold:g}, unit={unit})")
    if not report.anomalies:
        print("No anomalies.")
        return 0
    print(f"Anomalies ({len(report.anomalies)}):")
    for a in report.anomalies:
        print(f"  #{a.index:<4} ({a.point.lat:.6f}, {a.point.lon:.6f})  distance={a.distance:.3f} {unit}")
    return 0


def _cmd_summary(args: argparse.Namespace) -> int:
    """Handle the `summary` subcommand (distance statistics, no per-point list)."""
    detector, coords = _build_detector(args)
    report = detector.build_report(coords)
    payload = report.model_dump(mode="json", exclude={"anomalies"})
    payload["anomaly_count"] = len(report.anomalies)

    if args.json:
        print(json.dumps(payload, indent=2))
        return 0

    unit = report.config.unit
    print(f"count:          {report.count}")
    print(f"centroid:       ({report.centroid.lat:.6f}, {report.centroid.lon:.6f})")
    print(f"mean distance:  {report.mean_distance:.3f} {unit}")
    print(f"std distance:   {report.std_distance:.3f} {unit} ({report.config.std_convention})")
    print(f"boundary:       {report.boundary:.3f} {unit}")
    print(f"anomalies:      {len(report.anomalies)}")
    return 0


def _add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("path", help="Coordinate file (.json or .csv)")
    p.add_argument("--format", choices=["json", "csv"], default=None, help="Override format inference.")
    p.add_argument("--delimiter", type=str, default=None, help="CSV delimiter (default from config).")
    p.add_argument("--threshold", type=float, default=None, help="Std-dev multiplier (> 0).")
    p.add_argument("--unit", type=str, default=None, help="kilometers (km) or miles (mi)")
    p.add_argument("--std-convention", dest="std_convention", choices=["population", "sample"], default=None)
    p.add_argument(
        "--strict-bounds",
        dest="strict_bounds",
        action="store_true",
        help="Require latitude within [-90, 90] (default only checks [-180, 180]).",
    )
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the geoanomaly CLI."""
    parser = argparse.ArgumentParser(prog="geoanomaly")
    sub = parser.add_subparsers(dest="command", required=True)

    det = sub.add_parser("detect", help="List coordinates that lie unusually far from the dataset centroid.")
    _add_common_arguments(det)
    det.set_defaults(func=_cmd_detect)

    summ = sub.add_parser("summary", help="Print centroid and distance statistics for a dataset.")
    _add_common_arguments(summ)
    summ.set_defaults(func=_cmd_summary)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geoanomaly.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        # Settings load here, so bad env/YAML values also surface as exit code 2.
        configure_logging()
        return int(func(args))
    except (ValueError, OSError) as exc:
        # ValueError covers InvalidInputError and pydantic ValidationError (e.g. --threshold -1).
        print(f"geoanomaly: error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
