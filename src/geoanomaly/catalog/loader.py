"""
Coordinate file loader.

Datasets are local JSON or CSV files. JSON may be a list of `[lat, lon]` pairs or
objects (`{"lat": .., "lon": ..}`), or a mapping with a `coordinates` list. CSV
needs a header naming the latitude/longitude columns, or exactly two columns and
no header. Entries are returned as read; the detector normalizes them.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Literal

from geoanomaly.config.settings import LoaderSettings
from geoanomaly.core.env import resolve_project_path
from geoanomaly.core.errors import InvalidInputError

FileFormat = Literal["json", "csv"]

_LAT_COLUMNS = ("lat", "latitude")
_LON_COLUMNS = ("lon", "lng", "long", "longitude")


def infer_format(path: str | Path) -> FileFormat:
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".csv", ".txt"):
        return "csv"
    raise InvalidInputError(f"Cannot infer coordinate file format from '{path}'; use .json or .csv")


def _resolve(path: str | Path) -> Path:
    # Paths given relative to the working directory win over project-root resolution.
    p = Path(path).expanduser()
    if p.exists():
        return p
    return resolve_project_path(p)


def _parse_json(text: str, *, source: Path) -> list[Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"{source}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    if isinstance(payload, dict):
        payload = payload.get("coordinates")
    if not isinstance(payload, list):
        raise InvalidInputError(f"{source}: expected a list of coordinates or {{\"coordinates\": [...]}}")
    return payload


def _pick_column(fieldnames: list[str], candidates: tuple[str, ...]) -> str | None:
    lowered = {name.strip().lower(): name for name in fieldnames}
    for c in candidates:
        if c in lowered:
            return lowered[c]
    return None


def _parse_number(raw: str | None) -> float | str | None:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        # Leave the raw text in place so the detector reports the offending entry.
        return raw.strip()


def _parse_csv(text: str, *, source: Path, delimiter: str) -> list[list[Any]]:
    rows = [r for r in csv.reader(text.splitlines(), delimiter=delimiter) if any(c.strip() for c in r)]
    if not rows:
        return []

    header = [c.strip().lower() for c in rows[0]]
    lat_col = _pick_column(header, _LAT_COLUMNS)
    lon_col = _pick_column(header, _LON_COLUMNS)

    if lat_col is not None and lon_col is not None:
        lat_idx = header.index(lat_col)
        lon_idx = header.index(lon_col)
        body = rows[1:]
    elif all(len(r) == 2 for r in rows):
        lat_idx, lon_idx = 0, 1
        body = rows
    else:
        raise InvalidInputError(
            f"{source}: CSV needs lat/latitude and lon/lng/longitude header columns, or exactly two columns"
        )

    out: list[list[Any]] = []
    for row in body:
        lat = row[lat_idx] if lat_idx < len(row) else None
        lon = row[lon_idx] if lon_idx < len(row) else None
        out.append([_parse_number(lat), _parse_number(lon)])
    return out


def load_coordinates(
    path: str | Path,
    *,
    file_format: FileFormat | None = None,
    settings: LoaderSettings | None = None,
) -> list[Any]:
    """Load a coordinate dataset from a JSON or CSV file."""
    cfg = settings or LoaderSettings()
    resolved = _resolve(path)
    fmt = file_format or infer_format(resolved)
    text = resolved.read_text(encoding=cfg.encoding)

    if fmt == "json":
        return _parse_json(text, source=resolved)
    return _parse_csv(text, source=resolved, delimiter=cfg.csv_delimiter)
