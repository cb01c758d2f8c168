from __future__ import annotations

# Global distance-from-centroid outlier detector.
#
# Pipeline (recomputed on every call, no state kept between calls):
# - normalize coordinates to GeoPoints (original objects are kept for the result)
# - centroid = coordinate-wise mean of latitudes and longitudes
# - great-circle distance of every point to the centroid
# - mean/std of those distances
# - flag points with |distance - mean| > threshold * std

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from geoanomaly.config.settings import Settings, get_settings
from geoanomaly.core.errors import EmptyDatasetError, InvalidInputError
from geoanomaly.core.geo import DistanceUnit, GeoPoint, centroid, earth_radius, haversine, normalize_unit
from geoanomaly.core.stats import DistanceStats, StdConvention, describe, outlier_mask
from geoanomaly.domain.coordinates import CoordinateBounds, to_points
from geoanomaly.domain.models import AnomalyModel, DetectionReport, DetectorConfigModel, PointModel

logger = logging.getLogger(__name__)

C = TypeVar("C")

_STD_CONVENTIONS = ("population", "sample")
_BOUNDS = ("loose", "strict")


@dataclass(frozen=True)
class DetectionResult(Generic[C]):
    """Everything a detection run computed, plus the flagged input objects."""

    centroid: GeoPoint
    distances: list[float]
    stats: DistanceStats
    threshold: float
    unit: DistanceUnit
    anomaly_indices: list[int]
    anomalies: list[C]

    @property
    def boundary(self) -> float:
        return self.threshold * self.stats.std


def _resolve_threshold(value: Any, default: float) -> float:
    if value is None:
        return float(default)
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise InvalidInputError(f"threshold must be a positive number, got {value!r}")
    # Zero means "not set", as with an omitted option.
    if value == 0:
        return float(default)
    if value < 0:
        raise InvalidInputError(f"threshold must be a positive number, got {value!r}")
    return float(value)


def _resolve_unit(value: Any, default: DistanceUnit) -> DistanceUnit:
    if value is None:
        return default
    unit = normalize_unit(value)
    if unit is None:
        logger.warning("Unknown distance unit %r; falling back to %s.", value, default)
        return default
    return unit


class AnomalyDetector:
    """Flags coordinates that sit unusually far from (or close to) the dataset centroid.

    Configuration is fixed at construction. Omitted options come from settings
    (`detector.*` in `defaults.yaml`), which default to threshold 3 and kilometers.
    """

    __slots__ = ("_threshold", "_unit", "_std_convention", "_bounds")

    def __init__(
        self,
        threshold: float | None = None,
        unit: str | None = None,
        *,
        std_convention: StdConvention | None = None,
        coordinate_bounds: CoordinateBounds | None = None,
        settings: Settings | None = None,
    ) -> None:
        cfg = (settings or get_settings()).detector

        std_convention = std_convention or cfg.std_convention
        if std_convention not in _STD_CONVENTIONS:
            raise InvalidInputError(f"std_convention must be one of {_STD_CONVENTIONS}, got {std_convention!r}")
        coordinate_bounds = coordinate_bounds or cfg.coordinate_bounds
        if coordinate_bounds not in _BOUNDS:
            raise InvalidInputError(f"coordinate_bounds must be one of {_BOUNDS}, got {coordinate_bounds!r}")

        self._threshold = _resolve_threshold(threshold, cfg.threshold)
        self._unit = _resolve_unit(unit, cfg.unit)
        self._std_convention: StdConvention = std_convention
        self._bounds: CoordinateBounds = coordinate_bounds

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def unit(self) -> DistanceUnit:
        return self._unit

    @property
    def std_convention(self) -> StdConvention:
        return self._std_convention

    @property
    def coordinate_bounds(self) -> CoordinateBounds:
        return self._bounds

    def __repr__(self) -> str:
        return (
            f"AnomalyDetector(threshold={self._threshold!r}, unit={self._unit!r}, "
            f"std_convention={self._std_convention!r}, coordinate_bounds={self._bounds!r})"
        )

    def analyze(self, coordinates: Sequence[C]) -> DetectionResult[C]:
        """Run the full pipeline and return centroid, distances, stats and anomalies.

        Raises:
            EmptyDatasetError: `coordinates` is empty.
            InvalidCoordinateError: an entry has a missing/non-numeric/out-of-range value.
        """
        items = list(coordinates)
        if not items:
            raise EmptyDatasetError()

        points = to_points(items, bounds=self._bounds)
        center = centroid(points)
        radius = earth_radius(self._unit)
        distances = [haversine(p, center, radius=radius) for p in points]

        stats = describe(distances, convention=self._std_convention)
        mask = outlier_mask(distances, stats, threshold=self._threshold)
        indices = [i for i, flagged in enumerate(mask) if flagged]

        logger.debug(
            "Scanned %d coordinates: centroid=(%.6f, %.6f) mean=%.6f std=%.6f %s, flagged %d",
            stats.n,
            center.lat,
            center.lon,
            stats.mean,
            stats.std,
            self._unit,
            len(indices),
        )

        return DetectionResult(
            centroid=center,
            distances=distances,
            stats=stats,
            threshold=self._threshold,
            unit=self._unit,
            anomaly_indices=indices,
            anomalies=[items[i] for i in indices],
        )

    def detect_anomalies(self, coordinates: Sequence[C]) -> list[C]:
        """Return the anomalous coordinates, in input order and original representation."""
        return self.analyze(coordinates).anomalies

    def build_report(self, coordinates: Sequence[Any]) -> DetectionReport:
        """Analyze `coordinates` and package the run as a serializable report."""
        items = list(coordinates)
        result = self.analyze(items)
        points = to_points(items, bounds=self._bounds)
        anomalies = [
            AnomalyModel(
                index=i,
                point=PointModel(lat=points[i].lat, lon=points[i].lon),
                distance=result.distances[i],
                deviation=abs(result.distances[i] - result.stats.mean),
            )
            for i in result.anomaly_indices
        ]
        return DetectionReport(
            config=DetectorConfigModel(
                threshold=self._threshold,
                unit=self._unit,
                std_convention=self._std_convention,
                coordinate_bounds=self._bounds,
            ),
            count=result.stats.n,
            centroid=PointModel(lat=result.centroid.lat, lon=result.centroid.lon),
            mean_distance=result.stats.mean,
            std_distance=result.stats.std,
            boundary=result.boundary,
            anomalies=anomalies,
        )
