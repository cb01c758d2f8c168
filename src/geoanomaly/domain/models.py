"""
Report models (Pydantic).

These types are the JSON contract at the CLI boundary. The detector itself
returns plain dataclasses and the caller's own coordinate objects; these models
exist to serialize a detection run consistently.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class PointModel(BaseModel):
    """A geographic point in decimal degrees."""

    lat: float = Field(..., ge=-180, le=180)
    lon: float = Field(..., ge=-180, le=180)


class DetectorConfigModel(BaseModel):
    """The configuration a detection run used."""

    threshold: float = Field(..., gt=0)
    unit: Literal["kilometers", "miles"]
    std_convention: Literal["population", "sample"]
    coordinate_bounds: Literal["loose", "strict"]


class AnomalyModel(BaseModel):
    """One flagged coordinate with its distance from the centroid."""

    index: int = Field(..., ge=0)
    point: PointModel
    distance: float = Field(..., ge=0)
    deviation: float = Field(..., ge=0)


class DetectionReport(BaseModel):
    """Full detection run: centroid, distance statistics, and flagged points."""

    config: DetectorConfigModel
    count: int = Field(..., ge=0)
    centroid: PointModel
    mean_distance: float = Field(..., ge=0)
    std_distance: float = Field(..., ge=0)
    boundary: float = Field(..., ge=0)
    anomalies: list[AnomalyModel] = Field(default_factory=list)
