"""Pydantic request/response models for boundary endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..models.domain import BoundaryPoint, ZoneBoundary


class PointModel(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def to_domain(self) -> BoundaryPoint:
        return BoundaryPoint(self.latitude, self.longitude)


class BoundaryCreateRequest(BaseModel):
    name: str = Field(..., description="Boundary name; stored upper-cased.")
    points: list[PointModel] = Field(..., description="Polygon vertices; the ring is closed on save.")


class BoundaryUpdateRequest(BaseModel):
    name: str
    points: Optional[list[PointModel]] = Field(
        default=None,
        description="New vertices; omit to rename only.",
    )


class BoundaryFaresRequest(BaseModel):
    fares: dict[str, float] = Field(default_factory=dict, description="Target boundary name -> fare.")


class CompatibilityRequest(BaseModel):
    compatible_boundaries: list[str] = Field(default_factory=list)


class BoundaryModel(BaseModel):
    id: str
    name: str
    points: list[PointModel]
    fill_color: str
    stroke_color: str
    stroke_width: float
    is_active: bool
    boundary_fares: dict[str, float]
    compatible_boundaries: list[str]
    created_at: int
    last_updated: int

    @classmethod
    def from_domain(cls, boundary: ZoneBoundary) -> "BoundaryModel":
        return cls(
            id=boundary.id,
            name=boundary.name,
            points=[PointModel(latitude=p.latitude, longitude=p.longitude) for p in boundary.points],
            fill_color=boundary.fill_color,
            stroke_color=boundary.stroke_color,
            stroke_width=boundary.stroke_width,
            is_active=boundary.is_active,
            boundary_fares=dict(boundary.boundary_fares),
            compatible_boundaries=list(boundary.compatible_boundaries),
            created_at=boundary.created_at,
            last_updated=boundary.last_updated,
        )


class LocateResponse(BaseModel):
    latitude: float
    longitude: float
    boundary: Optional[str] = None
