"""Pydantic models for fare and compatibility endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class FareLookupResponse(BaseModel):
    from_boundary: str
    to: str
    fare: Optional[float] = None


class DestinationFaresRequest(BaseModel):
    fares: dict[str, float] = Field(
        default_factory=dict,
        description="Origin boundary name -> fare. Replaces the destination's whole table; empty clears it.",
    )


class DestinationFaresResponse(BaseModel):
    destination: str
    fares: dict[str, float]
    display: str


class TripFareResponse(BaseModel):
    destination: str
    fare: Optional[float] = None


class CompatibilityResponse(BaseModel):
    a: str
    b: str
    compatible: bool
