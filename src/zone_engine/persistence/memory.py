"""In-process repositories for tests and local runs without a database."""

from __future__ import annotations

import copy
import dataclasses
import logging
import uuid
from typing import Optional

from ..models.domain import BoundaryFareBatch, ZoneBoundary, now_millis
from ..models.result import Result

logger = logging.getLogger(__name__)


def _generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:20]}"


class InMemoryZoneBoundaryRepository:
    """Dict-backed boundary repository; records are deep-copied on the way in and out."""

    def __init__(self, boundaries: list[ZoneBoundary] | None = None) -> None:
        self._records: dict[str, ZoneBoundary] = {}
        for boundary in boundaries or []:
            record = copy.deepcopy(boundary)
            record.id = record.id or _generate_id("zb")
            self._records[record.id] = record

    async def get_all_zone_boundaries(self) -> Result[list[ZoneBoundary]]:
        return Result.success([copy.deepcopy(b) for b in self._records.values() if b.is_active])

    async def get_all_zone_boundaries_including_inactive(self) -> Result[list[ZoneBoundary]]:
        return Result.success([copy.deepcopy(b) for b in self._records.values()])

    async def add_zone_boundary(self, boundary: ZoneBoundary) -> Result[ZoneBoundary]:
        timestamp = now_millis()
        record = dataclasses.replace(
            copy.deepcopy(boundary),
            id=_generate_id("zb"),
            created_at=timestamp,
            last_updated=timestamp,
        )
        self._records[record.id] = record
        logger.debug("Stored boundary %s as %s", record.name, record.id)
        return Result.success(copy.deepcopy(record))

    async def update_zone_boundary(self, boundary: ZoneBoundary) -> Result[None]:
        if boundary.id not in self._records:
            return Result.failure(f"Boundary not found: {boundary.id}")
        self._records[boundary.id] = dataclasses.replace(copy.deepcopy(boundary), last_updated=now_millis())
        return Result.success(None)

    async def delete_zone_boundary(self, boundary_id: str) -> Result[None]:
        return self._set_active(boundary_id, False)

    async def reactivate_zone_boundary(self, boundary_id: str) -> Result[None]:
        return self._set_active(boundary_id, True)

    async def boundary_name_exists(self, name: str, exclude_id: Optional[str] = None) -> Result[bool]:
        wanted = name.strip().casefold()
        exists = any(
            record.is_active and record.name.casefold() == wanted and record.id != exclude_id
            for record in self._records.values()
        )
        return Result.success(exists)

    def _set_active(self, boundary_id: str, active: bool) -> Result[None]:
        record = self._records.get(boundary_id)
        if record is None:
            return Result.failure("Boundary not found")
        record.is_active = active
        record.last_updated = now_millis()
        return Result.success(None)


class InMemoryFareBatchRepository:
    def __init__(self, batches: list[BoundaryFareBatch] | None = None) -> None:
        self._records: dict[str, BoundaryFareBatch] = {}
        for batch in batches or []:
            record = copy.deepcopy(batch)
            record.id = record.id or _generate_id("batch")
            self._records[record.id] = record

    async def get_all_fare_batches(self) -> Result[list[BoundaryFareBatch]]:
        batches = [
            dataclasses.replace(
                copy.deepcopy(batch),
                rules=[copy.deepcopy(rule) for rule in batch.rules if rule.is_active],
            )
            for batch in self._records.values()
            if batch.is_active
        ]
        return Result.success(batches)

    async def add_fare_batch(self, batch: BoundaryFareBatch) -> Result[BoundaryFareBatch]:
        timestamp = now_millis()
        record = dataclasses.replace(
            copy.deepcopy(batch),
            id=_generate_id("batch"),
            created_at=timestamp,
            last_updated=timestamp,
        )
        for rule in record.rules:
            rule.id = rule.id or _generate_id("rule")
        self._records[record.id] = record
        return Result.success(copy.deepcopy(record))

    async def delete_fare_batch(self, batch_id: str) -> Result[None]:
        if self._records.pop(batch_id, None) is None:
            return Result.failure(f"Fare batch not found: {batch_id}")
        return Result.success(None)
