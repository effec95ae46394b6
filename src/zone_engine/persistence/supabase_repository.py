"""Supabase-backed boundary and fare batch repositories.

The supabase client is synchronous; each query runs in a worker thread so the
async service layer is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable, Optional, TypeVar

from supabase import Client

from ..config import settings
from ..models.domain import (
    BoundaryFareBatch,
    BoundaryFareRule,
    BoundaryPoint,
    ZoneBoundary,
    now_millis,
)
from ..models.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")


def boundary_to_row(boundary: ZoneBoundary) -> dict[str, Any]:
    return {
        "id": boundary.id,
        "name": boundary.name,
        "points": [{"latitude": p.latitude, "longitude": p.longitude} for p in boundary.points],
        "fill_color": boundary.fill_color,
        "stroke_color": boundary.stroke_color,
        "stroke_width": boundary.stroke_width,
        "is_active": boundary.is_active,
        "boundary_fares": dict(boundary.boundary_fares),
        "compatible_boundaries": list(boundary.compatible_boundaries),
        "created_at": boundary.created_at,
        "last_updated": boundary.last_updated,
    }


def row_to_boundary(row: dict[str, Any]) -> ZoneBoundary:
    return ZoneBoundary(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        points=[BoundaryPoint(float(p["latitude"]), float(p["longitude"])) for p in row.get("points") or []],
        fill_color=row.get("fill_color") or "#FF9800",
        stroke_color=row.get("stroke_color") or "#F57C00",
        stroke_width=float(row.get("stroke_width") or 2.0),
        is_active=bool(row.get("is_active", True)),
        boundary_fares={str(k): float(v) for k, v in (row.get("boundary_fares") or {}).items()},
        compatible_boundaries=[str(name) for name in row.get("compatible_boundaries") or []],
        created_at=int(row.get("created_at") or 0),
        last_updated=int(row.get("last_updated") or 0),
    )


def batch_to_row(batch: BoundaryFareBatch) -> dict[str, Any]:
    return {
        "id": batch.id,
        "name": batch.name,
        "description": batch.description,
        "is_active": batch.is_active,
        "rules": [
            {
                "id": rule.id,
                "from_boundary": rule.from_boundary,
                "to_location": rule.to_location,
                "fare": rule.fare,
                "is_active": rule.is_active,
                "created_at": rule.created_at,
                "last_updated": rule.last_updated,
            }
            for rule in batch.rules
        ],
        "created_at": batch.created_at,
        "last_updated": batch.last_updated,
    }


def row_to_batch(row: dict[str, Any]) -> BoundaryFareBatch:
    rules = [
        BoundaryFareRule(
            id=str(rule.get("id") or ""),
            from_boundary=str(rule.get("from_boundary") or ""),
            to_location=str(rule.get("to_location") or ""),
            fare=float(rule.get("fare") or 0.0),
            is_active=bool(rule.get("is_active", True)),
            created_at=int(rule.get("created_at") or 0),
            last_updated=int(rule.get("last_updated") or 0),
        )
        for rule in row.get("rules") or []
    ]
    return BoundaryFareBatch(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        description=str(row.get("description") or ""),
        is_active=bool(row.get("is_active", True)),
        rules=rules,
        created_at=int(row.get("created_at") or 0),
        last_updated=int(row.get("last_updated") or 0),
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class _SupabaseRepository:
    def __init__(self, client: Client, table: str) -> None:
        self.client = client
        self.table = table

    async def _run(self, action: str, query: Callable[[], T]) -> Result[T]:
        try:
            value = await asyncio.to_thread(query)
        except Exception as exc:
            logger.exception(f"Supabase {action} on '{self.table}' failed: {exc}")
            return Result.failure(exc)
        return Result.success(value)


class SupabaseZoneBoundaryRepository(_SupabaseRepository):
    def __init__(self, client: Client, table: str | None = None) -> None:
        super().__init__(client, table or settings.zone_boundaries_table)

    def _select_all(self, active_only: bool) -> list[ZoneBoundary]:
        query = self.client.table(self.table).select("*")
        if active_only:
            query = query.eq("is_active", True)
        response = query.execute()
        return [row_to_boundary(row) for row in response.data or []]

    async def get_all_zone_boundaries(self) -> Result[list[ZoneBoundary]]:
        return await self._run("select active", lambda: self._select_all(active_only=True))

    async def get_all_zone_boundaries_including_inactive(self) -> Result[list[ZoneBoundary]]:
        return await self._run("select all", lambda: self._select_all(active_only=False))

    async def add_zone_boundary(self, boundary: ZoneBoundary) -> Result[ZoneBoundary]:
        timestamp = now_millis()
        row = boundary_to_row(boundary)
        row.update(id=str(uuid.uuid4()), created_at=timestamp, last_updated=timestamp)

        def insert() -> ZoneBoundary:
            self.client.table(self.table).insert(row).execute()
            logger.info(f"Inserted zone boundary {row['name']} ({len(row['points'])} points)")
            return row_to_boundary(row)

        return await self._run("insert", insert)

    async def update_zone_boundary(self, boundary: ZoneBoundary) -> Result[None]:
        row = boundary_to_row(boundary)
        row["last_updated"] = now_millis()

        def update() -> None:
            response = self.client.table(self.table).update(row).eq("id", boundary.id).execute()
            if not response.data:
                raise LookupError(f"Boundary not found: {boundary.id}")

        return await self._run("update", update)

    def _set_active(self, boundary_id: str, active: bool) -> None:
        response = (
            self.client.table(self.table)
            .update({"is_active": active, "last_updated": now_millis()})
            .eq("id", boundary_id)
            .execute()
        )
        if not response.data:
            raise LookupError("Boundary not found")

    async def delete_zone_boundary(self, boundary_id: str) -> Result[None]:
        return await self._run("soft delete", lambda: self._set_active(boundary_id, False))

    async def reactivate_zone_boundary(self, boundary_id: str) -> Result[None]:
        return await self._run("reactivate", lambda: self._set_active(boundary_id, True))

    async def boundary_name_exists(self, name: str, exclude_id: Optional[str] = None) -> Result[bool]:
        def check() -> bool:
            response = (
                self.client.table(self.table)
                .select("id")
                .ilike("name", _escape_like(name.strip()))
                .eq("is_active", True)
                .execute()
            )
            return any(str(row["id"]) != exclude_id for row in response.data or [])

        return await self._run("name check", check)


class SupabaseFareBatchRepository(_SupabaseRepository):
    def __init__(self, client: Client, table: str | None = None) -> None:
        super().__init__(client, table or settings.fare_batches_table)

    async def get_all_fare_batches(self) -> Result[list[BoundaryFareBatch]]:
        def select() -> list[BoundaryFareBatch]:
            response = self.client.table(self.table).select("*").eq("is_active", True).execute()
            batches = [row_to_batch(row) for row in response.data or []]
            for batch in batches:
                batch.rules = [rule for rule in batch.rules if rule.is_active]
            return batches

        return await self._run("select", select)

    async def add_fare_batch(self, batch: BoundaryFareBatch) -> Result[BoundaryFareBatch]:
        timestamp = now_millis()
        row = batch_to_row(batch)
        row.update(id=str(uuid.uuid4()), created_at=timestamp, last_updated=timestamp)
        for rule in row["rules"]:
            rule["id"] = rule["id"] or f"rule_{uuid.uuid4().hex[:12]}"

        def insert() -> BoundaryFareBatch:
            self.client.table(self.table).insert(row).execute()
            logger.info(f"Inserted fare batch {row['name']} with {len(row['rules'])} rules")
            return row_to_batch(row)

        return await self._run("insert", insert)

    async def delete_fare_batch(self, batch_id: str) -> Result[None]:
        def delete() -> None:
            self.client.table(self.table).delete().eq("id", batch_id).execute()

        return await self._run("delete", delete)
