"""Repository contracts consumed by the boundary and fare services.

Implementations never raise across this boundary: every failure is returned
as ``Result.failure``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Protocol, TypeVar

from ..errors import PersistenceError
from ..models.domain import BoundaryFareBatch, ZoneBoundary
from ..models.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def await_result(action: str, call: Awaitable[Result[T]], timeout_seconds: float) -> T:
    """Await a repository call under a deadline and unwrap its result.

    Raises ``PersistenceError`` on timeout or when the repository reports a failure.
    """

    try:
        result = await asyncio.wait_for(call, timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        raise PersistenceError(f"Timed out after {timeout_seconds:g}s while trying to {action}") from exc
    if not result.ok:
        logger.warning("Repository failed to %s: %s", action, result.message)
    return result.unwrap()


class ZoneBoundaryRepository(Protocol):
    async def get_all_zone_boundaries(self) -> Result[list[ZoneBoundary]]:
        """Active boundaries only."""
        ...

    async def get_all_zone_boundaries_including_inactive(self) -> Result[list[ZoneBoundary]]:
        ...

    async def add_zone_boundary(self, boundary: ZoneBoundary) -> Result[ZoneBoundary]:
        """Store a new boundary and return it with its generated id and timestamps."""
        ...

    async def update_zone_boundary(self, boundary: ZoneBoundary) -> Result[None]:
        ...

    async def delete_zone_boundary(self, boundary_id: str) -> Result[None]:
        """Soft delete (``is_active = False``)."""
        ...

    async def reactivate_zone_boundary(self, boundary_id: str) -> Result[None]:
        ...

    async def boundary_name_exists(self, name: str, exclude_id: Optional[str] = None) -> Result[bool]:
        """Case-insensitive match against active boundaries."""
        ...


class FareBatchRepository(Protocol):
    async def get_all_fare_batches(self) -> Result[list[BoundaryFareBatch]]:
        """Active batches with their active rules."""
        ...

    async def add_fare_batch(self, batch: BoundaryFareBatch) -> Result[BoundaryFareBatch]:
        ...

    async def delete_fare_batch(self, batch_id: str) -> Result[None]:
        ...
