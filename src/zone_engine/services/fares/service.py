"""Fare lookup across boundary-to-boundary maps and destination fare batches."""

from __future__ import annotations

import dataclasses
import logging
from typing import Awaitable, Mapping, Optional, TypeVar

from ...config import settings
from ...errors import ValidationError
from ...models.domain import BoundaryFareBatch, BoundaryFareRule, ZoneBoundary, canonical_name
from ...models.result import Result
from ...persistence.base import FareBatchRepository, await_result
from ..boundaries.locator import ZoneLocator
from ..boundaries.store import BoundaryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_FARES_MESSAGE = "No boundary fares set"
CURRENCY_SYMBOL = "₱"


def clean_destination_name(label: str) -> str:
    """Strip a rendered fare suffix: ``"City Hall - ₱50"`` -> ``"City Hall"``."""

    return label.split(f" - {CURRENCY_SYMBOL}")[0].strip()


def _same_location(a: str, b: str) -> bool:
    return a.strip().casefold() == b.strip().casefold()


def _validated_fares(fares: Mapping[str, float]) -> dict[str, float]:
    cleaned: dict[str, float] = {}
    for name, fare in fares.items():
        key = canonical_name(name)
        if not key:
            raise ValidationError("Fare entries need a boundary name")
        value = float(fare)
        if value < 0:
            raise ValidationError(f"Fare for {key} must not be negative")
        cleaned[key] = value
    return cleaned


class FareResolutionService:
    """Single lookup contract over both fare representations.

    Boundary-to-boundary fares live on the origin ``ZoneBoundary``; fares to
    destinations live in one ``BoundaryFareBatch`` per destination. When both
    define the same pair the boundary-to-boundary value wins.
    """

    def __init__(
        self,
        store: BoundaryStore,
        repository: FareBatchRepository,
        *,
        locator: ZoneLocator | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.store = store
        self.repository = repository
        self.locator = locator or ZoneLocator(store)
        self.timeout_seconds = timeout_seconds or settings.repository_timeout_seconds
        store.add_rename_listener(self.on_boundary_renamed)

    async def _call(self, action: str, call: Awaitable[Result[T]]) -> T:
        return await await_result(action, call, self.timeout_seconds)

    async def _batches(self) -> list[BoundaryFareBatch]:
        return await self._call("load fare batches", self.repository.get_all_fare_batches())

    # Lookup

    async def get_fare(self, from_boundary: str, target: str) -> Optional[float]:
        origin_key = canonical_name(from_boundary)
        target_key = canonical_name(target)

        boundaries = await self.store.list_active()
        names = {canonical_name(boundary.name): boundary for boundary in boundaries}
        origin = names.get(origin_key)
        if origin is not None and target_key in names:
            for name, fare in origin.boundary_fares.items():
                if canonical_name(name) == target_key:
                    return fare

        for batch in await self._batches():
            for rule in batch.rules:
                if (
                    rule.is_active
                    and canonical_name(rule.from_boundary) == origin_key
                    and _same_location(rule.to_location, target)
                ):
                    return rule.fare
        return None

    async def fares_for_destination(self, destination: str) -> dict[str, float]:
        fares: dict[str, float] = {}
        for batch in await self._batches():
            for rule in batch.rules:
                if rule.is_active and _same_location(rule.to_location, destination):
                    fares[rule.from_boundary] = rule.fare
        logger.debug("Found %d boundary fares for %s", len(fares), destination)
        return fares

    async def display_string(self, destination: str) -> str:
        fares = await self.fares_for_destination(destination)
        if not fares:
            return NO_FARES_MESSAGE
        return ", ".join(f"{boundary}: {CURRENCY_SYMBOL}{fare}" for boundary, fare in fares.items())

    async def resolve_trip_fare(
        self,
        pickup_latitude: float,
        pickup_longitude: float,
        destination_name: str,
        destination_latitude: float,
        destination_longitude: float,
    ) -> Optional[float]:
        """Fare for a trip from the pickup's zone to a destination.

        Tries the named destination first, then the zone the destination
        coordinates fall in. Returns None when the pickup is outside every
        zone or no fare is configured.
        """

        pickup_zone = await self.locator.locate(pickup_latitude, pickup_longitude)
        if pickup_zone is None:
            logger.info("Pickup (%s, %s) is outside all boundaries", pickup_latitude, pickup_longitude)
            return None

        destination = clean_destination_name(destination_name)
        fare = await self.get_fare(pickup_zone, destination) if destination else None
        if fare is not None:
            return fare

        destination_zone = await self.locator.locate(destination_latitude, destination_longitude)
        if destination_zone is None:
            return None
        return await self.get_fare(pickup_zone, destination_zone)

    # Mutation

    async def set_fares_for_destination(
        self,
        destination: str,
        fares: Mapping[str, float],
    ) -> Optional[BoundaryFareBatch]:
        """Replace the destination's whole fare table; an empty mapping just clears it."""

        destination = destination.strip()
        if not destination:
            raise ValidationError("Destination name is required")
        cleaned = _validated_fares(fares)

        batches = await self._batches()
        existing = [batch for batch in batches if batch.targets(destination)]
        for batch in existing:
            await self._call(f"delete fare batch {batch.id}", self.repository.delete_fare_batch(batch.id))
        if existing:
            logger.info("Removed %d fare batch(es) for %s", len(existing), destination)

        for batch in batches:
            if batch.targets(destination) or not any(_same_location(rule.to_location, destination) for rule in batch.rules):
                continue
            await self._strip_destination(batch, destination)

        if not cleaned:
            return None

        batch = BoundaryFareBatch(
            name=f"{destination} Fares",
            description=f"Boundary fares for {destination}",
            rules=[
                BoundaryFareRule(from_boundary=boundary, to_location=destination, fare=fare)
                for boundary, fare in cleaned.items()
            ],
        )
        stored = await self._call("save fare batch", self.repository.add_fare_batch(batch))
        logger.info("Set %d boundary fares for %s", len(stored.rules), destination)
        return stored

    async def _strip_destination(self, batch: BoundaryFareBatch, destination: str) -> None:
        """Re-save a mixed batch without its rules for ``destination``."""

        kept = [
            dataclasses.replace(rule, id="")
            for rule in batch.rules
            if not _same_location(rule.to_location, destination)
        ]
        await self._call(f"delete fare batch {batch.id}", self.repository.delete_fare_batch(batch.id))
        if kept:
            remaining = dataclasses.replace(batch, id="", rules=kept)
            await self._call("save fare batch", self.repository.add_fare_batch(remaining))
        logger.info("Dropped %d %s fare rule(s) from %s", len(batch.rules) - len(kept), destination, batch.name)

    async def set_boundary_fares(self, boundary_id: str, fares: Mapping[str, float]) -> ZoneBoundary:
        """Replace a boundary's boundary-to-boundary fare map."""

        boundary = await self.store.get(boundary_id)
        saved = await self.store.save(dataclasses.replace(boundary, boundary_fares=_validated_fares(fares)))
        logger.info("Updated boundary fares for %s", boundary.name)
        return saved

    async def on_boundary_renamed(self, old_name: str, new_name: str) -> None:
        """Move destination fare rules from ``old_name`` to ``new_name``."""

        old_key = canonical_name(old_name)
        for batch in await self._batches():
            if not any(canonical_name(rule.from_boundary) == old_key for rule in batch.rules):
                continue
            renamed = dataclasses.replace(
                batch,
                id="",
                rules=[
                    dataclasses.replace(
                        rule,
                        id="",
                        from_boundary=new_name if canonical_name(rule.from_boundary) == old_key else rule.from_boundary,
                    )
                    for rule in batch.rules
                ],
            )
            await self._call(f"delete fare batch {batch.id}", self.repository.delete_fare_batch(batch.id))
            await self._call("save fare batch", self.repository.add_fare_batch(renamed))
            logger.info("Moved fare rules in %s from %s to %s", batch.name, old_key, new_name)
