"""One-time seed of the legacy barangay boundaries into an empty store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Sequence

from ..config import settings
from ..errors import ZoneEngineError
from ..models.domain import points_from_pairs
from .boundaries.store import BoundaryStore

logger = logging.getLogger(__name__)


def load_legacy_boundaries(source: Path | None = None) -> dict[str, list[list[float]]]:
    """Read ``{name: [[lat, lng], ...]}`` polygon definitions from JSON."""

    path = source or settings.legacy_boundaries_file
    if not path.exists():
        raise FileNotFoundError(f"Legacy boundary file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Legacy boundary file '{path}' must hold an object keyed by boundary name")
    return data


async def seed_boundaries(
    store: BoundaryStore,
    definitions: Mapping[str, Sequence[Sequence[float]]] | None = None,
) -> int:
    """Create one boundary per definition unless any boundary already exists.

    Returns the number of boundaries created. A definition that fails
    validation is logged and skipped.
    """

    existing = await store.list_all()
    if existing:
        logger.info(f"Skipping boundary seed: {len(existing)} boundaries already stored")
        return 0

    definitions = load_legacy_boundaries() if definitions is None else definitions
    created = 0
    for name, pairs in definitions.items():
        try:
            await store.create(name, points_from_pairs(pairs))
        except ZoneEngineError as exc:
            logger.warning(f"Skipping seed boundary {name}: {exc}")
            continue
        created += 1

    logger.info(f"Seeded {created} of {len(definitions)} zone boundaries")
    return created
