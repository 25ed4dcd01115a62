"""Series loader — the engine's only asynchronous boundary."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from price_trends.core.models import PriceObservation
from price_trends.history.provider import ObservationStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_POINTS = 100


class SeriesLoader:
    """Loads a product's raw observations in ascending time order.

    History is never load-bearing: a failing or slow store yields an empty
    list, and the boundary synthesizer fills the gap with anchor prices.
    Invalid rows (a negative price, say) are programmer errors and raise
    ``ValueError`` instead.

    Parameters
    ----------
    store : ObservationStore
        The storage collaborator.
    timeout_seconds : float | None
        Upper bound on a single store call. None waits indefinitely.
    """

    def __init__(
        self,
        store: ObservationStore,
        timeout_seconds: float | None = None,
    ) -> None:
        self._store = store
        self._timeout = timeout_seconds

    async def load(
        self,
        product_id: str,
        lower_bound: datetime | None,
        *,
        limit: int = DEFAULT_MAX_POINTS,
        newest_first: bool = False,
    ) -> list[PriceObservation]:
        """Return at most ``limit`` observations, sorted ascending by time."""
        since = lower_bound.isoformat() if lower_bound is not None else None
        try:
            rows = await asyncio.wait_for(
                self._store.fetch_observations(
                    product_id, since, limit, newest_first=newest_first
                ),
                timeout=self._timeout,
            )
        except ValueError:
            raise
        except Exception as exc:
            logger.warning(
                "Price history unavailable for product %s, using anchors only: %r",
                product_id,
                exc,
            )
            return []

        ordered = sorted(rows, key=lambda o: o.observed_at)
        if len(ordered) > limit:
            ordered = ordered[-limit:] if newest_first else ordered[:limit]
        logger.debug(
            "Loaded %d observations for product %s (since=%s)", len(ordered), product_id, since
        )
        return ordered
