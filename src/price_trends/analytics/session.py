"""Cancel-and-replace range selection for interactive callers."""

from __future__ import annotations

import asyncio
import logging

from price_trends.analytics.engine import PriceTrendEngine
from price_trends.core.models import ChartData, ProductReference, TimeRange

logger = logging.getLogger(__name__)


class RangeSelectionSession:
    """Keeps at most one chart load in flight per product.

    Selecting a new range for a product cancels the previous load for that
    product; the superseded ``select`` call returns None instead of a stale
    chart. Loads for different products never affect each other.
    """

    def __init__(self, engine: PriceTrendEngine) -> None:
        self._engine = engine
        self._inflight: dict[str, asyncio.Task[ChartData]] = {}

    def in_flight(self, product_id: str) -> bool:
        task = self._inflight.get(product_id)
        return task is not None and not task.done()

    async def select(
        self,
        product_id: str,
        time_range: TimeRange | str,
        product: ProductReference,
    ) -> ChartData | None:
        previous = self._inflight.get(product_id)
        if previous is not None and not previous.done():
            logger.debug("Superseding in-flight chart load for product %s", product_id)
            previous.cancel()

        task = asyncio.create_task(
            self._engine.get_chart_data(product_id, time_range, product)
        )
        self._inflight[product_id] = task
        try:
            return await task
        except asyncio.CancelledError:
            # Superseded by a newer selection for the same product
            if task.cancelled() and self._inflight.get(product_id) is not task:
                return None
            raise
        finally:
            if self._inflight.get(product_id) is task:
                del self._inflight[product_id]
