"""Boundary synthesis: anchor a sparse history to "original" and "now".

The chart must always read as a timeline from the listed price to today.
Given the ascending raw history and the product's anchor prices:

1. If there is no history, or its last point is older than the staleness
   window, append the current price at ``now``.
2. If the series is non-empty and the original price differs from the
   current price, prepend the original price one offset before the first
   point of the series as it stands after step 1.
3. If nothing could be placed, return an empty series ("no history").

Synthesis is idempotent: a series whose first point already is the
synthetic original-price boundary is not prepended to again, and a
series ending at ``now`` is never stale.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from price_trends.core.models import PriceObservation, ProductReference

logger = logging.getLogger(__name__)

DEFAULT_STALENESS = timedelta(hours=24)
DEFAULT_ORIGINAL_OFFSET = timedelta(days=1)


def _is_original_boundary(point: PriceObservation, product: ProductReference) -> bool:
    return (
        point.synthetic
        and point.price == product.original_price
        and point.currency == product.original_currency
    )


def synthesize_boundaries(
    observations: list[PriceObservation],
    product: ProductReference,
    now: datetime,
    *,
    staleness: timedelta = DEFAULT_STALENESS,
    original_offset: timedelta = DEFAULT_ORIGINAL_OFFSET,
) -> list[PriceObservation]:
    """Return a new ascending series with synthetic boundary points added.

    ``observations`` must already be ascending; it is not modified.
    """
    series = list(observations)

    stale = not series or series[-1].observed_at < now - staleness
    if stale and product.current_price is not None:
        series.append(
            PriceObservation(
                price=product.current_price,
                currency=product.original_currency,
                observed_at=now,
                synthetic=True,
            )
        )
        logger.debug("Appended current price %s for product %s", product.current_price, product.id)

    if (
        series
        and product.original_price is not None
        and product.original_price != product.current_price
        and not _is_original_boundary(series[0], product)
    ):
        series.insert(
            0,
            PriceObservation(
                price=product.original_price,
                currency=product.original_currency,
                observed_at=series[0].observed_at - original_offset,
                synthetic=True,
            ),
        )
        logger.debug("Prepended original price %s for product %s", product.original_price, product.id)

    return series
