"""SQLite-backed observation store.

Reference implementation of the ``ObservationStore`` protocol, plus the
product anchor table the CLI reads ``ProductReference`` records from.
Uses aiosqlite for async SQLite access.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from price_trends.core.exceptions import StorageError
from price_trends.core.models import PriceObservation, ProductReference

logger = logging.getLogger(__name__)

_SCHEMA = (
    """CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        current_price REAL,
        original_price REAL,
        original_currency TEXT NOT NULL DEFAULT 'SAR'
    )""",
    """CREATE TABLE IF NOT EXISTS price_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        product_id TEXT NOT NULL,
        price REAL NOT NULL,
        currency TEXT NOT NULL,
        scraped_at TEXT NOT NULL
    )""",
    """CREATE INDEX IF NOT EXISTS idx_history_product_date
        ON price_history (product_id, scraped_at)""",
)


def _to_iso(value: datetime) -> str:
    """Uniform UTC ISO-8601 text so lexical order matches time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SqliteObservationStore:
    """SQLite-backed implementation of ObservationStore.

    Parameters
    ----------
    db_path : str
        Path to the SQLite database file.
        Created automatically if it doesn't exist.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._initialized = False

    async def _ensure_tables(self) -> None:
        if self._initialized:
            return

        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(self._db_path) as db:
                for statement in _SCHEMA:
                    await db.execute(statement)
                await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to initialise store at {self._db_path}: {e}",
                context={"operation": "migrate", "product_id": None},
            ) from e
        self._initialized = True

    # --- Observations ---

    async def record_observations(
        self, product_id: str, observations: list[PriceObservation]
    ) -> int:
        """Append observations for a product. Returns count of rows inserted."""
        if not observations:
            return 0

        await self._ensure_tables()
        rows = [
            (product_id, obs.price, obs.currency, _to_iso(obs.observed_at))
            for obs in observations
        ]
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.executemany(
                    """INSERT INTO price_history (product_id, price, currency, scraped_at)
                       VALUES (?, ?, ?, ?)""",
                    rows,
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to record observations: {e}",
                context={"operation": "insert", "product_id": product_id},
            ) from e

        logger.info("Recorded %d observations for product %s", len(rows), product_id)
        return len(rows)

    async def fetch_observations(
        self,
        product_id: str,
        since: str | None,
        limit: int,
        *,
        newest_first: bool = False,
    ) -> list[PriceObservation]:
        """Retrieve up to ``limit`` observations, ordered by ``scraped_at``.

        Rows come back ascending, or descending when ``newest_first``.
        """
        await self._ensure_tables()

        query = "SELECT price, currency, scraped_at FROM price_history WHERE product_id = ?"
        params: list = [product_id]
        if since is not None:
            query += " AND scraped_at >= ?"
            params.append(_to_iso(datetime.fromisoformat(since)))
        query += f" ORDER BY scraped_at {'DESC' if newest_first else 'ASC'}, id LIMIT ?"
        params.append(limit)

        try:
            async with aiosqlite.connect(self._db_path) as db:
                cursor = await db.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to fetch observations: {e}",
                context={"operation": "fetch", "product_id": product_id},
            ) from e

        logger.debug("Fetched %d observations for product %s", len(rows), product_id)
        return [
            PriceObservation(
                price=row[0],
                currency=row[1],
                observed_at=datetime.fromisoformat(row[2]),
            )
            for row in rows
        ]

    # --- Product anchors ---

    async def save_product(self, product: ProductReference) -> None:
        """Insert or replace a product's anchor prices."""
        await self._ensure_tables()
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(
                    """INSERT OR REPLACE INTO products
                       (id, current_price, original_price, original_currency)
                       VALUES (?, ?, ?, ?)""",
                    (
                        product.id,
                        product.current_price,
                        product.original_price,
                        product.original_currency,
                    ),
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to save product: {e}",
                context={"operation": "upsert", "product_id": product.id},
            ) from e

    async def get_product(self, product_id: str) -> ProductReference | None:
        """Return the product's anchors, or None if it is unknown."""
        await self._ensure_tables()
        try:
            async with aiosqlite.connect(self._db_path) as db:
                cursor = await db.execute(
                    """SELECT id, current_price, original_price, original_currency
                       FROM products WHERE id = ?""",
                    (product_id,),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to load product: {e}",
                context={"operation": "query", "product_id": product_id},
            ) from e

        if row is None:
            return None
        return ProductReference(
            id=row[0],
            current_price=row[1],
            original_price=row[2],
            original_currency=row[3],
        )

    async def list_product_ids(self) -> list[str]:
        """Return every product id that has anchors or history."""
        await self._ensure_tables()
        try:
            async with aiosqlite.connect(self._db_path) as db:
                cursor = await db.execute(
                    """SELECT id FROM products
                       UNION SELECT DISTINCT product_id FROM price_history
                       ORDER BY 1"""
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to list products: {e}",
                context={"operation": "query", "product_id": None},
            ) from e

        return [row[0] for row in rows]
