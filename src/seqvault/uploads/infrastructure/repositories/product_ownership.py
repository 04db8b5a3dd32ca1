"""Product ownership checkers.

Static map for single-process deployments and tests; asyncpg-backed
lookup against the catalog's products table.
"""

import logging
from typing import Dict, Optional

import asyncpg

from ....core.exceptions import ServiceUnavailableError
from ..queries import PRODUCT_OWNED_BY

logger = logging.getLogger(__name__)


class StaticProductOwnershipChecker:
    """Ownership answered from an in-memory ``product_id -> creator_id`` map."""

    def __init__(self, owners: Optional[Dict[str, str]] = None):
        self._owners: Dict[str, str] = dict(owners or {})

    def register(self, product_id: str, creator_id: str) -> None:
        self._owners[product_id] = creator_id

    async def is_owner(self, user_id: str, product_id: str) -> bool:
        return self._owners.get(product_id) == user_id


class AsyncpgProductOwnershipChecker:
    """Ownership answered by the catalog database."""

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        self._pool = pool
        self._schema = schema

    async def is_owner(self, user_id: str, product_id: str) -> bool:
        query = PRODUCT_OWNED_BY.format(schema=self._schema)
        try:
            row = await self._pool.fetchrow(query, product_id, user_id)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Product ownership lookup failed for {product_id}: {e}")
            raise ServiceUnavailableError(f"Product ownership lookup failed: {e}") from e
        return row is not None
