"""Prisma client lifecycle for the read-only catalog.

One client is shared by every request. It is handed out without a round trip
while it is known to be healthy; the `SELECT 1` check only runs when the last
verification is older than HEALTH_CHECK_INTERVAL_SECONDS or after a query
failed (`mark_stale`). The lock is only taken to replace a dead client, so
concurrent lookups never queue behind each other.
"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

_client: "Prisma | None" = None
_verified_at = 0.0
_lock = asyncio.Lock()

MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 1.0
HEALTH_CHECK_INTERVAL_SECONDS = 30.0


async def _create_client() -> "Prisma":
    """Create and connect a new Prisma client, backing off between attempts."""
    from prisma import Prisma

    for attempt in range(MAX_RETRIES):
        try:
            client = Prisma()
            await client.connect()
            logger.info("Catalog database connected")
            return client
        except Exception as e:
            if attempt < MAX_RETRIES - 1:
                delay = RETRY_DELAY_SECONDS * (2**attempt)
                logger.warning(f"Catalog connection attempt {attempt + 1} failed: {e}. Retrying in {delay}s")
                await asyncio.sleep(delay)
            else:
                logger.error(f"Could not connect to the catalog after {MAX_RETRIES} attempts: {e}")
                raise


async def _is_connected(client: "Prisma") -> bool:
    try:
        await client.query_raw("SELECT 1")
        return True
    except Exception as e:
        logger.debug(f"Catalog health check failed: {e}")
        return False


def _is_fresh() -> bool:
    return time.monotonic() - _verified_at < HEALTH_CHECK_INTERVAL_SECONDS


def mark_stale() -> None:
    """Force a health check on the next `get_db()` (called after a failed query)."""
    global _verified_at
    _verified_at = 0.0


async def get_db() -> "Prisma":
    """Return the shared client, reconnecting only when it is found dead."""
    global _client, _verified_at

    client = _client
    if client is not None:
        if _is_fresh():
            return client
        if await _is_connected(client):
            _verified_at = time.monotonic()
            return client

    async with _lock:
        # Another caller may have reconnected while we waited
        if _client is not None and _client is not client:
            return _client

        if _client is not None:
            logger.warning("Catalog connection stale, reconnecting")
            try:
                await _client.disconnect()
            except Exception as e:
                logger.debug(f"Ignoring disconnect error on stale connection: {e}")
            _client = None

        _client = await _create_client()
        _verified_at = time.monotonic()
        return _client


async def close_db() -> None:
    """Disconnect the shared client at shutdown."""
    global _client
    async with _lock:
        if _client is None:
            return
        try:
            await _client.disconnect()
            logger.info("Catalog database disconnected")
        except Exception as e:
            logger.warning(f"Error closing catalog connection: {e}")
        finally:
            _client = None
            mark_stale()
