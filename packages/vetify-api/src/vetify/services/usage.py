"""Best-effort ``last_used`` tracking for API keys."""

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vetify.models.api_key import ApiKey

logger = logging.getLogger(__name__)


class UsageRecorder:
    """Writes ``last_used`` in its own session, off the request path.

    Concurrent updates for one key are last-write-wins. A failure here is
    logged and dropped; it must never turn a successful request into an error.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record_usage(self, key_id: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    update(ApiKey)
                    .where(ApiKey.id == key_id)
                    # Usage is not an edit; keep updated_at as it was.
                    .values(
                        last_used=datetime.now(timezone.utc),
                        updated_at=ApiKey.updated_at,
                    )
                )
                await session.commit()
        except Exception:
            logger.exception("Failed to update last_used for API key %s", key_id)
