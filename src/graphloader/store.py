"""
Synthetic record store standing in for a real database.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping

from .config import settings
from .logging import get_logger
from .models import User

logger = get_logger(__name__)

SEED_USERS: dict[str, User] = {
    "1": User(id="1", name="Alice", email="alice@example.com"),
    "2": User(id="2", name="Bob", email="bob@example.com"),
}


class RecordStore:
    """Fixed lookup table of users keyed by ID.

    Both operations sleep for ``latency`` seconds to simulate a round trip to a
    remote backend. Unknown IDs are not an error: ``lookup`` returns ``None``
    and ``fetch_users`` leaves them out.
    """

    def __init__(
        self,
        records: Mapping[str, User] | None = None,
        latency: float | None = None,
    ) -> None:
        self._records = dict(SEED_USERS if records is None else records)
        self.latency = settings.store_latency_seconds if latency is None else latency

    async def _round_trip(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    async def lookup(self, user_id: str) -> User | None:
        """Fetch a single user by ID."""
        await self._round_trip()
        user = self._records.get(user_id)
        logger.debug("Store lookup", user_id=user_id, found=user is not None)
        return user

    async def fetch_users(self, user_ids: Iterable[str]) -> list[User]:
        """Fetch every existing user among ``user_ids``, in one round trip."""
        keys = list(user_ids)
        await self._round_trip()
        users = [self._records[key] for key in keys if key in self._records]
        logger.debug("Store batch fetch", requested=len(keys), found=len(users))
        return users
