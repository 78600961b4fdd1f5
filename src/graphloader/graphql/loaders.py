from strawberry.dataloader import DataLoader

from ..logging import get_logger
from ..models import User
from ..store import RecordStore

logger = get_logger(__name__)


class Loaders:
    """Per-query DataLoaders.

    The loaders only batch: caching across queries is the job of the engine's
    ``KeyedCache``, which also coalesces concurrent loads of the same key.
    """

    def __init__(self, store: RecordStore, max_batch_size: int | None = None):
        self.store = store
        self.user_loader = DataLoader(
            load_fn=self.load_users,
            max_batch_size=max_batch_size,
            cache=False,
        )

    async def load_users(self, keys: list[str]) -> list[User | None]:
        """Batch load users by ID."""
        users = await self.store.fetch_users(keys)
        users_map = {user.id: user for user in users}
        logger.debug("Loaded user batch", keys=keys, found=len(users_map))
        return [users_map.get(key) for key in keys]
