from __future__ import annotations

from typing import TYPE_CHECKING

from graphql import GraphQLResolveInfo

from ...errors import StoreError
from ...logging import get_logger
from ..outcomes import Found, NotFound, Outcome, TransientFailure

if TYPE_CHECKING:
    from ...cache import KeyedCache
    from ...models import User
    from ..loaders import Loaders

logger = get_logger(__name__)


async def resolve_user_by_id(info: GraphQLResolveInfo, id: str) -> Outcome[User]:
    """Resolve ``Query.user`` through the shared cache and the batching loader."""
    cache: KeyedCache[str, User] = info.context["cache"]
    loaders: Loaders = info.context["loaders"]

    try:
        user = await cache.get_or_load(id, loaders.user_loader.load)
    except StoreError as e:
        return TransientFailure(key=id, cause=e, kind="User")

    if user is None:
        logger.debug("User not found", user_id=id)
        return NotFound(key=id, kind="User")
    return Found(user)
