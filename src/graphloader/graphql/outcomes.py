"""
Resolver outcomes and the null policy applied to them.

Resolvers return an outcome instead of raising for an expected miss. The
policy in ``apply_outcome`` decides, from the field's declared type, whether a
miss is a plain ``null`` or a field error.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from graphql import GraphQLError, GraphQLResolveInfo, is_non_null_type

from ..logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

NOT_FOUND = "NOT_FOUND"
BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    key: str
    kind: str = "Record"


@dataclass(frozen=True)
class TransientFailure:
    key: str
    cause: Exception
    kind: str = "Record"


Outcome = Found[T] | NotFound | TransientFailure


def apply_outcome(outcome: Outcome[Any], info: GraphQLResolveInfo) -> Any:
    """Turn a resolver outcome into a field value or raise a field error.

    Raises:
        GraphQLError: For a miss on a non-null field, or any transient failure.
            graphql-core attaches the field path and applies null propagation.
    """
    if isinstance(outcome, Found):
        return outcome.value

    if isinstance(outcome, NotFound):
        if not is_non_null_type(info.return_type):
            return None
        logger.info(
            "Non-null field resolved to nothing", field=info.field_name, key=outcome.key
        )
        raise GraphQLError(
            f"{outcome.kind} '{outcome.key}' not found",
            extensions={"code": NOT_FOUND},
        )

    if isinstance(outcome, TransientFailure):
        logger.warning(
            "Field resolution failed",
            field=info.field_name,
            key=outcome.key,
            error=str(outcome.cause),
        )
        raise GraphQLError(
            f"Error fetching {outcome.kind.lower()} data",
            original_error=outcome.cause,
            extensions={"code": BACKEND_UNAVAILABLE},
        )

    raise TypeError(f"Unsupported resolver outcome: {outcome!r}")
