"""
Tests for the central null policy
"""

from unittest.mock import MagicMock

import pytest
from graphql import GraphQLError, GraphQLNonNull, GraphQLResolveInfo, GraphQLString

from graphloader.errors import StoreError
from graphloader.graphql.outcomes import (
    BACKEND_UNAVAILABLE,
    NOT_FOUND,
    Found,
    NotFound,
    TransientFailure,
    apply_outcome,
)


def make_info(non_null: bool) -> GraphQLResolveInfo:
    info = MagicMock(spec=GraphQLResolveInfo)
    info.field_name = "user"
    info.return_type = GraphQLNonNull(GraphQLString) if non_null else GraphQLString
    return info


@pytest.mark.parametrize("non_null", [True, False])
def test_found_returns_value(non_null):
    assert apply_outcome(Found("alice"), make_info(non_null)) == "alice"


def test_not_found_on_nullable_field_is_null():
    assert apply_outcome(NotFound(key="99", kind="User"), make_info(non_null=False)) is None


def test_not_found_on_non_null_field_is_error():
    with pytest.raises(GraphQLError) as exc_info:
        apply_outcome(NotFound(key="99", kind="User"), make_info(non_null=True))

    assert exc_info.value.message == "User '99' not found"
    assert exc_info.value.extensions == {"code": NOT_FOUND}


@pytest.mark.parametrize("non_null", [True, False])
def test_transient_failure_is_always_error(non_null):
    cause = StoreError("connection refused")

    with pytest.raises(GraphQLError) as exc_info:
        apply_outcome(TransientFailure(key="1", cause=cause, kind="User"), make_info(non_null))

    assert exc_info.value.message == "Error fetching user data"
    assert exc_info.value.original_error is cause
    assert exc_info.value.extensions == {"code": BACKEND_UNAVAILABLE}


def test_unknown_outcome_rejected():
    with pytest.raises(TypeError):
        apply_outcome("alice", make_info(non_null=True))
