"""
Field resolvers and their bindings to the schema
"""

from ..binding import ArgumentSpec, FieldBinding
from .user import resolve_user_by_id

QUERY_BINDINGS: tuple[FieldBinding, ...] = (
    FieldBinding(
        type_name="Query",
        field_name="user",
        resolver=resolve_user_by_id,
        arguments=(ArgumentSpec("id", "ID"),),
    ),
)

__all__ = ["QUERY_BINDINGS", "resolve_user_by_id"]
