"""
GraphQL layer: schema, resolvers, loaders and the query engine
"""

from .engine import QueryEngine, Response
from .schema import SCHEMA_SDL

__all__ = ["QueryEngine", "Response", "SCHEMA_SDL"]
