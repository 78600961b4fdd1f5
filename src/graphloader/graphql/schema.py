"""
GraphQL schema definition and startup validation
"""

from graphql import (
    GraphQLError,
    GraphQLSchema,
    build_schema,
    get_introspection_query,
    graphql_sync,
)
from graphql import validate_schema as gql_validate_schema

from ..errors import SchemaError
from ..logging import get_logger

logger = get_logger(__name__)

SCHEMA_SDL = """
type Query {
  user(id: ID!): User!
}

type User {
  id: ID!
  name: String!
  email: String!
}
"""


def build_schema_from_sdl(sdl: str = SCHEMA_SDL) -> GraphQLSchema:
    """Parse SDL text into a validated executable schema.

    Raises:
        SchemaError: If the text is malformed or describes an invalid schema
    """
    try:
        schema = build_schema(sdl)
    except (GraphQLError, TypeError) as e:
        logger.error("GraphQL schema parsing failed", error=str(e))
        raise SchemaError(f"Invalid schema definition: {e}") from e

    validate_schema(schema)
    return schema


def validate_schema(schema: GraphQLSchema) -> None:
    """Validate the GraphQL schema at startup.

    This ensures that all type references can be resolved and that a query
    root exists, so the engine fails fast rather than on the first request.

    Raises:
        SchemaError: If the schema is invalid
    """
    errors = gql_validate_schema(schema)
    if errors:
        error_messages = [str(e) for e in errors]
        logger.error("GraphQL schema validation failed", errors=error_messages)
        raise SchemaError(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

    # Check that introspection works (catches most resolution issues)
    result = graphql_sync(schema, get_introspection_query())
    if result.errors:
        error_messages = [str(e) for e in result.errors]
        logger.error("GraphQL introspection failed", errors=error_messages)
        raise SchemaError(f"GraphQL introspection failed: {'; '.join(error_messages)}")

    logger.debug("GraphQL schema validation successful")
