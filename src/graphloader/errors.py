"""
Exception types raised by graphloader.

Per-query problems (syntax, validation, resolver failures) are reported in the
``Response`` as ``GraphQLError`` entries; the exceptions here cover startup and
backend failures.
"""


class GraphLoaderError(Exception):
    """Base class for graphloader errors."""

    pass


class SchemaError(GraphLoaderError):
    """Raised when the schema text cannot be parsed or is invalid."""

    pass


class BindingError(SchemaError):
    """Raised when a resolver cannot be bound to a schema field."""

    pass


class StoreError(GraphLoaderError):
    """Raised when the backing record store fails."""

    pass
