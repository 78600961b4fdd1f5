"""
Query engine: parses the schema once, binds resolvers and executes queries.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from graphql import (
    DocumentNode,
    ExecutionResult,
    GraphQLError,
    GraphQLSchema,
    execute,
    parse,
    validate,
)
from graphql.pyutils import is_awaitable

from ..cache import KeyedCache
from ..config import Settings, settings as default_settings
from ..logging import clear_query_context, get_logger, set_query_context
from ..models import User
from ..store import RecordStore
from .binding import FieldBinding, bind
from .loaders import Loaders
from .resolvers import QUERY_BINDINGS
from .schema import SCHEMA_SDL, build_schema_from_sdl

logger = get_logger(__name__)

GRAPHQL_PARSE_FAILED = "GRAPHQL_PARSE_FAILED"
GRAPHQL_VALIDATION_FAILED = "GRAPHQL_VALIDATION_FAILED"
BAD_USER_INPUT = "BAD_USER_INPUT"
QUERY_TIMEOUT = "QUERY_TIMEOUT"


@dataclass
class Response:
    """Result of executing one query.

    ``request_error`` is set when the query was rejected before execution
    (syntax, validation, variable coercion or timeout); such responses never
    carry data.
    """

    data: dict[str, Any] | None = None
    errors: list[GraphQLError] = field(default_factory=list)
    request_error: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def formatted(self) -> dict[str, Any]:
        """The response in the standard GraphQL result shape."""
        result: dict[str, Any] = {"data": self.data}
        if self.errors:
            result["errors"] = [error.formatted for error in self.errors]
        return result

    @classmethod
    def from_execution(cls, result: ExecutionResult) -> Response:
        errors = list(result.errors or [])
        # Errors without a path come from variable coercion, before any field ran
        if result.data is None and errors and all(error.path is None for error in errors):
            return cls.rejected(errors, BAD_USER_INPUT)
        return cls(data=result.data, errors=errors)

    @classmethod
    def rejected(cls, errors: Iterable[GraphQLError], code: str) -> Response:
        tagged = [_with_code(error, code) for error in errors]
        return cls(data=None, errors=tagged, request_error=True)


def _with_code(error: GraphQLError, code: str) -> GraphQLError:
    if error.extensions and "code" in error.extensions:
        return error
    return GraphQLError(
        error.message,
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        original_error=error.original_error,
        extensions={**(error.extensions or {}), "code": code},
    )


class QueryEngine:
    """Executes GraphQL queries against a fixed schema.

    The schema text is parsed and validated once, at construction. The
    ``KeyedCache`` is owned by the engine and shared by every query it runs;
    DataLoaders are created per query.

    Usage:
        with QueryEngine() as engine:
            response = await engine.execute('{ user(id: "1") { name } }')
    """

    def __init__(
        self,
        sdl: str = SCHEMA_SDL,
        *,
        settings: Settings | None = None,
        store: RecordStore | None = None,
        cache: KeyedCache[str, User] | None = None,
        bindings: Iterable[FieldBinding] = QUERY_BINDINGS,
    ) -> None:
        self.settings = settings or default_settings
        self.store = store or RecordStore(latency=self.settings.store_latency_seconds)
        self.cache = cache if cache is not None else KeyedCache.from_settings(self.settings)

        self.schema: GraphQLSchema = build_schema_from_sdl(sdl)
        for binding in bindings:
            bind(self.schema, binding)

        logger.info(
            "Query engine started",
            cache_ttl_seconds=self.cache.ttl,
            cache_max_size=self.cache.maxsize,
        )

    def __enter__(self) -> QueryEngine:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the cache. The engine can still be used afterwards."""
        self.cache.clear()
        logger.info("Query engine closed")

    def context(self) -> dict[str, Any]:
        """Build the context for one query's resolvers."""
        return {
            "cache": self.cache,
            "loaders": Loaders(self.store, max_batch_size=self.settings.max_batch_size),
        }

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> Response:
        """Parse, validate and execute ``query``.

        Never raises for problems with the query itself: syntax and validation
        errors are request-level errors, resolver failures are field errors.
        """
        set_query_context()
        try:
            try:
                document = parse(query)
            except GraphQLError as e:
                logger.warning("Query parsing failed", error=e.message)
                return Response.rejected([e], GRAPHQL_PARSE_FAILED)

            validation_errors = validate(self.schema, document)
            if validation_errors:
                logger.warning(
                    "Query validation failed",
                    errors=[error.message for error in validation_errors],
                )
                return Response.rejected(validation_errors, GRAPHQL_VALIDATION_FAILED)

            try:
                result = await asyncio.wait_for(
                    self._run(document, variables, operation_name),
                    timeout=self.settings.query_timeout_seconds,
                )
            except TimeoutError:
                logger.warning(
                    "Query timed out", timeout_seconds=self.settings.query_timeout_seconds
                )
                error = GraphQLError(
                    f"Query exceeded {self.settings.query_timeout_seconds}s timeout"
                )
                return Response.rejected([error], QUERY_TIMEOUT)

            response = Response.from_execution(result)
            logger.debug(
                "Query executed",
                operation_name=operation_name,
                errors=len(response.errors),
            )
            return response
        finally:
            clear_query_context()

    async def _run(
        self,
        document: DocumentNode,
        variables: dict[str, Any] | None,
        operation_name: str | None,
    ) -> ExecutionResult:
        result = execute(
            self.schema,
            document,
            context_value=self.context(),
            variable_values=variables,
            operation_name=operation_name,
        )
        if is_awaitable(result):
            result = await result
        return result
