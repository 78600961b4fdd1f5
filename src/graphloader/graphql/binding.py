"""
Binding of outcome-returning resolvers to schema fields.

A ``FieldBinding`` names the field it serves and the arguments it expects,
with their GraphQL scalar types. Binding checks that contract against the
parsed schema up front, so a mismatch fails at startup instead of at query
time, and extracted argument values reach the resolver as Python types.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from graphql import (
    GraphQLError,
    GraphQLObjectType,
    GraphQLResolveInfo,
    GraphQLSchema,
    get_named_type,
    is_non_null_type,
)

from ..errors import BindingError
from ..logging import get_logger
from .outcomes import INTERNAL_SERVER_ERROR, Outcome, apply_outcome

logger = get_logger(__name__)

OutcomeResolver = Callable[..., Awaitable[Outcome[Any]]]

# Python type each bindable scalar is converted to before reaching a resolver.
SCALAR_TYPES: dict[str, type] = {
    "ID": str,
    "String": str,
    "Int": int,
    "Float": float,
    "Boolean": bool,
}


@dataclass(frozen=True)
class ArgumentSpec:
    """A required, non-null scalar argument."""

    name: str
    scalar: str = "ID"

    @property
    def python_type(self) -> type:
        return SCALAR_TYPES[self.scalar]


@dataclass(frozen=True)
class FieldBinding:
    type_name: str
    field_name: str
    resolver: OutcomeResolver
    arguments: tuple[ArgumentSpec, ...] = field(default_factory=tuple)

    @property
    def coordinate(self) -> str:
        return f"{self.type_name}.{self.field_name}"

    def extract(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Convert validated argument values to the declared Python types."""
        return {arg.name: arg.python_type(raw[arg.name]) for arg in self.arguments}

    def check(self, schema: GraphQLSchema) -> GraphQLObjectType:
        """Verify the field and its arguments exist with the declared types.

        Returns:
            The object type that owns the field

        Raises:
            BindingError: If the schema does not match this binding
        """
        owner = schema.get_type(self.type_name)
        if not isinstance(owner, GraphQLObjectType):
            raise BindingError(f"Cannot bind {self.coordinate}: no object type {self.type_name!r}")

        schema_field = owner.fields.get(self.field_name)
        if schema_field is None:
            raise BindingError(f"Cannot bind {self.coordinate}: field is not declared")

        expected = {arg.name for arg in self.arguments}
        declared = set(schema_field.args)
        if expected != declared:
            raise BindingError(
                f"Cannot bind {self.coordinate}: resolver takes {sorted(expected)}, "
                f"schema declares {sorted(declared)}"
            )

        for arg in self.arguments:
            if arg.scalar not in SCALAR_TYPES:
                raise BindingError(
                    f"Cannot bind {self.coordinate}: unsupported scalar {arg.scalar!r}"
                )
            arg_type = schema_field.args[arg.name].type
            if not is_non_null_type(arg_type) or get_named_type(arg_type).name != arg.scalar:
                raise BindingError(
                    f"Cannot bind {self.coordinate}: argument {arg.name!r} must be "
                    f"{arg.scalar}!, schema declares {arg_type}"
                )

        return owner


def bind(schema: GraphQLSchema, binding: FieldBinding) -> None:
    """Attach ``binding`` to its schema field.

    The installed resolver extracts typed arguments, awaits the outcome and
    hands it to ``apply_outcome``. An unexpected exception is logged and
    becomes a field error carrying the original exception.
    """
    owner = binding.check(schema)

    async def resolve_field(root: Any, info: GraphQLResolveInfo, **raw_args: Any) -> Any:
        _ = root
        args = binding.extract(raw_args)
        try:
            outcome = await binding.resolver(info, **args)
        except Exception as e:
            logger.exception("Resolver raised", field=binding.coordinate, error=str(e))
            raise GraphQLError(
                f"Internal error resolving {binding.field_name}",
                original_error=e,
                extensions={"code": INTERNAL_SERVER_ERROR},
            ) from e
        return apply_outcome(outcome, info)

    owner.fields[binding.field_name].resolve = resolve_field
    logger.debug("Bound resolver", field=binding.coordinate)
