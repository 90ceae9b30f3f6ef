"""Parameter schema nodes for tool inputs.

A closed tagged union of schema node types. Scalar nodes carry their own
validation constraints; wrapper nodes (``optional``, ``nullable``,
``default``) modify the node they wrap. ``unknown`` is the fallback for
anything without a more precise description.

Nodes are built fluently::

    ObjectSchema(
        properties={
            "query": StringSchema(min_length=1).describe("Search text"),
            "limit": NumberSchema(integer=True, minimum=1, maximum=100).default(20),
            "tags": ArraySchema(items=StringSchema()).optional(),
        }
    )
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _SchemaBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str | None = None

    def describe(self, text: str) -> SchemaNode:
        """Return a copy of this node carrying *text* as its description."""
        return self.model_copy(update={"description": text})  # type: ignore[return-value]

    def optional(self) -> OptionalSchema:
        """Allow the field to be absent."""
        return OptionalSchema(inner=self)  # type: ignore[arg-type]

    def nullable(self) -> NullableSchema:
        """Allow the field to be ``null``."""
        return NullableSchema(inner=self)  # type: ignore[arg-type]

    def default(self, value: Any) -> DefaultSchema:
        """Fill *value* in when the field is absent."""
        return DefaultSchema(inner=self, value=value)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Scalar and container nodes
# ---------------------------------------------------------------------------


class StringSchema(_SchemaBase):
    kind: Literal["string"] = "string"
    min_length: int | None = None
    max_length: int | None = None
    format: Literal["email", "url", "uuid"] | None = None


class NumberSchema(_SchemaBase):
    kind: Literal["number"] = "number"
    minimum: int | float | None = None
    maximum: int | float | None = None
    integer: bool = False


class BooleanSchema(_SchemaBase):
    kind: Literal["boolean"] = "boolean"


class EnumSchema(_SchemaBase):
    kind: Literal["enum"] = "enum"
    values: tuple[str, ...] = Field(min_length=1)


class ArraySchema(_SchemaBase):
    kind: Literal["array"] = "array"
    items: SchemaNode


class ObjectSchema(_SchemaBase):
    kind: Literal["object"] = "object"
    properties: dict[str, SchemaNode] = Field(default_factory=dict)


class UnknownSchema(_SchemaBase):
    """A node with no precise description; published as a plain string."""

    kind: Literal["unknown"] = "unknown"


# ---------------------------------------------------------------------------
# Wrapper nodes
# ---------------------------------------------------------------------------


class OptionalSchema(_SchemaBase):
    kind: Literal["optional"] = "optional"
    inner: SchemaNode


class NullableSchema(_SchemaBase):
    kind: Literal["nullable"] = "nullable"
    inner: SchemaNode


class DefaultSchema(_SchemaBase):
    kind: Literal["default"] = "default"
    inner: SchemaNode
    value: Any = None


SchemaNode = Annotated[
    StringSchema
    | NumberSchema
    | BooleanSchema
    | EnumSchema
    | ArraySchema
    | ObjectSchema
    | UnknownSchema
    | OptionalSchema
    | NullableSchema
    | DefaultSchema,
    Field(discriminator="kind"),
]

for _model in (ArraySchema, ObjectSchema, OptionalSchema, NullableSchema, DefaultSchema):
    _model.model_rebuild()


def accepts_missing(node: SchemaNode) -> bool:
    """True when the node tolerates an absent value (optional or defaulted)."""
    while isinstance(node, OptionalSchema | NullableSchema | DefaultSchema):
        if isinstance(node, OptionalSchema | DefaultSchema):
            return True
        node = node.inner
    return False


def accepts_null(node: SchemaNode) -> bool:
    """True when the node tolerates an explicit ``null``."""
    while isinstance(node, OptionalSchema | NullableSchema | DefaultSchema):
        if isinstance(node, NullableSchema):
            return True
        node = node.inner
    return False


def is_required(node: SchemaNode) -> bool:
    """A field is required iff it is neither optional nor nullable."""
    return not accepts_missing(node) and not accepts_null(node)


def default_of(node: SchemaNode) -> tuple[bool, Any]:
    """Return ``(True, value)`` for the outermost default in the wrapper chain."""
    while isinstance(node, OptionalSchema | NullableSchema | DefaultSchema):
        if isinstance(node, DefaultSchema):
            return True, node.value
        node = node.inner
    return False, None


def unwrap(node: SchemaNode) -> SchemaNode:
    """Strip every wrapper and return the underlying value node."""
    while isinstance(node, OptionalSchema | NullableSchema | DefaultSchema):
        node = node.inner
    return node
