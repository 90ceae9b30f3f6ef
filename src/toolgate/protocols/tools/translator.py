"""Schema translator — parameter schema nodes to wire-level JSON Schema.

The output is what ``tools/list`` publishes as each tool's ``inputSchema``.
"""

from __future__ import annotations

from typing import Any

from toolgate.protocols.tools.schema import (
    ArraySchema,
    BooleanSchema,
    DefaultSchema,
    EnumSchema,
    NullableSchema,
    NumberSchema,
    ObjectSchema,
    OptionalSchema,
    SchemaNode,
    StringSchema,
    is_required,
)

_FORMATS = {"email": "email", "url": "uri", "uuid": "uuid"}


def to_json_schema(node: SchemaNode) -> dict[str, Any]:
    """Translate *node* into a JSON-Schema-like dict.

    Total over the node union: anything unrecognized becomes an
    unconstrained string.
    """
    if isinstance(node, OptionalSchema):
        result = to_json_schema(node.inner)
    elif isinstance(node, NullableSchema):
        result = {**to_json_schema(node.inner), "nullable": True}
    elif isinstance(node, DefaultSchema):
        result = {**to_json_schema(node.inner), "default": node.value}
    elif isinstance(node, ObjectSchema):
        result = object_to_json_schema(node)
    elif isinstance(node, StringSchema):
        result = {"type": "string"}
        if node.min_length is not None:
            result["minLength"] = node.min_length
        if node.max_length is not None:
            result["maxLength"] = node.max_length
        if node.format is not None:
            result["format"] = _FORMATS[node.format]
    elif isinstance(node, NumberSchema):
        result = {"type": "integer" if node.integer else "number"}
        if node.minimum is not None:
            result["minimum"] = node.minimum
        if node.maximum is not None:
            result["maximum"] = node.maximum
    elif isinstance(node, BooleanSchema):
        result = {"type": "boolean"}
    elif isinstance(node, EnumSchema):
        result = {"type": "string", "enum": list(node.values)}
    elif isinstance(node, ArraySchema):
        result = {"type": "array", "items": to_json_schema(node.items)}
    else:
        result = {"type": "string"}

    if node.description:
        result["description"] = node.description
    return result


def object_to_json_schema(node: ObjectSchema) -> dict[str, Any]:
    """Translate an object node; ``required`` is omitted when empty."""
    properties: dict[str, Any] = {}
    required: list[str] = []
    for name, field in node.properties.items():
        properties[name] = to_json_schema(field)
        if is_required(field):
            required.append(name)

    result: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        result["required"] = required
    return result
