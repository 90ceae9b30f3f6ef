"""Tool registry, parameter schemas and schema translation."""

from toolgate.protocols.tools.registry import Tool, ToolHandler, ToolRegistry
from toolgate.protocols.tools.results import error_response, list_response, success_response
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
    UnknownSchema,
    is_required,
)
from toolgate.protocols.tools.translator import object_to_json_schema, to_json_schema
from toolgate.protocols.tools.validation import ArgumentValidator

__all__ = [
    "ArgumentValidator",
    "ArraySchema",
    "BooleanSchema",
    "DefaultSchema",
    "EnumSchema",
    "NullableSchema",
    "NumberSchema",
    "ObjectSchema",
    "OptionalSchema",
    "SchemaNode",
    "StringSchema",
    "Tool",
    "ToolHandler",
    "ToolRegistry",
    "UnknownSchema",
    "error_response",
    "is_required",
    "list_response",
    "object_to_json_schema",
    "success_response",
    "to_json_schema",
]
