"""Argument validation — compiles parameter schema nodes to pydantic models.

Scalars are strict (no string-to-number coercion). Optional fields may be
absent but not ``null``; nullable fields accept ``null``; defaults fill absent
keys; keys not named by the schema are dropped.
"""

from __future__ import annotations

import copy
import uuid
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    create_model,
)

from toolgate.protocols.errors import ToolArgumentsError
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
    accepts_missing,
    default_of,
    unwrap,
)

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class ArgumentValidator:
    """Validates raw ``tools/call`` arguments against an object schema."""

    def __init__(self, tool_name: str, schema: ObjectSchema) -> None:
        self.tool_name = tool_name
        self.schema = schema
        self.model = build_model(schema, name=_model_name(tool_name))

    def validate(self, arguments: Any) -> dict[str, Any]:
        """Return the parsed arguments as a plain dict.

        Raises:
            ToolArgumentsError: If the arguments do not satisfy the schema.
        """
        try:
            instance = self.model.model_validate(arguments)
        except ValidationError as exc:
            raise ToolArgumentsError(self.tool_name, format_validation_error(exc)) from exc
        result: dict[str, Any] = _dump(self.schema, instance)
        return result


def build_model(node: ObjectSchema, name: str = "Arguments") -> type[BaseModel]:
    """Compile an object node into a pydantic model class.

    Properties are stored under positional attribute names and aliased to
    their schema key, so any key (``from``, ``_id``, ``model_x``) is usable.
    """
    fields: dict[str, Any] = {}
    for index, (key, field) in enumerate(node.properties.items()):
        annotation = _annotation(field, f"{name}_{index}")
        if accepts_missing(field):
            _, default = default_of(field)
            fields[_attr(index)] = (annotation, Field(default=default, alias=key))
        else:
            fields[_attr(index)] = (annotation, Field(alias=key))

    return create_model(  # type: ignore[call-overload, no-any-return]
        name,
        __config__=ConfigDict(extra="ignore", populate_by_name=False),
        **fields,
    )


def format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one line per failing field."""
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        messages.append(f"{location}: {error['msg']}")
    return "; ".join(messages)


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _annotation(node: SchemaNode, name: str) -> Any:
    """Return the pydantic annotation validating a single value of *node*."""
    if isinstance(node, OptionalSchema | DefaultSchema):
        return _annotation(node.inner, name)
    if isinstance(node, NullableSchema):
        return Union[_annotation(node.inner, name), None]  # noqa: UP007
    if isinstance(node, ObjectSchema):
        return build_model(node, name=name)
    if isinstance(node, StringSchema):
        return _string_annotation(node)
    if isinstance(node, NumberSchema):
        if node.integer:
            return Annotated[StrictInt, Field(ge=node.minimum, le=node.maximum)]
        return Annotated[
            Union[StrictInt, StrictFloat],  # noqa: UP007
            AfterValidator(_bounds(node.minimum, node.maximum)),
        ]
    if isinstance(node, BooleanSchema):
        return StrictBool
    if isinstance(node, EnumSchema):
        return Literal[node.values]
    if isinstance(node, ArraySchema):
        return list[_annotation(node.items, f"{name}_item")]  # type: ignore[misc]
    # Matches the published {"type": "string"}.
    return StrictStr


def _string_annotation(node: StringSchema) -> Any:
    constraints = Field(
        min_length=node.min_length,
        max_length=node.max_length,
        pattern=_EMAIL_PATTERN if node.format == "email" else None,
    )
    if node.format == "url":
        return Annotated[StrictStr, constraints, AfterValidator(_check_url)]
    if node.format == "uuid":
        return Annotated[StrictStr, constraints, AfterValidator(_check_uuid)]
    return Annotated[StrictStr, constraints]


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError as exc:
        raise ValueError("Invalid url") from exc
    return value


def _check_uuid(value: str) -> str:
    try:
        uuid.UUID(value)
    except ValueError as exc:
        raise ValueError("Invalid uuid") from exc
    return value


def _bounds(minimum: float | None, maximum: float | None) -> Any:
    def check(value: float) -> float:
        if minimum is not None and value < minimum:
            raise ValueError(f"Number must be greater than or equal to {minimum}")
        if maximum is not None and value > maximum:
            raise ValueError(f"Number must be less than or equal to {maximum}")
        return value

    return check


def _dump(node: SchemaNode, value: Any) -> Any:
    """Turn a validated model tree back into plain data keyed by schema names.

    Absent optional keys stay absent; absent defaulted keys get their default.
    """
    if value is None:
        return None
    inner = unwrap(node)
    if isinstance(inner, ObjectSchema):
        result: dict[str, Any] = {}
        for index, (key, field) in enumerate(inner.properties.items()):
            attr = _attr(index)
            if attr in value.model_fields_set:
                result[key] = _dump(field, getattr(value, attr))
                continue
            has_default, default = default_of(field)
            if has_default:
                result[key] = copy.deepcopy(default)
        return result
    if isinstance(inner, ArraySchema):
        return [_dump(inner.items, item) for item in value]
    return value


def _attr(index: int) -> str:
    return f"field_{index}"


def _model_name(tool_name: str) -> str:
    parts = [part for part in tool_name.replace("-", "_").split("_") if part]
    return "".join(part.capitalize() for part in parts) + "Arguments"
