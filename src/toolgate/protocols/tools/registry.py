"""ToolRegistry — ordered, write-once mapping from tool name to descriptor.

Tools are registered at startup; the dispatcher freezes the registry before
serving so concurrent requests only ever read it.

Usage::

    registry = ToolRegistry()

    @registry.tool(schema=ObjectSchema(properties={"text": StringSchema()}))
    async def echo(params: dict[str, Any]) -> ToolResult:
        return ToolResult.from_text(params["text"])
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any

from toolgate.core.interface.models import ToolResult
from toolgate.protocols.errors import DuplicateToolError, RegistryFrozenError, ToolNotFoundError
from toolgate.protocols.tools.schema import ObjectSchema
from toolgate.protocols.tools.translator import object_to_json_schema
from toolgate.protocols.tools.validation import ArgumentValidator

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


@dataclass(frozen=True)
class Tool:
    """A registered tool with its translated schema and compiled validator."""

    name: str
    description: str
    schema: ObjectSchema
    handler: ToolHandler
    input_schema: dict[str, Any]
    validator: ArgumentValidator

    def describe(self) -> dict[str, Any]:
        """Return the ``tools/list`` entry for this tool."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolRegistry:
    """Name-to-tool map preserving registration order."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        description: str,
        schema: ObjectSchema,
        handler: ToolHandler,
    ) -> Tool:
        """Add a tool.

        The JSON schema and argument validator are built once here.

        Raises:
            DuplicateToolError: If *name* is already registered.
            RegistryFrozenError: If the registry has been frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(name)
        if name in self._tools:
            raise DuplicateToolError(name)

        tool = Tool(
            name=name,
            description=description,
            schema=schema,
            handler=handler,
            input_schema=object_to_json_schema(schema),
            validator=ArgumentValidator(name, schema),
        )
        self._tools[name] = tool
        logger.debug("Registered tool %s", name)
        return tool

    def tool(
        self,
        name: str | None = None,
        *,
        description: str | None = None,
        schema: ObjectSchema | None = None,
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of :meth:`register`.

        The name defaults to the function name and the description to the
        first paragraph of its docstring.
        """

        def decorator(handler: ToolHandler) -> ToolHandler:
            doc = inspect.getdoc(handler) or ""
            self.register(
                name or handler.__name__,
                description if description is not None else doc.split("\n\n", 1)[0],
                schema or ObjectSchema(),
                handler,
            )
            return handler

        return decorator

    def get(self, name: str) -> Tool | None:
        """Exact-match lookup; no case folding."""
        return self._tools.get(name)

    def require(self, name: str) -> Tool:
        """Like :meth:`get` but raises :class:`ToolNotFoundError` on a miss."""
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def all_tools(self) -> list[Tool]:
        """Return every tool in registration order."""
        return list(self._tools.values())

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())
