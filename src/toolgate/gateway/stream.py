"""Stream normalizer — provider SSE bytes in, canonical chunks out.

Every upstream streams server-sent events, but each puts different JSON in
its ``data:`` lines and ends the stream differently.  The normalizer frames
lines across arbitrary byte boundaries (``\\r\\n``, ``\\r`` or ``\\n``
endings), hands each ``data:`` line to the provider's transpiler for
decoding, and emits one canonical sequence::

    start, (text | thinking)*, done(usage?) | error

Every supported provider puts one JSON object on each ``data:`` line, so
lines are decoded one at a time and ``event:``/``id:`` fields are ignored.
An event split over several ``data:`` lines is not reassembled; each of its
lines is skipped as non-JSON.

Usage::

    stream = await client.chat_stream(messages, options)
    async for chunk in normalize_stream(stream):
        ...

    # or relay it straight to a browser
    return StreamingResponse(encode_sse(normalize_stream(stream)), media_type="text/event-stream")
"""

from __future__ import annotations

import codecs
import inspect
import json
import logging
import re
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from toolgate.core.interface.config import Provider
from toolgate.core.interface.models import StreamDelta, StreamingChunk, Usage
from toolgate.core.interface.transpilers import get_transpiler
from toolgate.gateway.providers import resolve_provider

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"
_DATA_PREFIX = "data:"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

# Shapes a decoder can trip over in a structurally odd (but valid JSON) event.
_DECODE_ERRORS = (AttributeError, IndexError, KeyError, TypeError, ValidationError)


class StreamNormalizer:
    """Incremental, push-style normalizer for one upstream stream.

    Feed it raw byte chunks as they arrive; each call returns the canonical
    chunks completed so far.  Call :meth:`finish` when the upstream ends.
    Once a terminal chunk has been produced every further call returns
    an empty list.
    """

    def __init__(self, provider: Provider | str = Provider.OPENAI) -> None:
        self.provider = resolve_provider(provider)
        self._transpiler = get_transpiler(self.provider)
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._started = False
        self._finished = False
        self._usage: Usage | None = None

    @property
    def finished(self) -> bool:
        return self._finished

    def feed(self, data: bytes) -> list[StreamingChunk]:
        """Consume one chunk of upstream bytes."""
        if self._finished:
            return []
        chunks = self._open()
        self._buffer += self._decoder.decode(data)
        *lines, self._buffer = _LINE_BREAK.split(self._buffer)
        for line in lines:
            chunks.extend(self._process_line(line))
            if self._finished:
                break
        return chunks

    def finish(self) -> list[StreamingChunk]:
        """Flush the trailing partial line and close the sequence.

        A stream that ends without its own terminal event is closed with
        ``done``.
        """
        if self._finished:
            return []
        chunks = self._open()
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        for line in _LINE_BREAK.split(tail):
            chunks.extend(self._process_line(line))
            if self._finished:
                return chunks
        chunks.append(self._done())
        return chunks

    def abort(self, message: str) -> list[StreamingChunk]:
        """Close the sequence with an ``error`` chunk (e.g. the connection dropped)."""
        if self._finished:
            return []
        chunks = self._open()
        self._finished = True
        chunks.append(StreamingChunk.failure(message))
        return chunks

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open(self) -> list[StreamingChunk]:
        if self._started:
            return []
        self._started = True
        return [StreamingChunk.start()]

    def _done(self) -> StreamingChunk:
        self._finished = True
        return StreamingChunk.done(self._usage)

    def _process_line(self, line: str) -> list[StreamingChunk]:
        if not line.startswith(_DATA_PREFIX):
            return []
        data = line[len(_DATA_PREFIX):].strip()
        if not data:
            return []
        if data == DONE_SENTINEL:
            return [self._done()]

        try:
            event = json.loads(data)
        except json.JSONDecodeError:
            logger.debug("Skipping non-JSON stream unit from %s", self.provider.value)
            return []
        if not isinstance(event, dict):
            return []

        try:
            delta = self._transpiler.decode_stream_event(event)
        except _DECODE_ERRORS:
            logger.debug("Skipping malformed stream unit from %s", self.provider.value)
            return []
        return self._apply(delta)

    def _apply(self, delta: StreamDelta) -> list[StreamingChunk]:
        if delta.usage is not None:
            self._usage = delta.usage if self._usage is None else self._usage.merge(delta.usage)

        if delta.error:
            self._finished = True
            return [StreamingChunk.failure(delta.error)]

        chunks: list[StreamingChunk] = []
        if delta.thinking:
            chunks.append(StreamingChunk.thinking(delta.thinking))
        if delta.text:
            chunks.append(StreamingChunk.text(delta.text))
        if delta.done:
            chunks.append(self._done())
        return chunks


async def normalize_stream(
    source: AsyncIterable[bytes],
    provider: Provider | str | None = None,
) -> AsyncIterator[StreamingChunk]:
    """Pull-style wrapper around :class:`StreamNormalizer`.

    *provider* defaults to the source's ``wire_format`` (see
    :class:`~toolgate.gateway.client.ByteStream`), else OpenAI.  The source
    is closed when the sequence ends, or when the consumer stops early.
    A transport failure mid-stream becomes a terminal ``error`` chunk.
    """
    if provider is None:
        provider = getattr(source, "wire_format", Provider.OPENAI)
    normalizer = StreamNormalizer(provider)
    iterator = source.__aiter__()
    try:
        try:
            async for data in iterator:
                for chunk in normalizer.feed(data):
                    yield chunk
                if normalizer.finished:
                    break
        except httpx.TransportError as exc:
            logger.warning("Upstream stream interrupted: %s", exc)
            for chunk in normalizer.abort(f"Stream interrupted: {exc}"):
                yield chunk
        for chunk in normalizer.finish():
            yield chunk
    finally:
        await _close(iterator, source)


def encode_chunk(chunk: StreamingChunk) -> bytes:
    """Render one chunk as an SSE ``data:`` frame."""
    return f"data: {json.dumps(chunk.to_wire(), separators=(',', ':'))}\n\n".encode()


async def encode_sse(chunks: AsyncIterable[StreamingChunk]) -> AsyncIterator[bytes]:
    """Render a chunk sequence as SSE frames followed by ``data: [DONE]``."""
    async for chunk in chunks:
        yield encode_chunk(chunk)
    yield f"data: {DONE_SENTINEL}\n\n".encode()


# ---------------------------------------------------------------------------
# Callback-style consumption
# ---------------------------------------------------------------------------


class StreamSummary(BaseModel):
    """What a fully consumed stream amounted to."""

    full_text: str = ""
    thinking: str = ""
    usage: Usage | None = None
    error: str | None = None


Callback = Callable[..., Awaitable[None] | None]


async def collect_stream(
    chunks: AsyncIterable[StreamingChunk],
    *,
    on_text: Callback | None = None,
    on_done: Callback | None = None,
    on_error: Callback | None = None,
) -> StreamSummary:
    """Drain *chunks*, invoking callbacks and accumulating the text.

    Callbacks may be plain functions or coroutines.  ``on_done`` receives the
    usage (or ``None``); ``on_error`` the error message.
    """
    summary = StreamSummary()
    async for chunk in chunks:
        if chunk.type == "text" and chunk.data:
            summary.full_text += chunk.data
            await _call(on_text, chunk.data)
        elif chunk.type == "thinking" and chunk.data:
            summary.thinking += chunk.data
        elif chunk.type == "done":
            summary.usage = chunk.usage
            await _call(on_done, chunk.usage)
        elif chunk.type == "error":
            summary.error = chunk.error
            await _call(on_error, chunk.error)
    return summary


async def _call(callback: Callback | None, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


async def _close(*resources: Any) -> None:
    seen: set[int] = set()
    for resource in resources:
        closer = getattr(resource, "aclose", None)
        if closer is None or id(resource) in seen:
            continue
        seen.add(id(resource))
        await closer()
