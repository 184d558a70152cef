"""
Plain-text streaming relay for generation routes.

The blocking model stream runs in a worker thread and feeds an asyncio.Queue; the response
generator re-emits every chunk unchanged while accumulating the full text. on_complete runs as
a response background task, i.e. after the body has been sent, and only when the source stream
finished cleanly.
"""
import asyncio
import logging
from collections.abc import AsyncGenerator, Callable, Iterator

from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

logger = logging.getLogger(__name__)

_END = object()


class StreamRelay:
    """Accumulator shared between the response body generator and the completion callback."""

    def __init__(self) -> None:
        self.chunks: list[str] = []
        self.completed = False

    def accumulate(self, chunk: str) -> None:
        self.chunks.append(chunk)

    @property
    def text(self) -> str:
        return "".join(self.chunks)


def _sync_producer(
    chunks: Iterator[str],
    queue: asyncio.Queue,
    loop: asyncio.AbstractEventLoop,
) -> None:
    """
    Run in thread: drain the blocking model stream into queue via loop.
    Puts _END when the stream ends, or the Exception on error.
    """
    try:
        for chunk in chunks:
            loop.call_soon_threadsafe(queue.put_nowait, chunk)
        loop.call_soon_threadsafe(queue.put_nowait, _END)
    except Exception as e:
        logger.exception("Model stream producer failed")
        loop.call_soon_threadsafe(queue.put_nowait, e)


class StreamStartError(RuntimeError):
    """The model failed before producing the first chunk; nothing has been sent yet."""


async def _relay(
    first: object,
    queue: asyncio.Queue,
    producer: asyncio.Future,
    relay: StreamRelay,
) -> AsyncGenerator[bytes, None]:
    item = first
    try:
        while item is not _END:
            if isinstance(item, Exception):
                # Headers are already sent: raising aborts the body so the client sees a broken stream
                raise item
            relay.accumulate(item)
            yield item.encode("utf-8")
            item = await queue.get()
        relay.completed = True
    finally:
        await producer


async def stream_text_response(
    chunks: Iterator[str],
    on_complete: Callable[[StreamRelay], None] | None = None,
) -> StreamingResponse:
    """
    Start the model stream and return a text/plain StreamingResponse relaying it.
    Waits for the first item so an upstream failure can still become a 500 (StreamStartError).
    """
    queue: asyncio.Queue = asyncio.Queue()
    loop = asyncio.get_running_loop()
    producer = loop.run_in_executor(None, _sync_producer, chunks, queue, loop)

    first = await queue.get()
    if isinstance(first, Exception):
        await producer
        raise StreamStartError(str(first)) from first

    relay = StreamRelay()
    background = None
    if on_complete is not None:
        background = BackgroundTask(_run_on_complete, on_complete, relay)

    return StreamingResponse(
        _relay(first, queue, producer, relay),
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
        background=background,
    )


def _run_on_complete(on_complete: Callable[[StreamRelay], None], relay: StreamRelay) -> None:
    if not relay.completed:
        return
    try:
        on_complete(relay)
    except Exception as e:
        logger.warning("Stream completion callback failed (response already sent): %s", e)
