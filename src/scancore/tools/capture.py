"""Line-oriented capture of a single scanner output stream.

Provides:
- OutputHandler: Callback type for real-time line handling
- capture_stream: Drain one stream to EOF, returning every byte read
"""

import asyncio
import sys
from collections.abc import Callable

import structlog

logger = structlog.get_logger()

# handler(line, is_error)
OutputHandler = Callable[[str, bool], None]


async def _read_chunk(reader: asyncio.StreamReader) -> bytes:
    """Read up to and including the next newline.

    Returns the unterminated tail at EOF (empty once exhausted). A line longer
    than the reader limit comes back in several chunks.
    """
    try:
        return await reader.readuntil(b"\n")
    except asyncio.IncompleteReadError as e:
        return e.partial
    except asyncio.LimitOverrunError as e:
        return await reader.read(e.consumed)


def _strip_terminator(text: str) -> str:
    if text.endswith("\n"):
        text = text[:-1]
    if text.endswith("\r"):
        text = text[:-1]
    return text


async def capture_stream(
    reader: asyncio.StreamReader,
    is_error: bool = False,
    handler: OutputHandler | None = None,
    echo: bool = False,
) -> bytes:
    """Read a stream to EOF line by line.

    Every byte read is returned unchanged, terminators included, along with a
    final line that has no terminator. Each complete line is also passed to
    ``handler`` (without its ``\\n`` / ``\\r\\n``) and, with ``echo``,
    written to the console (stdout) prefixed with the stream name.

    A read error ends capture like EOF does: when the child exits its pipes
    close, and whatever was buffered is still returned.

    Args:
        reader: Stream reader of the child's stdout or stderr
        is_error: True when reading stderr
        handler: Called synchronously with (line, is_error) for every line
        echo: Print each line as "[stdout] ..." / "[stderr] ..."

    Returns:
        All bytes read from the stream
    """
    name = "stderr" if is_error else "stdout"
    buf = bytearray()
    pending = bytearray()

    def deliver(line: bytes) -> None:
        text = line.decode("utf-8", errors="replace")
        if echo:
            sys.stdout.write(f"[{name}] {_strip_terminator(text)}\n")
            sys.stdout.flush()
        if handler is not None:
            handler(_strip_terminator(text), is_error)

    while True:
        try:
            chunk = await _read_chunk(reader)
        except OSError as e:
            logger.debug("stream_read_error", stream=name, error=str(e), captured=len(buf))
            break

        if not chunk:
            break

        buf += chunk
        pending += chunk
        if pending.endswith(b"\n"):
            deliver(bytes(pending))
            pending.clear()

    if pending:
        deliver(bytes(pending))

    return bytes(buf)
