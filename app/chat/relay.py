"""
Chat Relay Module

Consumes a streaming generation response and re-emits it as server-sent
events, one event per sentence-sized chunk.

Loop, once per backend line:
1. Stop (CANCELLED) if the client went away; nothing further is read or sent
2. Read a line; EOF flushes and ends (DONE), a read error flushes and sends
   one error event (ERROR)
3. Skip lines that are not JSON objects
4. Append the repaired fragment text to the sentence buffer
5. ``done`` flushes and ends (DONE); a fragment containing ``.``, ``!``,
   ``?`` or a newline flushes the buffer as one ``message`` event

The backend stream is closed on every exit path.
"""

from enum import Enum
from typing import Callable, Iterator, List, Optional

from app.chat.cleanup import clean_response, is_flush_point, repair_fragment
from app.core.exceptions import BackendStreamError
from app.core.logging import get_logger
from app.llm.client import CompletionStream
from app.llm.streaming import parse_fragment
from app.utils.sse import ServerSentEvent, error_event, message_event

logger = get_logger(__name__)


class RelayState(str, Enum):
    STREAMING = "streaming"
    FLUSH_PENDING = "flush_pending"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({RelayState.DONE, RelayState.ERROR, RelayState.CANCELLED})


class SentenceBuffer:
    """Accumulates fragment text until the next flush point."""

    def __init__(self, cleaner: Callable[[str], str] = clean_response):
        self._parts: List[str] = []
        self._cleaner = cleaner

    def append(self, text: str) -> None:
        self._parts.append(text)

    def is_empty(self) -> bool:
        return not self._parts

    @property
    def raw(self) -> str:
        return "".join(self._parts)

    def drain(self) -> str:
        """Return the cleaned contents and reset the buffer."""
        text = self._cleaner(self.raw)
        self._parts = []
        return text


class ChatRelay:
    """
    Relays one generation stream to one client.

    A relay instance is single-use: it owns its buffer and the backend stream
    it is given, and ends in one of the terminal states.
    """

    def __init__(
        self,
        is_cancelled: Optional[Callable[[], bool]] = None,
        cleaner: Callable[[str], str] = clean_response,
    ):
        """
        Args:
            is_cancelled: Non-blocking poll of the client's cancellation
                signal, checked before every backend read
            cleaner: Cleanup applied to the buffer at each flush
        """
        self.is_cancelled = is_cancelled or (lambda: False)
        self.buffer = SentenceBuffer(cleaner)
        self.state = RelayState.STREAMING

    def _flush(self) -> Iterator[ServerSentEvent]:
        if self.buffer.is_empty():
            return
        self.state = RelayState.FLUSH_PENDING
        text = self.buffer.drain()
        if text:
            yield message_event(text)
        self.state = RelayState.STREAMING

    def relay(self, stream: CompletionStream) -> Iterator[ServerSentEvent]:
        """
        Stream events for the given backend response.

        Args:
            stream: Open backend stream; closed when this generator finishes
                or is closed

        Yields:
            ``message`` events with cleaned text, and at most one ``error``
            event as the last event
        """
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Relay already finished ({self.state.value})")

        try:
            lines = iter(stream.iter_lines())
            while True:
                if self.is_cancelled():
                    logger.info("Client disconnected, abandoning generation stream")
                    self.state = RelayState.CANCELLED
                    return

                try:
                    line = next(lines)
                except StopIteration:
                    yield from self._flush()
                    self.state = RelayState.DONE
                    return
                except BackendStreamError as e:
                    yield from self._flush()
                    self.state = RelayState.ERROR
                    yield error_event(e.message)
                    return

                fragment = parse_fragment(line)
                if fragment is None:
                    continue

                if fragment.text:
                    self.buffer.append(repair_fragment(fragment.text))

                if fragment.done:
                    yield from self._flush()
                    self.state = RelayState.DONE
                    return

                if fragment.text and is_flush_point(fragment.text):
                    yield from self._flush()
        except GeneratorExit:
            if self.state not in TERMINAL_STATES:
                self.state = RelayState.CANCELLED
            raise
        finally:
            stream.close()
            logger.debug(f"Relay finished in state: {self.state.value}")
