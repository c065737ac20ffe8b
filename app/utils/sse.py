"""
Server-sent event helpers.

Wire format per event::

    event: <name>
    data: <line 1>
    data: <line 2>

Multi-line payloads get one ``data:`` line per text line so browsers'
``EventSource`` reassembles them with the original newlines.
"""

import json
from dataclasses import dataclass

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
    "Access-Control-Allow-Origin": "*",
}


@dataclass(frozen=True)
class ServerSentEvent:
    event: str
    data: str

    def encode(self) -> str:
        lines = [f"event: {self.event}"]
        lines.extend(f"data: {line}" for line in self.data.split("\n"))
        return "\n".join(lines) + "\n\n"


def message_event(text: str) -> ServerSentEvent:
    return ServerSentEvent(event="message", data=text)


def error_event(message: str) -> ServerSentEvent:
    return ServerSentEvent(event="error", data=json.dumps({"error": message}, ensure_ascii=False))
