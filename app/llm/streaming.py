import json
from dataclasses import dataclass
from typing import Optional, Union

from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StreamFragment:
    """One decoded line of a streaming generation response"""
    text: str
    done: bool


def parse_fragment(line: Union[bytes, str]) -> Optional[StreamFragment]:
    """
    Decode one NDJSON line of the form ``{"response": str, "done": bool}``.

    Args:
        line: Raw line from the backend

    Returns:
        StreamFragment, or None for blank, non-JSON or non-object lines
        (keepalives and other noise the backend may interleave)
    """
    if not line:
        return None
    try:
        data = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping malformed stream line: {e}")
        return None
    if not isinstance(data, dict):
        logger.debug("Skipping non-object stream line")
        return None

    text = data.get("response", "")
    if not isinstance(text, str):
        text = ""
    return StreamFragment(text=text, done=data.get("done") is True)
