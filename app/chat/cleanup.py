"""
Response cleanup

Turns raw model output into text fit for display. Reasoning models stream
``<think>`` blocks, other markup and tokens glued together without spaces;
the stages below repair that.

Each stage is a pure ``str -> str`` function and idempotent on its own.
``clean_response`` applies them in ``CLEANUP_STAGES`` order. Whitespace is
normalized before the list stages so that a marker exposed by trimming a line
is rewritten in the same pass, which keeps the whole pipeline idempotent.

``repair_fragment`` is the separate, per-fragment step applied to each piece
of streamed text before it enters the sentence buffer.
"""

import re
from typing import Callable, List, Tuple

_REASONING_RE = re.compile(r"<think>(.*?)</think>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_EMPHASIS_RE = re.compile(r"(\*|_)\1+")
_HSPACE_RE = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
_NEWLINES_RE = re.compile(r"\n{3,}")
_ORDERED_LIST_RE = re.compile(r"^(\d+)\.[ \t]+", re.MULTILINE)
_BULLET_RE = re.compile(r"^[-*][ \t]+", re.MULTILINE)

FLUSH_CHARACTERS = frozenset(".!?\n")


def unwrap_reasoning(text: str) -> str:
    """Replace each ``<think>...</think>`` pair with its inner content."""
    return _REASONING_RE.sub(r"\1", text)


def strip_tags(text: str) -> str:
    """Remove every remaining ``<...>`` tag, keeping text between tags."""
    return _TAG_RE.sub("", text)


def split_glued_words(text: str) -> str:
    """Insert a space at letter/digit and lower->upper letter transitions.

    ``"harga1000Rupiah"`` becomes ``"harga 1000 Rupiah"``.
    """
    result = []
    previous = ""
    for char in text:
        if previous:
            if previous.islower() and char.isupper():
                result.append(" ")
            elif (char.isalpha() and previous.isnumeric()) or (
                char.isnumeric() and previous.isalpha()
            ):
                result.append(" ")
        result.append(char)
        previous = char
    return "".join(result)


def normalize_emphasis(text: str) -> str:
    """Collapse ``**``/``__`` style markers to a single ``*``/``_``."""
    return _EMPHASIS_RE.sub(r"\1", text)


def normalize_whitespace(text: str) -> str:
    """Collapse horizontal whitespace and blank lines, then trim.

    Literal ``\\n`` escape sequences emitted by the model become real
    newlines first.
    """
    t = text.replace("\\n", "\n")
    t = re.sub(r"\r\n|\r", "\n", t)
    t = _HSPACE_RE.sub(" ", t)
    t = _SPACE_AROUND_NEWLINE_RE.sub("\n", t)
    t = _NEWLINES_RE.sub("\n\n", t)
    return t.strip()


def normalize_ordered_lists(text: str) -> str:
    """Rewrite ``1.   item`` at line start to ``1. item``."""
    return _ORDERED_LIST_RE.sub(r"\1. ", text)


def normalize_bullets(text: str) -> str:
    """Rewrite ``- item`` / ``* item`` at line start to ``• item``."""
    return _BULLET_RE.sub("• ", text)


def trim(text: str) -> str:
    return text.strip()


CLEANUP_STAGES: Tuple[Callable[[str], str], ...] = (
    unwrap_reasoning,
    strip_tags,
    split_glued_words,
    normalize_emphasis,
    normalize_whitespace,
    normalize_ordered_lists,
    normalize_bullets,
    trim,
)


def clean_response(text: str) -> str:
    """Run every cleanup stage over ``text``."""
    for stage in CLEANUP_STAGES:
        text = stage(text)
    return text


def split_word_boundaries(fragment: str) -> List[str]:
    """Split a fragment before each lower->upper letter transition.

    ``"iPhoneCase"`` -> ``["i", "Phone", "Case"]``
    """
    chunks: List[str] = []
    current = ""
    for char in fragment:
        if current and current[-1].islower() and char.isupper():
            chunks.append(current)
            current = char
        else:
            current += char
    if current:
        chunks.append(current)
    return chunks


def repair_fragment(fragment: str) -> str:
    """Reassemble a fragment from its word-boundary chunks.

    Chunks are joined with no separator, so the text is unchanged here;
    spacing at those boundaries is decided later by ``split_glued_words``.
    """
    return "".join(split_word_boundaries(fragment))


def is_flush_point(fragment: str) -> bool:
    """True when a raw fragment ends a sentence or a line."""
    return any(char in FLUSH_CHARACTERS for char in fragment)
