"""
Text helpers

Small formatting utilities shared by prompt assembly and logging.
"""


def format_number(value: float, separator: str = ".") -> str:
    """Format the integer part of ``value`` with grouped thousands.

    The fractional part is truncated, not rounded:
    ``format_number(1234567.9) == "1.234.567"``.
    """
    return f"{int(value):,}".replace(",", separator)


def truncate(text: str, max_chars: int) -> str:
    """Truncate text to at most `max_chars` characters, preserving words.

    If the text is longer than max_chars it will cut at the last space before
    the limit to avoid mid-word splits. If no space found, it will hard-cut.
    """
    if not text:
        return ""
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars]
    last_space = cut.rfind(" ")
    if last_space > 0:
        return cut[:last_space].rstrip()
    return cut.rstrip()
