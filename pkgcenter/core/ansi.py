import re
from typing import AnyStr

# yay prints colors (CSI) and hyperlinks (OSC 8) even when piped.
# An unterminated CSI/OSC runs to the end of input; any other ESC is dropped alone.
_ESCAPE_PATTERN = r"\x1b(?:\[[^@-~]*(?:[@-~]|\Z)|\].*?(?:\x07|\x1b\\|\Z))?"

_ESCAPE_RE = re.compile(_ESCAPE_PATTERN, re.DOTALL)
_ESCAPE_BYTES_RE = re.compile(_ESCAPE_PATTERN.encode("ascii"), re.DOTALL)


def scrub(text: AnyStr) -> AnyStr:
    """Removes terminal control sequences from text.

    Works on both `str` and `bytes` and returns the same type. Never raises on
    malformed or truncated sequences.

    Args:
        text: Raw terminal output.

    Returns:
        The input with every CSI and OSC sequence and every stray ESC removed.
    """
    if not text:
        return text
    if isinstance(text, bytes):
        return _ESCAPE_BYTES_RE.sub(b"", text)
    return _ESCAPE_RE.sub("", text)
