"""
Per-field normalization rules shared by the decoder and the encoder.

Each parser returns None when the raw value cannot be read; callers collapse
that to the field default.
"""

from __future__ import annotations

import re
from typing import Optional

from .rules import MAP_MODULUS, PLAYER_NAME_MAX_BYTES, TRUE_TOKEN, U16_MAX

REPLACEMENT_CHAR = "\ufffd"

_U16_RE = re.compile(r"\+?[0-9]+")
_LINE_BREAKS = str.maketrans("", "", "\r\n")
_NAME_FILTER = str.maketrans("", "", "\r\n" + REPLACEMENT_CHAR)


def parse_u16(value: str) -> Optional[int]:
    """Unsigned 16-bit decimal: optional '+', ASCII digits, at most 65535."""
    if not _U16_RE.fullmatch(value):
        return None
    # Leading zeros are legal and unbounded; anything wider than five digits
    # is out of range.
    digits = value.lstrip("+").lstrip("0")
    if len(digits) > 5:
        return None
    n = int(digits or "0")
    if n > U16_MAX:
        return None
    return n


def wrap_10bit(n: int) -> int:
    return n % MAP_MODULUS


def parse_switch(value: str) -> bool:
    return value.lower() == TRUE_TOKEN.lower()


def repair_utf8(data: bytes) -> str:
    """Lossy UTF-8 decode: every invalid sequence becomes U+FFFD."""
    return data.decode("utf-8", errors="replace")


def _truncate_and_repair(data: bytes) -> str:
    # A multi-byte character split by the cut turns into U+FFFD, which the
    # filter then drops.
    text = repair_utf8(data[:PLAYER_NAME_MAX_BYTES])
    return text.translate(_NAME_FILTER)


def decode_player_name(value: str) -> str:
    """Truncate to 1023 bytes, repair, then drop U+FFFD, CR and LF."""
    return _truncate_and_repair(value.encode("utf-8", errors="surrogatepass"))


def encode_player_name(value: str) -> str:
    """Drop CR and LF, truncate to 1023 bytes, repair, then drop U+FFFD."""
    stripped = value.translate(_LINE_BREAKS)
    return _truncate_and_repair(stripped.encode("utf-8", errors="surrogatepass"))
