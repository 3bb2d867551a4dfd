"""Character filtering stage applied to raw bibliography payloads.

Sources uploaded to object storage are frequently produced by reference
managers that leak control characters, byte-order marks or invalid byte
sequences into the file. The filter runs before tokenisation and only removes
characters, it never interprets BibTeX syntax.
"""

from __future__ import annotations

import re


# C0 controls other than TAB/LF/CR, DEL, C1 controls, U+FEFF and U+FFFD.
_DISALLOWED = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff\ufffd]")


def filter_characters(text: str) -> str:
    """Drop every character outside the benign whitelist."""
    return _DISALLOWED.sub("", text)


def decode_source(payload: bytes | str) -> str:
    """Decode *payload* as UTF-8 and filter it.

    Undecodable byte sequences are replaced and then dropped by the filter, so
    encoding noise never reaches the parser.
    """
    if isinstance(payload, bytes):
        text = payload.decode("utf-8", errors="replace")
    else:
        text = payload
    return filter_characters(text)


__all__ = ["decode_source", "filter_characters"]
