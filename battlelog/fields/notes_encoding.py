from __future__ import annotations

"""Escape codec that lets free-text notes survive a tab-delimited export.

Backslash is escaped first on encode (and restored last on decode) so
literal backslash sequences in user text round-trip unchanged.
"""

__all__ = [
    "encode_notes_for_storage",
    "decode_notes_from_storage",
]

_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "t": "\t", "n": "\n", "r": "\r"}


def encode_notes_for_storage(notes: str) -> str:
    if not notes:
        return notes
    return "".join(_ESCAPES.get(ch, ch) for ch in notes)


def decode_notes_from_storage(encoded: str) -> str:
    """Reverse `encode_notes_for_storage`; unknown escapes are kept as-is."""
    if not encoded or "\\" not in encoded:
        return encoded
    out: list[str] = []
    i = 0
    while i < len(encoded):
        ch = encoded[i]
        if ch == "\\" and i + 1 < len(encoded) and encoded[i + 1] in _UNESCAPES:
            out.append(_UNESCAPES[encoded[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)
