# decode.py
# SPDX-License-Identifier: MIT
"""Turn raw license file bytes into normalized text for matching."""

from __future__ import annotations

import unicodedata as _ud
from dataclasses import dataclass

from .log import get_logger

__all__ = ["DecodedText", "decode_bytes"]

log = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class DecodedText:
    """Decoded license text plus the encoding that produced it."""

    text: str
    encoding: str
    had_replacement: bool


_BOMS: tuple[tuple[bytes, str], ...] = (
    (b"\x00\x00\xFE\xFF", "utf-32-be"),
    (b"\xFF\xFE\x00\x00", "utf-32-le"),
    (b"\xEF\xBB\xBF", "utf-8-sig"),
    (b"\xFE\xFF", "utf-16-be"),
    (b"\xFF\xFE", "utf-16-le"),
)

_ZERO_WIDTH = {0x200B, 0x200C, 0x200D, 0x2060, 0xFEFF}


def _detect_bom(data: bytes) -> str | None:
    for sig, enc in _BOMS:
        if data.startswith(sig):
            return enc
    return None


def _guess_utf16(sample: bytes) -> str | None:
    """Guess UTF-16 endianness from where NUL bytes fall.

    ASCII-heavy UTF-16 text has a NUL in every other byte, so a lopsided
    even/odd NUL count gives the byte order away.
    """
    even_nuls = sum(1 for i in range(0, len(sample), 2) if sample[i] == 0)
    odd_nuls = sum(1 for i in range(1, len(sample), 2) if sample[i] == 0)
    if even_nuls + odd_nuls < max(4, len(sample) // 64):
        return None
    if even_nuls > odd_nuls * 2:
        return "utf-16-be"
    if odd_nuls > even_nuls * 2:
        return "utf-16-le"
    return None


def _postprocess(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = "".join(
        ch for ch in text
        if (ch in "\n\t" or _ud.category(ch)[0] != "C") and ord(ch) not in _ZERO_WIDTH
    )
    return _ud.normalize("NFC", text)


def decode_bytes(data: bytes) -> DecodedText:
    """Decode license bytes with BOM, UTF-16, UTF-8 and cp1252 fallbacks.

    Strategy:
      1) Honor a BOM when present.
      2) Guess BOM-less UTF-16 from NUL placement (NULs are valid UTF-8).
      3) Try strict UTF-8.
      4) Fall back to cp1252, then latin-1 which cannot fail.

    Newlines are normalized to LF, control and zero-width characters are
    removed and the result is NFC-normalized.
    """
    if not data:
        return DecodedText("", "utf-8", False)

    candidates: list[str] = []
    bom = _detect_bom(data)
    if bom:
        candidates.append(bom)
    guess = _guess_utf16(data[:4096])
    if guess:
        candidates.append(guess)
    candidates.append("utf-8")
    candidates.append("cp1252")

    for enc in candidates:
        try:
            raw = data.decode(enc, errors="strict")
        except UnicodeDecodeError:
            continue
        text = _postprocess(raw)
        return DecodedText(text, enc, "\ufffd" in text)

    log.debug("decode_bytes: falling back to latin-1 for %d bytes", len(data))
    text = _postprocess(data.decode("latin-1", errors="replace"))
    return DecodedText(text, "latin-1", "\ufffd" in text)
