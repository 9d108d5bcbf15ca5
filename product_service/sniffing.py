"""Content-type sniffing for uploaded files.

Determines a MIME type from the leading bytes of the content, ignoring
whatever the client claimed. Follows the WHATWG MIME sniffing rules for the
formats a product photo upload is likely to carry, then falls back to a
text/binary decision.
"""

from __future__ import annotations

from typing import Final

# Only this many leading bytes are considered.
SNIFF_LEN: Final[int] = 512

TEXT_PLAIN: Final[str] = "text/plain; charset=utf-8"
OCTET_STREAM: Final[str] = "application/octet-stream"

_WHITESPACE: Final[bytes] = b"\t\n\x0c\r "

# Byte-order marks, checked before anything else.
_BOMS: Final[list[tuple[bytes, str]]] = [
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", TEXT_PLAIN),
]

# Markup tags that must be followed by a space or '>' (case-insensitive).
_HTML_TAGS: Final[list[bytes]] = [
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
]

# Exact prefixes: (signature, mime)
_PREFIX_SIGNATURES: Final[list[tuple[bytes, str]]] = [
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    # Images
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"BM", "image/bmp"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x00\x00\x02\x00", "image/x-icon"),
    # Audio / video
    (b"ID3", "audio/mpeg"),
    (b"OggS\x00", "application/ogg"),
    (b"MThd\x00\x00\x00\x06", "audio/midi"),
    (b"\x1aE\xdf\xa3", "video/webm"),
    # Archives
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
]

# Container formats: (outer tag, inner tag at offset 8, mime)
_CONTAINER_SIGNATURES: Final[list[tuple[bytes, bytes, str]]] = [
    (b"RIFF", b"WEBPVP", "image/webp"),
    (b"RIFF", b"WAVE", "audio/wave"),
    (b"RIFF", b"AVI ", "video/avi"),
    (b"FORM", b"AIFF", "audio/aiff"),
]


def detect_content_type(data: bytes) -> str:
    """Return the sniffed MIME type of ``data``.

    Args:
        data: Raw file content; only the first 512 bytes are inspected.

    Returns:
        A MIME type string, never empty. Unknown binary content is
        ``application/octet-stream``; unknown text is ``text/plain``.
    """
    head = data[:SNIFF_LEN]

    for bom, mime in _BOMS:
        if head.startswith(bom):
            return mime

    markup = _detect_markup(head.lstrip(_WHITESPACE))
    if markup is not None:
        return markup

    for signature, mime in _PREFIX_SIGNATURES:
        if head.startswith(signature):
            return mime

    for outer, inner, mime in _CONTAINER_SIGNATURES:
        if head.startswith(outer) and head[8 : 8 + len(inner)] == inner:
            return mime

    if _is_mp4(head):
        return "video/mp4"

    if any(_is_binary_byte(b) for b in head):
        return OCTET_STREAM
    return TEXT_PLAIN


def _detect_markup(head: bytes) -> str | None:
    upper = head.upper()
    for tag in _HTML_TAGS:
        if upper.startswith(tag) and len(head) > len(tag):
            if head[len(tag)] in b" >":
                return "text/html; charset=utf-8"
    if head.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    return None


def _is_mp4(head: bytes) -> bool:
    # ISO base media: box size (big-endian) then 'ftyp', brands in 4-byte steps.
    if len(head) < 12:
        return False
    box_size = int.from_bytes(head[:4], "big")
    if box_size % 4 != 0 or len(head) < box_size or head[4:8] != b"ftyp":
        return False
    for offset in range(8, box_size, 4):
        if offset == 12:
            # Minor version, not a brand.
            continue
        if head[offset : offset + 3] == b"mp4":
            return True
    return False


def _is_binary_byte(value: int) -> bool:
    return (
        value <= 0x08
        or value == 0x0B
        or 0x0E <= value <= 0x1A
        or 0x1C <= value <= 0x1F
    )
