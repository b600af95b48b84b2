"""
Core Utilities.

Shared helpers used across the client: MIME sniffing of response and
request bodies, and message cleanup.
"""

import re

# Only the first 512 bytes are considered when sniffing.
SNIFF_LEN = 512

_WHITESPACE = b"\t\n\x0c\r "

_HTML_TAGS = (
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
)

# (prefix, content type), checked in order after the HTML/XML signatures.
_EXACT_SIGNATURES = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"BM", "image/bmp"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
)

_BINARY_BYTES = frozenset([*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)])

_NEWLINES = re.compile(r"(\r?\n)+")


def detect_content_type(data: bytes) -> str:
    """
    Sniff the MIME type of a body.

    Implements the subset of the WHATWG MIME sniffing table that matters for
    CAM payloads: HTML error pages, XML, documents, images and archives,
    falling back to text/plain or application/octet-stream.

    Args:
        data: Raw body bytes; only the first 512 bytes are inspected

    Returns:
        A MIME type string, always valid (never empty)
    """
    head = bytes(data[:SNIFF_LEN])
    stripped = head.lstrip(_WHITESPACE)

    upper = stripped.upper()
    for tag in _HTML_TAGS:
        if upper.startswith(tag) and len(stripped) > len(tag) and stripped[len(tag)] in b" >":
            return "text/html; charset=utf-8"

    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"

    for prefix, content_type in _EXACT_SIGNATURES:
        if head.startswith(prefix):
            return content_type

    if head.startswith(b"RIFF") and head[8:14] == b"WEBPVP":
        return "image/webp"

    if any(b in _BINARY_BYTES for b in head):
        return "application/octet-stream"
    return "text/plain; charset=utf-8"


def is_html(data: bytes) -> bool:
    """Return True if data sniffs as an HTML document."""
    return "html" in detect_content_type(data)


def collapse_newlines(text: str, separator: str = "; ") -> str:
    """Replace runs of line breaks in text with separator."""
    return _NEWLINES.sub(separator, text)
