from __future__ import annotations

"""
resp_read.py — open the "container" (Response) without breaking on real hosts.

BMS tables live on free hosting, and what comes back is often not what it claims:
- header JSON served as text/html or with no Content-Type at all,
- UTF-8 text with a BOM in front (invalid JSON, but common),
- Shift_JIS / UTF-8 confusion on old pages.

This module does NOT do HTTP. It only reads text, sniffs the format and decodes JSON.
"""

from dataclasses import dataclass
from typing import Any, Optional
import json
import re

import requests

from .errors import MalformedDocumentError


_BOM = "\ufeff"


@dataclass
class TextPayload:
    text: str
    encoding_used: str
    source: str
    content_type: str
    size_bytes: int


def _extract_charset(content_type: str) -> Optional[str]:
    m = re.search(r"charset=([^\s;]+)", content_type or "", flags=re.IGNORECASE)
    return m.group(1).strip("\"'") if m else None


def read_text_safely(resp: requests.Response) -> TextPayload:
    """
    Decode resp.content into text.

    Order of hypotheses:
    1) charset=... from Content-Type
    2) strict UTF-8 (JSON is UTF-8 on the wire; requests would guess ISO-8859-1 for text/*)
    3) resp.apparent_encoding
    4) UTF-8 with replacement
    """
    content_type = resp.headers.get("Content-Type", "") or ""
    raw = resp.content or b""
    size = len(raw)

    charset = _extract_charset(content_type)
    if charset:
        try:
            return TextPayload(
                text=raw.decode(charset, errors="replace"),
                encoding_used=charset,
                source="header_charset",
                content_type=content_type,
                size_bytes=size,
            )
        except LookupError:
            pass

    try:
        return TextPayload(
            text=raw.decode("utf-8"),
            encoding_used="utf-8",
            source="utf8_strict",
            content_type=content_type,
            size_bytes=size,
        )
    except UnicodeDecodeError:
        pass

    apparent = getattr(resp, "apparent_encoding", None)
    if apparent:
        try:
            return TextPayload(
                text=raw.decode(apparent, errors="replace"),
                encoding_used=apparent,
                source="apparent_encoding",
                content_type=content_type,
                size_bytes=size,
            )
        except LookupError:
            pass

    return TextPayload(
        text=raw.decode("utf-8", errors="replace"),
        encoding_used="utf-8",
        source="fallback_utf8",
        content_type=content_type,
        size_bytes=size,
    )


def sniff_payload_kind(content_type: Optional[str], text: str) -> str:
    """
    "json" or "html". A heuristic, not a MIME parser: hosts mislabel or omit Content-Type.

    Headers must be objects, so with no Content-Type a leading "{" is enough.
    """
    if not content_type:
        first = strip_bom(text.lstrip()).lstrip()[:1]
        if first == "{":
            return "json"
        return "html"

    if "application/json" in content_type.lower():
        return "json"
    return "html"


def strip_bom(text: str) -> str:
    # Exactly one BOM; anything after it is left for the JSON decoder to judge.
    if text.startswith(_BOM):
        return text[1:]
    return text


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def decode_document(text: str, *, source: str = "document") -> Any:
    """Strip a leading BOM and decode JSON. No other recovery is attempted."""
    cleaned = strip_bom(text)
    try:
        return json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedDocumentError(source, str(e)) from e
